"""
Composition root for the training session core.

This module wires settings, error tracking, the Supabase adapters and the AI
calorie estimator into a ready-to-use TrainingSessionMachine.

Usage:
    from backend.main import create_training_session
    from backend.settings import Settings

    # Default machine (uses get_settings())
    machine = create_training_session()

    # Test machine with custom settings and a pre-built client
    test_settings = Settings(environment="test", supabase_user_id="u1", _env_file=None)
    machine = create_training_session(settings=test_settings, client=mock_client)
"""

import logging
from typing import Optional

import sentry_sdk
from supabase import Client, create_client

from application.use_cases import Scheduler, TrainingSessionMachine
from backend.ai import OpenAICalorieEstimator
from backend.settings import Settings, get_settings
from infrastructure.db import (
    SupabaseBodyMetricsSource,
    SupabaseCalorieLedger,
    SupabaseExerciseSource,
)

logger = logging.getLogger(__name__)


def create_training_session(
    settings: Optional[Settings] = None,
    client: Optional[Client] = None,
    preset_id: Optional[str] = None,
    scheduler: Optional[Scheduler] = None,
) -> TrainingSessionMachine:
    """
    Create a TrainingSessionMachine backed by Supabase and OpenAI.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.
        client: Pre-built Supabase client. Created from settings when omitted.
        preset_id: Menu preset to train from (default: most recently updated)
        scheduler: Runs the background estimate coroutine. By default it goes to
                   the running event loop, or to a loop thread the machine owns
                   when the caller has none (call machine.close() on shutdown).

    Returns:
        Configured TrainingSessionMachine in the idle phase.

    Raises:
        ValueError: If no user id is configured, or no client is given and
            Supabase credentials are missing
    """
    if settings is None:
        settings = get_settings()

    _init_sentry(settings)

    user_id = settings.supabase_user_id
    if not user_id:
        raise ValueError("Supabase user id not configured. Set SUPABASE_USER_ID environment variable.")

    if client is None:
        client = _create_supabase_client(settings)

    if not settings.ai_estimation_configured:
        logger.info("OPENAI_API_KEY not set; sessions will keep their baseline calorie figure")

    return TrainingSessionMachine(
        exercise_source=SupabaseExerciseSource(client, user_id, preset_id=preset_id),
        body_metrics_source=SupabaseBodyMetricsSource(
            client, user_id, default_weight_kg=settings.default_body_weight_kg
        ),
        ledger=SupabaseCalorieLedger(client, user_id),
        estimator=OpenAICalorieEstimator(settings=settings),
        scheduler=scheduler,
        default_body_weight_kg=settings.default_body_weight_kg,
    )


def _create_supabase_client(settings: Settings) -> Client:
    """Create a Supabase client from settings, raising if not configured."""
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "Supabase credentials not configured. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY)."
        )
    return create_client(settings.supabase_url, settings.supabase_key)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
        )
        logger.info("Sentry initialized for training-session-core")
