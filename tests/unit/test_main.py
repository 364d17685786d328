"""
Unit tests for backend/main.py
"""

import pytest
from unittest.mock import MagicMock, patch

from application.use_cases import TrainingSessionMachine
from backend.ai import OpenAICalorieEstimator
from backend.main import _init_sentry, create_training_session
from backend.settings import Settings
from domain.models import SessionPhase
from infrastructure.db import (
    SupabaseBodyMetricsSource,
    SupabaseCalorieLedger,
    SupabaseExerciseSource,
)


def _settings(**overrides) -> Settings:
    values = {
        "environment": "test",
        "supabase_url": "https://test.supabase.co",
        "supabase_service_role_key": "service-key",
        "supabase_user_id": "user-1",
        "openai_api_key": None,
        "sentry_dsn": None,
        "_env_file": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.mark.unit
class TestCreateTrainingSession:
    """Test the create_training_session() factory function."""

    def test_returns_idle_machine(self):
        machine = create_training_session(settings=_settings(), client=MagicMock())

        assert isinstance(machine, TrainingSessionMachine)
        assert machine.phase == SessionPhase.IDLE

    def test_wires_supabase_adapters_with_user_id(self):
        client = MagicMock()

        machine = create_training_session(
            settings=_settings(default_body_weight_kg=64), client=client, preset_id="preset-7"
        )

        assert isinstance(machine._exercise_source, SupabaseExerciseSource)
        assert isinstance(machine._body_metrics_source, SupabaseBodyMetricsSource)
        assert isinstance(machine._ledger, SupabaseCalorieLedger)
        assert isinstance(machine._estimator, OpenAICalorieEstimator)
        assert machine._exercise_source._client is client
        assert machine._exercise_source._user_id == "user-1"
        assert machine._exercise_source._preset_id == "preset-7"
        assert machine._body_metrics_source._default_weight_kg == 64
        assert machine._default_body_weight_kg == 64

    def test_passes_scheduler_through(self):
        scheduler = MagicMock()

        machine = create_training_session(settings=_settings(), client=MagicMock(), scheduler=scheduler)

        assert machine._scheduler is scheduler

    def test_default_scheduler_falls_back_to_owned_loop(self):
        machine = create_training_session(settings=_settings(), client=MagicMock())

        assert machine._scheduler == machine._schedule_default
        assert machine._background_loop is None

    def test_uses_default_settings_when_none_provided(self):
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = _settings()

            create_training_session(client=MagicMock())

            mock_get_settings.assert_called_once()

    def test_creates_client_from_settings(self):
        with patch("backend.main.create_client") as mock_create_client:
            machine = create_training_session(settings=_settings())

        mock_create_client.assert_called_once_with("https://test.supabase.co", "service-key")
        assert machine._ledger._client is mock_create_client.return_value

    def test_missing_credentials_raise(self):
        settings = _settings(supabase_url=None)

        with pytest.raises(ValueError, match="Supabase credentials not configured"):
            create_training_session(settings=settings)

    def test_missing_user_id_raises(self):
        with pytest.raises(ValueError, match="user id not configured"):
            create_training_session(settings=_settings(supabase_user_id=None), client=MagicMock())


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        """Sentry should not be initialized when DSN is not set."""
        settings = Settings(sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        """Sentry should be initialized when DSN is provided."""
        settings = Settings(
            sentry_dsn="https://test@sentry.io/123",
            environment="test",
            _env_file=None
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once_with(
                dsn="https://test@sentry.io/123",
                environment="test",
                traces_sample_rate=0.1,
            )

    def test_create_training_session_initializes_sentry(self):
        settings = _settings(sentry_dsn="https://test@sentry.io/123")

        with patch("backend.main.sentry_sdk.init") as mock_init:
            create_training_session(settings=settings, client=MagicMock())

        mock_init.assert_called_once()
