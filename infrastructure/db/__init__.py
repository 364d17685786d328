"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the collaborator
interfaces defined in application.ports. These implementations are injected
into the training session machine by the composition root (backend.main).

Usage:
    from supabase import create_client
    from infrastructure.db import (
        SupabaseExerciseSource,
        SupabaseBodyMetricsSource,
        SupabaseCalorieLedger,
    )

    # Create Supabase client
    client = create_client(SUPABASE_URL, SUPABASE_KEY)

    # Instantiate adapters with injected client
    exercise_source = SupabaseExerciseSource(client, user_id="user_123")
    body_metrics_source = SupabaseBodyMetricsSource(client, user_id="user_123")
    calorie_ledger = SupabaseCalorieLedger(client, user_id="user_123")
"""

from infrastructure.db.exercise_source import SupabaseExerciseSource
from infrastructure.db.body_metrics_repository import SupabaseBodyMetricsSource
from infrastructure.db.calorie_ledger_repository import SupabaseCalorieLedger

__all__ = [
    # Menu store (read)
    "SupabaseExerciseSource",

    # Body data (read)
    "SupabaseBodyMetricsSource",

    # Calorie ledger (write)
    "SupabaseCalorieLedger",
]
