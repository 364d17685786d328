"""
Infrastructure Layer for the training session core.

This package contains concrete implementations of collaborator interfaces:
- db/: Supabase database implementations
"""

# Re-export database adapters for convenient access
from infrastructure.db import (
    SupabaseBodyMetricsSource,
    SupabaseCalorieLedger,
    SupabaseExerciseSource,
)

__all__ = [
    "SupabaseBodyMetricsSource",
    "SupabaseCalorieLedger",
    "SupabaseExerciseSource",
]
