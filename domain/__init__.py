"""
Domain layer for the training session core.

This package contains pure domain models and services that are independent
of infrastructure concerns (database, AI provider, UI).
"""

from domain.models import (
    BodyMetrics,
    CalorieDetail,
    CalorieProvider,
    ExerciseDefinition,
    ExerciseSnapshot,
    FocusArea,
    SessionPhase,
    SessionState,
    TrainingSessionLog,
)

__all__ = [
    "BodyMetrics",
    "CalorieDetail",
    "CalorieProvider",
    "ExerciseDefinition",
    "ExerciseSnapshot",
    "FocusArea",
    "SessionPhase",
    "SessionState",
    "TrainingSessionLog",
]
