"""
Domain models for the training session core.

This package contains pure domain models that are independent of
infrastructure concerns (database, AI provider, UI).

These models represent the core business concepts:
- ExerciseDefinition: An editable exercise of the active training menu
- ExerciseSnapshot: The frozen per-session copy of an exercise
- BodyMetrics: Latest body record used for calorie estimation
- CalorieDetail: Per-exercise calorie breakdown and its provider
- TrainingSessionLog: A finalized training session
- SessionState: The live state of the training session machine

Usage:
    >>> from domain.models import ExerciseDefinition, ExerciseSnapshot

    >>> snapshot = ExerciseSnapshot.from_definition(
    ...     ExerciseDefinition(id="ex-1", name="Squat", sets=5, reps=5, weight=100)
    ... )
    >>> snapshot.training_seconds
    60
"""

from domain.models.body_metrics import DEFAULT_BODY_WEIGHT_KG, BodyMetrics
from domain.models.calories import (
    CalorieDetail,
    CalorieEstimate,
    CalorieProvider,
    ExerciseCalories,
    ExerciseEstimate,
)
from domain.models.exercise import (
    DEFAULT_TRAINING_SECONDS,
    ExerciseDefinition,
    ExerciseSnapshot,
    FocusArea,
)
from domain.models.session import SessionPhase, SessionState, TrainingSessionLog

__all__ = [
    # Exercises
    "ExerciseDefinition",
    "ExerciseSnapshot",
    "FocusArea",
    "DEFAULT_TRAINING_SECONDS",
    # Body metrics
    "BodyMetrics",
    "DEFAULT_BODY_WEIGHT_KG",
    # Calories
    "CalorieDetail",
    "CalorieEstimate",
    "CalorieProvider",
    "ExerciseCalories",
    "ExerciseEstimate",
    # Session
    "SessionPhase",
    "SessionState",
    "TrainingSessionLog",
]
