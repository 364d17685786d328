"""
Fake Collaborator Implementations for Testing.

This package provides in-memory fake implementations of the ports in
application.ports for fast, isolated testing. No database or network required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Call tracking for assertions
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeExerciseSource, create_exercise_source

    # Direct instantiation
    source = FakeExerciseSource()
    source.seed([make_exercise("ex-1")])

    # Factory function with pre-populated data
    source = create_exercise_source(num_exercises=3, sets=2)
"""
from datetime import datetime, timezone
from typing import Optional

from domain.models import CalorieEstimate, ExerciseDefinition, ExerciseEstimate, FocusArea

from tests.fakes.exercise_source import FakeExerciseSource
from tests.fakes.body_metrics_source import FakeBodyMetricsSource
from tests.fakes.calorie_ledger import FakeCalorieLedger
from tests.fakes.calorie_estimator import FakeCalorieEstimator


FIXED_NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


# =============================================================================
# Factory Functions
# =============================================================================


def make_exercise(
    exercise_id: str,
    *,
    name: Optional[str] = None,
    sets: int = 3,
    reps: int = 10,
    weight: float = 20,
    rest_seconds: int = 60,
    training_seconds: Optional[int] = 30,
    enabled: bool = True,
) -> ExerciseDefinition:
    """Build a menu exercise with test-friendly defaults."""
    return ExerciseDefinition(
        id=exercise_id,
        name=name or f"Exercise {exercise_id}",
        sets=sets,
        reps=reps,
        weight=weight,
        rest_seconds=rest_seconds,
        training_seconds=training_seconds,
        focus_area=FocusArea.PUSH,
        enabled=enabled,
    )


def create_exercise_source(
    *,
    num_exercises: int = 0,
    sets: int = 3,
    reps: int = 10,
    weight: float = 20,
    rest_seconds: int = 60,
    training_seconds: Optional[int] = 30,
) -> FakeExerciseSource:
    """
    Create a FakeExerciseSource with optional pre-populated exercises.

    Args:
        num_exercises: Number of enabled exercises (ids ex-1, ex-2, ...)
        sets, reps, weight, rest_seconds, training_seconds: Shared by all exercises

    Returns:
        Pre-populated FakeExerciseSource
    """
    source = FakeExerciseSource()
    source.seed([
        make_exercise(
            f"ex-{i + 1}",
            sets=sets,
            reps=reps,
            weight=weight,
            rest_seconds=rest_seconds,
            training_seconds=training_seconds,
        )
        for i in range(num_exercises)
    ])
    return source


def make_estimate(
    total_calories: int,
    *,
    per_exercise: Optional[list] = None,
    model: str = "gpt-4o-mini",
    reasoning: str = "Estimated from volume and duration",
    confidence: Optional[float] = 0.8,
) -> CalorieEstimate:
    """Build an AI estimate; per_exercise items are (id, calories) pairs."""
    return CalorieEstimate(
        total_calories=total_calories,
        per_exercise=[
            ExerciseEstimate(id=exercise_id, calories=calories, reasoning="ai")
            for exercise_id, calories in (per_exercise or [])
        ],
        reasoning=reasoning,
        model=model,
        confidence=confidence,
    )


__all__ = [
    # Fakes
    "FakeExerciseSource",
    "FakeBodyMetricsSource",
    "FakeCalorieLedger",
    "FakeCalorieEstimator",
    # Factories
    "FIXED_NOW",
    "make_exercise",
    "create_exercise_source",
    "make_estimate",
]
