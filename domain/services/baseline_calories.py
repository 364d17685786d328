"""
Baseline calorie estimator.

A deliberately crude, deterministic volume proxy (sets x reps x weight) that is
always available with zero latency. Weight is floored so bodyweight
exercises still earn credit.
"""

import math
from typing import Dict, Iterable, Optional, Sequence

from domain.models.calories import (
    CalorieDetail,
    CalorieEstimate,
    CalorieProvider,
    ExerciseCalories,
    ExerciseEstimate,
)
from domain.models.exercise import ExerciseSnapshot


MIN_CREDITED_WEIGHT = 5
SESSION_CALORIE_FACTOR = 0.09
EXERCISE_CALORIE_FACTOR = 0.01

BASELINE_EXERCISE_REASONING = "Volume-based estimate (weight x reps x sets)"
BASELINE_SESSION_REASONING = "Simple calculation based on weight and training volume"
AI_FALLBACK_REASONING = "AI estimate missing for this exercise; baseline value used"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def exercise_volume(exercise: ExerciseSnapshot) -> float:
    """Training volume of an exercise: sets x reps x max(weight, 5)."""
    return exercise.sets * exercise.reps * max(exercise.weight, MIN_CREDITED_WEIGHT)


def calculate_baseline_calories(exercises: Iterable[ExerciseSnapshot]) -> int:
    """
    Baseline calorie total for a session.

    Examples:
        >>> from domain.models import ExerciseSnapshot, FocusArea
        >>> bench = ExerciseSnapshot(
        ...     id="b", name="Bench", sets=3, reps=10, weight=40,
        ...     rest_seconds=60, focus_area=FocusArea.PUSH,
        ... )
        >>> calculate_baseline_calories([bench])
        108
    """
    volume = sum(exercise_volume(exercise) for exercise in exercises)
    return round_half_up(volume * SESSION_CALORIE_FACTOR)


def calculate_baseline_exercise_calories(exercise: ExerciseSnapshot) -> int:
    """Baseline calories attributed to a single exercise."""
    return round_half_up(exercise_volume(exercise) * EXERCISE_CALORIE_FACTOR)


def build_baseline_calorie_detail(exercises: Sequence[ExerciseSnapshot]) -> CalorieDetail:
    """Per-exercise baseline breakdown for a session."""
    return CalorieDetail(
        provider=CalorieProvider.BASELINE,
        per_exercise=[
            ExerciseCalories(
                id=exercise.id,
                name=exercise.name,
                calories=calculate_baseline_exercise_calories(exercise),
                reasoning=BASELINE_EXERCISE_REASONING,
            )
            for exercise in exercises
        ],
        reasoning=BASELINE_SESSION_REASONING,
    )


def _index_estimates(items: Iterable[ExerciseEstimate]) -> Dict[str, ExerciseEstimate]:
    # Keyed by id when the model returned one, by name otherwise; first one wins.
    index: Dict[str, ExerciseEstimate] = {}
    for item in items:
        key = item.id or item.name
        if key:
            index.setdefault(key, item)
    return index


def build_ai_calorie_detail(
    exercises: Sequence[ExerciseSnapshot],
    estimate: CalorieEstimate,
) -> CalorieDetail:
    """
    Map an AI estimate back onto the session's exercises.

    Each exercise is matched by id, then by name. Exercises the model left
    out keep their baseline figure, tagged with a fallback reasoning.
    """
    index = _index_estimates(estimate.per_exercise)
    per_exercise = []
    for exercise in exercises:
        match: Optional[ExerciseEstimate] = index.get(exercise.id) or index.get(exercise.name)
        if match is not None:
            per_exercise.append(
                ExerciseCalories(
                    id=exercise.id,
                    name=exercise.name,
                    calories=max(0, round_half_up(match.calories)),
                    reasoning=match.reasoning,
                )
            )
        else:
            per_exercise.append(
                ExerciseCalories(
                    id=exercise.id,
                    name=exercise.name,
                    calories=calculate_baseline_exercise_calories(exercise),
                    reasoning=AI_FALLBACK_REASONING,
                )
            )

    return CalorieDetail(
        provider=CalorieProvider.AI,
        per_exercise=per_exercise,
        reasoning=estimate.reasoning,
        model=estimate.model,
        confidence=estimate.confidence,
    )
