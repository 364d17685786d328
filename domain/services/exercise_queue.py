"""
Exercise queue builder.

Turns the active menu's exercises into the ordered, frozen snapshot list a
training session runs against.
"""

from typing import Iterable, Optional, Sequence, Tuple

from domain.models.exercise import ExerciseDefinition, ExerciseSnapshot


def build_exercise_queue(
    exercises: Iterable[ExerciseDefinition],
    exercise_ids: Optional[Sequence[str]] = None,
) -> Tuple[ExerciseSnapshot, ...]:
    """
    Build the session queue from the menu's exercises.

    Source order is preserved. Disabled exercises are dropped, and when
    exercise_ids is non-empty only exercises whose id is listed are kept.
    An empty exercise_ids list means no restriction.

    Args:
        exercises: Exercises of the active menu
        exercise_ids: Optional ids to restrict the session to

    Returns:
        Tuple of snapshots, empty when nothing is eligible
    """
    wanted = set(exercise_ids) if exercise_ids else None
    return tuple(
        ExerciseSnapshot.from_definition(exercise)
        for exercise in exercises
        if exercise.enabled and (wanted is None or exercise.id in wanted)
    )
