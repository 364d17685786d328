"""
Exercise models for training sessions.

ExerciseDefinition is the editable menu entry owned by the exercise store.
ExerciseSnapshot is the frozen copy a training session runs against, so
edits to the menu never reach a session that is already in progress.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_TRAINING_SECONDS = 60


class FocusArea(str, Enum):
    """Muscle-group tag attached to every exercise."""

    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    CORE = "core"


class ExerciseDefinition(BaseModel):
    """
    An exercise as configured in the active training menu.

    Examples:
        >>> bench = ExerciseDefinition(
        ...     id="ex-1",
        ...     name="Bench Press",
        ...     sets=3,
        ...     reps=10,
        ...     weight=40,
        ...     rest_seconds=90,
        ...     focus_area=FocusArea.PUSH,
        ... )
        >>> bench.training_seconds is None
        True
    """

    id: str = Field(..., min_length=1, description="Exercise identifier")
    name: str = Field(..., min_length=1, description="Display name")
    sets: int = Field(default=3, ge=1, description="Target number of sets")
    reps: int = Field(default=10, ge=0, description="Target reps per set")
    weight: float = Field(default=0, ge=0, description="Working weight in kg")
    rest_seconds: int = Field(default=60, ge=0, description="Rest after each set")
    training_seconds: Optional[int] = Field(
        default=None, ge=1, description="Length of the training phase per set"
    )
    focus_area: FocusArea = Field(default=FocusArea.PUSH)
    note: Optional[str] = Field(default=None, description="Free-text note")
    youtube_url: Optional[str] = Field(default=None, description="Reference video")
    enabled: bool = Field(default=True, description="Included in new sessions")


class ExerciseSnapshot(BaseModel):
    """Immutable per-session copy of an ExerciseDefinition."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    sets: int = Field(..., ge=1)
    reps: int = Field(..., ge=0)
    weight: float = Field(..., ge=0)
    rest_seconds: int = Field(..., ge=0)
    training_seconds: int = Field(default=DEFAULT_TRAINING_SECONDS, ge=1)
    focus_area: FocusArea
    note: Optional[str] = None
    youtube_url: Optional[str] = None

    @classmethod
    def from_definition(cls, exercise: ExerciseDefinition) -> "ExerciseSnapshot":
        """Copy the session-relevant fields of a menu exercise."""
        return cls(
            id=exercise.id,
            name=exercise.name,
            sets=exercise.sets,
            reps=exercise.reps,
            weight=exercise.weight,
            rest_seconds=exercise.rest_seconds,
            training_seconds=exercise.training_seconds or DEFAULT_TRAINING_SECONDS,
            focus_area=exercise.focus_area,
            note=exercise.note or None,
            youtube_url=exercise.youtube_url or None,
        )
