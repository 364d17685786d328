"""
Training session state and finalized session logs.

SessionState is a frozen value; every transition produces a new state via
model_copy(update=...). TrainingSessionLog keeps its id for life; only the
calorie fields are replaced when an AI estimate arrives.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from domain.models.calories import CalorieDetail
from domain.models.exercise import ExerciseSnapshot


class SessionPhase(str, Enum):
    """
    Coarse state of the active session.

    - IDLE: no active session (initial, and after reset)
    - TRAINING: working a set
    - REST: resting between sets or exercises
    - COMPLETED: finalized, until the next reset or start
    """

    IDLE = "idle"
    TRAINING = "training"
    REST = "rest"
    COMPLETED = "completed"


class TrainingSessionLog(BaseModel):
    """Record of one completed training session."""

    model_config = ConfigDict(frozen=True)

    id: str
    finished_at: datetime
    duration_seconds: float = Field(..., ge=0)
    exercises: Tuple[ExerciseSnapshot, ...]
    calories_burned: int = Field(..., ge=0)
    calorie_detail: CalorieDetail
    calorie_estimate_pending: bool = False

    @property
    def label(self) -> str:
        """Human-readable name: the first exercise, plus a count of the rest."""
        if not self.exercises:
            return "Training session"
        main_name = self.exercises[0].name
        others = len(self.exercises) - 1
        if others == 0:
            return main_name
        suffix = "exercise" if others == 1 else "exercises"
        return f"{main_name} + {others} more {suffix}"


class SessionState(BaseModel):
    """
    In-memory state of the training session machine.

    While phase is TRAINING or REST:
        0 <= exercise_index < len(exercises)
        1 <= current_set <= exercises[exercise_index].sets
    """

    model_config = ConfigDict(frozen=True)

    phase: SessionPhase = SessionPhase.IDLE
    is_paused: bool = False
    exercises: Tuple[ExerciseSnapshot, ...] = ()
    exercise_index: int = 0
    current_set: int = 0
    phase_remaining_seconds: float = 0
    total_elapsed_seconds: float = 0
    session_started_at: Optional[datetime] = None
    completed_sessions: Tuple[TrainingSessionLog, ...] = ()
    last_completed_session: Optional[TrainingSessionLog] = None

    @property
    def is_active(self) -> bool:
        """True while a set or rest period is running."""
        return self.phase in (SessionPhase.TRAINING, SessionPhase.REST)

    @property
    def current_exercise(self) -> Optional[ExerciseSnapshot]:
        """Exercise under the cursor, or None outside an active session."""
        if 0 <= self.exercise_index < len(self.exercises):
            return self.exercises[self.exercise_index]
        return None
