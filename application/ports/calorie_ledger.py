"""
Calorie Ledger Interface (Port).

Write side of the calorie-tracking store. A finalized training session is
recorded as a burn entry; a later AI estimate corrects that entry's amount.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass
class TrainingCalorieEntry:
    """Burn entry created when a training session is finalized."""
    session_id: str
    calories: int
    finished_at: datetime
    exercise_count: int
    duration_seconds: float
    label: str


class CalorieLedger(Protocol):
    """
    Abstract interface for the calorie ledger.

    Both operations report success as a bool. Callers treat failures as
    best-effort: they are logged, never retried.
    """

    def add_training_entry(self, entry: TrainingCalorieEntry) -> bool:
        """
        Record the calories burned by a finalized session.

        Args:
            entry: Session summary; session_id links the entry to the session

        Returns:
            True if the entry was stored
        """
        ...

    def update_training_entry_calories(self, session_id: str, calories: int) -> bool:
        """
        Correct the amount of the entry linked to session_id.

        Args:
            session_id: Id of the session the entry was created for
            calories: New calorie amount

        Returns:
            True if an entry was updated
        """
        ...
