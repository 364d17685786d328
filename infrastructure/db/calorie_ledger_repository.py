"""
Supabase Calorie Ledger Implementation.

This module implements the CalorieLedger protocol over the `calorie_entries`
table. A finished training session becomes a `burn` entry linked to the
session id; a summary row is also written to `training_sessions`.
"""
import logging
import math
from typing import Any, Dict

from supabase import Client

from application.ports.calorie_ledger import TrainingCalorieEntry

logger = logging.getLogger(__name__)

TRAINING_CATEGORY = "training"


def build_calorie_entry_row(user_id: str, entry: TrainingCalorieEntry) -> Dict[str, Any]:
    """Map a training entry to a `calorie_entries` insert payload."""
    return {
        "user_id": user_id,
        "entry_date": entry.finished_at.date().isoformat(),
        "type": "burn",
        "amount": entry.calories,
        "label": entry.label,
        "category": TRAINING_CATEGORY,
        "linked_session_id": entry.session_id,
        "duration_minutes": math.ceil(entry.duration_seconds / 60),
    }


def build_training_session_row(user_id: str, entry: TrainingCalorieEntry) -> Dict[str, Any]:
    """Map a training entry to a `training_sessions` insert payload."""
    return {
        "user_id": user_id,
        "menu_name": entry.label,
        "calories": entry.calories,
        "duration_seconds": int(round(entry.duration_seconds)),
        "finished_at": entry.finished_at.isoformat(),
        "exercise_count": entry.exercise_count,
    }


class SupabaseCalorieLedger:
    """
    Supabase implementation of CalorieLedger.

    Failures are logged and reported as False; nothing is retried.
    """

    def __init__(self, client: Client, user_id: str):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
            user_id: Owner of the ledger rows
        """
        self._client = client
        self._user_id = user_id

    def add_training_entry(self, entry: TrainingCalorieEntry) -> bool:
        """Insert the burn entry of a finished session."""
        try:
            result = (
                self._client.table("calorie_entries")
                .insert(build_calorie_entry_row(self._user_id, entry))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to add calorie entry for session {entry.session_id}: {e}")
            return False

        if not result.data:
            logger.warning(f"Calorie entry insert returned no rows for session {entry.session_id}")
            return False

        logger.info(f"Calorie entry saved for session {entry.session_id}: {entry.calories} kcal")
        self._record_training_session(entry)
        return True

    def _record_training_session(self, entry: TrainingCalorieEntry) -> None:
        # Session history row is informational; a failure does not affect the ledger entry.
        try:
            self._client.table("training_sessions").insert(
                build_training_session_row(self._user_id, entry)
            ).execute()
        except Exception as e:
            logger.warning(f"Failed to record training session {entry.session_id}: {e}")

    def update_training_entry_calories(self, session_id: str, calories: int) -> bool:
        """Correct the amount of the burn entry linked to session_id."""
        try:
            result = (
                self._client.table("calorie_entries")
                .update({"amount": calories})
                .eq("user_id", self._user_id)
                .eq("linked_session_id", session_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update calorie entry for session {session_id}: {e}")
            return False

        if not result.data:
            logger.warning(f"No calorie entry linked to session {session_id}")
            return False

        logger.info(f"Calorie entry for session {session_id} updated to {calories} kcal")
        return True
