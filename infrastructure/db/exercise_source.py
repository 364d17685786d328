"""
Supabase Exercise Source Implementation.

This module implements the ExerciseSource protocol over the `menu_presets`
and `exercises` tables: the enabled exercises of the user's active menu, in
menu order.
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from supabase import Client

from domain.models import ExerciseDefinition

logger = logging.getLogger(__name__)


def row_to_exercise(row: Dict[str, Any]) -> Optional[ExerciseDefinition]:
    """Convert an `exercises` row to a domain model, or None if it is invalid."""
    try:
        return ExerciseDefinition(
            id=str(row["id"]),
            name=row.get("name") or "",
            sets=row.get("sets") or 1,
            reps=row.get("reps") or 0,
            weight=float(row.get("weight") or 0),
            rest_seconds=row.get("rest_seconds") or 0,
            training_seconds=row.get("training_seconds") or None,
            focus_area=row.get("focus_area") or "push",
            note=row.get("note"),
            youtube_url=row.get("youtube_url"),
            enabled=row.get("enabled", True),
        )
    except (KeyError, ValidationError) as e:
        logger.warning(f"Skipping invalid exercise row {row.get('id')}: {e}")
        return None


class SupabaseExerciseSource:
    """
    Supabase implementation of ExerciseSource.

    Reads the exercises of one menu preset. When no preset id is given, the
    user's most recently updated preset is treated as the active menu.
    """

    def __init__(self, client: Client, user_id: str, preset_id: Optional[str] = None):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
            user_id: Owner of the menu
            preset_id: Active menu preset (optional)
        """
        self._client = client
        self._user_id = user_id
        self._preset_id = preset_id

    def _resolve_preset_id(self) -> Optional[str]:
        if self._preset_id:
            return self._preset_id
        result = (
            self._client.table("menu_presets")
            .select("id")
            .eq("user_id", self._user_id)
            .order("updated_at", desc=True)
            .limit(1)
            .execute()
        )
        if result.data:
            return str(result.data[0]["id"])
        return None

    def get_enabled_exercises(self) -> List[ExerciseDefinition]:
        """Get the enabled exercises of the active menu, ordered by order_index."""
        try:
            preset_id = self._resolve_preset_id()
            if not preset_id:
                logger.info(f"No menu preset found for user {self._user_id}")
                return []

            result = (
                self._client.table("exercises")
                .select("*")
                .eq("user_id", self._user_id)
                .eq("preset_id", preset_id)
                .eq("enabled", True)
                .order("order_index")
                .execute()
            )
        except Exception:
            logger.exception(f"Error fetching exercises for user {self._user_id}")
            return []

        exercises = [row_to_exercise(row) for row in result.data or []]
        return [exercise for exercise in exercises if exercise is not None]
