"""
Exercise Source Interface (Port).

Read side of the menu store: the exercises of the currently active menu.
"""
from typing import List, Protocol

from domain.models import ExerciseDefinition


class ExerciseSource(Protocol):
    """
    Abstract interface for reading the active menu's exercises.

    Implementations may return disabled exercises too; the session queue
    builder filters on `enabled` itself.
    """

    def get_enabled_exercises(self) -> List[ExerciseDefinition]:
        """
        Get the exercises of the active menu, in menu order.

        Returns:
            List of exercise definitions (empty when no menu is configured)
        """
        ...
