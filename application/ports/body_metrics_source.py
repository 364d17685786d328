"""
Body Metrics Source Interface (Port).

Read side of the body-data store, used to personalize calorie estimates.
"""
from typing import Optional, Protocol

from domain.models import BodyMetrics


class BodyMetricsSource(Protocol):
    """Abstract interface for reading the latest known body record."""

    def get_latest(self) -> Optional[BodyMetrics]:
        """
        Get the most recent body record.

        Returns:
            Latest BodyMetrics, or None when nothing has been recorded
        """
        ...
