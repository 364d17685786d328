"""
Supabase Body Metrics Source Implementation.

This module implements the BodyMetricsSource protocol over the
`body_entries` table (one row per user and day).
"""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from supabase import Client

from domain.models import DEFAULT_BODY_WEIGHT_KG, BodyMetrics

logger = logging.getLogger(__name__)


def _positive(value: Any) -> Optional[float]:
    """Numeric columns store 0 for 'not measured'; map those to None."""
    if value is None:
        return None
    number = float(value)
    return number if number > 0 else None


def row_to_body_metrics(row: Dict[str, Any], default_weight_kg: float) -> BodyMetrics:
    """Convert a `body_entries` row to BodyMetrics."""
    return BodyMetrics(
        weight_kg=_positive(row.get("weight")) or default_weight_kg,
        height_cm=_positive(row.get("height_cm")),
        gender=row.get("gender") or None,
        body_fat=_positive(row.get("body_fat")),
        muscle_mass=_positive(row.get("muscle_mass")),
    )


class SupabaseBodyMetricsSource:
    """Supabase implementation of BodyMetricsSource."""

    def __init__(
        self,
        client: Client,
        user_id: str,
        default_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
    ):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
            user_id: Owner of the body records
            default_weight_kg: Weight used when the latest record has none
        """
        self._client = client
        self._user_id = user_id
        self._default_weight_kg = default_weight_kg

    def get_latest(self) -> Optional[BodyMetrics]:
        """Get the newest body record by entry date, or None if there is none."""
        try:
            result = (
                self._client.table("body_entries")
                .select("*")
                .eq("user_id", self._user_id)
                .order("entry_date", desc=True)
                .limit(1)
                .execute()
            )
        except Exception:
            logger.exception(f"Error fetching latest body entry for user {self._user_id}")
            return None

        if not result.data:
            return None
        try:
            return row_to_body_metrics(result.data[0], self._default_weight_kg)
        except (TypeError, ValueError, ValidationError) as e:
            logger.warning(f"Invalid body entry for user {self._user_id}: {e}")
            return None
