"""
Body metrics value object.

Latest known body record, used to personalize AI calorie estimates.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


DEFAULT_BODY_WEIGHT_KG = 70.0


class BodyMetrics(BaseModel):
    """Latest body measurements of the user. Only weight is required."""

    weight_kg: float = Field(default=DEFAULT_BODY_WEIGHT_KG, gt=0)
    height_cm: Optional[float] = Field(default=None, gt=0)
    gender: Optional[Literal["male", "female", "other"]] = None
    body_fat: Optional[float] = Field(default=None, ge=0, description="Body fat %")
    muscle_mass: Optional[float] = Field(default=None, ge=0, description="Muscle mass kg")
