"""
Calorie breakdown models attached to finalized training sessions.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CalorieProvider(str, Enum):
    """Where a session's calorie figure came from."""

    BASELINE = "baseline"
    AI = "ai"


class ExerciseCalories(BaseModel):
    """Calories attributed to a single exercise of a session."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    calories: int = Field(..., ge=0)
    reasoning: Optional[str] = None


class CalorieDetail(BaseModel):
    """Per-exercise breakdown plus provenance of a calorie total."""

    model_config = ConfigDict(frozen=True)

    provider: CalorieProvider
    per_exercise: List[ExerciseCalories] = Field(default_factory=list)
    reasoning: Optional[str] = None
    model: Optional[str] = None
    confidence: Optional[float] = None


class ExerciseEstimate(BaseModel):
    """One per-exercise item of an AI estimate, as returned by the model."""

    id: str = ""
    name: str = ""
    calories: int = 0
    reasoning: Optional[str] = None


class CalorieEstimate(BaseModel):
    """Normalized result of an AI calorie estimation."""

    total_calories: int = Field(..., ge=0)
    per_exercise: List[ExerciseEstimate] = Field(default_factory=list)
    reasoning: str = ""
    model: str
    confidence: Optional[float] = None
