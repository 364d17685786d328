"""
Calorie Estimator Interface (Port).

Slow, approximate, optional refinement of a session's calorie figure.
The request models serialize with the camelCase keys the estimation prompt
documents (weightKg, durationSeconds, restSeconds, ...).
"""
from typing import List, Literal, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.models import BodyMetrics, CalorieEstimate, ExerciseSnapshot


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfilePayload(_CamelModel):
    """Body profile sent with an estimation request."""
    weight_kg: float
    height_cm: Optional[float] = None
    gender: Optional[Literal["male", "female", "other"]] = None
    body_fat: Optional[float] = None
    muscle_mass: Optional[float] = None


class SessionPayload(_CamelModel):
    """Session-level facts sent with an estimation request."""
    duration_seconds: float


class ExercisePayload(_CamelModel):
    """One exercise of the finished session."""
    id: str
    name: str
    sets: int
    reps: int
    weight: float
    rest_seconds: int
    training_seconds: int


class CalorieEstimationRequest(_CamelModel):
    """
    Everything the estimator needs to know about a finished session.

    session_id is for request tracking only and never reaches the prompt.
    """
    user: UserProfilePayload
    session: SessionPayload
    exercises: List[ExercisePayload] = Field(default_factory=list)
    session_id: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def build(
        cls,
        body: BodyMetrics,
        duration_seconds: float,
        exercises: List[ExerciseSnapshot],
        session_id: Optional[str] = None,
    ) -> "CalorieEstimationRequest":
        """Assemble a request from domain objects."""
        return cls(
            session_id=session_id,
            user=UserProfilePayload(
                weight_kg=body.weight_kg,
                height_cm=body.height_cm,
                gender=body.gender,
                body_fat=body.body_fat,
                muscle_mass=body.muscle_mass,
            ),
            session=SessionPayload(duration_seconds=duration_seconds),
            exercises=[
                ExercisePayload(
                    id=exercise.id,
                    name=exercise.name,
                    sets=exercise.sets,
                    reps=exercise.reps,
                    weight=exercise.weight,
                    rest_seconds=exercise.rest_seconds,
                    training_seconds=exercise.training_seconds,
                )
                for exercise in exercises
            ],
        )

    def to_prompt_json(self) -> str:
        """Compact camelCase JSON, omitting unknown body fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class CalorieEstimator(Protocol):
    """
    Abstract interface for AI calorie estimation.

    Implementations raise CalorieEstimatorNotConfiguredError when no
    credential is available and CalorieEstimationError for remote or parse
    failures (see application.exceptions).
    """

    async def estimate(self, request: CalorieEstimationRequest) -> CalorieEstimate:
        """
        Estimate the calories burned by a finished session.

        Args:
            request: Body profile, session duration and exercises

        Returns:
            Normalized CalorieEstimate
        """
        ...
