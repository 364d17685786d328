"""
Collaborator Interfaces (Ports) for the training session core.

This package defines abstract interfaces that decouple the session state
machine from the stores and services it talks to. Implementations are
provided in the infrastructure layer (Supabase) and in backend.ai (OpenAI).

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the session machine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import ExerciseSource, CalorieLedger

    class TrainingSessionMachine:
        def __init__(self, exercise_source: ExerciseSource, ledger: CalorieLedger, ...):
            self._exercise_source = exercise_source
            self._ledger = ledger
"""

# Menu store (read)
from application.ports.exercise_source import ExerciseSource

# Body-data store (read)
from application.ports.body_metrics_source import BodyMetricsSource

# Calorie ledger (write)
from application.ports.calorie_ledger import CalorieLedger, TrainingCalorieEntry

# AI calorie estimation
from application.ports.calorie_estimator import (
    CalorieEstimator,
    CalorieEstimationRequest,
    ExercisePayload,
    SessionPayload,
    UserProfilePayload,
)

__all__ = [
    # Menu store
    "ExerciseSource",
    # Body data
    "BodyMetricsSource",
    # Ledger
    "CalorieLedger",
    "TrainingCalorieEntry",
    # Estimation
    "CalorieEstimator",
    "CalorieEstimationRequest",
    "ExercisePayload",
    "SessionPayload",
    "UserProfilePayload",
]
