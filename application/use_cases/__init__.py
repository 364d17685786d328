"""
Application Use Cases for the training session core.

This package contains application-level use cases that orchestrate domain logic
and coordinate between ports/adapters.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and collaborator ports
- Dependencies are injected via constructors for testability
- Use cases expose domain models, not UI or API representations

Usage:
    from application.use_cases import TrainingSessionMachine

    machine = TrainingSessionMachine(
        exercise_source=exercise_source,
        body_metrics_source=body_metrics_source,
        ledger=calorie_ledger,
        estimator=calorie_estimator,
    )
    machine.start_session()
    machine.tick()
"""

from application.use_cases.background_loop import BackgroundEventLoop
from application.use_cases.training_session import (
    Scheduler,
    TrainingSessionMachine,
    schedule_on_running_loop,
)

__all__ = [
    "BackgroundEventLoop",
    "Scheduler",
    "TrainingSessionMachine",
    "schedule_on_running_loop",
]
