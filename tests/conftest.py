"""
Shared pytest fixtures for the training session core.

Every test gets fresh fakes and a machine with deterministic session ids
("session-1", "session-2", ...) and a fixed clock.
"""
import itertools

import pytest

from application.use_cases import TrainingSessionMachine
from domain.models import BodyMetrics
from tests.fakes import (
    FIXED_NOW,
    FakeBodyMetricsSource,
    FakeCalorieEstimator,
    FakeCalorieLedger,
    FakeExerciseSource,
)


@pytest.fixture
def exercise_source() -> FakeExerciseSource:
    return FakeExerciseSource()


@pytest.fixture
def body_metrics_source() -> FakeBodyMetricsSource:
    return FakeBodyMetricsSource(BodyMetrics(weight_kg=80, height_cm=180, gender="male"))


@pytest.fixture
def ledger() -> FakeCalorieLedger:
    return FakeCalorieLedger()


@pytest.fixture
def estimator() -> FakeCalorieEstimator:
    return FakeCalorieEstimator()


@pytest.fixture
def make_machine(exercise_source, body_metrics_source, ledger, estimator):
    """Factory fixture: build a machine over the shared fakes; closed at teardown."""
    machines = []

    def _make(**overrides) -> TrainingSessionMachine:
        counter = itertools.count(1)
        kwargs = {
            "id_generator": lambda: f"session-{next(counter)}",
            "clock": lambda: FIXED_NOW,
        }
        kwargs.update(overrides)
        machine = TrainingSessionMachine(
            exercise_source=exercise_source,
            body_metrics_source=body_metrics_source,
            ledger=ledger,
            estimator=estimator,
            **kwargs,
        )
        machines.append(machine)
        return machine

    yield _make

    for machine in machines:
        machine.close()


@pytest.fixture
def machine(make_machine) -> TrainingSessionMachine:
    return make_machine()
