"""
Pure domain services for training sessions.

- exercise_queue: menu exercises -> frozen session queue
- baseline_calories: deterministic volume-based calorie estimate
- session_transitions: phase transitions and log patching reducers
"""

from domain.services.baseline_calories import (
    build_ai_calorie_detail,
    build_baseline_calorie_detail,
    calculate_baseline_calories,
    calculate_baseline_exercise_calories,
)
from domain.services.exercise_queue import build_exercise_queue

__all__ = [
    "build_exercise_queue",
    "calculate_baseline_calories",
    "calculate_baseline_exercise_calories",
    "build_baseline_calorie_detail",
    "build_ai_calorie_detail",
]
