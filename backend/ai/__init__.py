"""
AI integration: OpenAI client factory and the calorie estimator.
"""

from backend.ai.calorie_estimator import OpenAICalorieEstimator, parse_estimate
from backend.ai.client_factory import AIClientFactory, AIRequestContext

__all__ = [
    "AIClientFactory",
    "AIRequestContext",
    "OpenAICalorieEstimator",
    "parse_estimate",
]
