"""
Application-layer exceptions.

These exceptions are used across application and infrastructure layers.
"""


class CalorieEstimationError(Exception):
    """AI calorie estimation failed.

    Raised for remote errors (the message carries the provider's error
    text), network failures and unusable responses. The baseline estimate
    stays authoritative when this happens.
    """

    pass


class CalorieEstimationParseError(CalorieEstimationError):
    """The model answered, but not with the expected JSON object."""

    pass


class CalorieEstimatorNotConfiguredError(CalorieEstimationError):
    """No API credential is configured.

    An expected condition: estimation is skipped silently and the baseline
    estimate stands.
    """

    def __init__(self, message: str = "OpenAI API key is not configured"):
        super().__init__(message)
