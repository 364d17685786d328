"""
OpenAI client wrapper for training calorie estimation.

Provides the OpenAICalorieEstimator class, which sends one chat-completion
request per finished session and parses the model's JSON answer into a
CalorieEstimate.
"""

import json
import logging
import math
import re
from typing import Any, Dict, Optional

from openai import APIError, APIStatusError, AsyncOpenAI

from application.exceptions import CalorieEstimationError, CalorieEstimationParseError
from application.ports import CalorieEstimationRequest
from backend.ai.client_factory import AIClientFactory, AIRequestContext
from backend.ai.prompts import (
    CALORIE_ESTIMATION_SYSTEM_PROMPT,
    build_calorie_estimation_prompt,
)
from backend.settings import Settings, get_settings
from domain.models import CalorieEstimate, ExerciseEstimate
from domain.services.baseline_calories import round_half_up

logger = logging.getLogger(__name__)

_CODE_FENCE_PATTERN = re.compile(r"```(?:json)?([\s\S]*?)```", re.IGNORECASE)


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def _strip_code_fences(content: str) -> str:
    """Return the body of the first ``` fence, or the trimmed content."""
    match = _CODE_FENCE_PATTERN.search(content)
    if match:
        return match.group(1).strip()
    return content.strip()


def _extract_json_object(content: str) -> str:
    """Slice from the first '{' to the last '}', tolerating surrounding prose."""
    normalized = _strip_code_fences(content)
    first = normalized.find("{")
    last = normalized.rfind("}")
    if first >= 0 and last >= first:
        return normalized[first:last + 1]
    return normalized


def parse_estimate(content: str, default_model: str) -> CalorieEstimate:
    """
    Parse and normalize the model's answer.

    Args:
        content: Raw message content returned by the model
        default_model: Model identifier used when the answer omits one

    Returns:
        Normalized CalorieEstimate

    Raises:
        CalorieEstimationParseError: If no JSON object with a numeric
            totalCalories and a perExercise array can be extracted
    """
    try:
        data = json.loads(_extract_json_object(content))
    except json.JSONDecodeError as e:
        raise CalorieEstimationParseError(f"Calorie estimation response is not valid JSON: {e}") from e

    if (
        not isinstance(data, dict)
        or not _is_number(data.get("totalCalories"))
        or not isinstance(data.get("perExercise"), list)
    ):
        raise CalorieEstimationParseError("Unexpected calorie estimation response format")

    per_exercise = []
    for item in data["perExercise"]:
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed perExercise item: {item!r}")
            continue
        calories = item.get("calories")
        reasoning = item.get("reasoning")
        per_exercise.append(
            ExerciseEstimate(
                id="" if item.get("id") is None else str(item["id"]),
                name="" if item.get("name") is None else str(item["name"]),
                calories=max(0, round_half_up(calories)) if _is_number(calories) else 0,
                reasoning=str(reasoning) if reasoning else None,
            )
        )

    reasoning = data.get("reasoning")
    model = data.get("model")
    confidence = data.get("confidence")
    return CalorieEstimate(
        total_calories=max(0, round_half_up(data["totalCalories"])),
        per_exercise=per_exercise,
        reasoning=reasoning if isinstance(reasoning, str) else "",
        model=default_model if model is None else str(model),
        confidence=float(confidence) if _is_number(confidence) else None,
    )


def _remote_error_message(error: APIStatusError) -> str:
    """Best available human-readable message from an OpenAI error response."""
    body = error.body
    if isinstance(body, dict):
        nested = body.get("error")
        if isinstance(nested, dict) and nested.get("message"):
            return str(nested["message"])
        if body.get("message"):
            return str(body["message"])
    return error.message or "OpenAI API request failed"


class OpenAICalorieEstimator:
    """
    OpenAI-powered calorie estimator for finished training sessions.

    Uses gpt-4o-mini with JSON output. Exactly one request is sent per call;
    failures surface as CalorieEstimationError and are never retried. The
    client is created lazily, so a missing API key is reported on each call
    as CalorieEstimatorNotConfiguredError rather than at construction.
    """

    DEFAULT_MODEL = "gpt-4o-mini"
    TEMPERATURE = 0.1

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
    ):
        """
        Initialize the estimator.

        Args:
            settings: Settings holding the OpenAI key and model (default: get_settings())
            client: Pre-built OpenAI client (tests, custom transports)
            model: Model override (default: settings.calorie_estimation_model)
        """
        self._settings = settings or get_settings()
        self._client = client
        self._model = model or self._settings.calorie_estimation_model or self.DEFAULT_MODEL

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AIClientFactory.create_openai_client(
                settings=self._settings,
                context=AIRequestContext(
                    user_id=self._settings.supabase_user_id,
                    feature_name="training_calorie_estimation",
                ),
            )
        return self._client

    def _tracking_headers(self, request: CalorieEstimationRequest) -> Optional[Dict[str, str]]:
        """Per-request Helicone headers tying the call to its training session."""
        if not self._settings.helicone_enabled or not request.session_id:
            return None
        context = AIRequestContext(
            session_id=request.session_id,
            custom_properties={"exercise_count": str(len(request.exercises))},
        )
        return context.to_tracking_headers(self._settings.environment)

    async def estimate(self, request: CalorieEstimationRequest) -> CalorieEstimate:
        """
        Estimate the calories burned by a finished session.

        Args:
            request: Body profile, session duration and exercises

        Returns:
            Normalized CalorieEstimate

        Raises:
            CalorieEstimatorNotConfiguredError: If no API key is configured
            CalorieEstimationError: On remote, network or empty-response errors
            CalorieEstimationParseError: If the answer is not the expected JSON
        """
        client = self._get_client()
        user_prompt = build_calorie_estimation_prompt(request.to_prompt_json(), self._model)

        try:
            response = await client.chat.completions.create(
                model=self._model,
                temperature=self.TEMPERATURE,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": CALORIE_ESTIMATION_SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                extra_headers=self._tracking_headers(request),
            )
        except APIStatusError as e:
            raise CalorieEstimationError(_remote_error_message(e)) from e
        except APIError as e:
            raise CalorieEstimationError(e.message or "OpenAI API request failed") from e

        content = response.choices[0].message.content if response.choices else None
        if not isinstance(content, str) or not content.strip():
            raise CalorieEstimationError("OpenAI API returned no text content")

        estimate = parse_estimate(content, default_model=self._model)
        logger.debug(
            f"Calorie estimate: {estimate.total_calories} kcal "
            f"across {len(estimate.per_exercise)} exercises"
        )
        return estimate
