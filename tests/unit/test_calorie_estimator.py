"""
Unit tests for OpenAICalorieEstimator and parse_estimate.

The OpenAI client is replaced with a MagicMock; no network access.
"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from application.exceptions import (
    CalorieEstimationError,
    CalorieEstimationParseError,
    CalorieEstimatorNotConfiguredError,
)
from application.ports import CalorieEstimationRequest
from backend.ai import OpenAICalorieEstimator, parse_estimate
from backend.ai.prompts import CALORIE_ESTIMATION_SYSTEM_PROMPT
from backend.settings import Settings
from domain.models import BodyMetrics, ExerciseSnapshot, FocusArea

pytestmark = pytest.mark.unit

_OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _mock_client(content=None, error=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=_completion(content), side_effect=error
    )
    return client


def _request(session_id=None) -> CalorieEstimationRequest:
    exercise = ExerciseSnapshot(
        id="ex-1",
        name="Squat",
        sets=3,
        reps=5,
        weight=100,
        rest_seconds=120,
        training_seconds=45,
        focus_area=FocusArea.LEGS,
    )
    return CalorieEstimationRequest.build(
        body=BodyMetrics(weight_kg=82, height_cm=178),
        duration_seconds=900,
        exercises=[exercise],
        session_id=session_id,
    )


@pytest.fixture
def settings():
    return Settings(environment="test", openai_api_key="sk-test", _env_file=None)


VALID_ANSWER = json.dumps({
    "totalCalories": 152.6,
    "perExercise": [{"id": "ex-1", "name": "Squat", "calories": 152.4, "reasoning": "heavy legs"}],
    "reasoning": "MET-based",
    "model": "gpt-4o-mini",
    "confidence": 0.7,
})


class TestParseEstimate:
    def test_parses_plain_json(self):
        estimate = parse_estimate(VALID_ANSWER, default_model="x")

        assert estimate.total_calories == 153
        assert estimate.per_exercise[0].id == "ex-1"
        assert estimate.per_exercise[0].calories == 152
        assert estimate.per_exercise[0].reasoning == "heavy legs"
        assert estimate.reasoning == "MET-based"
        assert estimate.model == "gpt-4o-mini"
        assert estimate.confidence == 0.7

    def test_strips_code_fences(self):
        content = f"```json\n{VALID_ANSWER}\n```"
        assert parse_estimate(content, default_model="x").total_calories == 153

    def test_tolerates_surrounding_prose(self):
        content = f"Here is the estimate: {VALID_ANSWER} Hope this helps."
        assert parse_estimate(content, default_model="x").total_calories == 153

    def test_defaults_for_optional_fields(self):
        estimate = parse_estimate('{"totalCalories": 10, "perExercise": []}', default_model="fallback")

        assert estimate.reasoning == ""
        assert estimate.model == "fallback"
        assert estimate.confidence is None
        assert estimate.per_exercise == []

    def test_negative_values_clamped(self):
        content = '{"totalCalories": -5, "perExercise": [{"id": "a", "calories": -3}]}'

        estimate = parse_estimate(content, default_model="m")

        assert estimate.total_calories == 0
        assert estimate.per_exercise[0].calories == 0

    def test_non_numeric_item_calories_become_zero(self):
        content = '{"totalCalories": 5, "perExercise": [{"id": "a", "calories": "lots"}, "junk"]}'

        estimate = parse_estimate(content, default_model="m")

        assert len(estimate.per_exercise) == 1
        assert estimate.per_exercise[0].calories == 0

    def test_oversized_item_calories_become_zero(self):
        content = '{"totalCalories": 5, "perExercise": [{"id": "a", "calories": 1' + "0" * 400 + "}]}"

        assert parse_estimate(content, default_model="m").per_exercise[0].calories == 0

    def test_non_numeric_confidence_dropped(self):
        content = '{"totalCalories": 5, "perExercise": [], "confidence": "high"}'
        assert parse_estimate(content, default_model="m").confidence is None

    @pytest.mark.parametrize(
        "content",
        [
            "not json at all",
            '{"totalCalories": "100", "perExercise": []}',
            '{"totalCalories": 100}',
            '{"totalCalories": 100, "perExercise": {}}',
            '{"totalCalories": true, "perExercise": []}',
            '{"totalCalories": 1' + '0' * 400 + ', "perExercise": []}',
            "[1, 2, 3]",
        ],
    )
    def test_rejects_unexpected_shapes(self, content):
        with pytest.raises(CalorieEstimationParseError):
            parse_estimate(content, default_model="m")

    def test_parse_error_is_an_estimation_error(self):
        with pytest.raises(CalorieEstimationError):
            parse_estimate("{}", default_model="m")


class TestOpenAICalorieEstimator:
    @pytest.mark.asyncio
    async def test_sends_single_json_request(self, settings):
        client = _mock_client(VALID_ANSWER)
        estimator = OpenAICalorieEstimator(settings=settings, client=client)

        estimate = await estimator.estimate(_request())

        assert estimate.total_calories == 153
        client.chat.completions.create.assert_awaited_once()
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.1
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": CALORIE_ESTIMATION_SYSTEM_PROMPT}
        user_prompt = kwargs["messages"][1]["content"]
        assert '"weightKg":82.0' in user_prompt
        assert '"durationSeconds":900.0' in user_prompt
        assert '"trainingSeconds":45' in user_prompt
        assert kwargs["extra_headers"] is None

    @pytest.mark.asyncio
    async def test_model_override(self, settings):
        client = _mock_client('{"totalCalories": 1, "perExercise": []}')
        estimator = OpenAICalorieEstimator(settings=settings, client=client, model="gpt-4.1-mini")

        estimate = await estimator.estimate(_request())

        assert estimator.model == "gpt-4.1-mini"
        assert client.chat.completions.create.call_args.kwargs["model"] == "gpt-4.1-mini"
        assert estimate.model == "gpt-4.1-mini"

    @pytest.mark.asyncio
    async def test_remote_error_message_is_surfaced(self, settings):
        error = openai.RateLimitError(
            "Error code: 429",
            response=httpx.Response(429, request=httpx.Request("POST", _OPENAI_URL)),
            body={"error": {"message": "Rate limit reached for gpt-4o-mini"}},
        )
        estimator = OpenAICalorieEstimator(settings=settings, client=_mock_client(error=error))

        with pytest.raises(CalorieEstimationError, match="Rate limit reached"):
            await estimator.estimate(_request())

    @pytest.mark.asyncio
    async def test_network_error_is_wrapped(self, settings):
        error = openai.APIConnectionError(request=httpx.Request("POST", _OPENAI_URL))
        estimator = OpenAICalorieEstimator(settings=settings, client=_mock_client(error=error))

        with pytest.raises(CalorieEstimationError):
            await estimator.estimate(_request())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_content_is_an_error(self, settings, content):
        estimator = OpenAICalorieEstimator(settings=settings, client=_mock_client(content))

        with pytest.raises(CalorieEstimationError, match="no text content"):
            await estimator.estimate(_request())

    @pytest.mark.asyncio
    async def test_unparseable_content(self, settings):
        estimator = OpenAICalorieEstimator(settings=settings, client=_mock_client("I cannot help"))

        with pytest.raises(CalorieEstimationParseError):
            await estimator.estimate(_request())

    @pytest.mark.asyncio
    async def test_missing_key_reports_not_configured(self):
        settings = Settings(environment="test", openai_api_key=None, _env_file=None)
        estimator = OpenAICalorieEstimator(settings=settings)

        with pytest.raises(CalorieEstimatorNotConfiguredError):
            await estimator.estimate(_request())

    @pytest.mark.asyncio
    async def test_helicone_headers_carry_session_id(self):
        settings = Settings(
            environment="test", openai_api_key="sk-test",
            helicone_enabled=True, helicone_api_key="hk-test", _env_file=None,
        )
        client = _mock_client(VALID_ANSWER)
        estimator = OpenAICalorieEstimator(settings=settings, client=client)

        await estimator.estimate(_request(session_id="session-42"))

        headers = client.chat.completions.create.call_args.kwargs["extra_headers"]
        assert headers["Helicone-Session-Id"] == "session-42"
        assert headers["Helicone-Property-Exercise-Count"] == "1"
        assert headers["Helicone-Property-Environment"] == "test"
        assert "sessionId" not in client.chat.completions.create.call_args.kwargs["messages"][1]["content"]

    def test_client_created_lazily_with_tracking_context(self, settings):
        settings = Settings(
            environment="test", openai_api_key="sk-test", supabase_user_id="user-9", _env_file=None
        )
        estimator = OpenAICalorieEstimator(settings=settings)

        with patch("backend.ai.calorie_estimator.AIClientFactory.create_openai_client") as mock_create:
            client = estimator._get_client()
            estimator._get_client()

        mock_create.assert_called_once()
        context = mock_create.call_args.kwargs["context"]
        assert context.user_id == "user-9"
        assert context.feature_name == "training_calorie_estimation"
        assert client is mock_create.return_value
