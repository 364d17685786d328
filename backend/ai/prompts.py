"""
LLM prompt templates for training calorie estimation.

The user prompt embeds the response schema and the serialized session, so the
model has everything it needs in a single request.
"""

CALORIE_ESTIMATION_SYSTEM_PROMPT = """You are an agent that estimates the energy expenditure of resistance training sessions.

Base your estimate on METs, estimated VO2 and the energy cost of the muscle groups involved, and return quantitative output only.
"""

CALORIE_ESTIMATION_USER_PROMPT = """Estimate the calories burned by the training session described by the JSON input below.

This is resistance training, not aerobic exercise: combine METs with the user's body weight, and make heavier loads and more sets burn more calories.

Respond with JSON only, matching exactly this schema:
{schema}

Input: {payload}
"""

RESPONSE_SCHEMA_TEMPLATE = (
    '{{"totalCalories":number,'
    '"perExercise":[{{"id":"string","name":"string","calories":number,"reasoning":"string"}}],'
    '"reasoning":"string","model":"{model}","confidence":number}}'
)


def build_calorie_estimation_prompt(payload_json: str, model: str) -> str:
    """
    Build the user prompt for a calorie estimation request.

    Args:
        payload_json: camelCase JSON of the CalorieEstimationRequest
        model: Model identifier the response should echo back

    Returns:
        Formatted user prompt string
    """
    schema = RESPONSE_SCHEMA_TEMPLATE.format(model=model)
    return CALORIE_ESTIMATION_USER_PROMPT.format(schema=schema, payload=payload_json)
