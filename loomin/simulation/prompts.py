"""Prompt text sent to the LLM provider."""

import json

from loomin.simulation.models import CanonicalVariables, Topic

TOPIC_NAMES = ", ".join(f'"{topic.value}"' for topic in Topic)

EXTRACTION_SYSTEM_PROMPT = f"""You are a physics engine API. Extract variables from the user's notes.
RULES:
1. Output Pure JSON. NO MATH. Calculate values yourself.
2. Detect Topic, one of: {TOPIC_NAMES}.
3. Standardize Units to SI: "10 cm" -> 0.1, "100 mph" -> 44.7 (m/s), "20 lbs" -> 9.07 (kg), "12 V" -> 12.
4. Use these variable names when they apply: wind_speed (m/s), blade_count, payload (kg), arm_length (m), material.
EXAMPLE: {{"topic": "wind_turbine", "vars": {{"wind_speed": 45, "blade_count": 5}}}}"""

EXPLANATION_SYSTEM_PROMPT = (
    "You narrate engineering failures for students. Answer in plain text."
)


def build_explanation_prompt(
    topic: Topic, variables: CanonicalVariables, message: str
) -> str:
    """User prompt asking for one sentence about a specific failure."""
    return (
        f"Explain physics failure: {topic.value}, vars: {json.dumps(variables)}. "
        f"Reason: {message}. Write 1 dramatic sentence."
    )
