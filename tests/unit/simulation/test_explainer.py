"""Tests for failure narration."""

from unittest.mock import AsyncMock

import pytest

from loomin.core.exceptions import LLMError
from loomin.simulation.explainer import FailureExplainer
from loomin.simulation.models import Topic
from loomin.simulation.prompts import build_explanation_prompt


@pytest.mark.asyncio
async def test_returns_stripped_text(mock_llm_client):
    mock_llm_client.generate_with_context.return_value = "  The blades shear off!  "

    text = await FailureExplainer(mock_llm_client).explain(
        Topic.WIND_TURBINE, {"wind_speed": 90}, "Drag exceeded limit"
    )

    assert text == "The blades shear off!"


@pytest.mark.asyncio
async def test_prompt_names_topic_vars_and_reason(mock_llm_client):
    await FailureExplainer(mock_llm_client).explain(
        Topic.ROBOT_ARM, {"payload": 11}, "Torque exceeded"
    )

    kwargs = mock_llm_client.generate_with_context.call_args.kwargs
    assert kwargs["user_prompt"] == build_explanation_prompt(
        Topic.ROBOT_ARM, {"payload": 11}, "Torque exceeded"
    )
    assert "robot_arm" in kwargs["user_prompt"]
    assert '"payload": 11' in kwargs["user_prompt"]
    assert kwargs["config"].temperature == 0.7


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [LLMError("down"), ValueError("bad")])
async def test_failures_yield_empty_string(mock_llm_client, error):
    mock_llm_client.generate_with_context = AsyncMock(side_effect=error)

    text = await FailureExplainer(mock_llm_client).explain(
        Topic.WIND_TURBINE, {}, "Drag exceeded limit"
    )

    assert text == ""
