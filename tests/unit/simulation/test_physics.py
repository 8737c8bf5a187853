"""
Tests for physics evaluation.

Organization
------------
- TestWindTurbine: drag-limited wind speed rule
- TestRobotArm: shoulder torque rule
- TestOtherTopics: topics without a failure rule
- TestFailureNarrative: deterministic failure text
"""

import pytest

from loomin.simulation.models import NEUTRAL_MESSAGE, SimulationStatus, Topic
from loomin.simulation.physics import (
    evaluate,
    failure_narrative,
    format_number,
    wind_limit,
)


class TestWindTurbine:
    """limit = max(20, 75 - 5 * blade_count)"""

    def test_boundary_is_inclusive(self):
        verdict = evaluate(Topic.WIND_TURBINE, {"wind_speed": 75, "blade_count": 0})

        assert verdict.status == SimulationStatus.OPTIMAL
        assert verdict.message == NEUTRAL_MESSAGE

    def test_one_over_boundary_fails(self):
        verdict = evaluate(Topic.WIND_TURBINE, {"wind_speed": 76, "blade_count": 0})

        assert verdict.status == SimulationStatus.CRITICAL_FAILURE

    def test_drag_scaling(self):
        verdict = evaluate(Topic.WIND_TURBINE, {"wind_speed": 40, "blade_count": 8})

        assert verdict.status == SimulationStatus.CRITICAL_FAILURE
        assert "35 m/s" in verdict.message
        assert "8 blades" in verdict.message
        assert verdict.recommendation == (
            "Reduce wind_speed to 30 m/s OR reduce blade_count to 3."
        )

    def test_limit_floor(self):
        assert wind_limit(20) == 20
        assert evaluate(
            Topic.WIND_TURBINE, {"wind_speed": 20, "blade_count": 20}
        ).status == SimulationStatus.OPTIMAL

    def test_defaults_for_missing_vars(self):
        # three blades by default: limit 60
        assert evaluate(Topic.WIND_TURBINE, {}).status == SimulationStatus.OPTIMAL
        assert (
            evaluate(Topic.WIND_TURBINE, {"wind_speed": 61}).status
            == SimulationStatus.CRITICAL_FAILURE
        )

    def test_unrelated_vars_ignored(self):
        verdict = evaluate(
            Topic.WIND_TURBINE, {"wind_speed": 10, "Scene_Mode": 0, "Torque": 900}
        )
        assert verdict.status == SimulationStatus.OPTIMAL


class TestRobotArm:
    """torque = payload * arm_length * 9.8 against 600 Nm"""

    def test_under_limit(self):
        verdict = evaluate(Topic.ROBOT_ARM, {"payload": 10, "arm_length": 6})

        assert verdict.status == SimulationStatus.OPTIMAL

    def test_over_limit(self):
        verdict = evaluate(Topic.ROBOT_ARM, {"payload": 11, "arm_length": 6})

        assert verdict.status == SimulationStatus.CRITICAL_FAILURE
        assert verdict.message == "Torque (647 Nm) exceeded gear limit of 600 Nm."
        assert verdict.recommendation == "Reduce payload to 10.2 kg."

    def test_default_arm_length(self):
        assert evaluate(Topic.ROBOT_ARM, {"payload": 62}).is_failure
        assert not evaluate(Topic.ROBOT_ARM, {"payload": 62, "arm_length": 0}).is_failure


class TestOtherTopics:
    @pytest.mark.parametrize(
        "topic", [Topic.MOTHERBOARD, Topic.SOLAR, Topic.ENGINE, Topic.GENERIC]
    )
    def test_always_optimal(self, topic):
        verdict = evaluate(topic, {"wind_speed": 999, "payload": 999})

        assert verdict.status == SimulationStatus.OPTIMAL
        assert verdict.recommendation == ""


class TestFailureNarrative:
    def test_turbine_narrative(self):
        variables = {"wind_speed": 76.0, "blade_count": 0}
        verdict = evaluate(Topic.WIND_TURBINE, variables)

        text = failure_narrative(Topic.WIND_TURBINE, variables, verdict)

        assert text.startswith("At 76 m/s with 0 blades")
        assert "up to 75 m/s" in text

    def test_arm_narrative(self):
        variables = {"payload": 11, "arm_length": 6}
        verdict = evaluate(Topic.ROBOT_ARM, variables)

        text = failure_narrative(Topic.ROBOT_ARM, variables, verdict)

        assert "647 Nm" in text

    def test_no_narrative_for_optimal(self):
        variables = {"payload": 1}
        verdict = evaluate(Topic.ROBOT_ARM, variables)

        assert failure_narrative(Topic.ROBOT_ARM, variables, verdict) == ""


def test_format_number():
    assert format_number(76.0) == "76"
    assert format_number(44.704) == "44.704"
    assert format_number(3) == "3"
