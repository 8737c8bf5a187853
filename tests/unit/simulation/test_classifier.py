"""Tests for topic classification."""

import pytest

from loomin.simulation.classifier import classify_topic, scene_mode_for
from loomin.simulation.models import Topic


class TestKeywordPrecedence:
    """Specific topics, then turbine, then robot arm, then generic."""

    def test_motherboard_beats_wind(self):
        text = "The motherboard fan pushes wind over the heat sink blade fins"
        assert classify_topic(text) == Topic.MOTHERBOARD

    def test_engine_beats_turbine(self):
        assert classify_topic("Gas turbine engine with a seized piston") == Topic.ENGINE

    @pytest.mark.parametrize(
        "text",
        ["A wind turbine on a hill", "wind pushes each blade", "Old WINDMILL"],
    )
    def test_wind_turbine(self, text):
        assert classify_topic(text) == Topic.WIND_TURBINE

    def test_wind_alone_is_not_a_turbine(self):
        assert classify_topic("Strong wind today") == Topic.GENERIC

    def test_robot_arm(self):
        assert classify_topic("Robot lifting a crate with its gripper") == Topic.ROBOT_ARM

    @pytest.mark.parametrize(
        "text,topic",
        [
            ("resistor in series", Topic.CIRCUIT),
            ("gear ratio of 3:1", Topic.MECHANICAL),
            ("Rooftop solar panel array", Topic.SOLAR),
        ],
    )
    def test_specific_topics(self, text, topic):
        assert classify_topic(text) == topic

    def test_generic_default(self):
        assert classify_topic("Shopping list: eggs") == Topic.GENERIC
        assert classify_topic("") == Topic.GENERIC


class TestSceneModeOverride:
    """Scene_Mode extracted from the note overrides keywords."""

    def test_mode_zero_forces_turbine(self):
        assert classify_topic("robot gripper", scene_mode=0) == Topic.WIND_TURBINE

    def test_mode_one_forces_robot_arm(self):
        assert classify_topic("wind turbine", scene_mode=1) == Topic.ROBOT_ARM

    def test_mode_two_uses_scene_rules(self):
        assert classify_topic("cpu cooler", scene_mode=2) == Topic.MOTHERBOARD
        assert classify_topic("an LED strip", scene_mode=3) == Topic.CIRCUIT

    def test_mode_two_without_keywords_is_generic(self):
        assert classify_topic("wind turbine", scene_mode=2) == Topic.GENERIC

    def test_other_modes_fall_through_to_keywords(self):
        assert classify_topic("wind turbine", scene_mode=-1) == Topic.WIND_TURBINE
        assert classify_topic("robot", scene_mode=1.5) == Topic.ROBOT_ARM


@pytest.mark.parametrize(
    "topic,mode",
    [
        (Topic.WIND_TURBINE, 0),
        (Topic.ROBOT_ARM, 1),
        (Topic.MOTHERBOARD, 2),
        (Topic.GENERIC, 2),
    ],
)
def test_scene_mode_for(topic, mode):
    assert scene_mode_for(topic) == mode
