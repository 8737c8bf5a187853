"""
Topic classification.

Maps note text (and an optional Scene_Mode override) to a Topic with fixed
keyword rules. Matching is case-insensitive substring matching.

Precedence, highest first:

    1. Scene_Mode override: 0 -> wind_turbine, 1 -> robot_arm,
       >= 2 -> scene keyword sub-rules, else generic
    2. Specific generic-topic keywords (motherboard, circuit board, ...)
    3. Wind turbine keywords
    4. Robot arm keywords
    5. generic

Step 2 runs before step 3 so a note about an engine that happens to mention
wind is not drawn as a turbine. The order is load-bearing.
"""

from typing import Optional, Sequence, Tuple

from loomin.simulation.models import Number, Topic

KeywordRule = Tuple[Topic, Sequence[str]]

# Sub-rules used once Scene_Mode >= 2 has selected the generic visual
SCENE_RULES: Sequence[KeywordRule] = (
    (Topic.MOTHERBOARD, ("motherboard", "cpu", "ram", "chipset")),
    (Topic.CIRCUIT, ("circuit", "resistor", "capacitor", "led")),
    (Topic.MECHANICAL, ("gear", "mechanical", "lever", "pulley")),
    (Topic.SOLAR, ("solar", "photovoltaic", "pv panel")),
    (Topic.ENGINE, ("engine", "piston", "combustion")),
)

SPECIFIC_RULES: Sequence[KeywordRule] = (
    (Topic.MOTHERBOARD, ("motherboard", "cpu socket", "ram slot", "chipset", "pcie")),
    (Topic.CIRCUIT, ("circuit board", "resistor", "capacitor", "transistor")),
    (Topic.MECHANICAL, ("gear ratio", "mechanical advantage", "lever", "fulcrum")),
    (Topic.SOLAR, ("solar panel", "photovoltaic", "solar cell")),
    (Topic.ENGINE, ("engine", "piston", "crankshaft", "combustion")),
)

ROBOT_ARM_KEYWORDS = ("robot", "robotic arm", "gripper", "actuator")

SCENE_MODES = {
    Topic.WIND_TURBINE: 0,
    Topic.ROBOT_ARM: 1,
}
GENERIC_SCENE_MODE = 2


def _first_match(lower: str, rules: Sequence[KeywordRule]) -> Optional[Topic]:
    for topic, keywords in rules:
        if any(keyword in lower for keyword in keywords):
            return topic
    return None


def _is_turbine(lower: str) -> bool:
    return (
        "turbine" in lower
        or ("wind" in lower and "blade" in lower)
        or "windmill" in lower
    )


def classify_topic(text: str, scene_mode: Optional[Number] = None) -> Topic:
    """
    Classify note text into a simulation topic.

    Args:
        text: Raw note text
        scene_mode: Scene_Mode value extracted from the note, if any

    Returns:
        The detected Topic
    """
    lower = (text or "").lower()

    if scene_mode is not None:
        if scene_mode == 0:
            return Topic.WIND_TURBINE
        if scene_mode == 1:
            return Topic.ROBOT_ARM
        if scene_mode >= GENERIC_SCENE_MODE:
            return _first_match(lower, SCENE_RULES) or Topic.GENERIC
        # Negative and fractional modes below 2 fall through to keywords

    specific = _first_match(lower, SPECIFIC_RULES)
    if specific is not None:
        return specific
    if _is_turbine(lower):
        return Topic.WIND_TURBINE
    if any(keyword in lower for keyword in ROBOT_ARM_KEYWORDS):
        return Topic.ROBOT_ARM
    return Topic.GENERIC


def scene_mode_for(topic: Topic) -> int:
    """Scene_Mode that renders topic: turbine 0, arm 1, everything else 2."""
    return SCENE_MODES.get(topic, GENERIC_SCENE_MODE)
