"""
Physics evaluation.

Pure, deterministic stability rules per topic. The evaluator never fails:
missing variables take baseline defaults and topics without a rule are
OPTIMAL.

Wind turbine
    More blades mean more drag and a lower safe wind speed, floored at 20 m/s:
        limit = max(20, 75 - 5 * blade_count)
    wind_speed > limit  ->  CRITICAL_FAILURE

Robot arm
    Shoulder torque against a 600 Nm gear train:
        torque = payload * arm_length * 9.8
    torque > 600  ->  CRITICAL_FAILURE
"""

from typing import Callable, Dict

from loomin.simulation.models import (
    CanonicalVariables,
    Number,
    SimulationStatus,
    SimulationVerdict,
    Topic,
)

GRAVITY = 9.8
TORQUE_LIMIT_NM = 600
BASE_WIND_LIMIT = 75
DRAG_PER_BLADE = 5
MIN_WIND_LIMIT = 20
SAFETY_MARGIN = 5
SAFE_BLADE_COUNT = 3

DEFAULTS: Dict[str, Number] = {
    "wind_speed": 0,
    "blade_count": 3,
    "payload": 0,
    "arm_length": 1,
}

OPTIMAL = SimulationVerdict(status=SimulationStatus.OPTIMAL)


def format_number(value: Number) -> str:
    """Render a number the way it reads in a note: 76, not 76.0."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _get(variables: CanonicalVariables, key: str) -> Number:
    """Variable value, or its default when absent (an explicit 0 is kept)."""
    value = variables.get(key)
    return DEFAULTS[key] if value is None else value


def wind_limit(blade_count: Number) -> Number:
    """Highest safe wind speed (m/s) for a blade count."""
    return max(MIN_WIND_LIMIT, BASE_WIND_LIMIT - DRAG_PER_BLADE * blade_count)


def _evaluate_wind_turbine(variables: CanonicalVariables) -> SimulationVerdict:
    wind = _get(variables, "wind_speed")
    blades = _get(variables, "blade_count")
    limit = wind_limit(blades)
    if wind <= limit:
        return OPTIMAL
    return SimulationVerdict(
        status=SimulationStatus.CRITICAL_FAILURE,
        message=(
            f"Drag from {format_number(blades)} blades exceeded limit "
            f"({format_number(limit)} m/s) at wind speed {format_number(wind)} m/s."
        ),
        recommendation=(
            f"Reduce wind_speed to {limit - SAFETY_MARGIN:.0f} m/s "
            f"OR reduce blade_count to {SAFE_BLADE_COUNT}."
        ),
    )


def _evaluate_robot_arm(variables: CanonicalVariables) -> SimulationVerdict:
    payload = _get(variables, "payload")
    length = _get(variables, "arm_length")
    torque = payload * length * GRAVITY
    if torque <= TORQUE_LIMIT_NM:
        return OPTIMAL
    max_payload = TORQUE_LIMIT_NM / (length * GRAVITY)
    return SimulationVerdict(
        status=SimulationStatus.CRITICAL_FAILURE,
        message=(
            f"Torque ({torque:.0f} Nm) exceeded gear limit of {TORQUE_LIMIT_NM} Nm."
        ),
        recommendation=f"Reduce payload to {max_payload:.1f} kg.",
    )


RULES: Dict[Topic, Callable[[CanonicalVariables], SimulationVerdict]] = {
    Topic.WIND_TURBINE: _evaluate_wind_turbine,
    Topic.ROBOT_ARM: _evaluate_robot_arm,
}


def evaluate(topic: Topic, variables: CanonicalVariables) -> SimulationVerdict:
    """
    Judge whether the parameters describe a stable design.

    Args:
        topic: Simulation topic
        variables: Canonical variables; unrecognized keys are ignored

    Returns:
        The verdict; OPTIMAL for topics without a failure rule
    """
    rule = RULES.get(topic)
    if rule is None:
        return OPTIMAL
    return rule(variables)


def failure_narrative(
    topic: Topic, variables: CanonicalVariables, verdict: SimulationVerdict
) -> str:
    """
    Deterministic explanation of a failure, used where no LLM is consulted.

    Returns:
        The narrative, or "" when the verdict is not a failure
    """
    if not verdict.is_failure:
        return ""

    if topic == Topic.WIND_TURBINE:
        wind = format_number(_get(variables, "wind_speed"))
        blades = format_number(_get(variables, "blade_count"))
        limit = format_number(wind_limit(_get(variables, "blade_count")))
        return (
            f"At {wind} m/s with {blades} blades, the aerodynamic drag exceeds "
            "structural limits. The centrifugal force combined with wind shear "
            "creates oscillations that will tear the blades apart. According to "
            f"Betz's Law and structural engineering limits, {blades} blades can "
            f"only safely operate up to {limit} m/s."
        )

    if topic == Topic.ROBOT_ARM:
        torque = _get(variables, "payload") * _get(variables, "arm_length") * GRAVITY
        return (
            f"The torque of {torque:.0f} Nm at the shoulder joint exceeds the gear "
            f"train's rated capacity of {TORQUE_LIMIT_NM} Nm. This will cause gear "
            "teeth to shear and the arm to fail catastrophically."
        )

    return ""
