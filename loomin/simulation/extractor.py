"""
Direct pattern extraction.

Pulls canonical variables straight out of note text with regular expressions,
so notes that already spell out ``wind_speed = 50`` never reach the LLM.

Rules
-----
Each named rule binds one canonical key:

    wind_speed        "wind speed = 50", "Wind_Speed: 50 mph"
    blade_count       "blade count = 5"
    number_of_blades  "number of blades = 8"
    payload           "payload = 20 lbs"
    arm_length        "arm length = 3"

A generic rule then picks up any line shaped ``Key = Value [unit]``. Only
``=`` counts there, so headers such as ``Lecture: 4`` stay prose. Generic
keys that match the canonical vocabulary case-insensitively take the
canonical spelling; anything else is kept as written.

Every rule runs over the whole text and all matches are applied in text order,
so the last mention of a key wins. That lets a student correct a parameter
further down the page.
"""

import math
import re
from typing import Dict, List, Pattern, Tuple

from loomin.simulation.models import CanonicalVariables, Number
from loomin.simulation.units import NUMBER_PATTERN, UNIT_PATTERN, as_number, normalize

CANONICAL_KEYS = (
    "wind_speed",
    "blade_count",
    "number_of_blades",
    "payload",
    "arm_length",
    "material",
    "Scene_Mode",
)

_CANONICAL_BY_LOWER: Dict[str, str] = {key.lower(): key for key in CANONICAL_KEYS}

_QUANTITY = rf"[ \t]*({NUMBER_PATTERN})(?:[ \t]*({UNIT_PATTERN}))?"

# Named parameters accept "=" or ":"; arbitrary keys only "="
_VALUE = rf"[ \t]*[=:]{_QUANTITY}"
_ASSIGNMENT = rf"[ \t]*={_QUANTITY}"

NAMED_RULES: List[Tuple[str, Pattern[str]]] = [
    ("wind_speed", re.compile(rf"\bwind[_\s]*speed{_VALUE}", re.IGNORECASE)),
    ("blade_count", re.compile(rf"\bblade[_\s]*count{_VALUE}", re.IGNORECASE)),
    (
        "number_of_blades",
        re.compile(rf"\bnumber[_\s]*of[_\s]*blades{_VALUE}", re.IGNORECASE),
    ),
    ("payload", re.compile(rf"\bpayload{_VALUE}", re.IGNORECASE)),
    ("arm_length", re.compile(rf"\barm[_\s]*length{_VALUE}", re.IGNORECASE)),
]

GENERIC_RULE = re.compile(
    rf"^[ \t]*([A-Za-z_][A-Za-z0-9_]*){_ASSIGNMENT}", re.MULTILINE
)


def canonical_key(key: str) -> str:
    """Return the canonical spelling of key, or key unchanged."""
    return _CANONICAL_BY_LOWER.get(key.lower(), key)


def _to_value(number: str, unit: str) -> Number:
    return normalize(as_number(float(number)), unit or None)


def extract_variables(text: str) -> CanonicalVariables:
    """
    Extract canonical variables from note text.

    Args:
        text: Raw note text

    Returns:
        Mapping of variable name to finite number; empty if nothing matched
    """
    if not text:
        return {}

    # (position, key, value) from every rule, applied in text order
    matches: List[Tuple[int, str, Number]] = []
    for key, pattern in NAMED_RULES:
        for match in pattern.finditer(text):
            matches.append((match.start(1), key, _to_value(match[1], match[2])))

    for match in GENERIC_RULE.finditer(text):
        key = canonical_key(match[1])
        matches.append((match.start(2), key, _to_value(match[2], match[3])))

    variables: CanonicalVariables = {}
    for _, key, value in sorted(matches, key=lambda m: m[0]):
        if math.isfinite(value):
            variables[key] = value

    if "number_of_blades" in variables and "blade_count" not in variables:
        variables["blade_count"] = variables["number_of_blades"]

    return variables
