"""
Unit normalization.

Converts user-supplied magnitudes into the SI-ish units the physics rules
expect. Both extraction paths use these helpers, so a value reads the same
whether it was matched by a regex or returned by the LLM.

    >>> normalize(100, "mph")
    44.704
    >>> parse_quantity("10 cm")
    0.1
    >>> parse_quantity("12 Nm")
    12

Unknown units pass through unchanged; there is no error state.
"""

import math
import re
from typing import Any, Dict, Optional

from loomin.simulation.models import Number

# unit token (lowercase) -> multiplier into the canonical unit
CONVERSIONS: Dict[str, float] = {
    "mph": 0.44704,
    "km/h": 1 / 3.6,
    "kmh": 1 / 3.6,
    "kph": 1 / 3.6,
    "lb": 0.45359237,
    "lbs": 0.45359237,
    "pound": 0.45359237,
    "pounds": 0.45359237,
    "g": 0.001,
    "cm": 0.01,
    "mm": 0.001,
}

# Converted values are rounded to this many decimals to drop float noise
PRECISION = 6

NUMBER_PATTERN = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
UNIT_PATTERN = r"[A-Za-z°%][A-Za-z°%/]*"

_QUANTITY_RE = re.compile(
    rf"^\s*({NUMBER_PATTERN})\s*({UNIT_PATTERN})?\s*$"
)


def as_number(value: float) -> Number:
    """Return value as int when it is integral, else as float."""
    if isinstance(value, int):
        return value
    if value.is_integer():
        return int(value)
    return value


def normalize(value: Number, unit: Optional[str] = None) -> Number:
    """
    Scale a magnitude into its canonical unit.

    Args:
        value: Numeric magnitude
        unit: Unit token as written (case-insensitive); None for unitless

    Returns:
        The converted value, or value unchanged for unitless/unknown units
    """
    factor = CONVERSIONS.get(unit.strip().lower()) if unit else None
    if factor is None:
        return value
    return as_number(round(value * factor, PRECISION))


def parse_quantity(raw: Any) -> Optional[Number]:
    """
    Parse a number, or a string such as ``"100 mph"``, into a canonical value.

    Returns:
        The normalized finite number, or None if raw is not a quantity
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value: float = raw
        unit = None
    elif isinstance(raw, str):
        match = _QUANTITY_RE.match(raw)
        if not match:
            return None
        value = float(match.group(1))
        unit = match.group(2)
    else:
        return None

    if not math.isfinite(value):
        return None
    result = normalize(as_number(value), unit)
    if isinstance(result, float) and not math.isfinite(result):
        return None
    return result
