"""
Validated environment overrides.

Every ``LOOMIN_*`` override passes through one of these getters before it
reaches the Config. A bad value never aborts startup: it is logged and the
file or default value stays in force.

    LOOMIN_API_PORT=99999        -> clamped to 65535
    LOOMIN_LLM_TEMPERATURE=inf   -> ignored
    LOOMIN_LLM_PROVIDER=Groq     -> "groq"
    LOOMIN_STORAGE_BACKEND=redis -> ignored, not a known backend
"""

from __future__ import annotations

import logging
import math
import os
from typing import Callable, FrozenSet, Optional, TypeVar

logger = logging.getLogger(__name__)

N = TypeVar("N", int, float)

STORAGE_BACKENDS: FrozenSet[str] = frozenset(["sqlite", "memory"])

LLM_PROVIDERS: FrozenSet[str] = frozenset(["groq", "openai", "claude", "ollama"])

# Values of loomin.simulation.models.Topic; core must not import the domain layer
TOPICS: FrozenSet[str] = frozenset(
    [
        "wind_turbine",
        "robot_arm",
        "motherboard",
        "circuit",
        "mechanical",
        "solar",
        "engine",
        "electronics",
        "generic",
    ]
)

_TRUE = frozenset(["true", "yes", "1", "on"])
_FALSE = frozenset(["false", "no", "0", "off", ""])


def _read_number(
    name: str,
    parse: Callable[[str], N],
    default: Optional[N],
    min_value: Optional[N],
    max_value: Optional[N],
) -> Optional[N]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = parse(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", name, raw)
        return default
    if isinstance(value, float) and not math.isfinite(value):
        logger.warning("Ignoring %s=%r: not finite", name, raw)
        return default
    if min_value is not None and value < min_value:
        return min_value
    if max_value is not None and value > max_value:
        return max_value
    return value


def get_env_int(
    name: str,
    default: Optional[int] = None,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> Optional[int]:
    """
    Read an integer override, clamped into [min_value, max_value].

    Returns:
        The clamped value, or default when unset or unparsable
    """
    return _read_number(name, int, default, min_value, max_value)


def get_env_float(
    name: str,
    default: Optional[float] = None,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> Optional[float]:
    """Read a finite float override, clamped into [min_value, max_value]."""
    return _read_number(name, float, default, min_value, max_value)


def get_env_whitelist(
    name: str,
    allowed: FrozenSet[str],
    default: Optional[str] = None,
    case_sensitive: bool = False,
) -> Optional[str]:
    """
    Read an override that must name one of ``allowed``.

    Case-insensitive matches return the allowed spelling, so
    ``LOOMIN_LLM_PROVIDER=Groq`` selects ``"groq"``.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default

    value = raw.strip()
    if case_sensitive:
        match = value if value in allowed else None
    else:
        by_lower = {item.lower(): item for item in allowed}
        match = by_lower.get(value.lower())

    if match is None:
        logger.warning(
            "Ignoring %s=%r: expected one of %s", name, raw, sorted(allowed)
        )
        return default
    return match


def get_env_bool(name: str, default: bool = False) -> bool:
    """Read a yes/no override; unrecognized values keep the default."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    return default
