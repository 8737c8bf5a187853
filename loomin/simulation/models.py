"""
Data models for the notes-to-simulation pipeline.

Defines topic and status enums plus the dataclasses that travel between
pipeline stages and over the wire.

Wire shape
----------
    {
        "extraction": {"topic": "wind_turbine", "vars": {"wind_speed": 76, ...}},
        "simulation": {"status": "CRITICAL_FAILURE", "message": "...",
                       "recommendation": "...", "aiExplanation": "..."}
    }
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Union

Number = Union[int, float]
CanonicalVariables = Dict[str, Number]

NEUTRAL_MESSAGE = "System operating within normal parameters."


class Topic(str, Enum):
    """Simulation domain detected from a note."""

    WIND_TURBINE = "wind_turbine"
    ROBOT_ARM = "robot_arm"
    MOTHERBOARD = "motherboard"
    CIRCUIT = "circuit"
    MECHANICAL = "mechanical"
    SOLAR = "solar"
    ENGINE = "engine"
    ELECTRONICS = "electronics"
    GENERIC = "generic"

    @classmethod
    def parse(cls, value: Any) -> "Topic":
        """Map free-form topic text to a Topic; unknown values become GENERIC."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.GENERIC
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(normalized)
        except ValueError:
            return cls.GENERIC


class SimulationStatus(str, Enum):
    """Physics verdict status."""

    OPTIMAL = "OPTIMAL"
    WARNING = "WARNING"
    CRITICAL_FAILURE = "CRITICAL_FAILURE"


class ResultSource(str, Enum):
    """Which pipeline branch produced a result."""

    DIRECT = "direct"
    CACHE = "cache"
    LLM = "llm"


@dataclass(frozen=True)
class SimulationVerdict:
    """
    Outcome of one physics evaluation.

    Attributes:
        status: OPTIMAL, WARNING or CRITICAL_FAILURE.
        message: Why the status was reached.
        recommendation: Suggested parameter change (failures only).
        ai_explanation: Narrative of the failure (failures only).
    """

    status: SimulationStatus
    message: str = NEUTRAL_MESSAGE
    recommendation: str = ""
    ai_explanation: str = ""

    @property
    def is_failure(self) -> bool:
        return self.status == SimulationStatus.CRITICAL_FAILURE

    def with_explanation(self, explanation: str) -> "SimulationVerdict":
        """Copy of this verdict carrying a failure narrative.

        Non-failure verdicts never carry one and are returned unchanged.
        """
        if not self.is_failure:
            return self
        return replace(self, ai_explanation=explanation)

    def to_dict(self) -> Dict[str, str]:
        """Convert to the wire dictionary."""
        return {
            "status": self.status.value,
            "message": self.message,
            "recommendation": self.recommendation,
            "aiExplanation": self.ai_explanation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationVerdict":
        """Create from the wire dictionary."""
        return cls(
            status=SimulationStatus(data["status"]),
            message=data.get("message", ""),
            recommendation=data.get("recommendation", ""),
            ai_explanation=data.get("aiExplanation", ""),
        )


@dataclass
class Extraction:
    """
    Topic and canonical variables extracted from a note.

    Attributes:
        topic: Detected simulation topic.
        vars: Canonical variables (finite numbers only).
        degraded: True when the LLM call failed and this is the fallback.
    """

    topic: Topic
    vars: CanonicalVariables = field(default_factory=dict)
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"topic": self.topic.value, "vars": dict(self.vars)}


@dataclass
class PipelineResult:
    """Extraction plus verdict, as returned to callers and stored in the cache."""

    extraction: Extraction
    simulation: SimulationVerdict
    source: ResultSource = ResultSource.DIRECT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire dictionary (``source`` is not serialized)."""
        return {
            "extraction": self.extraction.to_dict(),
            "simulation": self.simulation.to_dict(),
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], source: ResultSource = ResultSource.CACHE
    ) -> "PipelineResult":
        """Create from the wire dictionary.

        Raises:
            KeyError, ValueError, TypeError: If the dictionary is malformed.
        """
        extraction = data["extraction"]
        raw_vars = extraction.get("vars") or {}
        if not isinstance(raw_vars, dict):
            raise TypeError("extraction.vars must be an object")
        return cls(
            extraction=Extraction(
                topic=Topic.parse(extraction.get("topic")),
                vars=dict(raw_vars),
            ),
            simulation=SimulationVerdict.from_dict(data["simulation"]),
            source=source,
        )
