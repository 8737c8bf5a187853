"""
LLM extraction adapter.

Used when a note has no machine-readable ``key = value`` lines. One completion
request turns free prose into ``{topic, vars}``; values are then run through
the same unit normalizer as the direct path.

Failure policy
--------------
The adapter never raises for provider trouble. A client error, a completion
that is not JSON, or a payload that is not an object is logged and answered
with the fallback extraction ``Extraction(fallback_topic, {}, degraded=True)``.
There is no retry: one attempt per call.
"""

import json
from dataclasses import replace
from typing import Any, Dict, Optional

from loomin.core.exceptions import LLMError, ResponseParseError
from loomin.core.logging import get_logger
from loomin.llm.base import GenerationConfig, LLMClient
from loomin.simulation.extractor import canonical_key
from loomin.simulation.models import CanonicalVariables, Extraction, Topic
from loomin.simulation.prompts import EXTRACTION_SYSTEM_PROMPT
from loomin.simulation.units import parse_quantity

logger = get_logger(__name__)


def parse_extraction_payload(content: str) -> Dict[str, Any]:
    """
    Decode a completion into the extraction object.

    Tolerates Markdown code fences and prose around the object, which some
    providers emit even when asked for JSON.

    Raises:
        ResponseParseError: If no JSON object can be decoded
    """
    text = (content or "").strip()
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise ResponseParseError("Completion contains no JSON object")
        try:
            payload = json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Completion is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ResponseParseError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    return payload


def normalize_variables(raw: Any) -> CanonicalVariables:
    """Canonicalize keys and values of an LLM ``vars`` object.

    Non-numeric and non-finite values are dropped.
    """
    if not isinstance(raw, dict):
        return {}
    variables: CanonicalVariables = {}
    for key, value in raw.items():
        number = parse_quantity(value)
        if number is None:
            continue
        variables[canonical_key(str(key))] = number
    if "number_of_blades" in variables and "blade_count" not in variables:
        variables["blade_count"] = variables["number_of_blades"]
    return variables


class LLMExtractor:
    """Turn free-form notes into an Extraction with one LLM call."""

    def __init__(
        self,
        client: LLMClient,
        generation_config: Optional[GenerationConfig] = None,
        fallback_topic: Topic = Topic.GENERIC,
    ) -> None:
        self.client = client
        self.generation_config = replace(
            generation_config or GenerationConfig(temperature=0.1), json_mode=True
        )
        self.fallback_topic = Topic.parse(fallback_topic)

    def fallback(self) -> Extraction:
        """Extraction reported when the provider call fails."""
        return Extraction(topic=self.fallback_topic, vars={}, degraded=True)

    async def extract(self, text: str) -> Extraction:
        """
        Extract topic and variables from note text.

        Args:
            text: Raw note text

        Returns:
            The parsed Extraction, or the degraded fallback on any failure
        """
        try:
            content = await self.client.generate_with_context(
                system_prompt=EXTRACTION_SYSTEM_PROMPT,
                user_prompt=text,
                config=self.generation_config,
            )
            payload = parse_extraction_payload(content)
        except LLMError as e:
            logger.warning(
                "LLM extraction failed, using fallback",
                error_code=e.error_code,
                error=str(e),
                fallback_topic=self.fallback_topic.value,
            )
            return self.fallback()
        except Exception as e:
            logger.exception(
                "Unexpected error during LLM extraction, using fallback",
                error=str(e),
                fallback_topic=self.fallback_topic.value,
            )
            return self.fallback()

        extraction = Extraction(
            topic=Topic.parse(payload.get("topic")),
            vars=normalize_variables(payload.get("vars")),
        )
        logger.debug(
            "LLM extraction parsed",
            topic=extraction.topic.value,
            var_count=len(extraction.vars),
        )
        return extraction
