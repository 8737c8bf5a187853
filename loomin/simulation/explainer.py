"""
Failure narration.

For a CRITICAL_FAILURE on the LLM path, asks the provider for one dramatic
sentence about what broke. Best effort: any failure yields an empty string
and the verdict is unaffected.
"""

from typing import Optional

from loomin.core.exceptions import LLMError
from loomin.core.logging import get_logger
from loomin.llm.base import GenerationConfig, LLMClient
from loomin.simulation.models import CanonicalVariables, Topic
from loomin.simulation.prompts import EXPLANATION_SYSTEM_PROMPT, build_explanation_prompt

logger = get_logger(__name__)


class FailureExplainer:
    """Produce a one-sentence narrative for a failed simulation."""

    def __init__(
        self,
        client: LLMClient,
        generation_config: Optional[GenerationConfig] = None,
    ) -> None:
        self.client = client
        self.generation_config = generation_config or GenerationConfig(
            temperature=0.7, max_tokens=200
        )

    async def explain(
        self, topic: Topic, variables: CanonicalVariables, message: str
    ) -> str:
        """Return the narrative, or "" if the provider call fails."""
        try:
            text = await self.client.generate_with_context(
                system_prompt=EXPLANATION_SYSTEM_PROMPT,
                user_prompt=build_explanation_prompt(topic, variables, message),
                config=self.generation_config,
            )
        except LLMError as e:
            logger.warning("Failure explanation unavailable", error=str(e))
            return ""
        except Exception as e:
            logger.exception("Unexpected error during failure explanation", error=str(e))
            return ""
        return (text or "").strip()
