"""
Anthropic Claude LLM provider.

Uses the Anthropic SDK's async client.
"""

import os
from typing import Any, Optional

from loomin.core.logging import get_logger
from loomin.llm.base import (
    ConfigurationError,
    GenerationConfig,
    LLMClient,
    LLMError,
    RateLimitError,
    is_rate_limit_message,
)
from loomin.shared.lazy_imports import lazy_property

logger = get_logger(__name__)

# Claude has no response_format switch; JSON mode is requested in the prompt
JSON_MODE_SUFFIX = "\n\nRespond with a single JSON object and nothing else."


class ClaudeClient(LLMClient):
    """
    Anthropic Claude API client.

    Requires ANTHROPIC_API_KEY environment variable.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-3-5-haiku-latest",
    ):
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        self._model_name = model

    @lazy_property
    def client(self) -> Any:
        """Lazy-load the async Anthropic client."""
        from anthropic import AsyncAnthropic

        if not self.api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY not set. Set it in environment or pass to constructor."
            )

        return AsyncAnthropic(api_key=self.api_key)

    @property
    def model_name(self) -> str:
        return self._model_name

    def is_available(self) -> bool:
        """Check if Claude is available."""
        return bool(self.api_key)

    async def generate_with_context(
        self,
        system_prompt: str,
        user_prompt: str,
        context: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
        **kwargs: Any,
    ) -> str:
        """Generate with system prompt and context."""
        config = config or GenerationConfig()

        user_message = user_prompt
        if context:
            user_message = f"{context}\n\n{user_prompt}"

        try:
            params = self._build_claude_params(system_prompt, user_message, config)
            response = await self.client.messages.create(**params)
        except ConfigurationError:
            raise
        except Exception as e:
            if is_rate_limit_message(str(e)):
                raise RateLimitError(f"Claude rate limit: {e}")
            raise LLMError(f"Claude generation failed: {e}")

        return self._extract_and_record_response(response)

    def _build_claude_params(
        self, system_prompt: str, user_message: str, config: GenerationConfig
    ) -> dict[str, Any]:
        """
        Build Claude API request parameters.

        Rule #4: Extracted to reduce generate_with_context() size
        """
        if config.json_mode:
            system_prompt = system_prompt + JSON_MODE_SUFFIX

        params: dict[str, Any] = {
            "model": self._model_name,
            "max_tokens": config.max_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_message}],
            "temperature": config.temperature,
        }
        if config.stop_sequences:
            params["stop_sequences"] = config.stop_sequences
        return params

    def _extract_and_record_response(self, response: Any) -> str:
        """
        Extract text from response and record usage.

        Rule #4: Extracted to reduce generate_with_context() size
        """
        output = ""
        for block in response.content:
            if hasattr(block, "text"):
                output += block.text

        if not output:
            raise LLMError("Empty response from Claude")

        if getattr(response, "usage", None):
            self._record_usage(
                prompt_tokens=getattr(response.usage, "input_tokens", 0) or 0,
                completion_tokens=getattr(response.usage, "output_tokens", 0) or 0,
            )
        logger.debug(
            "Claude response received", model=self._model_name, chars=len(output)
        )
        return output.strip()
