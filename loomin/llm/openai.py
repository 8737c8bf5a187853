"""
OpenAI-compatible LLM provider.

Uses the OpenAI SDK's async client. Groq exposes an OpenAI-compatible endpoint,
so the same client serves both by pointing ``base_url`` at Groq.
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


class OpenAIClient(LLMClient):
    """
    OpenAI (or OpenAI-compatible) chat completions client.

    Requires OPENAI_API_KEY, or the key passed explicitly (e.g. GROQ_API_KEY
    when ``base_url`` points at Groq).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        provider: str = "openai",
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: API key (defaults to OPENAI_API_KEY env var)
            model: Model name
            base_url: Alternate endpoint for OpenAI-compatible services
            provider: Name used in error messages and logs
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY", "")
        self.base_url = base_url or None
        self.provider = provider
        self._model_name = model

    @lazy_property
    def client(self) -> Any:
        """Lazy-load the async OpenAI client."""
        from openai import AsyncOpenAI

        if not self.api_key:
            raise ConfigurationError(
                f"API key for {self.provider} not set. "
                "Set it in environment or pass to constructor."
            )

        return AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)

    @property
    def model_name(self) -> str:
        return self._model_name

    def is_available(self) -> bool:
        """Check if the client has credentials."""
        return bool(self.api_key)

    def _build_request_params(self, config: GenerationConfig) -> dict[str, Any]:
        """Build request parameters from config."""
        params: dict[str, Any] = {
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "top_p": config.top_p,
        }
        if config.seed is not None:
            params["seed"] = config.seed
        if config.stop_sequences:
            params["stop"] = config.stop_sequences
        if config.json_mode:
            params["response_format"] = {"type": "json_object"}
        return params

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

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ]

        try:
            response = await self.client.chat.completions.create(
                model=self._model_name,
                messages=messages,
                **self._build_request_params(config),
            )
        except ConfigurationError:
            raise
        except Exception as e:
            if is_rate_limit_message(str(e)):
                raise RateLimitError(f"{self.provider} rate limit: {e}")
            raise LLMError(f"{self.provider} generation failed: {e}")

        if not response.choices or not response.choices[0].message.content:
            raise LLMError(f"Empty response from {self.provider}")

        if response.usage:
            self._record_usage(
                prompt_tokens=response.usage.prompt_tokens or 0,
                completion_tokens=response.usage.completion_tokens or 0,
            )
        logger.debug(
            "Completion received", provider=self.provider, model=self._model_name
        )
        return response.choices[0].message.content.strip()
