"""
Base LLM Provider Interface.

This module defines the LLMClient interface that all LLM providers must implement.
This abstraction allows swapping providers (Groq, OpenAI, Claude, Ollama) without
changing pipeline code.

Architecture Context
--------------------
LLM clients serve two calls in the simulation pipeline:

    ┌─────────────────┐               ┌─────────────────┐
    │  LLMExtractor   │               │ FailureExplainer│
    │ (notes → JSON)  │               │ (one sentence)  │
    └────────┬────────┘               └────────┬────────┘
             │                                 │
             └────────────────┬────────────────┘
                              │
                   ┌──────────┴──────────┐
                   │     LLMClient       │
                   │   (abstract base)   │
                   └──────────┬──────────┘
                              │
         ┌────────────────────┼────────────────────┐
         ↓                    ↓                    ↓
    ┌─────────┐          ┌─────────┐          ┌─────────┐
    │ OpenAI  │          │  Claude │          │  Ollama │
    │ (+Groq) │          │  Client │          │  Client │
    └─────────┘          └─────────┘          └─────────┘

Exception Hierarchy
-------------------
    LLMError (base)
    ├── RateLimitError      # API rate limits exceeded
    ├── ConfigurationError  # Invalid API key, model, etc.
    └── ResponseParseError  # Completion is not the requested JSON

The exceptions live in loomin.core.exceptions and are re-exported here.

Interface Contract
------------------
Implementations must provide:
- generate_with_context(): Generation with system prompt and user text
- is_available(): Check if provider is ready
- model_name: The model identifier

All generation methods are coroutines. A call is a single attempt; callers
decide how to degrade when it fails.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from loomin.core.exceptions import (
    ConfigurationError,
    LLMError,
    RateLimitError,
    ResponseParseError,
)

__all__ = [
    "ConfigurationError",
    "GenerationConfig",
    "LLMClient",
    "LLMError",
    "RateLimitError",
    "ResponseParseError",
]


@dataclass
class GenerationConfig:
    """
    Configuration for text generation.

    Attributes:
        max_tokens: Maximum tokens to generate
        temperature: Creativity (0=deterministic, 1=creative)
        top_p: Nucleus sampling parameter
        stop_sequences: Strings that stop generation
        seed: Random seed for reproducibility (if supported)
        json_mode: Force JSON output (if supported by provider)
    """

    max_tokens: int = 1024
    temperature: float = 0.3
    top_p: float = 1.0
    stop_sequences: Optional[List[str]] = None
    seed: Optional[int] = None
    json_mode: bool = False


class LLMClient(ABC):
    """
    Abstract base class for LLM providers.

    All LLM providers must implement this interface.
    """

    def _get_usage(self) -> Dict[str, int]:
        """Get or initialize the usage accumulator."""
        if not hasattr(self, "_usage"):
            self._usage = {
                "prompt_tokens": 0,
                "completion_tokens": 0,
                "total_tokens": 0,
            }
        return self._usage

    def _record_usage(
        self,
        prompt_tokens: int = 0,
        completion_tokens: int = 0,
    ) -> None:
        """Record token usage from a generation call."""
        usage = self._get_usage()
        usage["prompt_tokens"] += prompt_tokens
        usage["completion_tokens"] += completion_tokens
        usage["total_tokens"] += prompt_tokens + completion_tokens

    def get_usage(self) -> Dict[str, int]:
        """
        Get cumulative token usage.

        Returns:
            Dict with prompt_tokens, completion_tokens, total_tokens
        """
        return dict(self._get_usage())

    async def generate(
        self,
        prompt: str,
        config: Optional[GenerationConfig] = None,
        **kwargs: Any,
    ) -> str:
        """Generate text from a bare prompt."""
        return await self.generate_with_context(
            system_prompt="You are a helpful assistant.",
            user_prompt=prompt,
            config=config,
            **kwargs,
        )

    @abstractmethod
    async def generate_with_context(
        self,
        system_prompt: str,
        user_prompt: str,
        context: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
        **kwargs: Any,
    ) -> str:
        """
        Generate text with system prompt and context.

        Args:
            system_prompt: System instructions
            user_prompt: User text
            context: Additional context prepended to the user text
            config: Generation configuration

        Returns:
            Generated text

        Raises:
            LLMError: On any provider failure or empty completion
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available and configured."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""


def is_rate_limit_message(message: str) -> bool:
    """Check whether a provider error message describes throttling."""
    lowered = message.lower()
    return any(
        term in lowered for term in ("rate limit", "429", "quota", "overloaded")
    )
