"""
LLM providers for note extraction and failure narration.

    from loomin.llm import get_llm_client, GenerationConfig
"""

from loomin.llm.base import (
    ConfigurationError,
    GenerationConfig,
    LLMClient,
    LLMError,
    RateLimitError,
    ResponseParseError,
)
from loomin.llm.factory import get_generation_config, get_llm_client

__all__ = [
    "ConfigurationError",
    "GenerationConfig",
    "LLMClient",
    "LLMError",
    "RateLimitError",
    "ResponseParseError",
    "get_generation_config",
    "get_llm_client",
]
