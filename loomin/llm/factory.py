"""
LLM provider factory.

Create and configure LLM clients based on configuration.
"""

from typing import Callable, Optional

from loomin.core.config import Config
from loomin.core.logging import get_logger
from loomin.llm.base import GenerationConfig, LLMClient

logger = get_logger(__name__)

EXTRACTION_TASK = "extraction"
EXPLANATION_TASK = "explanation"


def get_generation_config(
    config: Config,
    task: Optional[str] = None,
    **overrides,
) -> GenerationConfig:
    """
    Get a GenerationConfig with temperature tuned for the pipeline task.

    - extraction → low temperature, JSON answers must be stable
    - explanation → higher temperature for the failure narrative
    - anything else → the active provider's temperature

    Args:
        config: Loomin configuration
        task: "extraction", "explanation" or None
        **overrides: Additional overrides for GenerationConfig fields

    Returns:
        GenerationConfig with appropriate temperature
    """
    temperatures = {
        EXTRACTION_TASK: config.llm.extraction_temperature,
        EXPLANATION_TASK: config.llm.explanation_temperature,
    }
    temperature = temperatures.get(
        task or "", config.llm.provider_config().temperature
    )
    overrides.setdefault("temperature", temperature)
    return GenerationConfig(**overrides)


def _create_groq_client(config: Config) -> LLMClient:
    """
    Create Groq client (OpenAI-compatible endpoint).

    Rule #4: Function <60 lines
    """
    from loomin.llm.openai import OpenAIClient

    return OpenAIClient(
        api_key=config.llm.groq.api_key or None,
        model=config.llm.groq.model,
        base_url=config.llm.groq.url,
        provider="groq",
    )


def _create_openai_client(config: Config) -> LLMClient:
    """
    Create OpenAI client.

    Rule #4: Function <60 lines
    """
    from loomin.llm.openai import OpenAIClient

    return OpenAIClient(
        api_key=config.llm.openai.api_key or None,
        model=config.llm.openai.model,
        base_url=config.llm.openai.url or None,
    )


def _create_claude_client(config: Config) -> LLMClient:
    """
    Create Claude client.

    Rule #4: Function <60 lines
    """
    from loomin.llm.claude import ClaudeClient

    return ClaudeClient(
        api_key=config.llm.claude.api_key or None,
        model=config.llm.claude.model,
    )


def _create_ollama_client(config: Config) -> LLMClient:
    """
    Create Ollama client.

    Rule #4: Function <60 lines
    """
    from loomin.llm.ollama import OllamaClient

    return OllamaClient(
        url=config.llm.ollama.url or None,
        model=config.llm.ollama.model,
    )


def _get_provider_factory(provider: str) -> Optional[Callable[[Config], LLMClient]]:
    """
    Get factory function for LLM provider.

    Rule #1: Dictionary dispatch eliminates nesting

    Args:
        provider: Provider name (groq, openai, claude, anthropic, ollama)

    Returns:
        Factory function or None if unknown provider
    """
    factories = {
        "groq": _create_groq_client,
        "openai": _create_openai_client,
        "claude": _create_claude_client,
        "anthropic": _create_claude_client,  # Alias for claude
        "ollama": _create_ollama_client,
    }
    return factories.get(provider)


def get_llm_client(
    config: Config,
    provider: Optional[str] = None,
) -> LLMClient:
    """
    Get LLM client based on configuration.

    Construction never touches the network or requires an API key; a missing
    key surfaces as ConfigurationError on the first generation call.

    Args:
        config: Loomin configuration
        provider: Override provider (groq, openai, claude, ollama)

    Returns:
        Configured LLMClient instance

    Raises:
        ValueError: If provider is unknown
    """
    provider = provider or config.llm.default_provider
    factory = _get_provider_factory(provider)
    if not factory:
        raise ValueError(f"Unknown LLM provider: {provider}")
    client = factory(config)
    logger.debug("LLM client created", provider=provider, model=client.model_name)
    return client
