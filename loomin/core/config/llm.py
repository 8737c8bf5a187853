"""
LLM configuration.

Provides configuration for LLM providers: Groq, OpenAI, Claude, Ollama.
Includes per-provider settings and the two task temperatures the simulation
pipeline uses (structured extraction and failure narration).
"""

from dataclasses import dataclass, field

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


@dataclass
class LLMProviderConfig:
    """Individual LLM provider configuration."""

    model: str = ""
    api_key: str = ""
    url: str = ""
    temperature: float = 0.3


@dataclass
class LLMConfig:
    """LLM providers configuration."""

    default_provider: str = "groq"
    groq: LLMProviderConfig = field(
        default_factory=lambda: LLMProviderConfig(
            model="llama-3.3-70b-versatile", url=GROQ_BASE_URL
        )
    )
    openai: LLMProviderConfig = field(
        default_factory=lambda: LLMProviderConfig(model="gpt-4o-mini")
    )
    claude: LLMProviderConfig = field(
        default_factory=lambda: LLMProviderConfig(model="claude-3-5-haiku-latest")
    )
    ollama: LLMProviderConfig = field(
        # Empty url falls back to OLLAMA_HOST, then localhost
        default_factory=lambda: LLMProviderConfig(model="llama3.1:8b")
    )

    # Low for extraction so the JSON stays stable, higher for the narrative
    extraction_temperature: float = 0.1
    explanation_temperature: float = 0.7

    def provider_config(self, provider: str = "") -> LLMProviderConfig:
        """Get the settings block for a provider (default provider if empty).

        Rule #1: Dictionary dispatch eliminates nesting
        """
        name = provider or self.default_provider
        providers = {
            "groq": self.groq,
            "openai": self.openai,
            "claude": self.claude,
            "anthropic": self.claude,
            "ollama": self.ollama,
        }
        if name not in providers:
            raise ValueError(
                f"Unknown LLM provider: {name}. "
                f"Available: {', '.join(sorted(providers))}"
            )
        return providers[name]
