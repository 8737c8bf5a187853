"""Tests for LLM client and generation config factories."""

import pytest

from loomin.llm.claude import ClaudeClient
from loomin.llm.factory import (
    EXPLANATION_TASK,
    EXTRACTION_TASK,
    get_generation_config,
    get_llm_client,
)
from loomin.llm.ollama import OllamaClient
from loomin.llm.openai import OpenAIClient


class TestGetLLMClient:
    def test_groq_is_openai_compatible(self, config):
        config.llm.groq.api_key = "gsk-test"

        client = get_llm_client(config)

        assert isinstance(client, OpenAIClient)
        assert client.provider == "groq"
        assert client.base_url == "https://api.groq.com/openai/v1"
        assert client.model_name == "llama-3.3-70b-versatile"
        assert client.is_available()

    def test_openai(self, config):
        client = get_llm_client(config, provider="openai")

        assert isinstance(client, OpenAIClient)
        assert client.base_url is None
        assert client.model_name == "gpt-4o-mini"

    @pytest.mark.parametrize("provider", ["claude", "anthropic"])
    def test_claude_and_alias(self, config, provider):
        assert isinstance(get_llm_client(config, provider=provider), ClaudeClient)

    def test_ollama(self, config, monkeypatch):
        monkeypatch.delenv("OLLAMA_HOST", raising=False)
        client = get_llm_client(config, provider="ollama")

        assert isinstance(client, OllamaClient)
        assert client.url == "http://localhost:11434"
        assert client.timeout is None

    def test_ollama_host_used_when_url_unset(self, config, monkeypatch):
        monkeypatch.setenv("OLLAMA_HOST", "http://gpu-box:11434/")

        assert get_llm_client(config, provider="ollama").url == "http://gpu-box:11434"

    def test_configured_ollama_url_wins(self, config, monkeypatch):
        monkeypatch.setenv("OLLAMA_HOST", "http://gpu-box:11434")
        config.llm.ollama.url = "http://lab:11434"

        assert get_llm_client(config, provider="ollama").url == "http://lab:11434"

    def test_unknown_provider(self, config):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            get_llm_client(config, provider="skynet")

    def test_construction_needs_no_key(self, config, clean_env):
        client = get_llm_client(config, provider="openai")

        assert client.is_available() is False


class TestGetGenerationConfig:
    def test_task_temperatures(self, config):
        assert get_generation_config(config, EXTRACTION_TASK).temperature == 0.1
        assert get_generation_config(config, EXPLANATION_TASK).temperature == 0.7

    def test_default_uses_provider_temperature(self, config):
        config.llm.groq.temperature = 0.5

        assert get_generation_config(config).temperature == 0.5

    def test_overrides(self, config):
        gen = get_generation_config(config, EXPLANATION_TASK, max_tokens=200, temperature=1.0)

        assert gen.max_tokens == 200
        assert gen.temperature == 1.0
