"""
Ollama local LLM provider.

Uses a local Ollama server for inference via the chat API, over httpx's async
client.
"""

import os
from typing import Any, Optional

import httpx

from loomin.core.logging import get_logger
from loomin.llm.base import GenerationConfig, LLMClient, LLMError

logger = get_logger(__name__)


class OllamaClient(LLMClient):
    """
    Ollama local inference client.

    Requires Ollama server running locally or at specified URL.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        model: str = "llama3.1:8b",
        timeout: Optional[float] = None,
    ):
        """
        Initialize Ollama client.

        Args:
            url: Ollama server URL (defaults to OLLAMA_HOST, then localhost)
            model: Model name
            timeout: Request timeout in seconds; None waits as long as the
                server takes, leaving time limits to Ollama itself
        """
        default_url = os.environ.get("OLLAMA_HOST", "http://localhost:11434")
        self.url = (url or default_url).rstrip("/")
        self._model_name = model
        self.timeout = timeout

    @property
    def model_name(self) -> str:
        return self._model_name

    def is_available(self) -> bool:
        """Check if Ollama server is available."""
        try:
            response = httpx.get(f"{self.url}/api/tags", timeout=2)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def _build_chat_messages(
        self,
        system_prompt: str,
        user_prompt: str,
        context: Optional[str] = None,
    ) -> list[dict[str, str]]:
        """Build message list for chat API."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        user_content = (
            f"Context:\n{context}\n\n{user_prompt}" if context else user_prompt
        )
        messages.append({"role": "user", "content": user_content})
        return messages

    def _build_payload(
        self, messages: list[dict[str, str]], config: GenerationConfig
    ) -> dict[str, Any]:
        """Build the /api/chat request body."""
        options: dict[str, Any] = {
            "temperature": config.temperature,
            "top_p": config.top_p,
            "num_predict": config.max_tokens,
        }
        if config.stop_sequences:
            options["stop"] = config.stop_sequences
        if config.seed is not None:
            options["seed"] = config.seed

        payload: dict[str, Any] = {
            "model": self._model_name,
            "messages": messages,
            "stream": False,
            "options": options,
        }
        if config.json_mode:
            payload["format"] = "json"
        return payload

    async def generate_with_context(
        self,
        system_prompt: str,
        user_prompt: str,
        context: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
        **kwargs: Any,
    ) -> str:
        """Generate with system prompt and context via /api/chat."""
        config = config or GenerationConfig()
        messages = self._build_chat_messages(system_prompt, user_prompt, context)
        payload = self._build_payload(messages, config)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.url}/api/chat", json=payload)
        except httpx.ConnectError:
            raise LLMError(
                f"Cannot connect to Ollama at {self.url}. Make sure Ollama is running."
            )
        except httpx.HTTPError as e:
            raise LLMError(f"Ollama error: {e}")

        if response.status_code != 200:
            raise LLMError(f"Ollama returned status {response.status_code}")

        data = response.json()
        text = (data.get("message") or {}).get("content", "")
        if not text:
            raise LLMError("Empty response from Ollama")

        self._record_usage(
            prompt_tokens=data.get("prompt_eval_count", 0) or 0,
            completion_tokens=data.get("eval_count", 0) or 0,
        )
        logger.debug("Ollama response received", model=self._model_name)
        return text.strip()
