"""
LLM Service using Ollama for the restock assistant.

Talks to a local Ollama server; every request is bounded by a timeout.
"""

from typing import Optional

import ollama

from ..utils import get_logger
from .base_llm_service import BaseLLMService


class OllamaLLMService(BaseLLMService):
    """Service for LLM inference using Ollama."""

    def __init__(
        self,
        model_name: str = "gemma3n:e2b-it-q4_K_M",
        base_url: str = "http://localhost:11434",
        timeout_seconds: float = 60.0,
        max_retries: int = 2,
        retry_backoff_seconds: float = 1.0,
    ):
        """
        Initialize Ollama service.

        Args:
            model_name: Name of the Ollama model to use
            base_url: Ollama server URL
            timeout_seconds: Per-request timeout
            max_retries: Extra attempts for ``summarize``
            retry_backoff_seconds: Base delay between attempts
        """
        super().__init__(max_retries=max_retries, retry_backoff_seconds=retry_backoff_seconds)
        self.logger = get_logger("ollama_llm_service")
        self._model_name = model_name
        self._base_url = base_url
        self.client = ollama.Client(host=base_url, timeout=timeout_seconds)

    def check_availability(self) -> bool:
        """
        Check that the server is up and the model is downloaded.

        Returns:
            True if the model can be used
        """
        try:
            models = self.client.list()
        except Exception as e:
            self.logger.error(f"Ollama server not running at {self._base_url}: {e}")
            self.logger.info("Please start Ollama server: ollama serve")
            return False

        model_names = [model['model'] for model in models.get('models', [])]
        if self._model_name in model_names:
            return True

        base_model = self._model_name.split(':')[0]
        if any(base_model in name for name in model_names):
            return True

        self.logger.error(f"Model {self._model_name} not found; run: ollama pull {self._model_name}")
        return False

    def chat(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        keep_history: bool = True,
    ) -> str:
        """Send a chat message; client errors propagate to the caller."""
        messages = [{"role": "system", "content": system_prompt}] if system_prompt else []
        if keep_history:
            messages.extend(self.conversation_history)
        messages.append({"role": "user", "content": message})

        self.logger.debug(f"Sending {len(messages)} messages to {self._model_name}")
        response = self.client.chat(model=self._model_name, messages=messages)
        reply = response["message"]["content"]

        if keep_history:
            self._remember(message, reply)
        return reply

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model_name(self) -> str:
        return self._model_name
