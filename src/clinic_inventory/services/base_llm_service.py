"""
Base LLM service interface for multiple providers.

Defines the common interface that all text-generation backends follow,
so the restock assistant can switch providers (Ollama, Gemini) or be
replaced by a stub in tests.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..exceptions import DependencyFailure
from ..utils import get_logger


class BaseLLMService(ABC):
    """
    Abstract base class for LLM services.

    Subclasses implement ``chat``; callers that only need a single
    prompt-to-text round trip use ``summarize``, which adds bounded retry.
    """

    def __init__(self, max_retries: int = 2, retry_backoff_seconds: float = 1.0):
        """
        Initialize base LLM service.

        Args:
            max_retries: Extra attempts after the first failure
            retry_backoff_seconds: Delay before retry n is n times this
        """
        self.max_retries = max(0, int(max_retries))
        self.retry_backoff_seconds = max(0.0, float(retry_backoff_seconds))
        self.conversation_history: List[Dict[str, Any]] = []
        self.logger = get_logger("llm_service")

    @abstractmethod
    def chat(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        keep_history: bool = True,
    ) -> str:
        """
        Send a chat message to the LLM.

        Args:
            message: User message to send
            system_prompt: Optional system prompt to set context
            keep_history: Whether to keep message in conversation history

        Returns:
            LLM response as string
        """
        pass

    def summarize(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """
        Generate text for a one-off prompt.

        Args:
            prompt: Full prompt text
            system_prompt: Optional system prompt

        Returns:
            Generated text

        Raises:
            DependencyFailure: If every attempt fails
        """
        attempts = self.max_retries + 1
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                return self.chat(prompt, system_prompt=system_prompt, keep_history=False)
            except Exception as e:
                last_error = e
                self.logger.warning(
                    f"{self.provider_name} request failed (attempt {attempt}/{attempts}): {e}"
                )
                if attempt < attempts and self.retry_backoff_seconds:
                    time.sleep(self.retry_backoff_seconds * attempt)

        raise DependencyFailure(
            f"Text generation unavailable ({self.provider_name}): {last_error}"
        ) from last_error

    def _remember(self, message: str, reply: str) -> None:
        """Append one exchange to the conversation history."""
        self.conversation_history.append({"role": "user", "content": message})
        self.conversation_history.append({"role": "assistant", "content": reply})

    def clear_history(self) -> None:
        """Clear conversation history."""
        self.conversation_history = []

    def get_history(self) -> List[Dict[str, Any]]:
        """Get current conversation history."""
        return self.conversation_history.copy()

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the name of the LLM provider."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the name of the model being used."""
        pass
