"""
LLM Service using Google Gemini via LangChain.

Cloud alternative to the local Ollama backend for the restock assistant.
"""

from typing import Optional

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from ..utils import get_logger
from .base_llm_service import BaseLLMService


class GeminiLLMService(BaseLLMService):
    """Service for LLM inference using Google Gemini via LangChain."""

    def __init__(
        self,
        model_name: str = "gemini-2.5-flash-lite",
        api_key: Optional[str] = None,
        temperature: float = 0.3,
        timeout_seconds: float = 60.0,
        max_retries: int = 2,
        retry_backoff_seconds: float = 1.0,
    ):
        """
        Initialize Gemini LLM service.

        Args:
            model_name: Name of the Gemini model to use
            api_key: Google API key
            temperature: Sampling temperature (0.0 to 1.0)
            timeout_seconds: Per-request timeout
            max_retries: Extra attempts for ``summarize``
            retry_backoff_seconds: Base delay between attempts

        Raises:
            ValueError: If no API key is available
        """
        super().__init__(max_retries=max_retries, retry_backoff_seconds=retry_backoff_seconds)
        self.logger = get_logger("gemini_llm_service")
        self._model_name = model_name

        if not api_key:
            self.logger.error("Google API key not provided")
            raise ValueError(
                "Google API key required. Set GOOGLE_API_KEY environment "
                "variable or store it with ConfigManager.set_llm_api_key"
            )

        # Retries are handled by summarize(); the client makes one attempt
        self.llm = ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=api_key,
            temperature=temperature,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.logger.info(f"Gemini model {model_name} initialized")

    def chat(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        keep_history: bool = True,
    ) -> str:
        """Send a chat message; client errors propagate to the caller."""
        messages = [SystemMessage(content=system_prompt)] if system_prompt else []
        if keep_history:
            messages.extend(
                HumanMessage(content=turn["content"]) if turn["role"] == "user"
                else AIMessage(content=turn["content"])
                for turn in self.conversation_history
            )
        messages.append(HumanMessage(content=message))

        self.logger.debug(f"Sending {len(messages)} messages to {self._model_name}")
        response = self.llm.invoke(messages)
        reply = response.content if isinstance(response.content, str) else str(response.content)

        if keep_history:
            self._remember(message, reply)
        return reply

    @property
    def provider_name(self) -> str:
        return "Google Gemini"

    @property
    def model_name(self) -> str:
        return self._model_name
