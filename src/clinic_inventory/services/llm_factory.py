"""
Factory for creating LLM service instances.

Picks the text-generation backend from configuration.
"""

from typing import Optional

from ..config import ConfigManager, get_config_manager
from ..utils import get_logger
from .base_llm_service import BaseLLMService

logger = get_logger("llm_factory")


class LLMProvider:
    """Enum for supported LLM providers."""
    OLLAMA = "ollama"
    GEMINI = "gemini"


def create_llm_service(
    provider: Optional[str] = None,
    config: Optional[ConfigManager] = None,
    model_name: Optional[str] = None,
) -> BaseLLMService:
    """
    Factory function to create an LLM service instance.

    Args:
        provider: "ollama" or "gemini" (defaults to ``llm.provider``)
        config: Configuration manager (defaults to the global one)
        model_name: Override the configured model for the provider

    Returns:
        BaseLLMService instance

    Raises:
        ValueError: If provider is not supported or misconfigured
    """
    config = config or get_config_manager()
    provider = (provider or config.get("llm.provider", LLMProvider.OLLAMA)).lower()

    common = {
        "timeout_seconds": float(config.get("llm.timeout_seconds", 60)),
        "max_retries": int(config.get("llm.max_retries", 2)),
        "retry_backoff_seconds": float(config.get("llm.retry_backoff_seconds", 1.0)),
    }

    logger.info(f"Creating LLM service with provider: {provider}")

    if provider == LLMProvider.OLLAMA:
        from .ollama_llm_service import OllamaLLMService

        model_name = model_name or config.get("llm.ollama.model", "gemma3n:e2b-it-q4_K_M")
        logger.info(f"Initializing Ollama service with model: {model_name}")
        service = OllamaLLMService(
            model_name=model_name,
            base_url=config.get("llm.ollama.base_url", "http://localhost:11434"),
            **common,
        )
        if not service.check_availability():
            logger.warning("Ollama is not ready; generation requests will fail until it is")
        return service

    elif provider == LLMProvider.GEMINI:
        from .gemini_llm_service import GeminiLLMService

        model_name = model_name or config.get("llm.gemini.model", "gemini-2.5-flash-lite")
        logger.info(f"Initializing Gemini service with model: {model_name}")
        return GeminiLLMService(
            model_name=model_name,
            api_key=config.get_llm_api_key(LLMProvider.GEMINI),
            temperature=float(config.get("llm.gemini.temperature", 0.3)),
            **common,
        )

    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. "
            f"Supported providers: {LLMProvider.OLLAMA}, {LLMProvider.GEMINI}"
        )
