"""
Tests for the text-generation backends and their factory.

No model server is contacted; provider clients are replaced by stubs.
"""

import pytest

from clinic_inventory.exceptions import DependencyFailure
from clinic_inventory.services import LLMProvider, create_llm_service
from clinic_inventory.services.ollama_llm_service import OllamaLLMService


class StubOllamaClient:

    def __init__(self, reply="Order more gauze.", models=None, fail=False):
        self.reply = reply
        self.models = models or []
        self.fail = fail
        self.calls = []

    def chat(self, model, messages):
        self.calls.append(messages)
        if self.fail:
            raise ConnectionError("connection refused")
        return {"message": {"role": "assistant", "content": self.reply}}

    def list(self):
        if self.fail:
            raise ConnectionError("connection refused")
        return {"models": [{"model": name} for name in self.models]}


@pytest.fixture
def ollama_service():
    service = OllamaLLMService(model_name="gemma3n:e2b-it-q4_K_M", retry_backoff_seconds=0)
    service.client = StubOllamaClient(models=["gemma3n:e2b-it-q4_K_M"])
    return service


def test_chat_keeps_history(ollama_service):
    assert ollama_service.chat("Hi", system_prompt="Be brief") == "Order more gauze."
    ollama_service.chat("And masks?")

    second_call = ollama_service.client.calls[1]
    assert [m["role"] for m in second_call] == ["user", "assistant", "user"]
    assert len(ollama_service.get_history()) == 4

    ollama_service.clear_history()
    assert ollama_service.get_history() == []


def test_summarize_skips_history(ollama_service):
    assert ollama_service.summarize("Summarize stock", system_prompt="Be brief") == "Order more gauze."

    [messages] = ollama_service.client.calls
    assert messages[0] == {"role": "system", "content": "Be brief"}
    assert ollama_service.get_history() == []


def test_summarize_gives_up_after_retries(ollama_service):
    ollama_service.client.fail = True
    ollama_service.max_retries = 2

    with pytest.raises(DependencyFailure):
        ollama_service.summarize("Summarize stock")

    assert len(ollama_service.client.calls) == 3


def test_check_availability(ollama_service):
    assert ollama_service.check_availability() is True

    ollama_service.client.models = ["llama3:8b"]
    assert ollama_service.check_availability() is False

    ollama_service.client.fail = True
    assert ollama_service.check_availability() is False


def test_factory_builds_configured_ollama(config, monkeypatch):
    monkeypatch.setattr(OllamaLLMService, "check_availability", lambda self: True)
    config.set("llm.max_retries", 4, save=False)

    service = create_llm_service(LLMProvider.OLLAMA, config=config, model_name="llama3:8b")

    assert isinstance(service, OllamaLLMService)
    assert service.model_name == "llama3:8b"
    assert service.max_retries == 4


def test_factory_rejects_unknown_provider(config):
    with pytest.raises(ValueError):
        create_llm_service("openai", config=config)


def test_gemini_requires_api_key(config, monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ValueError):
        create_llm_service(LLMProvider.GEMINI, config=config)
