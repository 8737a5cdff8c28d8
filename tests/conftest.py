"""
Shared fixtures for the clinic inventory test suite.

Config and log directories point at a throwaway location before the
package is imported, so tests never write into the working tree.
"""

import os
import tempfile

_SCRATCH = tempfile.mkdtemp(prefix="clinic_inventory_tests_")
os.environ.setdefault("CLINIC_INVENTORY_CONFIG_DIR", os.path.join(_SCRATCH, "config"))
os.environ.setdefault("CLINIC_INVENTORY_LOG_DIR", os.path.join(_SCRATCH, "logs"))

from typing import List, Optional  # noqa: E402

import pytest  # noqa: E402

from clinic_inventory.config import ConfigManager  # noqa: E402
from clinic_inventory.database import JsonStore  # noqa: E402
from clinic_inventory.services import (  # noqa: E402
    BaseLLMService,
    InsightsService,
    InventoryService,
    OrderService,
    RestockService,
    UsageService,
)


class FakeLLMService(BaseLLMService):
    """Scripted text backend: fails ``failures`` times, then answers."""

    def __init__(self, reply: str = "Restock gloves first.", failures: int = 0, max_retries: int = 2):
        super().__init__(max_retries=max_retries, retry_backoff_seconds=0)
        self.reply = reply
        self.failures = failures
        self.prompts: List[str] = []

    def chat(self, message: str, system_prompt: Optional[str] = None, keep_history: bool = True) -> str:
        self.prompts.append(message)
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("backend unreachable")
        return self.reply

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def model_name(self) -> str:
        return "fake-model"


@pytest.fixture
def config(tmp_path):
    return ConfigManager(config_dir=str(tmp_path / "config"))


@pytest.fixture
def store(tmp_path):
    store = JsonStore(str(tmp_path / "data"))
    store.initialize()
    return store


@pytest.fixture
def inventory_service(store, config):
    return InventoryService(store, config)


@pytest.fixture
def usage_service(store):
    return UsageService(store)


@pytest.fixture
def order_service(store):
    return OrderService(store)


@pytest.fixture
def restock_service(store, config):
    return RestockService(store, config)


@pytest.fixture
def fake_llm():
    return FakeLLMService()


@pytest.fixture
def llm_factory():
    return FakeLLMService


@pytest.fixture
def insights_service(inventory_service, usage_service, restock_service, fake_llm):
    return InsightsService(inventory_service, usage_service, restock_service, fake_llm)


@pytest.fixture
def make_item(inventory_service):
    """Create an inventory item with sensible defaults."""

    def _make(name="Nitrile Gloves", current_stock=50, min_threshold=10, **fields):
        data = {
            "name": name,
            "category": "PPE",
            "currentStock": current_stock,
            "minThreshold": min_threshold,
        }
        data.update(fields)
        return inventory_service.create_item(data)

    return _make
