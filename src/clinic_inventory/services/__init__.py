"""
Business logic services for the clinic inventory tracker.
"""

from .base_llm_service import BaseLLMService
from .insights_service import InsightsService
from .inventory_service import InventoryService
from .llm_factory import LLMProvider, create_llm_service
from .order_service import OrderService
from .restock_service import RestockService
from .usage_service import UsageService

__all__ = [
    "InventoryService",
    "UsageService",
    "OrderService",
    "RestockService",
    "InsightsService",
    "BaseLLMService",
    "LLMProvider",
    "create_llm_service",
]
