"""
Data models for the clinic inventory tracker.

This module exports all data models for easy import.
"""

from .base import CamelModel, utc_now
from .inventory import (
    Alert,
    AlertSeverity,
    AlertType,
    InventoryItem,
    UsageEvent,
    UsageHistoryEntry,
)
from .order import (
    OrderLineItem,
    OrderStatus,
    PurchaseOrder,
    coerce_quantity,
)
from .restock import (
    AutomatedRestockItem,
    AutomatedRestockPreview,
    AutomatedRestockResult,
    RestockPriority,
    RestockSuggestion,
)

__all__ = [
    "CamelModel",
    "utc_now",
    # Inventory models
    "InventoryItem",
    "UsageEvent",
    "UsageHistoryEntry",
    "Alert",
    "AlertType",
    "AlertSeverity",
    # Order models
    "PurchaseOrder",
    "OrderLineItem",
    "OrderStatus",
    "coerce_quantity",
    # Restock models
    "RestockSuggestion",
    "RestockPriority",
    "AutomatedRestockItem",
    "AutomatedRestockPreview",
    "AutomatedRestockResult",
]
