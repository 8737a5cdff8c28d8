"""
Restock analytics data models.

These are derived on every request and never persisted.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import CamelModel
from .order import PurchaseOrder


class RestockPriority(str, Enum):
    """Restock priority enumeration."""
    HIGH = "high"
    MEDIUM = "medium"

    @property
    def rank(self) -> int:
        return 0 if self is RestockPriority.HIGH else 1


class RestockSuggestion(CamelModel):
    """A ranked restocking recommendation for one item."""

    item_id: str
    item_name: str
    current_stock: int
    usage_rate: float = Field(..., ge=0.0)  # units per day, 2 dp
    days_until_empty: Optional[int] = None  # None: no usage, can't project
    suggested_quantity: int = Field(..., ge=1)
    priority: RestockPriority


class AutomatedRestockItem(RestockSuggestion):
    """Suggestion selected for automated restock, with its threshold."""

    min_threshold: int


class AutomatedRestockPreview(CamelModel):
    """What an automated restock would order right now."""

    items: List[AutomatedRestockItem] = Field(default_factory=list)
    total_items: int = 0
    total_quantity: int = 0


class AutomatedRestockResult(CamelModel):
    """Outcome of executing an automated restock."""

    success: bool
    items_restocked: int = 0
    total_quantity: int = 0
    order: Optional[PurchaseOrder] = None
    message: Optional[str] = None

    def to_dict(self):
        data = super().to_dict()
        if self.order is None:
            data.pop("order")
        else:
            data["order"] = self.order.to_dict()
        if self.message is None:
            data.pop("message")
        return data
