"""
Purchase order data models.

Orders are fulfilled at creation: their line items are credited onto
inventory stock in the same commit that records the order.
"""

import re
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import CamelModel, ensure_utc, utc_now

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_quantity(value: Any) -> int:
    """
    Coerce a line-item quantity to a non-negative integer.

    Integers pass through, floats truncate, strings contribute their
    leading integer ("12 boxes" -> 12). Anything else, and any negative
    result, counts as 0.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        result = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 0
        result = int(match.group(1))
    else:
        return 0
    return max(result, 0)


class OrderStatus(str, Enum):
    """Purchase order status enumeration."""
    PENDING = "pending"
    SUCCESSFUL = "successful"


class OrderLineItem(CamelModel):
    """A single line of a purchase order."""

    item_id: Optional[str] = None  # Reference to inventory item; may be unknown
    name: str = ""
    quantity: int = Field(default=0, ge=0)

    @field_validator('quantity', mode='before')
    @classmethod
    def coerce(cls, v: Any) -> int:
        return coerce_quantity(v)

    @field_validator('name', mode='before')
    @classmethod
    def name_to_str(cls, v: Any) -> str:
        return "" if v is None else str(v)

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "itemId": "abc-123",
                "name": "Nitrile Gloves (M)",
                "quantity": 100
            }
        }


class PurchaseOrder(CamelModel):
    """Represents a purchase order and its fulfillment record."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    supplier: Optional[str] = Field(None, max_length=200)
    items: List[OrderLineItem] = Field(default_factory=list)
    status: OrderStatus = Field(default=OrderStatus.SUCCESSFUL)
    automated: Optional[bool] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator('created_at', 'updated_at')
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def get_item_count(self) -> int:
        """Get number of line items in the order."""
        return len(self.items)

    def get_total_quantity(self) -> int:
        """Get total quantity across all line items."""
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict; ``automated`` only appears on automated orders."""
        data = super().to_dict()
        if self.automated is None:
            data.pop("automated", None)
        return data

    class Config:
        """Pydantic configuration."""
        extra = "allow"
        json_schema_extra = {
            "example": {
                "supplier": "MedSupply Co",
                "status": "successful",
                "items": [
                    {
                        "itemId": "abc-123",
                        "name": "Nitrile Gloves (M)",
                        "quantity": 100
                    }
                ]
            }
        }
