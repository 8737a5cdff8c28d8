"""
Inventory data models.

Defines clinic inventory items, usage events and stock alerts.
"""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel, ensure_utc, utc_now


class InventoryItem(CamelModel):
    """Represents a single stocked item in the clinic inventory."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    barcode: Optional[str] = Field(None, max_length=100)
    current_stock: int = Field(default=0, ge=0)
    min_threshold: int = Field(default=0, ge=0)
    unit_price: float = Field(default=0.0, ge=0.0)
    supplier: Optional[str] = Field(None, max_length=200)
    expiration_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator('barcode', 'supplier', 'description', 'expiration_date', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty form fields as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('created_at', 'updated_at')
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def is_low_stock(self) -> bool:
        """Check if item is at or below its minimum threshold."""
        return self.current_stock <= self.min_threshold

    def touch(self) -> None:
        """Stamp the item as modified now."""
        self.updated_at = utc_now()

    class Config:
        """Pydantic configuration."""
        extra = "allow"
        json_schema_extra = {
            "example": {
                "name": "Nitrile Gloves (M)",
                "category": "PPE",
                "barcode": "0123456789012",
                "currentStock": 40,
                "minThreshold": 20,
                "unitPrice": 0.12,
                "supplier": "MedSupply Co",
                "expirationDate": "2027-03-01"
            }
        }


class UsageEvent(CamelModel):
    """Represents one recorded consumption of an inventory item."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    item_id: str
    quantity: int = Field(..., gt=0)
    notes: Optional[str] = Field(None, max_length=500)
    date: datetime = Field(default_factory=utc_now)

    @field_validator('date')
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    class Config:
        """Pydantic configuration."""
        extra = "allow"
        json_schema_extra = {
            "example": {
                "itemId": "abc-123",
                "quantity": 5,
                "notes": "Morning clinic"
            }
        }


class UsageHistoryEntry(UsageEvent):
    """Usage event enriched with the referenced item's name."""

    item_name: str = "Unknown Item"


class AlertType(str, Enum):
    """Alert type enumeration."""
    LOW_STOCK = "low_stock"
    EXPIRING = "expiring"


class AlertSeverity(str, Enum):
    """Alert severity enumeration."""
    CRITICAL = "critical"
    WARNING = "warning"


class Alert(CamelModel):
    """A low-stock or expiry warning for one item."""

    type: AlertType
    severity: AlertSeverity
    item: str
    message: str
    item_id: str
