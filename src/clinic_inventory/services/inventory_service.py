"""
Inventory service for managing clinic stock items.

Handles CRUD operations, barcode lookup and stock/expiry alerts.
"""

import math
from datetime import datetime, time, timezone
from typing import Any, Dict, List, Optional

from pydantic.alias_generators import to_camel

from ..config import ConfigManager, get_config_manager
from ..database import JsonStore
from ..exceptions import NotFoundError, ValidationError
from ..models import Alert, AlertSeverity, AlertType, InventoryItem, utc_now
from ..utils import AuditLogger, get_logger
from .records import dump, load_items, validate_input

# Fields callers may never set directly
_READ_ONLY_FIELDS = ("id", "createdAt", "created_at", "updatedAt", "updated_at")


class InventoryService:
    """Service for managing inventory items."""

    def __init__(self, store: JsonStore, config: Optional[ConfigManager] = None) -> None:
        """
        Initialize inventory service.

        Args:
            store: JSON table store
            config: Configuration manager (defaults to the global one)
        """
        self.store = store
        self.config = config or get_config_manager()
        self.logger = get_logger("inventory_service")
        self.audit_logger = AuditLogger(store)

    def list_items(self) -> List[InventoryItem]:
        """
        Get all inventory items in store order.

        Returns:
            List of InventoryItems
        """
        return load_items(self.store.read(JsonStore.INVENTORY))

    def get_item(self, item_id: str) -> InventoryItem:
        """
        Get an inventory item by ID.

        Args:
            item_id: Item ID

        Returns:
            InventoryItem

        Raises:
            NotFoundError: If no item has this ID
        """
        for item in self.list_items():
            if item.id == item_id:
                return item
        raise NotFoundError("Item not found")

    def create_item(self, data: Dict[str, Any]) -> InventoryItem:
        """
        Create a new inventory item.

        Args:
            data: Item fields (camelCase or snake_case); id and timestamps
                are assigned here

        Returns:
            Created InventoryItem

        Raises:
            ValidationError: If required fields are missing/invalid or the
                barcode is already in use
        """
        fields = {k: v for k, v in data.items() if k not in _READ_ONLY_FIELDS}
        item = validate_input(InventoryItem, fields)

        with self.store.transaction() as tx:
            items = load_items(tx.read(JsonStore.INVENTORY))
            self._check_barcode_unique(items, item.barcode)
            items.append(item)
            tx.write(JsonStore.INVENTORY, dump(items))

        self.audit_logger.log_action(
            action_type="inventory_created",
            actor="user",
            details={"name": item.name, "currentStock": item.current_stock},
            item_id=item.id,
        )
        self.logger.info(f"Created inventory item: {item.name} ({item.id})")
        return item

    def update_item(self, item_id: str, changes: Dict[str, Any]) -> InventoryItem:
        """
        Update an existing inventory item.

        Args:
            item_id: Item ID
            changes: Fields to overwrite

        Returns:
            Updated InventoryItem

        Raises:
            NotFoundError: If no item has this ID
            ValidationError: If the merged item is invalid
        """
        with self.store.transaction() as tx:
            items = load_items(tx.read(JsonStore.INVENTORY))
            index = _find_index(items, item_id)
            if index is None:
                raise NotFoundError("Item not found")

            merged = items[index].to_dict()
            merged.update({k: v for k, v in changes.items() if k not in _READ_ONLY_FIELDS})
            updated = validate_input(InventoryItem, _prefer_camel(merged, changes))
            updated.touch()

            others = items[:index] + items[index + 1:]
            self._check_barcode_unique(others, updated.barcode)
            items[index] = updated
            tx.write(JsonStore.INVENTORY, dump(items))

        self.audit_logger.log_action(
            action_type="inventory_updated",
            actor="user",
            details={"fields": sorted(changes)},
            item_id=item_id,
        )
        self.logger.info(f"Updated inventory item: {updated.name} ({item_id})")
        return updated

    def delete_item(self, item_id: str) -> InventoryItem:
        """
        Delete an inventory item.

        Usage events that reference the item are kept.

        Returns:
            The deleted InventoryItem

        Raises:
            NotFoundError: If no item has this ID
        """
        with self.store.transaction() as tx:
            items = load_items(tx.read(JsonStore.INVENTORY))
            index = _find_index(items, item_id)
            if index is None:
                raise NotFoundError("Item not found")
            removed = items.pop(index)
            tx.write(JsonStore.INVENTORY, dump(items))

        self.audit_logger.log_action(
            action_type="inventory_deleted",
            actor="user",
            details={"name": removed.name},
            item_id=item_id,
        )
        self.logger.info(f"Deleted inventory item: {removed.name} ({item_id})")
        return removed

    def scan_barcode(self, barcode: Optional[str]) -> Dict[str, Any]:
        """
        Look up an item by barcode.

        Returns:
            ``{"success": True, "item": {...}}`` or
            ``{"success": False, "message": "Item not found"}``
        """
        if barcode:
            for item in self.list_items():
                if item.barcode == barcode:
                    return {"success": True, "item": item.to_dict()}

        self.logger.debug(f"Barcode not found: {barcode}")
        return {"success": False, "message": "Item not found"}

    def get_alerts(self, now: Optional[datetime] = None) -> List[Alert]:
        """
        Low-stock and expiry alerts for every item.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            List of Alerts in inventory order
        """
        now = now or utc_now()
        warning_days = self.config.get("alerts.expiry_warning_days", 7)
        critical_days = self.config.get("alerts.expiry_critical_days", 3)
        alerts = []

        for item in self.list_items():
            if item.is_low_stock():
                alerts.append(Alert(
                    type=AlertType.LOW_STOCK,
                    severity=AlertSeverity.CRITICAL if item.current_stock == 0 else AlertSeverity.WARNING,
                    item=item.name,
                    message=(
                        f"Low stock: {item.current_stock} units remaining "
                        f"(min: {item.min_threshold})"
                    ),
                    item_id=item.id,
                ))

            if item.expiration_date is not None:
                days_to_expiry = days_until(item.expiration_date, now)
                if days_to_expiry <= warning_days:
                    alerts.append(Alert(
                        type=AlertType.EXPIRING,
                        severity=(
                            AlertSeverity.CRITICAL if days_to_expiry <= critical_days
                            else AlertSeverity.WARNING
                        ),
                        item=item.name,
                        message=(
                            f"Expires in {days_to_expiry} days "
                            f"({item.expiration_date.isoformat()})"
                        ),
                        item_id=item.id,
                    ))

        return alerts

    def _check_barcode_unique(self, items: List[InventoryItem], barcode: Optional[str]) -> None:
        if barcode and any(other.barcode == barcode for other in items):
            raise ValidationError(f"Barcode {barcode} is already assigned to another item")


def days_until(expiration_date, now: datetime) -> int:
    """Whole days, rounded up, from now until UTC midnight of a date."""
    expiry = datetime.combine(expiration_date, time.min, tzinfo=timezone.utc)
    return math.ceil((expiry - now).total_seconds() / 86400)


def _find_index(items: List[InventoryItem], item_id: str) -> Optional[int]:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return None


def _prefer_camel(merged: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Resolve merged fields when changes arrive in snake_case.

    The stored dict is camelCase; a snake_case change must replace the
    camelCase value rather than compete with it during validation.
    """
    result = dict(merged)
    for key in changes:
        camel = to_camel(key)
        if camel != key and key in result:
            result[camel] = result.pop(key)
    return result
