"""
Usage service for recording consumption.

A usage event and the matching stock decrement are committed together.
"""

from typing import List, Optional

from ..database import JsonStore
from ..exceptions import InsufficientStockError, NotFoundError, ValidationError
from ..models import UsageEvent, UsageHistoryEntry
from ..utils import AuditLogger, get_logger
from .records import dump, load_items, load_usage, validate_input


class UsageService:
    """Service for the append-only usage ledger."""

    def __init__(self, store: JsonStore) -> None:
        """
        Initialize usage service.

        Args:
            store: JSON table store
        """
        self.store = store
        self.logger = get_logger("usage_service")
        self.audit_logger = AuditLogger(store)

    def record_usage(
        self,
        item_id: Optional[str],
        quantity,
        notes: Optional[str] = None,
    ) -> UsageEvent:
        """
        Record consumption of an item.

        Args:
            item_id: Inventory item ID
            quantity: Units used, a positive integer
            notes: Optional free-text notes

        Returns:
            Created UsageEvent

        Raises:
            ValidationError: If item_id is missing or quantity is not a
                positive integer
            NotFoundError: If the item does not exist
            InsufficientStockError: If quantity exceeds current stock
        """
        if not item_id:
            raise ValidationError("itemId is required")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("quantity must be a positive integer")

        with self.store.transaction() as tx:
            items = load_items(tx.read(JsonStore.INVENTORY))
            item = next((i for i in items if i.id == item_id), None)
            if item is None:
                raise NotFoundError("Item not found")

            if quantity > item.current_stock:
                self.logger.warning(
                    f"Rejected usage of {quantity} for {item.name}: "
                    f"only {item.current_stock} in stock"
                )
                raise InsufficientStockError(item_id, quantity, item.current_stock)

            item.current_stock -= quantity
            item.touch()

            event = validate_input(UsageEvent, {
                "itemId": item_id,
                "quantity": quantity,
                "notes": notes,
            })

            tx.write(JsonStore.INVENTORY, dump(items))
            tx.append(JsonStore.USAGE_HISTORY, event.to_dict())

        self.audit_logger.log_action(
            action_type="usage_recorded",
            actor="user",
            details={"quantity": quantity, "remaining": item.current_stock},
            item_id=item_id,
        )
        self.logger.info(
            f"Recorded usage of {quantity} x {item.name}, {item.current_stock} remaining"
        )
        return event

    def list_usage(self) -> List[UsageEvent]:
        """Get the full usage ledger in recording order."""
        return load_usage(self.store.read(JsonStore.USAGE_HISTORY))

    def get_usage_history(self) -> List[UsageHistoryEntry]:
        """
        Get the usage ledger enriched with item names.

        Events whose item has been deleted are labelled "Unknown Item".

        Returns:
            List of UsageHistoryEntry
        """
        names = {item.id: item.name for item in load_items(self.store.read(JsonStore.INVENTORY))}
        history = []
        for event in self.list_usage():
            entry = UsageHistoryEntry(**event.model_dump())
            if event.item_id in names:
                entry.item_name = names[event.item_id]
            history.append(entry)
        return history
