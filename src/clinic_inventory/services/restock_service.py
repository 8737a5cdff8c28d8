"""
Restock Service - suggestions and automated replenishment

Loads inventory and the usage ledger, runs the restock analytics, and
executes automated restock orders against the store.
"""

from typing import List, Optional

from ..config import ConfigManager, get_config_manager
from ..database import JsonStore
from ..forecasting import generate_suggestions, preview_automated_restock
from ..models import (
    AutomatedRestockPreview,
    AutomatedRestockResult,
    OrderLineItem,
    OrderStatus,
    PurchaseOrder,
    RestockSuggestion,
)
from ..utils import AuditLogger, get_logger
from .records import dump, load_items, load_usage

NOTHING_TO_RESTOCK = "No high priority items need restocking at this time"


class RestockService:
    """
    Service layer for restock analytics.

    Handles:
    - Ranked restock suggestions for manual ordering
    - Previewing the urgent-only automated restock
    - Executing automated restock as a single fulfilled purchase order
    """

    def __init__(self, store: JsonStore, config: Optional[ConfigManager] = None) -> None:
        """
        Initialize the restock service.

        Args:
            store: JSON table store
            config: Configuration manager (defaults to the global one)
        """
        self.store = store
        self.config = config or get_config_manager()
        self.logger = get_logger("restock_service")
        self.audit_logger = AuditLogger(store)

    @property
    def window_days(self) -> int:
        return int(self.config.get("restock.usage_window_days", 30))

    @property
    def supply_days(self) -> int:
        return int(self.config.get("restock.supply_days", 30))

    @property
    def automated_supplier(self) -> str:
        return self.config.get("restock.automated_supplier", "Automated Restock System")

    def _load_tables(self):
        """Read inventory and the usage ledger under one lock hold."""
        with self.store.transaction() as tx:
            items = load_items(tx.read(JsonStore.INVENTORY))
            usage = load_usage(tx.read(JsonStore.USAGE_HISTORY))
        return items, usage

    def get_suggestions(self) -> List[RestockSuggestion]:
        """
        Ranked restock suggestions for the current inventory.

        Returns:
            Suggestions, most urgent first
        """
        items, usage = self._load_tables()

        suggestions = generate_suggestions(
            items, usage, window_days=self.window_days, supply_days=self.supply_days
        )
        self.logger.debug(f"Generated {len(suggestions)} restock suggestions")
        return suggestions

    def preview_automated_restock(self) -> AutomatedRestockPreview:
        """
        What an automated restock would order right now.

        Returns:
            AutomatedRestockPreview
        """
        items, usage = self._load_tables()

        return preview_automated_restock(
            items, usage, window_days=self.window_days, supply_days=self.supply_days
        )

    def execute_automated_restock(self) -> AutomatedRestockResult:
        """
        Reorder every item at or below its minimum threshold.

        The urgent set is recomputed from freshly read tables while the
        store's writer lock is held, so a stale preview is never acted on.
        Stock credits and the order are committed together.

        Returns:
            AutomatedRestockResult; ``success`` is False when nothing
            needed restocking
        """
        with self.store.transaction() as tx:
            items = load_items(tx.read(JsonStore.INVENTORY))
            usage = load_usage(tx.read(JsonStore.USAGE_HISTORY))

            preview = preview_automated_restock(
                items, usage, window_days=self.window_days, supply_days=self.supply_days
            )

            if not preview.items:
                self.logger.info("Automated restock: nothing below threshold")
                result = AutomatedRestockResult(success=False, message=NOTHING_TO_RESTOCK)
            else:
                by_id = {item.id: item for item in items}
                for selected in preview.items:
                    item = by_id[selected.item_id]
                    item.current_stock += selected.suggested_quantity
                    item.touch()

                order = PurchaseOrder(
                    supplier=self.automated_supplier,
                    status=OrderStatus.SUCCESSFUL,
                    automated=True,
                    items=[
                        OrderLineItem(
                            item_id=selected.item_id,
                            name=selected.item_name,
                            quantity=selected.suggested_quantity,
                        )
                        for selected in preview.items
                    ],
                )

                tx.write(JsonStore.INVENTORY, dump(items))
                tx.append(JsonStore.PURCHASE_ORDERS, order.to_dict())

                result = AutomatedRestockResult(
                    success=True,
                    items_restocked=preview.total_items,
                    total_quantity=preview.total_quantity,
                    order=order,
                )

        if result.success:
            self.audit_logger.log_action(
                action_type="automated_restock",
                actor="system",
                details={
                    "itemsRestocked": result.items_restocked,
                    "totalQuantity": result.total_quantity,
                },
                order_id=result.order.id,
            )
            self.logger.info(
                f"Automated restock order {result.order.id}: "
                f"{result.items_restocked} items, {result.total_quantity} units"
            )
        else:
            self.audit_logger.log_action(
                action_type="automated_restock",
                actor="system",
                outcome="noop",
            )

        return result
