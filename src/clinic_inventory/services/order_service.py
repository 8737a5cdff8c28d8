"""
Purchase order service.

Orders are fulfilled on creation: matched line items are credited to
inventory in the same commit that records the order.
"""

from typing import Any, Dict, List, Optional

from ..database import JsonStore
from ..exceptions import NotFoundError, ValidationError
from ..models import OrderLineItem, OrderStatus, PurchaseOrder, utc_now
from ..utils import AuditLogger, get_logger
from .records import dump, load_items, load_orders, validate_input


class OrderService:
    """Service for creating and managing purchase orders."""

    def __init__(self, store: JsonStore) -> None:
        """
        Initialize order service.

        Args:
            store: JSON table store
        """
        self.store = store
        self.logger = get_logger("order_service")
        self.audit_logger = AuditLogger(store)

    def create_purchase_order(
        self,
        supplier: Optional[str],
        line_items: List[Dict[str, Any]],
    ) -> PurchaseOrder:
        """
        Create a purchase order and credit its quantities to stock.

        Line items for unknown item IDs stay on the order but change no
        stock. Quantities are coerced to integers; junk counts as 0.

        Args:
            supplier: Supplier name
            line_items: Sequence of ``{itemId, name, quantity}``

        Returns:
            Created PurchaseOrder with status "successful"

        Raises:
            ValidationError: If no line items are given
        """
        if not isinstance(line_items, list) or not line_items:
            raise ValidationError("Order must have at least one item")

        lines = [validate_input(OrderLineItem, _as_dict(line)) for line in line_items]
        order = validate_input(PurchaseOrder, {
            "supplier": supplier,
            "items": lines,
            "status": OrderStatus.SUCCESSFUL,
        })

        with self.store.transaction() as tx:
            items = load_items(tx.read(JsonStore.INVENTORY))
            by_id = {item.id: item for item in items}
            matched = 0

            for line in order.items:
                item = by_id.get(line.item_id) if line.item_id else None
                if item is None:
                    self.logger.warning(
                        f"Order {order.id}: skipping unknown item {line.item_id!r}"
                    )
                    continue
                if not line.name:
                    line.name = item.name
                item.current_stock += line.quantity
                item.touch()
                matched += 1

            if matched:
                tx.write(JsonStore.INVENTORY, dump(items))
            tx.append(JsonStore.PURCHASE_ORDERS, order.to_dict())

        self.audit_logger.log_action(
            action_type="order_created",
            actor="user",
            details={
                "supplier": supplier,
                "lines": order.get_item_count(),
                "matchedLines": matched,
                "totalQuantity": order.get_total_quantity(),
            },
            order_id=order.id,
        )
        self.logger.info(
            f"Created purchase order {order.id} from {supplier or 'unknown supplier'}: "
            f"{matched}/{order.get_item_count()} lines applied to stock"
        )
        return order

    def list_purchase_orders(self) -> List[PurchaseOrder]:
        """Get all purchase orders in creation order."""
        return load_orders(self.store.read(JsonStore.PURCHASE_ORDERS))

    def update_purchase_order(self, order_id: str, changes: Dict[str, Any]) -> PurchaseOrder:
        """
        Update an order's supplier and/or status.

        Stock is not adjusted; fulfillment happened at creation.

        Args:
            order_id: Order ID
            changes: ``supplier`` and/or ``status``

        Returns:
            Updated PurchaseOrder

        Raises:
            NotFoundError: If no order has this ID
            ValidationError: If the status is not a known value
        """
        status = changes.get("status")
        if status is not None:
            try:
                status = OrderStatus(status)
            except ValueError as e:
                raise ValidationError(f"Invalid order status: {status}") from e

        with self.store.transaction() as tx:
            orders = load_orders(tx.read(JsonStore.PURCHASE_ORDERS))
            order = next((o for o in orders if o.id == order_id), None)
            if order is None:
                raise NotFoundError("Purchase order not found")

            if status is not None:
                order.status = status
            if "supplier" in changes:
                order.supplier = changes["supplier"]
            order.updated_at = utc_now()

            tx.write(JsonStore.PURCHASE_ORDERS, dump(orders))

        self.audit_logger.log_action(
            action_type="order_updated",
            actor="user",
            details={"fields": sorted(changes)},
            order_id=order_id,
        )
        self.logger.info(f"Updated purchase order {order_id}")
        return order


def _as_dict(line: Any) -> Dict[str, Any]:
    if isinstance(line, OrderLineItem):
        return line.model_dump()
    if isinstance(line, dict):
        return line
    raise ValidationError("Order items must be objects")
