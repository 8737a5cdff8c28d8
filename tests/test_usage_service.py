"""
Tests for recording usage against inventory.
"""

import pytest

from clinic_inventory.database import JsonStore
from clinic_inventory.exceptions import InsufficientStockError, NotFoundError, ValidationError
from clinic_inventory.utils import AuditLogger


def test_record_usage_decrements_stock(usage_service, inventory_service, make_item):
    """Stock and ledger move together."""
    gloves = make_item(current_stock=20)

    event = usage_service.record_usage(gloves.id, 5, notes="Morning clinic")

    assert inventory_service.get_item(gloves.id).current_stock == 15
    [stored] = usage_service.list_usage()
    assert stored.id == event.id
    assert stored.quantity == 5
    assert stored.notes == "Morning clinic"
    assert event.to_dict()["itemId"] == gloves.id


def test_usage_may_empty_the_item(usage_service, inventory_service, make_item):
    gloves = make_item(current_stock=3)
    usage_service.record_usage(gloves.id, 3)
    assert inventory_service.get_item(gloves.id).current_stock == 0


def test_insufficient_stock_changes_nothing(usage_service, store, make_item):
    gloves = make_item(current_stock=10)
    inventory_before = store.read(JsonStore.INVENTORY)

    with pytest.raises(InsufficientStockError) as exc_info:
        usage_service.record_usage(gloves.id, 11)

    assert exc_info.value.message == "Insufficient stock"
    assert exc_info.value.available == 10
    assert store.read(JsonStore.INVENTORY) == inventory_before
    assert store.read(JsonStore.USAGE_HISTORY) == []


def test_unknown_item_is_not_found(usage_service):
    with pytest.raises(NotFoundError):
        usage_service.record_usage("missing", 1)


@pytest.mark.parametrize("item_id, quantity", [
    (None, 1),
    ("", 1),
    ("some-id", 0),
    ("some-id", -3),
    ("some-id", 1.5),
    ("some-id", "2"),
    ("some-id", True),
])
def test_invalid_input_is_rejected(usage_service, item_id, quantity):
    with pytest.raises(ValidationError):
        usage_service.record_usage(item_id, quantity)


def test_history_includes_item_names(usage_service, inventory_service, make_item):
    gloves = make_item(name="Gloves")
    masks = make_item(name="Masks", barcode="123")
    usage_service.record_usage(gloves.id, 1)
    usage_service.record_usage(masks.id, 2)
    inventory_service.delete_item(masks.id)

    history = usage_service.get_usage_history()

    assert [entry.item_name for entry in history] == ["Gloves", "Unknown Item"]
    assert history[1].to_dict()["itemName"] == "Unknown Item"


def test_usage_is_audited(usage_service, store, make_item):
    gloves = make_item()
    usage_service.record_usage(gloves.id, 2)

    actions = [entry["actionType"] for entry in store.read(JsonStore.AUDIT_LOG)]
    assert actions == ["inventory_created", "usage_recorded"]


def test_recent_audit_entries_newest_first(usage_service, make_item):
    gloves = make_item()
    usage_service.record_usage(gloves.id, 1)

    [latest] = usage_service.audit_logger.get_recent_logs(limit=1)

    assert latest["actionType"] == "usage_recorded"
    assert latest["itemId"] == gloves.id
    assert latest["details"] == {"quantity": 1, "remaining": 49}


def test_audit_table_keeps_newest_entries(store):
    audit = AuditLogger(store, max_entries=3)

    for n in range(5):
        audit.log_action(action_type=f"action_{n}", actor="user")

    entries = store.read(JsonStore.AUDIT_LOG)
    assert [entry["actionType"] for entry in entries] == ["action_2", "action_3", "action_4"]

