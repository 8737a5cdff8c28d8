"""
Restock analytics engine.

Pure functions that turn (inventory, usage history) into prioritized
restocking decisions:

- Fixed-window daily usage rate per item
- Days until stockout and a 30-day-supply reorder quantity
- Ranked suggestions for manual ordering
- The urgent-only selection used by automated restock

Nothing here touches storage; callers pass in fully loaded records.
"""

import math
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import (
    AutomatedRestockItem,
    AutomatedRestockPreview,
    InventoryItem,
    RestockPriority,
    RestockSuggestion,
    UsageEvent,
)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_SUPPLY_DAYS = 30

# Float noise tolerated before rounding a quantity up
_CEIL_EPSILON_PLACES = 9


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a calculator: halves go away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def estimate_daily_usage_rate(
    usage_events: Iterable[UsageEvent],
    item_id: str,
    window_days: int = DEFAULT_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> float:
    """
    Estimate average daily consumption of an item.

    Sums the quantities of the item's events dated within
    ``[now - window_days, now]`` (both ends inclusive) and divides by
    ``window_days``, whether or not every day in the window saw usage.

    Args:
        usage_events: Usage ledger
        item_id: Item to estimate
        window_days: Trailing window length in days
        now: Reference time (defaults to current UTC time)

    Returns:
        Units per day, 0.0 when no event matches
    """
    if window_days <= 0:
        raise ValueError("window_days must be positive")

    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=window_days)

    total_used = sum(
        event.quantity
        for event in usage_events
        if event.item_id == item_id and cutoff <= event.date <= now
    )
    if total_used == 0:
        return 0.0
    return total_used / window_days


def compute_suggested_quantity(
    usage_rate: float,
    min_threshold: int,
    supply_days: int = DEFAULT_SUPPLY_DAYS,
) -> int:
    """
    Reorder quantity covering ``supply_days`` of usage.

    Falls back to twice the minimum threshold when there is no usage,
    and never suggests fewer than one unit.
    """
    quantity = math.ceil(round(usage_rate * supply_days, _CEIL_EPSILON_PLACES))
    if quantity <= 0:
        quantity = min_threshold * 2
    return max(quantity, 1)


def project_days_until_empty(current_stock: int, usage_rate: float) -> Optional[int]:
    """Days of stock left at the current rate, None without usage."""
    if usage_rate <= 0:
        return None
    return int(round_half_up(current_stock / usage_rate))


def build_suggestion(
    item: InventoryItem,
    usage_rate: float,
    supply_days: int = DEFAULT_SUPPLY_DAYS,
) -> RestockSuggestion:
    """Build the suggestion for one item from its usage rate."""
    return RestockSuggestion(
        item_id=item.id,
        item_name=item.name,
        current_stock=item.current_stock,
        usage_rate=round_half_up(usage_rate, 2),
        days_until_empty=project_days_until_empty(item.current_stock, usage_rate),
        suggested_quantity=compute_suggested_quantity(
            usage_rate, item.min_threshold, supply_days
        ),
        priority=RestockPriority.HIGH if item.is_low_stock() else RestockPriority.MEDIUM,
    )


def suggestion_sort_key(suggestion: RestockSuggestion) -> Tuple[int, int, int]:
    """Priority first, then soonest stockout; no projection sorts last."""
    days = suggestion.days_until_empty
    return (
        suggestion.priority.rank,
        1 if days is None else 0,
        0 if days is None else days,
    )


def generate_suggestions(
    inventory: Sequence[InventoryItem],
    usage_events: Sequence[UsageEvent],
    window_days: int = DEFAULT_WINDOW_DAYS,
    supply_days: int = DEFAULT_SUPPLY_DAYS,
    now: Optional[datetime] = None,
) -> List[RestockSuggestion]:
    """
    Ranked restock suggestions.

    An item is included when it is at or below its minimum threshold or
    has any usage in the window. The sort is stable, so ties keep
    inventory order.

    Args:
        inventory: Inventory items in store order
        usage_events: Usage ledger
        window_days: Usage window for the rate estimate
        supply_days: Days of supply a suggestion should cover
        now: Reference time for the usage window

    Returns:
        Suggestions, most urgent first
    """
    now = now or datetime.now(timezone.utc)
    suggestions = []

    for item in inventory:
        usage_rate = estimate_daily_usage_rate(usage_events, item.id, window_days, now)
        if item.is_low_stock() or usage_rate > 0:
            suggestions.append(build_suggestion(item, usage_rate, supply_days))

    suggestions.sort(key=suggestion_sort_key)
    return suggestions


def _stock_ratio(item: AutomatedRestockItem) -> float:
    if item.min_threshold <= 0:
        return 0.0
    return item.current_stock / item.min_threshold


def automated_restock_sort_key(item: AutomatedRestockItem) -> Tuple[int, int, float]:
    """
    Soonest stockout first, no projection last; among items without a
    projection the one furthest below its threshold (by ratio) leads.
    """
    days = item.days_until_empty
    if days is None:
        return (1, 0, _stock_ratio(item))
    return (0, days, 0.0)


def preview_automated_restock(
    inventory: Sequence[InventoryItem],
    usage_events: Sequence[UsageEvent],
    window_days: int = DEFAULT_WINDOW_DAYS,
    supply_days: int = DEFAULT_SUPPLY_DAYS,
    now: Optional[datetime] = None,
) -> AutomatedRestockPreview:
    """
    Select the urgent items an automated restock would reorder.

    Only items at or below their minimum threshold qualify; usage alone
    does not. Ordering uses ``automated_restock_sort_key``, which differs
    from the manual suggestion list.

    Returns:
        Preview with the selected items and their totals
    """
    now = now or datetime.now(timezone.utc)
    selected = []

    for item in inventory:
        if not item.is_low_stock():
            continue
        usage_rate = estimate_daily_usage_rate(usage_events, item.id, window_days, now)
        suggestion = build_suggestion(item, usage_rate, supply_days)
        selected.append(
            AutomatedRestockItem(**suggestion.model_dump(), min_threshold=item.min_threshold)
        )

    selected.sort(key=automated_restock_sort_key)
    return AutomatedRestockPreview(
        items=selected,
        total_items=len(selected),
        total_quantity=sum(item.suggested_quantity for item in selected),
    )
