"""
Restock forecasting: usage rates, stockout projection and reorder ranking.
"""

from .restock_analytics import (
    automated_restock_sort_key,
    compute_suggested_quantity,
    estimate_daily_usage_rate,
    generate_suggestions,
    preview_automated_restock,
    round_half_up,
    suggestion_sort_key,
)

__all__ = [
    "estimate_daily_usage_rate",
    "compute_suggested_quantity",
    "generate_suggestions",
    "preview_automated_restock",
    "suggestion_sort_key",
    "automated_restock_sort_key",
    "round_half_up",
]
