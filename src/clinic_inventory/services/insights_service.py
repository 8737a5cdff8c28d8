"""
Restock assistant.

Builds chart data for the restock view and asks the text-generation
backend for insights and chat replies grounded in current inventory.
"""

from typing import Any, Dict, List, Optional

from ..exceptions import DependencyFailure, ValidationError
from ..models import RestockSuggestion
from ..utils import get_logger
from .base_llm_service import BaseLLMService
from .inventory_service import InventoryService
from .restock_service import RestockService
from .usage_service import UsageService

CHART_ITEM_LIMIT = 10
RECENT_USAGE_LIMIT = 15

NO_SUGGESTIONS_INSIGHT = (
    "All items are above their minimum thresholds and show no recent usage, "
    "so there is nothing to restock right now."
)

SYSTEM_PROMPT = (
    "You are an inventory assistant for a medical clinic. Answer using only "
    "the inventory data provided. Be concise and practical, and use short "
    "markdown lists where helpful."
)


class InsightsService:
    """Restock chart insights and inventory chat."""

    def __init__(
        self,
        inventory_service: InventoryService,
        usage_service: UsageService,
        restock_service: RestockService,
        llm_service: Optional[BaseLLMService] = None,
    ) -> None:
        """
        Initialize the insights service.

        Args:
            inventory_service: Inventory service
            usage_service: Usage service
            restock_service: Restock service
            llm_service: Text-generation backend; without one, every
                generation raises DependencyFailure
        """
        self.inventory_service = inventory_service
        self.usage_service = usage_service
        self.restock_service = restock_service
        self.llm_service = llm_service
        self.logger = get_logger("insights_service")

    def restock_chart(self) -> Dict[str, Any]:
        """
        Chart data for the most urgent suggestions plus generated insights.

        Returns:
            ``{"chartData": {...}, "aiInsights": str}``
        """
        suggestions = self.restock_service.get_suggestions()[:CHART_ITEM_LIMIT]
        thresholds = {
            item.id: item.min_threshold for item in self.inventory_service.list_items()
        }
        chart_data = build_chart_data(suggestions, thresholds)

        if not suggestions:
            return {"chartData": chart_data, "aiInsights": NO_SUGGESTIONS_INSIGHT}

        prompt = (
            "Analyze these restock suggestions for a clinic and give 3-5 "
            "actionable insights: which items are most urgent, any ordering "
            "risks, and how to prioritize spending.\n\n"
            + format_suggestions(suggestions)
        )
        insights = self._generate(prompt)
        return {"chartData": chart_data, "aiInsights": insights}

    def chat(self, message: Optional[str]) -> Dict[str, str]:
        """
        Answer a question about the current inventory.

        Args:
            message: User question

        Returns:
            ``{"reply": str}``

        Raises:
            ValidationError: If the message is empty
            DependencyFailure: If text generation fails
        """
        if not message or not message.strip():
            raise ValidationError("message is required")

        prompt = (
            f"{self._inventory_snapshot()}\n\n"
            f"User question: {message.strip()}"
        )
        return {"reply": self._generate(prompt)}

    def _generate(self, prompt: str) -> str:
        if self.llm_service is None:
            raise DependencyFailure("Text generation is not configured")
        return self.llm_service.summarize(prompt, system_prompt=SYSTEM_PROMPT)

    def _inventory_snapshot(self) -> str:
        items = self.inventory_service.list_items()
        alerts = self.inventory_service.get_alerts()
        suggestions = self.restock_service.get_suggestions()
        usage = self.usage_service.get_usage_history()[-RECENT_USAGE_LIMIT:]

        lines = ["Current inventory:"]
        for item in items:
            expiry = f", expires {item.expiration_date.isoformat()}" if item.expiration_date else ""
            lines.append(
                f"- {item.name} ({item.category}): {item.current_stock} in stock, "
                f"min {item.min_threshold}{expiry}"
            )
        if not items:
            lines.append("- (no items)")

        lines.append("\nAlerts:")
        lines.extend(f"- [{a.severity.value}] {a.item}: {a.message}" for a in alerts)
        if not alerts:
            lines.append("- (none)")

        lines.append("\nRestock suggestions:")
        lines.append(format_suggestions(suggestions) if suggestions else "- (none)")

        lines.append("\nRecent usage:")
        lines.extend(
            f"- {entry.date.date().isoformat()}: {entry.quantity} x {entry.item_name}"
            for entry in usage
        )
        if not usage:
            lines.append("- (none)")

        return "\n".join(lines)


def format_suggestions(suggestions: List[RestockSuggestion]) -> str:
    """One line per suggestion for prompts."""
    lines = []
    for s in suggestions:
        days = "no recent usage" if s.days_until_empty is None else f"{s.days_until_empty} days left"
        lines.append(
            f"- {s.item_name}: stock {s.current_stock}, {s.usage_rate}/day, {days}, "
            f"suggest {s.suggested_quantity}, priority {s.priority.value}"
        )
    return "\n".join(lines)


def build_chart_data(
    suggestions: List[RestockSuggestion],
    thresholds: Dict[str, int],
) -> Dict[str, Any]:
    """Bar chart data: current stock vs suggested quantity vs threshold."""
    return {
        "labels": [s.item_name for s in suggestions],
        "datasets": [
            {
                "label": "Current Stock",
                "data": [s.current_stock for s in suggestions],
                "backgroundColor": "rgba(239, 68, 68, 0.7)",
            },
            {
                "label": "Suggested Quantity",
                "data": [s.suggested_quantity for s in suggestions],
                "backgroundColor": "rgba(34, 197, 94, 0.7)",
            },
            {
                "label": "Minimum Threshold",
                "data": [thresholds.get(s.item_id, 0) for s in suggestions],
                "backgroundColor": "rgba(234, 179, 8, 0.7)",
            },
        ],
    }
