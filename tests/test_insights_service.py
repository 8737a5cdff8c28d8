"""
Tests for restock chart insights and inventory chat.
"""

import pytest

from clinic_inventory.exceptions import DependencyFailure, ValidationError
from clinic_inventory.services import InsightsService
from clinic_inventory.services.insights_service import NO_SUGGESTIONS_INSIGHT, build_chart_data


def test_restock_chart(insights_service, fake_llm, make_item):
    make_item(name="Pads", current_stock=0, min_threshold=25)
    make_item(name="Masks", current_stock=100, min_threshold=10, barcode="m")

    result = insights_service.restock_chart()

    chart = result["chartData"]
    assert chart["labels"] == ["Pads"]
    assert [d["label"] for d in chart["datasets"]] == [
        "Current Stock", "Suggested Quantity", "Minimum Threshold",
    ]
    assert [d["data"] for d in chart["datasets"]] == [[0], [50], [25]]
    assert result["aiInsights"] == "Restock gloves first."
    assert "Pads" in fake_llm.prompts[0]


def test_chart_is_limited_to_most_urgent(insights_service, make_item):
    for n in range(12):
        make_item(name=f"Item {n}", current_stock=0, min_threshold=5)

    chart = insights_service.restock_chart()["chartData"]

    assert chart["labels"] == [f"Item {n}" for n in range(10)]


def test_chart_without_suggestions_skips_generation(insights_service, fake_llm, make_item):
    make_item(current_stock=100, min_threshold=10)

    result = insights_service.restock_chart()

    assert result["chartData"]["labels"] == []
    assert result["aiInsights"] == NO_SUGGESTIONS_INSIGHT
    assert fake_llm.prompts == []


def test_chat_includes_inventory_context(insights_service, usage_service, fake_llm, make_item):
    gloves = make_item(name="Nitrile Gloves", current_stock=8, min_threshold=10)
    usage_service.record_usage(gloves.id, 2)

    result = insights_service.chat("  What should I order?  ")

    assert result == {"reply": "Restock gloves first."}
    prompt = fake_llm.prompts[0]
    assert "Nitrile Gloves (PPE): 6 in stock, min 10" in prompt
    assert "User question: What should I order?" in prompt
    assert "2 x Nitrile Gloves" in prompt


@pytest.mark.parametrize("message", [None, "", "   "])
def test_chat_requires_message(insights_service, fake_llm, message):
    with pytest.raises(ValidationError):
        insights_service.chat(message)
    assert fake_llm.prompts == []


def test_generation_retries_then_succeeds(inventory_service, usage_service, restock_service, llm_factory):
    llm = llm_factory(failures=1, max_retries=2)
    service = InsightsService(inventory_service, usage_service, restock_service, llm)

    assert service.chat("Anything low?") == {"reply": "Restock gloves first."}
    assert len(llm.prompts) == 2


def test_generation_failure_is_dependency_failure(inventory_service, usage_service, restock_service, llm_factory):
    llm = llm_factory(failures=5, max_retries=1)
    service = InsightsService(inventory_service, usage_service, restock_service, llm)

    with pytest.raises(DependencyFailure) as exc_info:
        service.chat("Anything low?")

    assert exc_info.value.status_code == 502
    assert len(llm.prompts) == 2


def test_missing_backend_is_dependency_failure(inventory_service, usage_service, restock_service):
    service = InsightsService(inventory_service, usage_service, restock_service)
    with pytest.raises(DependencyFailure):
        service.chat("Anything low?")


def test_build_chart_data_unknown_threshold_is_zero(restock_service, make_item):
    make_item(name="Pads", current_stock=0, min_threshold=4)
    suggestions = restock_service.get_suggestions()

    chart = build_chart_data(suggestions, thresholds={})

    assert chart["datasets"][2]["data"] == [0]
