"""
Tests for the REST API routes and error responses.
"""

import pytest
from fastapi.testclient import TestClient

from clinic_inventory.api import init_api


@pytest.fixture
def client(store, fake_llm):
    return TestClient(init_api(store, fake_llm))


@pytest.fixture
def gloves(client):
    response = client.post("/api/inventory", json={
        "name": "Nitrile Gloves",
        "category": "PPE",
        "barcode": "0400000000011",
        "currentStock": 10,
        "minThreshold": 10,
    })
    assert response.status_code == 201
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["textGeneration"] == "enabled"


def test_inventory_crud(client, gloves):
    assert gloves["currentStock"] == 10
    assert "createdAt" in gloves

    listed = client.get("/api/inventory").json()
    assert [item["id"] for item in listed] == [gloves["id"]]

    updated = client.put(f"/api/inventory/{gloves['id']}", json={"minThreshold": 4})
    assert updated.status_code == 200
    assert updated.json()["minThreshold"] == 4

    deleted = client.delete(f"/api/inventory/{gloves['id']}")
    assert deleted.json() == {"message": "Item deleted successfully"}
    assert client.get("/api/inventory").json() == []


def test_invalid_item_is_400(client):
    response = client.post("/api/inventory", json={"category": "PPE"})
    assert response.status_code == 400
    assert "error" in response.json()


def test_missing_item_is_404(client):
    response = client.put("/api/inventory/missing", json={"name": "x"})
    assert response.status_code == 404
    assert response.json() == {"error": "Item not found"}


def test_record_usage(client, gloves):
    response = client.post("/api/usage", json={"itemId": gloves["id"], "quantity": 3, "notes": "Ward B"})

    assert response.status_code == 201
    assert response.json()["quantity"] == 3
    assert client.get("/api/inventory").json()[0]["currentStock"] == 7

    [entry] = client.get("/api/usage-history").json()
    assert entry["itemName"] == "Nitrile Gloves"
    assert entry["notes"] == "Ward B"


def test_usage_errors(client, gloves):
    too_many = client.post("/api/usage", json={"itemId": gloves["id"], "quantity": 11})
    assert too_many.status_code == 400
    assert too_many.json() == {"error": "Insufficient stock"}

    unknown = client.post("/api/usage", json={"itemId": "missing", "quantity": 1})
    assert unknown.status_code == 404

    no_item = client.post("/api/usage", json={"quantity": 1})
    assert no_item.status_code == 400

    bad_quantity = client.post("/api/usage", json={"itemId": gloves["id"], "quantity": "abc"})
    assert bad_quantity.status_code == 400

    assert client.get("/api/usage-history").json() == []


def test_alerts(client, gloves):
    [alert] = client.get("/api/alerts").json()
    assert alert["type"] == "low_stock"
    assert alert["severity"] == "warning"
    assert alert["itemId"] == gloves["id"]


def test_restock_suggestions(client, gloves):
    [suggestion] = client.get("/api/restock-suggestions").json()
    assert suggestion == {
        "itemId": gloves["id"],
        "itemName": "Nitrile Gloves",
        "currentStock": 10,
        "usageRate": 0.0,
        "daysUntilEmpty": None,
        "suggestedQuantity": 20,
        "priority": "high",
    }


def test_automated_restock_flow(client, gloves):
    preview = client.get("/api/automated-restock-preview").json()
    assert preview["totalItems"] == 1
    assert preview["items"][0]["minThreshold"] == 10

    result = client.post("/api/automated-restock").json()
    assert result["success"] is True
    assert result["itemsRestocked"] == 1
    assert result["totalQuantity"] == 20
    assert result["order"]["automated"] is True

    again = client.post("/api/automated-restock").json()
    assert again["success"] is False
    assert again["itemsRestocked"] == 0

    assert client.get("/api/inventory").json()[0]["currentStock"] == 30
    assert len(client.get("/api/purchase-orders").json()) == 1


def test_purchase_orders(client, gloves):
    response = client.post("/api/purchase-orders", json={
        "supplier": "MedSupply Co",
        "items": [
            {"itemId": gloves["id"], "name": "Nitrile Gloves", "quantity": "25"},
            {"itemId": "unknown", "name": "Retired item", "quantity": 5},
        ],
    })

    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "successful"
    assert [line["quantity"] for line in order["items"]] == [25, 5]
    assert client.get("/api/inventory").json()[0]["currentStock"] == 35

    updated = client.put(f"/api/purchase-orders/{order['id']}", json={"status": "pending"})
    assert updated.json()["status"] == "pending"
    assert updated.json()["supplier"] == "MedSupply Co"


def test_empty_purchase_order_is_400(client):
    response = client.post("/api/purchase-orders", json={"supplier": "Acme", "items": []})
    assert response.status_code == 400
    assert response.json() == {"error": "Order must have at least one item"}


def test_scan_barcode(client, gloves):
    found = client.post("/api/scan-barcode", json={"barcode": "0400000000011"}).json()
    assert found["success"] is True
    assert found["item"]["id"] == gloves["id"]

    missing = client.post("/api/scan-barcode", json={"barcode": "nope"}).json()
    assert missing == {"success": False, "message": "Item not found"}


def test_restock_chart_and_chat(client, gloves):
    chart = client.get("/api/restock-chart").json()
    assert chart["chartData"]["labels"] == ["Nitrile Gloves"]
    assert chart["aiInsights"] == "Restock gloves first."

    reply = client.post("/api/chat", json={"message": "What is low?"})
    assert reply.json() == {"reply": "Restock gloves first."}

    empty = client.post("/api/chat", json={"message": ""})
    assert empty.status_code == 400


def test_chat_without_backend_is_502(store):
    client = TestClient(init_api(store, None))

    response = client.post("/api/chat", json={"message": "Hello"})

    assert response.status_code == 502
    assert "error" in response.json()
