from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from sitestock.main import app
from sitestock.apps.inventory.router import (
    get_ledger_service,
    get_read_ledger_service,
    router as inventory_router,
)
from sitestock.apps.inventory.services import LedgerService
from sitestock.apps.inventory.stores import MemoryInventoryStore


RECEIPT_BODY = {
    "item_name": "Portland Cement",
    "item_code": "CEM001",
    "quantity_received": 100,
    "rate_per_unit": 900,
    "unit": "bag",
    "supplier_name": "ABC Cement Co.",
    "delivery_date": "2024-02-01",
    "received_by": "John Supervisor",
}

CONSUMPTION_BODY = {
    "item_code": "STL012",
    "quantity_used": 500,
    "purpose_activity_code": "CONSTR",
    "used_by": "Construction Team B",
    "date": "2024-02-01",
}


def _use_store(store) -> None:
    app.dependency_overrides[get_ledger_service] = lambda: LedgerService(store)
    app.dependency_overrides[get_read_ledger_service] = lambda: LedgerService(store)


@pytest.fixture()
def client(memory_store):
    _use_store(memory_store)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_router_has_expected_routes():
    def _has(method: str, path: str) -> bool:
        return any(route.path == path and method in (route.methods or []) for route in inventory_router.routes)

    assert _has("POST", "/inventory/receipts")
    assert _has("POST", "/inventory/consumptions")
    assert _has("GET", "/inventory/items/low-stock")
    assert _has("GET", "/inventory/items/{item_code}")
    assert _has("GET", "/inventory/logs")
    assert _has("GET", "/inventory/reports/valuation.csv")


def test_post_receipt_returns_created_row(client):
    response = client.post("/inventory/receipts", json=RECEIPT_BODY)

    assert response.status_code == 201
    body = response.json()
    assert body["id"] == "R003"
    assert body["total_value"] == 90000
    assert body["created_by"] == "John Supervisor"

    item = client.get("/inventory/items/cem001").json()
    assert item["current_quantity"] == 250
    assert item["total_value"] == 225000


def test_post_receipt_rejects_non_positive_quantity(client):
    response = client.post("/inventory/receipts", json={**RECEIPT_BODY, "quantity_received": 0})

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "quantity_received"]
    assert len(client.get("/inventory/receipts").json()) == 2


def _ledger_counts(client) -> tuple:
    return tuple(
        len(client.get(path).json())
        for path in ("/inventory/items", "/inventory/receipts", "/inventory/consumptions", "/inventory/logs")
    )


def _assert_rejected(client, path: str, bodies: list) -> None:
    before = _ledger_counts(client)
    for field, body in bodies:
        response = client.post(path, json=body)
        assert response.status_code == 422, body
        assert response.json()["detail"][0]["loc"] == ["body", field]
    assert _ledger_counts(client) == before


def test_post_receipt_rejects_unknown_unit(client):
    _assert_rejected(client, "/inventory/receipts", [("unit", {**RECEIPT_BODY, "unit": "crate"})])


def test_post_receipt_rejects_non_positive_rate(client):
    _assert_rejected(
        client,
        "/inventory/receipts",
        [
            ("rate_per_unit", {**RECEIPT_BODY, "rate_per_unit": 0}),
            ("rate_per_unit", {**RECEIPT_BODY, "rate_per_unit": -850}),
            ("quantity_received", {**RECEIPT_BODY, "quantity_received": -1}),
        ],
    )


def test_post_receipt_rejects_non_finite_numbers(client):
    _assert_rejected(
        client,
        "/inventory/receipts",
        [
            ("quantity_received", {**RECEIPT_BODY, "item_code": "SND001", "quantity_received": "inf"}),
            ("quantity_received", {**RECEIPT_BODY, "item_code": "SND001", "quantity_received": "nan"}),
            ("rate_per_unit", {**RECEIPT_BODY, "rate_per_unit": "inf"}),
            ("rate_per_unit", {**RECEIPT_BODY, "rate_per_unit": "-inf"}),
        ],
    )
    assert client.get("/inventory/items/SND001").status_code == 404
    assert client.get("/inventory/dashboard").json()["total_value"] == 612500


def test_post_receipt_rejects_blank_required_text(client):
    _assert_rejected(
        client,
        "/inventory/receipts",
        [
            ("supplier_name", {**RECEIPT_BODY, "supplier_name": "  "}),
            ("item_code", {**RECEIPT_BODY, "item_code": " "}),
            ("item_name", {**RECEIPT_BODY, "item_name": ""}),
            ("received_by", {**RECEIPT_BODY, "received_by": "\t"}),
        ],
    )


def test_post_consumption_rejects_invalid_payloads(client):
    _assert_rejected(
        client,
        "/inventory/consumptions",
        [
            ("quantity_used", {**CONSUMPTION_BODY, "quantity_used": 0}),
            ("quantity_used", {**CONSUMPTION_BODY, "quantity_used": -5}),
            ("quantity_used", {**CONSUMPTION_BODY, "quantity_used": "nan"}),
            ("quantity_used", {**CONSUMPTION_BODY, "quantity_used": "inf"}),
            ("used_by", {**CONSUMPTION_BODY, "used_by": ""}),
            ("item_code", {**CONSUMPTION_BODY, "item_code": " "}),
            ("purpose_activity_code", {**CONSUMPTION_BODY, "purpose_activity_code": "PAINT"}),
        ],
    )
    assert client.get("/inventory/items/STL012").json()["current_quantity"] == 2500


def test_post_consumption_updates_stock(client):
    response = client.post("/inventory/consumptions", json=CONSUMPTION_BODY)

    assert response.status_code == 201
    assert response.json()["purpose_activity_code"] == "CONSTR"
    item = client.get("/inventory/items/STL012").json()
    assert item["current_quantity"] == 2000
    logs = client.get("/inventory/logs").json()
    assert logs[0]["details"] == "Consumed 500 kg of Steel Rebar 12mm for CONSTR"


def test_post_consumption_over_stock_is_conflict(client):
    response = client.post("/inventory/consumptions", json={**CONSUMPTION_BODY, "quantity_used": 3000})

    assert response.status_code == 409
    assert response.json()["detail"] == "Only 2500 kg available"
    assert len(client.get("/inventory/consumptions").json()) == 2


def test_post_consumption_for_unknown_item_is_not_found(client):
    response = client.post("/inventory/consumptions", json={**CONSUMPTION_BODY, "item_code": "XXX999"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Stock item XXX999 not found."


def test_get_unknown_item_is_not_found(client):
    response = client.get("/inventory/items/NOPE01")

    assert response.status_code == 404


def test_low_stock_and_dashboard(client):
    low = client.get("/inventory/items/low-stock").json()
    assert [item["item_code"] for item in low] == ["RMC025"]

    dashboard = client.get("/inventory/dashboard").json()
    assert dashboard["total_items"] == 4
    assert dashboard["total_value"] == 612500
    assert dashboard["low_stock_items"] == 1

    summary = client.get("/inventory/reports/summary").json()
    assert summary["average_item_value"] == 153125
    assert summary["receipt_count"] == 2
    assert summary["consumption_count"] == 2
    assert summary["total_items"] == 4


def test_csv_export_is_attachment(client):
    response = client.get("/inventory/reports/valuation.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="stock-valuation-')
    assert disposition.endswith('.csv"')
    assert response.text.split("\n")[0] == "Item Name,Item Code,Current Quantity,Unit,Last Rate,Total Value"
    assert len(response.text.split("\n")) == 5


class _UnavailableStore(MemoryInventoryStore):
    def list_stock_items(self):
        raise OperationalError("SELECT * FROM stock_items", {}, Exception("connection refused"))


def test_storage_failure_is_service_unavailable():
    _use_store(_UnavailableStore())
    try:
        response = TestClient(app).get("/inventory/items")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json() == {"detail": "Inventory storage is unavailable."}


def test_health():
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
