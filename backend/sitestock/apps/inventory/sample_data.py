"""
Demo site ledger: four materials with a couple of historical movements.

Values are historical, so they are written straight through the store
primitives rather than replayed through `LedgerService`.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from . import models


def _at(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


SAMPLE_STOCK_ITEMS = [
    dict(id="I001", item_name="Portland Cement", item_code="CEM001", current_quantity=150, unit="bag",
         last_rate=850, total_value=127500, created_at=_at(2024, 1, 15), updated_at=_at(2024, 1, 20)),
    dict(id="I002", item_name="Steel Rebar 12mm", item_code="STL012", current_quantity=2500, unit="kg",
         last_rate=65, total_value=162500, created_at=_at(2024, 1, 15), updated_at=_at(2024, 1, 18)),
    dict(id="I003", item_name="Ready Mix Concrete M25", item_code="RMC025", current_quantity=45, unit="m3",
         last_rate=4500, total_value=202500, created_at=_at(2024, 1, 16), updated_at=_at(2024, 1, 19)),
    dict(id="I004", item_name="Brick (Common)", item_code="BRK001", current_quantity=15000, unit="pcs",
         last_rate=8, total_value=120000, created_at=_at(2024, 1, 14), updated_at=_at(2024, 1, 17)),
]

SAMPLE_RECEIPTS = [
    dict(id="R001", item_name="Portland Cement", item_code="CEM001", quantity_received=100, rate_per_unit=850,
         unit="bag", total_value=85000, supplier_name="ABC Cement Co.", delivery_date=date(2024, 1, 20),
         received_by="John Supervisor", created_at=_at(2024, 1, 20), created_by="John Supervisor"),
    dict(id="R002", item_name="Steel Rebar 12mm", item_code="STL012", quantity_received=1000, rate_per_unit=65,
         unit="kg", total_value=65000, supplier_name="XYZ Steel Industries", delivery_date=date(2024, 1, 18),
         received_by="Mike Foreman", created_at=_at(2024, 1, 18), created_by="Mike Foreman"),
]

SAMPLE_CONSUMPTIONS = [
    dict(id="C001", item_name="Portland Cement", item_code="CEM001", quantity_used=25, unit="bag",
         purpose_activity_code=models.ActivityCode.CONSTR, used_by="Construction Team A", date=date(2024, 1, 21),
         remarks="Foundation work - Block A", created_at=_at(2024, 1, 21), created_by="John Supervisor"),
    dict(id="C002", item_name="Steel Rebar 12mm", item_code="STL012", quantity_used=500, unit="kg",
         purpose_activity_code=models.ActivityCode.CONSTR, used_by="Construction Team B", date=date(2024, 1, 19),
         remarks="Column reinforcement", created_at=_at(2024, 1, 19), created_by="Mike Foreman"),
]

SAMPLE_LOGS = [
    dict(id="L001", type=models.TransactionTypeEnum.RECEIPT, reference_id="R001",
         action=models.TransactionActionEnum.CREATED, performed_by="John Supervisor", timestamp=_at(2024, 1, 20),
         details="Received 100 bag of Portland Cement from ABC Cement Co."),
    dict(id="L002", type=models.TransactionTypeEnum.CONSUMPTION, reference_id="C001",
         action=models.TransactionActionEnum.CREATED, performed_by="John Supervisor", timestamp=_at(2024, 1, 21),
         details="Consumed 25 bag of Portland Cement for CONSTR"),
]


def load_sample_data(store) -> None:
    """Write the demo ledger into an empty store in one unit of work."""
    with store.transaction():
        for row in SAMPLE_STOCK_ITEMS:
            store.add_stock_item(models.StockItem(**row))
        for row in SAMPLE_RECEIPTS:
            store.add_receipt(models.StockReceipt(**row))
        for row in SAMPLE_CONSUMPTIONS:
            store.add_consumption(models.StockConsumption(**row))
        for row in SAMPLE_LOGS:
            store.add_log(models.TransactionLog(**row))
