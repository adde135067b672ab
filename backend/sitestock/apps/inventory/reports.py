from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Sequence

from . import models, schemas

RECENT_WINDOW = timedelta(days=7)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_low_stock(item: models.StockItem, threshold: float) -> bool:
    return item.current_quantity < threshold


def low_stock_items(items: Iterable[models.StockItem], threshold: float) -> List[models.StockItem]:
    return [item for item in items if is_low_stock(item, threshold)]


def _created_on(records: Iterable, day: date) -> int:
    return sum(1 for record in records if _as_utc(record.created_at).date() == day)


def _created_since(records: Iterable, since: datetime) -> int:
    return sum(1 for record in records if _as_utc(record.created_at) >= since)


def dashboard_summary(
    items: Sequence[models.StockItem],
    receipts: Sequence[models.StockReceipt],
    consumptions: Sequence[models.StockConsumption],
    *,
    today: date,
    threshold: float,
) -> schemas.DashboardSummary:
    return schemas.DashboardSummary(
        total_items=len(items),
        total_value=sum(item.total_value for item in items),
        low_stock_items=len(low_stock_items(items, threshold)),
        today_transactions=_created_on(receipts, today) + _created_on(consumptions, today),
    )


def report_summary(
    items: Sequence[models.StockItem],
    receipts: Sequence[models.StockReceipt],
    consumptions: Sequence[models.StockConsumption],
    *,
    now: datetime,
    threshold: float,
) -> schemas.ReportSummary:
    """
    Figures shown on the reports page.

    Average item value is rounded half-up to a whole currency unit and is
    0 for an empty ledger.
    """
    since = _as_utc(now) - RECENT_WINDOW
    stock_total = sum(item.total_value for item in items)
    average = math.floor(stock_total / len(items) + 0.5) if items else 0
    return schemas.ReportSummary(
        receipt_count=len(receipts),
        consumption_count=len(consumptions),
        total_items=len(items),
        receipts_total_value=sum(receipt.total_value for receipt in receipts),
        receipts_last_7_days=_created_since(receipts, since),
        consumptions_last_7_days=_created_since(consumptions, since),
        consumed_quantity_total=sum(consumption.quantity_used for consumption in consumptions),
        stock_total_value=stock_total,
        low_stock_items=len(low_stock_items(items, threshold)),
        average_item_value=average,
    )
