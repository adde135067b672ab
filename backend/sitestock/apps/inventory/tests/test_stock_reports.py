from __future__ import annotations

from datetime import date, datetime, timezone

from sitestock.apps.inventory import reports
from sitestock.apps.inventory.services import LedgerService
from sitestock.apps.inventory.stores import MemoryInventoryStore


def _ledger(store):
    return store.list_stock_items(), store.list_receipts(), store.list_consumptions()


def test_dashboard_totals_for_sample_site(memory_store):
    items, receipts, consumptions = _ledger(memory_store)

    summary = reports.dashboard_summary(items, receipts, consumptions, today=date(2024, 1, 20), threshold=50)

    assert summary.total_items == 4
    assert summary.total_value == 612500
    assert summary.low_stock_items == 1
    assert summary.today_transactions == 1


def test_dashboard_counts_receipts_and_consumptions_made_today(memory_store):
    items, receipts, consumptions = _ledger(memory_store)

    assert reports.dashboard_summary(items, receipts, consumptions, today=date(2024, 1, 21), threshold=50).today_transactions == 1
    assert reports.dashboard_summary(items, receipts, consumptions, today=date(2024, 2, 1), threshold=50).today_transactions == 0


def test_report_summary_for_sample_site(memory_store):
    items, receipts, consumptions = _ledger(memory_store)

    summary = reports.report_summary(
        items,
        receipts,
        consumptions,
        now=datetime(2024, 1, 25, 12, 0, tzinfo=timezone.utc),
        threshold=50,
    )

    assert summary.receipt_count == 2
    assert summary.consumption_count == 2
    assert summary.total_items == 4
    assert summary.receipts_total_value == 150000
    assert summary.consumed_quantity_total == 525
    assert summary.stock_total_value == 612500
    assert summary.average_item_value == 153125
    assert summary.low_stock_items == 1
    # R002 landed on 2024-01-18 at midnight, more than seven days earlier.
    assert summary.receipts_last_7_days == 1
    assert summary.consumptions_last_7_days == 2


def test_report_average_rounds_half_up(memory_store):
    items = memory_store.list_stock_items()[:2]
    items[0].total_value = 1
    items[1].total_value = 2

    summary = reports.report_summary(items, [], [], now=datetime(2024, 1, 25, tzinfo=timezone.utc), threshold=50)

    assert summary.average_item_value == 2


def test_empty_ledger_reports_zero():
    service = LedgerService(MemoryInventoryStore())

    summary = service.get_report_summary(now=datetime(2024, 1, 25, tzinfo=timezone.utc))
    dashboard = service.get_dashboard(now=datetime(2024, 1, 25, tzinfo=timezone.utc))

    assert summary.average_item_value == 0
    assert summary.receipt_count == 0
    assert summary.total_items == 0
    assert summary.stock_total_value == 0
    assert dashboard.total_items == 0
    assert dashboard.today_transactions == 0


def test_naive_timestamps_are_treated_as_utc():
    assert reports._as_utc(datetime(2024, 1, 1, 12, 0)).tzinfo == timezone.utc
