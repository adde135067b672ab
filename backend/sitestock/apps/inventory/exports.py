"""
CSV rendering for the stock reports.

Fields are joined with "," and records with "\\n" without quoting, so values
must not contain commas or newlines. Item names, codes and supplier names
are short controlled strings on site; free-text remarks are the one column
where an embedded comma would shift the row.
"""

from __future__ import annotations

import enum
from datetime import date, datetime
from operator import attrgetter
from typing import Any, Callable, Iterable, List, Sequence, Tuple

Column = Tuple[str, Callable[[Any], Any]]


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_csv(columns: Sequence[Column], records: Iterable[Any]) -> str:
    lines = [",".join(header for header, _ in columns)]
    for record in records:
        lines.append(",".join(format_value(getter(record)) for _, getter in columns))
    return "\n".join(lines)


def _col(header: str, attr: str) -> Column:
    return header, attrgetter(attr)


RECEIPT_COLUMNS: List[Column] = [
    _col("ID", "id"),
    _col("Item Name", "item_name"),
    _col("Item Code", "item_code"),
    _col("Quantity Received", "quantity_received"),
    _col("Rate Per Unit", "rate_per_unit"),
    _col("Unit", "unit"),
    _col("Total Value", "total_value"),
    _col("Supplier Name", "supplier_name"),
    _col("Delivery Date", "delivery_date"),
    _col("Received By", "received_by"),
    _col("Created At", "created_at"),
]

CONSUMPTION_COLUMNS: List[Column] = [
    _col("ID", "id"),
    _col("Item Name", "item_name"),
    _col("Item Code", "item_code"),
    _col("Quantity Used", "quantity_used"),
    _col("Unit", "unit"),
    _col("Purpose/Activity Code", "purpose_activity_code"),
    _col("Used By", "used_by"),
    _col("Date", "date"),
    _col("Remarks", "remarks"),
    _col("Created At", "created_at"),
]

STOCK_VALUATION_COLUMNS: List[Column] = [
    _col("Item Name", "item_name"),
    _col("Item Code", "item_code"),
    _col("Current Quantity", "current_quantity"),
    _col("Unit", "unit"),
    _col("Last Rate", "last_rate"),
    _col("Total Value", "total_value"),
]
