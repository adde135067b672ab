from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from . import models


def _strip_required(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("field is required")
    return value


class StockReceiptCreate(BaseModel):
    item_name: str
    item_code: str
    quantity_received: float = Field(..., gt=0, allow_inf_nan=False)
    rate_per_unit: float = Field(..., gt=0, allow_inf_nan=False)
    unit: models.UnitOfMeasurement
    supplier_name: str
    delivery_date: dt.date
    received_by: str
    created_by: Optional[str] = None

    @field_validator("item_name", "item_code", "supplier_name", "received_by")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("created_by")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class StockConsumptionCreate(BaseModel):
    item_code: str
    quantity_used: float = Field(..., gt=0, allow_inf_nan=False)
    purpose_activity_code: models.ActivityCode
    used_by: str
    date: dt.date
    remarks: Optional[str] = None
    created_by: Optional[str] = None

    @field_validator("item_code", "used_by")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("remarks", "created_by")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class StockItemRead(BaseModel):
    id: str
    item_name: str
    item_code: str
    current_quantity: float
    unit: str
    last_rate: float
    total_value: float
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class StockReceiptRead(BaseModel):
    id: str
    item_name: str
    item_code: str
    quantity_received: float
    rate_per_unit: float
    unit: str
    total_value: float
    supplier_name: str
    delivery_date: dt.date
    received_by: str
    created_at: dt.datetime
    created_by: str
    updated_at: Optional[dt.datetime] = None
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True


class StockConsumptionRead(BaseModel):
    id: str
    item_name: str
    item_code: str
    quantity_used: float
    unit: str
    purpose_activity_code: models.ActivityCode
    used_by: str
    date: dt.date
    remarks: Optional[str] = None
    created_at: dt.datetime
    created_by: str
    updated_at: Optional[dt.datetime] = None
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True


class TransactionLogRead(BaseModel):
    id: str
    type: models.TransactionTypeEnum
    reference_id: str
    action: models.TransactionActionEnum
    performed_by: str
    timestamp: dt.datetime
    details: str

    class Config:
        from_attributes = True


class DashboardSummary(BaseModel):
    total_items: int
    total_value: float
    low_stock_items: int
    today_transactions: int


class ReportSummary(BaseModel):
    receipt_count: int
    consumption_count: int
    total_items: int
    receipts_total_value: float
    receipts_last_7_days: int
    consumptions_last_7_days: int
    consumed_quantity_total: float
    stock_total_value: float
    low_stock_items: int
    average_item_value: float
