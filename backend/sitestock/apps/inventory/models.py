from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    Index,
    String,
    Text,
    UniqueConstraint,
    desc,
)

from sitestock.database import Base
from sitestock.utils.identifiers import generate_uuid7


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UnitOfMeasurement(str, enum.Enum):
    PCS = "pcs"
    KG = "kg"
    M = "m"
    M2 = "m2"
    M3 = "m3"
    LTR = "ltr"
    BOX = "box"
    BAG = "bag"
    ROLL = "roll"
    TON = "ton"


class ActivityCode(str, enum.Enum):
    CONSTR = "CONSTR"
    MAINT = "MAINT"
    SETUP = "SETUP"
    DEMO = "DEMO"
    INSTALL = "INSTALL"
    REPAIR = "REPAIR"
    TEST = "TEST"
    OTHER = "OTHER"


class TransactionTypeEnum(str, enum.Enum):
    RECEIPT = "receipt"
    CONSUMPTION = "consumption"


class TransactionActionEnum(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class StockItem(Base):
    """
    Running quantity and valuation for one material type.

    `total_value` is derived: quantity * last rate after a receipt, prorated
    at the previous unit value after a consumption.
    """

    __tablename__ = "stock_items"
    __table_args__ = (
        UniqueConstraint("item_code", name="uq_stock_items_item_code"),
        Index("ix_stock_items_created_desc", desc("created_at")),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid7, index=True)
    item_name = Column(String(255), nullable=False)
    item_code = Column(String(64), nullable=False, index=True)
    current_quantity = Column(Float, nullable=False, default=0.0)
    unit = Column(String(16), nullable=False)
    last_rate = Column(Float, nullable=False, default=0.0)
    total_value = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<StockItem {self.item_code} qty={self.current_quantity} {self.unit}>"


class StockReceipt(Base):
    __tablename__ = "stock_receipts"
    __table_args__ = (
        Index("ix_stock_receipts_item_created", "item_code", "created_at"),
        Index("ix_stock_receipts_created_desc", desc("created_at")),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid7, index=True)
    item_name = Column(String(255), nullable=False)
    item_code = Column(String(64), nullable=False, index=True)
    quantity_received = Column(Float, nullable=False)
    rate_per_unit = Column(Float, nullable=False)
    unit = Column(String(16), nullable=False)
    total_value = Column(Float, nullable=False)
    supplier_name = Column(String(255), nullable=False)
    delivery_date = Column(Date, nullable=False)
    received_by = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_by = Column(String(128), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(128), nullable=True)


class StockConsumption(Base):
    __tablename__ = "stock_consumptions"
    __table_args__ = (
        Index("ix_stock_consumptions_item_created", "item_code", "created_at"),
        Index("ix_stock_consumptions_created_desc", desc("created_at")),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid7, index=True)
    item_name = Column(String(255), nullable=False)
    item_code = Column(String(64), nullable=False, index=True)
    quantity_used = Column(Float, nullable=False)
    unit = Column(String(16), nullable=False)
    purpose_activity_code = Column(
        SAEnum(ActivityCode, name="stock_activity_code_enum", native_enum=False),
        nullable=False,
        index=True,
    )
    used_by = Column(String(128), nullable=False)
    date = Column(Date, nullable=False)
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_by = Column(String(128), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(128), nullable=True)


class TransactionLog(Base):
    """
    Append-only audit trail: one row per recorded receipt or consumption.
    """

    __tablename__ = "transaction_logs"
    __table_args__ = (
        Index("ix_transaction_logs_reference", "type", "reference_id"),
        Index("ix_transaction_logs_timestamp_desc", desc("timestamp")),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid7, index=True)
    type = Column(
        SAEnum(TransactionTypeEnum, name="transaction_type_enum", native_enum=False),
        nullable=False,
        index=True,
    )
    reference_id = Column(String(36), nullable=False, index=True)
    action = Column(
        SAEnum(TransactionActionEnum, name="transaction_action_enum", native_enum=False),
        nullable=False,
        default=TransactionActionEnum.CREATED,
    )
    performed_by = Column(String(128), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    details = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<TransactionLog id={self.id} {self.type}:{self.reference_id} action={self.action}>"
