"""create stock ledger tables

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2024-01-14 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1c3e5f7b9d2"
down_revision = None
branch_labels = None
depends_on = None


ACTIVITY_CODES = ("CONSTR", "MAINT", "SETUP", "DEMO", "INSTALL", "REPAIR", "TEST", "OTHER")


def upgrade() -> None:
    op.create_table(
        "stock_items",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("item_name", sa.String(length=255), nullable=False),
        sa.Column("item_code", sa.String(length=64), nullable=False),
        sa.Column("current_quantity", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(length=16), nullable=False),
        sa.Column("last_rate", sa.Float(), nullable=False),
        sa.Column("total_value", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("item_code", name="uq_stock_items_item_code"),
    )
    op.create_index("ix_stock_items_id", "stock_items", ["id"], unique=False)
    op.create_index("ix_stock_items_item_code", "stock_items", ["item_code"], unique=False)
    op.create_index("ix_stock_items_created_desc", "stock_items", [sa.text("created_at DESC")], unique=False)

    op.create_table(
        "stock_receipts",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("item_name", sa.String(length=255), nullable=False),
        sa.Column("item_code", sa.String(length=64), nullable=False),
        sa.Column("quantity_received", sa.Float(), nullable=False),
        sa.Column("rate_per_unit", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(length=16), nullable=False),
        sa.Column("total_value", sa.Float(), nullable=False),
        sa.Column("supplier_name", sa.String(length=255), nullable=False),
        sa.Column("delivery_date", sa.Date(), nullable=False),
        sa.Column("received_by", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_by", sa.String(length=128), nullable=True),
    )
    op.create_index("ix_stock_receipts_id", "stock_receipts", ["id"], unique=False)
    op.create_index("ix_stock_receipts_item_code", "stock_receipts", ["item_code"], unique=False)
    op.create_index("ix_stock_receipts_item_created", "stock_receipts", ["item_code", "created_at"], unique=False)
    op.create_index("ix_stock_receipts_created_desc", "stock_receipts", [sa.text("created_at DESC")], unique=False)

    op.create_table(
        "stock_consumptions",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("item_name", sa.String(length=255), nullable=False),
        sa.Column("item_code", sa.String(length=64), nullable=False),
        sa.Column("quantity_used", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(length=16), nullable=False),
        sa.Column(
            "purpose_activity_code",
            sa.Enum(*ACTIVITY_CODES, name="stock_activity_code_enum", native_enum=False),
            nullable=False,
        ),
        sa.Column("used_by", sa.String(length=128), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_by", sa.String(length=128), nullable=True),
    )
    op.create_index("ix_stock_consumptions_id", "stock_consumptions", ["id"], unique=False)
    op.create_index("ix_stock_consumptions_item_code", "stock_consumptions", ["item_code"], unique=False)
    op.create_index(
        "ix_stock_consumptions_purpose_activity_code",
        "stock_consumptions",
        ["purpose_activity_code"],
        unique=False,
    )
    op.create_index(
        "ix_stock_consumptions_item_created",
        "stock_consumptions",
        ["item_code", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_stock_consumptions_created_desc",
        "stock_consumptions",
        [sa.text("created_at DESC")],
        unique=False,
    )

    op.create_table(
        "transaction_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "type",
            sa.Enum("RECEIPT", "CONSUMPTION", name="transaction_type_enum", native_enum=False),
            nullable=False,
        ),
        sa.Column("reference_id", sa.String(length=36), nullable=False),
        sa.Column(
            "action",
            sa.Enum("CREATED", "UPDATED", "DELETED", name="transaction_action_enum", native_enum=False),
            nullable=False,
        ),
        sa.Column("performed_by", sa.String(length=128), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
    )
    op.create_index("ix_transaction_logs_id", "transaction_logs", ["id"], unique=False)
    op.create_index("ix_transaction_logs_type", "transaction_logs", ["type"], unique=False)
    op.create_index("ix_transaction_logs_reference_id", "transaction_logs", ["reference_id"], unique=False)
    op.create_index("ix_transaction_logs_timestamp", "transaction_logs", ["timestamp"], unique=False)
    op.create_index("ix_transaction_logs_reference", "transaction_logs", ["type", "reference_id"], unique=False)
    op.create_index(
        "ix_transaction_logs_timestamp_desc",
        "transaction_logs",
        [sa.text("timestamp DESC")],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_transaction_logs_timestamp_desc", table_name="transaction_logs")
    op.drop_index("ix_transaction_logs_reference", table_name="transaction_logs")
    op.drop_index("ix_transaction_logs_timestamp", table_name="transaction_logs")
    op.drop_index("ix_transaction_logs_reference_id", table_name="transaction_logs")
    op.drop_index("ix_transaction_logs_type", table_name="transaction_logs")
    op.drop_index("ix_transaction_logs_id", table_name="transaction_logs")
    op.drop_table("transaction_logs")

    op.drop_index("ix_stock_consumptions_created_desc", table_name="stock_consumptions")
    op.drop_index("ix_stock_consumptions_item_created", table_name="stock_consumptions")
    op.drop_index("ix_stock_consumptions_purpose_activity_code", table_name="stock_consumptions")
    op.drop_index("ix_stock_consumptions_item_code", table_name="stock_consumptions")
    op.drop_index("ix_stock_consumptions_id", table_name="stock_consumptions")
    op.drop_table("stock_consumptions")

    op.drop_index("ix_stock_receipts_created_desc", table_name="stock_receipts")
    op.drop_index("ix_stock_receipts_item_created", table_name="stock_receipts")
    op.drop_index("ix_stock_receipts_item_code", table_name="stock_receipts")
    op.drop_index("ix_stock_receipts_id", table_name="stock_receipts")
    op.drop_table("stock_receipts")

    op.drop_index("ix_stock_items_created_desc", table_name="stock_items")
    op.drop_index("ix_stock_items_item_code", table_name="stock_items")
    op.drop_index("ix_stock_items_id", table_name="stock_items")
    op.drop_table("stock_items")
