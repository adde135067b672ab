from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from sitestock.utils.identifiers import normalize_item_code
from . import exports, models, reports, schemas
from .stores import InventoryStore

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = float(os.getenv("SITESTOCK_LOW_STOCK_THRESHOLD", "50"))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConsumptionRejection(str, enum.Enum):
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"


@dataclass(frozen=True)
class ConsumptionOutcome:
    """
    Result of a consumption request.

    A rejection is an expected business outcome, not an error: nothing was
    written and the caller decides how to present it.
    """

    consumption: Optional[models.StockConsumption] = None
    rejection: Optional[ConsumptionRejection] = None
    item_code: Optional[str] = None
    available_quantity: Optional[float] = None
    unit: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.consumption is not None

    @property
    def message(self) -> Optional[str]:
        if self.rejection == ConsumptionRejection.ITEM_NOT_FOUND:
            return f"Stock item {self.item_code} not found."
        if self.rejection == ConsumptionRejection.INSUFFICIENT_STOCK:
            return f"Only {exports.format_value(self.available_quantity)} {self.unit} available"
        return None


class LedgerService:
    """
    Receipt/consumption bookkeeping over an `InventoryStore`.

    Each mutation writes the movement row, updates the stock item and
    appends one transaction log entry inside a single store transaction.
    """

    def __init__(self, store: InventoryStore, *, low_stock_threshold: float = LOW_STOCK_THRESHOLD) -> None:
        self.store = store
        self.low_stock_threshold = low_stock_threshold

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_receipt(
        self,
        payload: schemas.StockReceiptCreate,
        *,
        now: Optional[datetime] = None,
    ) -> models.StockReceipt:
        now = now or _utcnow()
        item_code = normalize_item_code(payload.item_code)
        unit = models.UnitOfMeasurement(payload.unit).value
        actor = payload.created_by or payload.received_by

        with self.store.transaction():
            receipt = self.store.add_receipt(
                models.StockReceipt(
                    item_name=payload.item_name,
                    item_code=item_code,
                    quantity_received=payload.quantity_received,
                    rate_per_unit=payload.rate_per_unit,
                    unit=unit,
                    total_value=payload.quantity_received * payload.rate_per_unit,
                    supplier_name=payload.supplier_name,
                    delivery_date=payload.delivery_date,
                    received_by=payload.received_by,
                    created_at=now,
                    created_by=actor,
                )
            )

            item = self.store.get_stock_item(item_code)
            if item is None:
                item = self.store.add_stock_item(
                    models.StockItem(
                        item_name=payload.item_name,
                        item_code=item_code,
                        current_quantity=payload.quantity_received,
                        unit=unit,
                        last_rate=payload.rate_per_unit,
                        total_value=payload.quantity_received * payload.rate_per_unit,
                        created_at=now,
                        updated_at=now,
                    )
                )
            else:
                new_quantity = item.current_quantity + payload.quantity_received
                item.current_quantity = new_quantity
                item.last_rate = payload.rate_per_unit
                item.total_value = new_quantity * payload.rate_per_unit
                item.updated_at = now
                self.store.save_stock_item(item)

            self._append_log(
                type_=models.TransactionTypeEnum.RECEIPT,
                reference_id=receipt.id,
                performed_by=actor,
                details=(
                    f"Received {exports.format_value(payload.quantity_received)} {unit} "
                    f"of {payload.item_name} from {payload.supplier_name}"
                ),
                now=now,
            )

        logger.info(
            "Stock receipt recorded",
            extra={
                "receipt_id": receipt.id,
                "item_code": item_code,
                "quantity": payload.quantity_received,
                "current_quantity": item.current_quantity,
            },
        )
        return receipt

    def add_consumption(
        self,
        payload: schemas.StockConsumptionCreate,
        *,
        now: Optional[datetime] = None,
    ) -> ConsumptionOutcome:
        now = now or _utcnow()
        item_code = normalize_item_code(payload.item_code)
        actor = payload.created_by or payload.used_by
        activity = models.ActivityCode(payload.purpose_activity_code)

        with self.store.transaction():
            item = self.store.get_stock_item(item_code)
            if item is None:
                outcome = ConsumptionOutcome(
                    rejection=ConsumptionRejection.ITEM_NOT_FOUND,
                    item_code=item_code,
                )
                logger.warning("Stock consumption rejected", extra={"item_code": item_code, "reason": outcome.rejection.value})
                return outcome
            if item.current_quantity < payload.quantity_used:
                outcome = ConsumptionOutcome(
                    rejection=ConsumptionRejection.INSUFFICIENT_STOCK,
                    item_code=item_code,
                    available_quantity=item.current_quantity,
                    unit=item.unit,
                )
                logger.warning(
                    "Stock consumption rejected",
                    extra={
                        "item_code": item_code,
                        "reason": outcome.rejection.value,
                        "requested": payload.quantity_used,
                        "available": item.current_quantity,
                    },
                )
                return outcome

            consumption = self.store.add_consumption(
                models.StockConsumption(
                    item_name=item.item_name,
                    item_code=item_code,
                    quantity_used=payload.quantity_used,
                    unit=item.unit,
                    purpose_activity_code=activity,
                    used_by=payload.used_by,
                    date=payload.date,
                    remarks=payload.remarks,
                    created_at=now,
                    created_by=actor,
                )
            )

            old_quantity = item.current_quantity
            unit_value = item.total_value / old_quantity
            new_quantity = old_quantity - payload.quantity_used
            item.current_quantity = new_quantity
            item.total_value = new_quantity * unit_value
            item.updated_at = now
            self.store.save_stock_item(item)

            self._append_log(
                type_=models.TransactionTypeEnum.CONSUMPTION,
                reference_id=consumption.id,
                performed_by=actor,
                details=(
                    f"Consumed {exports.format_value(payload.quantity_used)} {item.unit} "
                    f"of {item.item_name} for {activity.value}"
                ),
                now=now,
            )

        logger.info(
            "Stock consumption recorded",
            extra={
                "consumption_id": consumption.id,
                "item_code": item_code,
                "quantity": payload.quantity_used,
                "current_quantity": new_quantity,
            },
        )
        return ConsumptionOutcome(consumption=consumption, item_code=item_code)

    def _append_log(
        self,
        *,
        type_: models.TransactionTypeEnum,
        reference_id: str,
        performed_by: Optional[str],
        details: str,
        now: datetime,
    ) -> models.TransactionLog:
        return self.store.add_log(
            models.TransactionLog(
                type=type_,
                reference_id=reference_id,
                action=models.TransactionActionEnum.CREATED,
                performed_by=performed_by or "system",
                timestamp=now,
                details=details,
            )
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_stock_items(self) -> List[models.StockItem]:
        return self.store.list_stock_items()

    def get_stock_item(self, item_code: str) -> Optional[models.StockItem]:
        return self.store.get_stock_item(item_code)

    def get_low_stock_items(self) -> List[models.StockItem]:
        return reports.low_stock_items(self.get_stock_items(), self.low_stock_threshold)

    def get_receipts(self) -> List[models.StockReceipt]:
        return self.store.list_receipts()

    def get_consumptions(self) -> List[models.StockConsumption]:
        return self.store.list_consumptions()

    def get_logs(self) -> List[models.TransactionLog]:
        return self.store.list_logs()

    def get_dashboard(self, *, now: Optional[datetime] = None) -> schemas.DashboardSummary:
        now = now or _utcnow()
        return reports.dashboard_summary(
            self.get_stock_items(),
            self.get_receipts(),
            self.get_consumptions(),
            today=now.date(),
            threshold=self.low_stock_threshold,
        )

    def get_report_summary(self, *, now: Optional[datetime] = None) -> schemas.ReportSummary:
        return reports.report_summary(
            self.get_stock_items(),
            self.get_receipts(),
            self.get_consumptions(),
            now=now or _utcnow(),
            threshold=self.low_stock_threshold,
        )

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------

    def export_receipts_csv(self) -> str:
        return exports.render_csv(exports.RECEIPT_COLUMNS, self.get_receipts())

    def export_consumptions_csv(self) -> str:
        return exports.render_csv(exports.CONSUMPTION_COLUMNS, self.get_consumptions())

    def export_stock_valuation_csv(self) -> str:
        return exports.render_csv(exports.STOCK_VALUATION_COLUMNS, self.get_stock_items())
