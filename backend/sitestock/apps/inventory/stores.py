"""
Persistence backends for the stock ledger.

Both backends expose the same primitives; `LedgerService` holds the
bookkeeping rules and never talks to a session or a dict directly.

- MemoryInventoryStore: dict/list backed, used for demos and tests.
- SqlInventoryStore: SQLAlchemy session, the production backend.
"""

from __future__ import annotations

import abc
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sqlalchemy.orm import Session

from sitestock.utils.identifiers import normalize_item_code, sequence_code
from . import models


class InventoryStore(abc.ABC):
    """Storage primitives for stock items, receipts, consumptions and logs."""

    @abc.abstractmethod
    @contextmanager
    def transaction(self) -> Iterator["InventoryStore"]:
        """
        Unit of work around one receipt or consumption.

        Every write made inside the block is kept only if the block exits
        cleanly; an exception discards all of them and is re-raised.
        """

    @abc.abstractmethod
    def get_stock_item(self, item_code: str) -> Optional[models.StockItem]:
        ...

    @abc.abstractmethod
    def add_stock_item(self, item: models.StockItem) -> models.StockItem:
        ...

    @abc.abstractmethod
    def save_stock_item(self, item: models.StockItem) -> models.StockItem:
        ...

    @abc.abstractmethod
    def add_receipt(self, receipt: models.StockReceipt) -> models.StockReceipt:
        ...

    @abc.abstractmethod
    def add_consumption(self, consumption: models.StockConsumption) -> models.StockConsumption:
        ...

    @abc.abstractmethod
    def add_log(self, log: models.TransactionLog) -> models.TransactionLog:
        ...

    @abc.abstractmethod
    def list_stock_items(self) -> List[models.StockItem]:
        ...

    @abc.abstractmethod
    def list_receipts(self) -> List[models.StockReceipt]:
        ...

    @abc.abstractmethod
    def list_consumptions(self) -> List[models.StockConsumption]:
        ...

    @abc.abstractmethod
    def list_logs(self) -> List[models.TransactionLog]:
        ...


_ITEM_FIELDS = tuple(models.StockItem.__table__.columns.keys())


def _detached(item: models.StockItem) -> models.StockItem:
    return models.StockItem(**{field: getattr(item, field) for field in _ITEM_FIELDS})


def _newest_first(records: list, attr: str) -> list:
    # Reversing first keeps later inserts ahead of earlier ones on equal timestamps.
    return sorted(reversed(records), key=lambda record: getattr(record, attr), reverse=True)


class MemoryInventoryStore(InventoryStore):
    """
    Stock items go in and come out as copies. Changing a returned item does
    nothing until it is passed to `save_stock_item`, and since a transaction
    holds the lock, other threads only read committed values.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._items: Dict[str, models.StockItem] = {}
        self._receipts: List[models.StockReceipt] = []
        self._consumptions: List[models.StockConsumption] = []
        self._logs: List[models.TransactionLog] = []

    @classmethod
    def with_sample_data(cls) -> "MemoryInventoryStore":
        from .sample_data import load_sample_data

        store = cls()
        load_sample_data(store)
        return store

    @contextmanager
    def transaction(self) -> Iterator["MemoryInventoryStore"]:
        with self._lock:
            snapshot = self._snapshot()
            try:
                yield self
            except Exception:
                self._restore(snapshot)
                raise

    def _snapshot(self) -> dict:
        return {
            "items": {
                code: {field: getattr(item, field) for field in _ITEM_FIELDS}
                for code, item in self._items.items()
            },
            "receipts": len(self._receipts),
            "consumptions": len(self._consumptions),
            "logs": len(self._logs),
        }

    def _restore(self, snapshot: dict) -> None:
        saved_items = snapshot["items"]
        for code in list(self._items):
            if code not in saved_items:
                del self._items[code]
        for code, state in saved_items.items():
            item = self._items[code]
            for field, value in state.items():
                setattr(item, field, value)
        del self._receipts[snapshot["receipts"]:]
        del self._consumptions[snapshot["consumptions"]:]
        del self._logs[snapshot["logs"]:]

    def get_stock_item(self, item_code: str) -> Optional[models.StockItem]:
        with self._lock:
            item = self._items.get(normalize_item_code(item_code))
            return _detached(item) if item is not None else None

    def add_stock_item(self, item: models.StockItem) -> models.StockItem:
        with self._lock:
            if item.item_code in self._items:
                raise ValueError(f"Stock item {item.item_code} already exists.")
            if item.id is None:
                item.id = sequence_code("I", len(self._items) + 1)
            self._items[item.item_code] = _detached(item)
            return item

    def save_stock_item(self, item: models.StockItem) -> models.StockItem:
        with self._lock:
            self._items[item.item_code] = _detached(item)
            return item

    def add_receipt(self, receipt: models.StockReceipt) -> models.StockReceipt:
        with self._lock:
            if receipt.id is None:
                receipt.id = sequence_code("R", len(self._receipts) + 1)
            self._receipts.append(receipt)
            return receipt

    def add_consumption(self, consumption: models.StockConsumption) -> models.StockConsumption:
        with self._lock:
            if consumption.id is None:
                consumption.id = sequence_code("C", len(self._consumptions) + 1)
            self._consumptions.append(consumption)
            return consumption

    def add_log(self, log: models.TransactionLog) -> models.TransactionLog:
        with self._lock:
            if log.id is None:
                log.id = sequence_code("L", len(self._logs) + 1)
            self._logs.append(log)
            return log

    def list_stock_items(self) -> List[models.StockItem]:
        with self._lock:
            return _newest_first([_detached(item) for item in self._items.values()], "created_at")

    def list_receipts(self) -> List[models.StockReceipt]:
        with self._lock:
            return _newest_first(self._receipts, "created_at")

    def list_consumptions(self) -> List[models.StockConsumption]:
        with self._lock:
            return _newest_first(self._consumptions, "created_at")

    def list_logs(self) -> List[models.TransactionLog]:
        with self._lock:
            return _newest_first(self._logs, "timestamp")


class SqlInventoryStore(InventoryStore):
    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator["SqlInventoryStore"]:
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get_stock_item(self, item_code: str) -> Optional[models.StockItem]:
        return (
            self.db.query(models.StockItem)
            .filter(models.StockItem.item_code == normalize_item_code(item_code))
            .first()
        )

    def _add(self, record):
        self.db.add(record)
        self.db.flush()
        return record

    def add_stock_item(self, item: models.StockItem) -> models.StockItem:
        return self._add(item)

    def save_stock_item(self, item: models.StockItem) -> models.StockItem:
        return self._add(item)

    def add_receipt(self, receipt: models.StockReceipt) -> models.StockReceipt:
        return self._add(receipt)

    def add_consumption(self, consumption: models.StockConsumption) -> models.StockConsumption:
        return self._add(consumption)

    def add_log(self, log: models.TransactionLog) -> models.TransactionLog:
        return self._add(log)

    def list_stock_items(self) -> List[models.StockItem]:
        return (
            self.db.query(models.StockItem)
            .order_by(models.StockItem.created_at.desc(), models.StockItem.id.desc())
            .all()
        )

    def list_receipts(self) -> List[models.StockReceipt]:
        return (
            self.db.query(models.StockReceipt)
            .order_by(models.StockReceipt.created_at.desc(), models.StockReceipt.id.desc())
            .all()
        )

    def list_consumptions(self) -> List[models.StockConsumption]:
        return (
            self.db.query(models.StockConsumption)
            .order_by(models.StockConsumption.created_at.desc(), models.StockConsumption.id.desc())
            .all()
        )

    def list_logs(self) -> List[models.TransactionLog]:
        return (
            self.db.query(models.TransactionLog)
            .order_by(models.TransactionLog.timestamp.desc(), models.TransactionLog.id.desc())
            .all()
        )
