from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parent
sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DATABASE_WRITE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.pop("DATABASE_READ_URL", None)
os.environ.pop("SITESTOCK_LOW_STOCK_THRESHOLD", None)

from sitestock.database import Base  # noqa: E402
from sitestock.apps.inventory import models as inventory_models  # noqa: E402
from sitestock.apps.inventory.stores import MemoryInventoryStore  # noqa: E402


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(
        bind=engine,
        tables=[
            inventory_models.StockItem.__table__,
            inventory_models.StockReceipt.__table__,
            inventory_models.StockConsumption.__table__,
            inventory_models.TransactionLog.__table__,
        ],
    )
    TestingSession = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def memory_store():
    return MemoryInventoryStore.with_sample_data()
