from __future__ import annotations

import argparse

from sitestock.database import WriteSessionLocal, create_db_and_tables
from sitestock.apps.inventory import models
from sitestock.apps.inventory.sample_data import load_sample_data
from sitestock.apps.inventory.stores import SqlInventoryStore


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Load the demo construction-site ledger into an empty database."
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (instead of running alembic).",
    )
    args = parser.parse_args()

    if args.create_tables:
        create_db_and_tables()

    db = WriteSessionLocal()
    try:
        if db.query(models.StockItem).count():
            print("Stock items already present; nothing seeded.")
            return
        load_sample_data(SqlInventoryStore(db))
        print(f"Seeded {db.query(models.StockItem).count()} stock items.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
