"""
Inventory module.

Handles the site stock ledger: receipts, consumptions, running item
valuation, the transaction log and the CSV reports built on them.
"""

from .router import router  # noqa: F401
from . import models  # noqa: F401
