# backend/sitestock/__init__.py
"""
SiteStock: stock ledger backend for a construction site store.

ORM models live in sitestock/apps/*/models.py; importing this package does
not touch the database.
"""
