from __future__ import annotations

import os
import time
import uuid


def generate_uuid7() -> str:
    """
    Generate a UUIDv7 string (time-ordered).

    Used as the primary key for every ledger table; ids sort by creation
    time at millisecond resolution.
    """
    ts_ms = int(time.time() * 1000)
    raw = bytearray(ts_ms.to_bytes(6, "big", signed=False) + os.urandom(10))
    raw[6] = (raw[6] & 0x0F) | 0x70
    raw[8] = (raw[8] & 0x3F) | 0x80
    return str(uuid.UUID(bytes=bytes(raw)))


def sequence_code(prefix: str, number: int, width: int = 3) -> str:
    """Short human-readable ids for the in-memory store, e.g. R001, C012."""
    return f"{prefix}{str(number).zfill(width)}"


def normalize_item_code(item_code: str) -> str:
    return (item_code or "").strip().upper()
