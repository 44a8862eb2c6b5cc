"""Event receipts for queue, sync and cache activity.

Each receipt is one JSON line on stdout:

    {"data": {...}, "payload_hash": "<sha256>:<blake3>",
     "receipt_type": "sync_complete", "ts": "2026-01-01T00:00:00.000Z"}

payload_hash covers the canonical JSON of data only, so two devices that
record the same event produce the same hash whatever their clocks say.
"""
import hashlib
import json
import time
from datetime import datetime, timezone
from typing import Literal, get_args

import blake3

ReceiptType = Literal[
    "offline_enqueue",
    "sync_skipped",
    "sync_complete",
    "sync_error",
    "connectivity_changed",
    "cache_cleared",
    "lifecycle_started",
    "lifecycle_stopped",
]

RECEIPT_TYPES: frozenset[str] = frozenset(get_args(ReceiptType))


def _canonical(data: dict) -> bytes:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=str).encode("utf-8")


def payload_hash(data: dict) -> str:
    """'sha256hex:blake3hex' over the canonical JSON of data."""
    raw = _canonical(data)
    return f"{hashlib.sha256(raw).hexdigest()}:{blake3.blake3(raw).hexdigest()}"


def emit_receipt(receipt_type: ReceiptType, data: dict) -> dict:
    """Print one receipt line and return it.

    Raises:
        ValueError: If receipt_type is not one of RECEIPT_TYPES
    """
    if receipt_type not in RECEIPT_TYPES:
        raise ValueError(f"Unknown receipt type: {receipt_type}")

    receipt = {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "payload_hash": payload_hash(data),
        "data": data,
    }
    print(json.dumps(receipt, sort_keys=True, default=str), flush=True)
    return receipt


def now_ms() -> int:
    """Current time in milliseconds since epoch."""
    return int(time.time() * 1000)
