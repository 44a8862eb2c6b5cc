"""Core subpackage for buddy_sync receipt primitives.

Exports all from receipt.py and constants.py.
"""
from .receipt import RECEIPT_TYPES, ReceiptType, emit_receipt, now_ms, payload_hash
from .constants import (
    PENDING_ACTIONS_KEY,
    CACHE_PREFIX,
    DEFAULT_MAX_RETRIES,
    BACKOFF_BASE_MS,
    SYNC_INTERVAL_SECONDS,
    CACHE_MAX_AGE_MS,
    REASON_OFFLINE,
    REASON_IN_PROGRESS,
    REASON_ERROR,
)

__all__ = [
    # Receipt primitives
    "RECEIPT_TYPES",
    "ReceiptType",
    "emit_receipt",
    "now_ms",
    "payload_hash",
    # Constants
    "PENDING_ACTIONS_KEY",
    "CACHE_PREFIX",
    "DEFAULT_MAX_RETRIES",
    "BACKOFF_BASE_MS",
    "SYNC_INTERVAL_SECONDS",
    "CACHE_MAX_AGE_MS",
    "REASON_OFFLINE",
    "REASON_IN_PROGRESS",
    "REASON_ERROR",
]
