"""Durable store backends shared by the action queue and the cache layer."""
from buddy_sync.config import SyncConfig
from buddy_sync.store.backend import KeyValueStore, MemoryStore, StoreError
from buddy_sync.store.file import JsonFileStore
from buddy_sync.store.sqlite import SqliteStore


def open_store(config: SyncConfig) -> KeyValueStore:
    """Build the store backend named by config.store_backend.

    Raises:
        StoreError: If the backend is unknown or cannot be opened
    """
    if config.store_backend == "memory":
        return MemoryStore()
    if config.store_backend == "json":
        return JsonFileStore(config.resolved_store_path())
    if config.store_backend == "sqlite":
        return SqliteStore(config.resolved_store_path())
    raise StoreError(f"Unknown store backend: {config.store_backend}")


__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "SqliteStore",
    "StoreError",
    "open_store",
]
