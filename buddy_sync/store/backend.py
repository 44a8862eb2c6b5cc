"""Durable key-value store abstraction.

Provides an abstract interface over string keys and string values with an
in-memory implementation. The action queue and the cache layer serialize
their structured data to JSON before handing it to a store.

Backend selection:
    1. MemoryStore - tests and throwaway sessions, nothing survives exit
    2. JsonFileStore - one JSON document on disk, default
    3. SqliteStore - one kv table, for larger caches
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional


class StoreError(Exception):
    """Raised when a store read or write fails."""


class KeyValueStore(ABC):
    """Abstract base class for durable stores."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Write value under key, replacing any previous value."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Read the value under key, or None if absent."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Missing keys are ignored."""
        pass

    @abstractmethod
    def remove_many(self, keys: Iterable[str]) -> None:
        """Delete every key in keys as a single operation."""
        pass

    @abstractmethod
    def list_keys(self) -> list[str]:
        """List every key currently held."""
        pass

    def close(self) -> None:
        """Release any underlying resources."""
        pass


class MemoryStore(KeyValueStore):
    """Dict-backed store. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(f"Store values must be str, got {type(value).__name__}")
        self._data[key] = value

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def remove_many(self, keys: Iterable[str]) -> None:
        for key in list(keys):
            self._data.pop(key, None)

    def list_keys(self) -> list[str]:
        return list(self._data)
