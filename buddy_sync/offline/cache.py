"""TTL cache of read data, sharing the durable store with the queue.

Entries live under CACHE_PREFIX + key as {"data", "timestamp"}. Stale
entries read as absent but stay on disk until clear_cache().
"""
import json
import logging
from typing import Any, Callable, Optional

from buddy_sync.core.constants import CACHE_MAX_AGE_MS, CACHE_PREFIX
from buddy_sync.core.receipt import emit_receipt, now_ms
from buddy_sync.store.backend import KeyValueStore, StoreError

logger = logging.getLogger("buddy_sync.cache")


class CacheLayer:
    """Timestamped cache entries in a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        prefix: str = CACHE_PREFIX,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.prefix = prefix
        self.clock = clock

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def cache_data(self, key: str, value: Any) -> None:
        """Store value with the current timestamp. Failures are logged."""
        try:
            entry = json.dumps({"data": value, "timestamp": self.clock()})
            self.store.set(self._key(key), entry)
        except (StoreError, TypeError, ValueError) as e:
            logger.error(f"Cache data error for {key}: {e}")

    def get_cached_data(self, key: str, max_age_ms: int = CACHE_MAX_AGE_MS) -> Optional[Any]:
        """Return the cached value if younger than max_age_ms, else None."""
        try:
            raw = self.store.get(self._key(key))
        except StoreError as e:
            logger.error(f"Get cached data error for {key}: {e}")
            return None

        if not raw:
            return None

        try:
            entry = json.loads(raw)
            data, timestamp = entry["data"], int(entry["timestamp"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Get cached data error for {key}: {e}")
            return None

        if self.clock() - timestamp > max_age_ms:
            return None

        return data

    def clear_cache(self) -> int:
        """Remove every entry under the cache prefix.

        Returns:
            Number of keys removed (0 on failure)
        """
        try:
            cache_keys = [k for k in self.store.list_keys() if k.startswith(self.prefix)]
            self.store.remove_many(cache_keys)
        except StoreError as e:
            logger.error(f"Clear cache error: {e}")
            return 0

        logger.info("Cache cleared")
        emit_receipt("cache_cleared", {"removed": len(cache_keys)})
        return len(cache_keys)
