"""Tests for the TTL cache layer."""
import json

from buddy_sync.core.constants import CACHE_PREFIX, PENDING_ACTIONS_KEY
from buddy_sync.offline import ActionQueue, CacheLayer, UpdateStreak


class TestCacheLayer:
    """TTL semantics and namespacing."""

    def test_fresh_then_expired(self, store, clock):
        """Readable within max_age, absent once the clock passes it."""
        cache = CacheLayer(store, clock=clock)
        cache.cache_data("k", {"chapters": [1, 2]})

        assert cache.get_cached_data("k", 1000) == {"chapters": [1, 2]}

        clock.advance(1000)
        assert cache.get_cached_data("k", 1000) == {"chapters": [1, 2]}

        clock.advance(1)
        assert cache.get_cached_data("k", 1000) is None

    def test_stale_entry_not_deleted(self, store, clock):
        """Expired entries stay in the store."""
        cache = CacheLayer(store, clock=clock)
        cache.cache_data("k", "v")
        clock.advance(5000)

        assert cache.get_cached_data("k", 1000) is None
        assert store.get(f"{CACHE_PREFIX}k") is not None
        assert cache.get_cached_data("k", 10_000) == "v"

    def test_default_max_age_is_one_hour(self, store, clock):
        cache = CacheLayer(store, clock=clock)
        cache.cache_data("k", 1)
        clock.advance(3_600_000)
        assert cache.get_cached_data("k") == 1
        clock.advance(1)
        assert cache.get_cached_data("k") is None

    def test_entry_shape(self, store, clock):
        CacheLayer(store, clock=clock).cache_data("profile", {"grade": 7})
        entry = json.loads(store.get(f"{CACHE_PREFIX}profile"))
        assert entry == {"data": {"grade": 7}, "timestamp": clock.now}

    def test_missing_key(self, store):
        assert CacheLayer(store).get_cached_data("nope") is None

    def test_corrupt_entry_reads_absent(self, store):
        store.set(f"{CACHE_PREFIX}k", "garbage")
        assert CacheLayer(store).get_cached_data("k") is None

    def test_store_failures_are_swallowed(self, store):
        cache = CacheLayer(store)
        store.fail_writes = True
        cache.cache_data("k", "v")
        store.fail_writes = False
        store.fail_reads = True
        assert cache.get_cached_data("k") is None
        assert cache.clear_cache() == 0

    def test_clear_cache_only_touches_prefix(self, store, clock):
        """Cache keys go, pending actions and other keys stay."""
        cache = CacheLayer(store, clock=clock)
        queue = ActionQueue(store, clock=clock)
        queue.enqueue(UpdateStreak(user_id="u1"))
        cache.cache_data("a", 1)
        cache.cache_data("b", 2)
        store.set("@onboarding_complete", "true")

        removed = cache.clear_cache()

        assert removed == 2
        assert sorted(store.list_keys()) == sorted([PENDING_ACTIONS_KEY, "@onboarding_complete"])
        assert queue.pending_count() == 1
