"""Startup wiring and the reconnect watcher.

Usage:
    offline = OfflineSync(SyncConfig.from_env())
    handle = await offline.init_offline_sync()

    offline.enqueue(AddXp(user_id="u1", amount=10, reason="quiz", source="practice"))

    # on shutdown
    await offline.aclose()

init_offline_sync probes once, syncs if online, then starts a repeating
task that re-probes every sync_interval_seconds and syncs whenever the
backend comes back after being unreachable.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from buddy_sync.config import SyncConfig
from buddy_sync.core.receipt import emit_receipt, now_ms
from buddy_sync.offline.actions import PendingAction, SyncAction
from buddy_sync.offline.cache import CacheLayer
from buddy_sync.offline.connectivity import ConnectivityProber, ConnectivityState
from buddy_sync.offline.queue import ActionQueue, QueueResult
from buddy_sync.offline.sync import SyncEngine, SyncResult
from buddy_sync.remote.client import RemoteService
from buddy_sync.store import KeyValueStore, open_store

logger = logging.getLogger("buddy_sync.lifecycle")


class SyncHandle:
    """Handle on the running reconnect watcher."""

    def __init__(self, task: asyncio.Task):
        self._task = task

    @property
    def running(self) -> bool:
        return not self._task.done()

    def stop(self) -> None:
        """Cancel the watcher. Safe to call more than once."""
        if not self._task.done():
            self._task.cancel()

    async def wait_stopped(self) -> None:
        """Wait until the watcher task has finished."""
        await asyncio.wait({self._task})


class OfflineSync:
    """Owns the store, backend client, connectivity state, queue, engine and cache."""

    def __init__(
        self,
        config: Optional[SyncConfig] = None,
        store: Optional[KeyValueStore] = None,
        remote: Optional[RemoteService] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], int] = now_ms,
    ):
        """Initialize OfflineSync.

        Args:
            config: Settings; read from the environment when omitted
            store: Durable store; opened from config when omitted
            remote: Backend client; built from config when omitted
            sleep: Awaitable used for retry backoff
            clock: Millisecond clock for queue and cache timestamps
        """
        self.config = config or SyncConfig.from_env()
        self.store = store or open_store(self.config)
        self.remote = remote or RemoteService.from_config(self.config)
        self.state = ConnectivityState()
        self.prober = ConnectivityProber(self.remote, self.state, self.config.probe_table)
        self.queue = ActionQueue(self.store, self.config.pending_actions_key, clock)
        self.cache = CacheLayer(self.store, self.config.cache_prefix, clock)
        self.engine = SyncEngine(
            self.queue,
            self.prober,
            self.remote,
            sleep=sleep,
            backoff_base=self.config.backoff_base_ms / 1000,
        )
        self._handle: Optional[SyncHandle] = None

    async def init_offline_sync(self) -> SyncHandle:
        """Probe, sync if online, and start the reconnect watcher.

        Returns:
            Handle for stopping the watcher
        """
        if self._handle and self._handle.running:
            logger.warning("Offline sync already initialized")
            return self._handle

        await self.prober.check_connection()
        if self.state.online:
            await self.sync_pending_actions()

        task = asyncio.create_task(self._watch(), name="buddy-sync-watcher")
        self._handle = SyncHandle(task)

        emit_receipt("lifecycle_started", {
            "interval_seconds": self.config.sync_interval_seconds,
            "online": self.state.online,
        })
        return self._handle

    async def _watch(self) -> None:
        while True:
            await asyncio.sleep(self.config.sync_interval_seconds)
            try:
                await self.tick()
            except Exception as e:
                logger.exception(f"Reconnect watcher error: {e}")

    async def tick(self) -> Optional[SyncResult]:
        """One watcher step: re-probe, sync on an offline-to-online transition."""
        was_offline = not self.state.online
        await self.prober.check_connection()

        if was_offline and self.state.online:
            logger.info("Connection restored - syncing...")
            return await self.sync_pending_actions()
        return None

    async def stop(self) -> None:
        """Stop the reconnect watcher and wait for it to exit."""
        if self._handle is None:
            return
        self._handle.stop()
        await self._handle.wait_stopped()
        self._handle = None
        emit_receipt("lifecycle_stopped", {"pending_count": self.queue.pending_count()})

    async def aclose(self) -> None:
        """Stop the watcher and release the backend client and store."""
        await self.stop()
        await self.remote.aclose()
        self.store.close()

    # Passthroughs for callers that only hold the controller

    def queue_action(self, action_type: str, data: dict) -> QueueResult:
        return self.queue.queue_action(action_type, data)

    def enqueue(self, action: SyncAction) -> QueueResult:
        return self.queue.enqueue(action)

    def get_pending_actions(self) -> list[PendingAction]:
        return self.queue.get_pending_actions()

    async def sync_pending_actions(self, max_retries: Optional[int] = None) -> SyncResult:
        if max_retries is None:
            max_retries = self.config.max_retries
        return await self.engine.sync_pending_actions(max_retries)

    async def check_connection(self) -> bool:
        return await self.prober.check_connection()

    def is_online(self) -> bool:
        return self.prober.is_online()

    def cache_data(self, key: str, value: Any) -> None:
        self.cache.cache_data(key, value)

    def get_cached_data(self, key: str, max_age_ms: Optional[int] = None) -> Optional[Any]:
        if max_age_ms is None:
            max_age_ms = self.config.cache_max_age_ms
        return self.cache.get_cached_data(key, max_age_ms)

    def clear_cache(self) -> int:
        return self.cache.clear_cache()
