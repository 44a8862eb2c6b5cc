"""Replay of the pending action queue against the remote backend.

Sync process:
1. Probe connectivity, bail out with reason "offline" if unreachable
2. Load the pending list
3. Replay each action in enqueue order, one at a time
4. Retry failures with linear backoff (1s, 2s, ...) up to max_retries
5. Write back the actions that still failed, plus anything queued mid-pass

Actions are never replayed concurrently. Later actions may depend on
earlier ones (a streak update after an XP grant), so total sync time
grows with queue length and retry depth.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from buddy_sync.core.constants import (
    DEFAULT_MAX_RETRIES,
    REASON_ERROR,
    REASON_IN_PROGRESS,
    REASON_OFFLINE,
)
from buddy_sync.core.receipt import emit_receipt
from buddy_sync.offline.actions import PendingAction, UnknownActionType, decode_action
from buddy_sync.offline.connectivity import ConnectivityProber
from buddy_sync.offline.queue import ActionQueue
from buddy_sync.remote.client import RemoteService

logger = logging.getLogger("buddy_sync.sync")


@dataclass
class SyncResult:
    """Outcome of one sync pass."""
    success: bool
    synced: int = 0
    failed: int = 0
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"success": self.success, "synced": self.synced, "failed": self.failed}
        if self.reason is not None:
            result["reason"] = self.reason
        return result


class SyncEngine:
    """Drains an ActionQueue through a RemoteService."""

    def __init__(
        self,
        queue: ActionQueue,
        prober: ConnectivityProber,
        remote: RemoteService,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        backoff_base: float = 1.0,
    ):
        """Initialize SyncEngine.

        Args:
            queue: Pending action queue to drain
            prober: Connectivity prober consulted before each pass
            remote: Backend the actions are replayed against
            sleep: Awaitable used for backoff waits
            backoff_base: Seconds of backoff per failed attempt so far
        """
        self.queue = queue
        self.prober = prober
        self.remote = remote
        self.sleep = sleep
        self.backoff_base = backoff_base
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def sync_pending_actions(self, max_retries: int = DEFAULT_MAX_RETRIES) -> SyncResult:
        """Replay every pending action once connectivity allows.

        Args:
            max_retries: Attempts per action before it is requeued

        Returns:
            SyncResult with synced/failed counts, or reason on a skipped pass
        """
        if self._in_flight:
            logger.warning("Sync already in progress - skipped")
            return SyncResult(False, reason=REASON_IN_PROGRESS)

        self._in_flight = True
        try:
            return await self._run_pass(max_retries)
        except Exception as e:
            logger.exception(f"Sync error: {e}")
            emit_receipt("sync_error", {"error": str(e)})
            return SyncResult(False, reason=REASON_ERROR)
        finally:
            self._in_flight = False

    async def _run_pass(self, max_retries: int) -> SyncResult:
        online = await self.prober.check_connection()
        if not online:
            logger.info("Offline - sync skipped")
            emit_receipt("sync_skipped", {
                "reason": REASON_OFFLINE,
                "pending_count": self.queue.pending_count(),
            })
            return SyncResult(False, reason=REASON_OFFLINE)

        pending = self.queue.get_pending_actions()
        if not pending:
            return SyncResult(True)

        logger.info(f"Syncing {len(pending)} pending actions...")

        synced = 0
        failed: list[PendingAction] = []

        for action in pending:
            if await self._replay(action, max_retries):
                synced += 1
            else:
                failed.append(action)

        # Keep whatever was queued while we were awaiting the backend.
        # A failed re-read raises and leaves the stored list as it was.
        carried = self.queue.requeue(failed, {a.id for a in pending})

        logger.info(f"Synced {synced}/{len(pending)} actions")
        if failed:
            logger.warning(f"{len(failed)} actions will retry later")

        emit_receipt("sync_complete", {
            "synced": synced,
            "failed": len(failed),
            "carried_over": carried,
        })
        return SyncResult(True, synced, len(failed))

    async def _replay(self, action: PendingAction, max_retries: int) -> bool:
        """Attempt one action up to max_retries times. True on success."""
        retries = 0
        while retries < max_retries:
            try:
                typed = decode_action(action)
                await typed.send(self.remote)
                logger.info(f"Synced action: {action.type}")
                return True
            except UnknownActionType as e:
                logger.warning(f"{e} - not retried")
                return False
            except Exception as e:
                retries += 1
                logger.error(
                    f"Action sync failed (attempt {retries}/{max_retries}): {action.type}: {e}"
                )
                if retries < max_retries:
                    await self.sleep(self.backoff_base * retries)
        return False
