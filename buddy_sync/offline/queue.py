"""Durable queue of client mutations made while offline.

The whole pending list is stored as one JSON array under a single store
key and rewritten as a whole on every change, so the persisted list is
never half-written. Every write starts from a fresh read of the raw list;
if that read fails nothing is written, and items that do not parse as a
PendingAction are carried along untouched rather than dropped.
"""
import json
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from buddy_sync.core.constants import PENDING_ACTIONS_KEY
from buddy_sync.core.receipt import emit_receipt, now_ms
from buddy_sync.offline.actions import (
    ACTION_TYPES,
    PendingAction,
    SyncAction,
    new_action_id,
)
from buddy_sync.store.backend import KeyValueStore, StoreError

logger = logging.getLogger("buddy_sync.queue")


@dataclass
class QueueResult:
    """Outcome of an enqueue."""
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"success": self.success}
        if self.error is not None:
            result["error"] = self.error
        return result


class ActionQueue:
    """FIFO list of PendingAction persisted through a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = PENDING_ACTIONS_KEY,
        clock: Callable[[], int] = now_ms,
    ):
        """Initialize ActionQueue.

        Args:
            store: Durable store shared with the cache layer
            key: Store key holding the JSON list
            clock: Millisecond clock used for timestamps and ids
        """
        self.store = store
        self.key = key
        self.clock = clock

    def queue_action(self, action_type: str, data: dict) -> QueueResult:
        """Append an action to the persisted list.

        Args:
            action_type: One of ACTION_TYPES
            data: Payload forwarded to the remote operation on replay

        Returns:
            QueueResult; on a failed read or write the action is lost and
            the stored list is left as it was
        """
        if action_type not in ACTION_TYPES:
            logger.error(f"Refusing to queue unknown action type: {action_type}")
            return QueueResult(False, f"Unknown action type: {action_type}")

        timestamp = self.clock()
        action = PendingAction(
            id=new_action_id(timestamp),
            type=action_type,
            data=data,
            timestamp=timestamp,
        )

        # Read and write with no await between them
        try:
            items = self._load()
            items.append(action.to_dict())
            self._write(items)
        except (StoreError, TypeError, ValueError) as e:
            logger.error(f"Queue action error for {action_type}: {e}")
            return QueueResult(False, str(e))

        logger.info(f"Action queued for offline sync: {action_type}")
        emit_receipt("offline_enqueue", {
            "action_id": action.id,
            "action_type": action_type,
            "queue_size": len(items),
        })
        return QueueResult(True)

    def enqueue(self, action: SyncAction) -> QueueResult:
        """Queue a typed action."""
        return self.queue_action(action.action_type, action.to_data())

    def get_pending_actions(self) -> list[PendingAction]:
        """Read the persisted list in enqueue order.

        Items that fail to parse are skipped with a warning; they stay in
        the store.

        Returns:
            Pending actions, or [] if absent, unreadable, or not a list
        """
        try:
            items = self._load()
        except (StoreError, ValueError) as e:
            logger.error(f"Get pending actions error: {e}")
            return []

        actions = []
        for item in items:
            try:
                actions.append(PendingAction.from_dict(item))
            except ValueError as e:
                logger.warning(f"Skipping unreadable pending action: {e}")
        return actions

    def pending_count(self) -> int:
        """Number of actions awaiting replay."""
        return len(self.get_pending_actions())

    def replace_pending(self, actions: list[PendingAction]) -> None:
        """Overwrite the whole persisted list in one store write.

        Raises:
            StoreError: If the write fails
        """
        self._write([a.to_dict() for a in actions])

    def requeue(self, failed: list[PendingAction], replayed_ids: set[str]) -> int:
        """Write back after a sync pass.

        The new list is the failed actions followed by every stored item
        whose id is not in replayed_ids: actions queued during the pass and
        items that never parsed.

        Returns:
            Number of stored items carried over behind the failed ones

        Raises:
            StoreError: If the re-read or the write fails
            ValueError: If the stored list is no longer a JSON array
        """
        carried = [
            item for item in self._load()
            if not (isinstance(item, dict) and item.get("id") in replayed_ids)
        ]
        self._write([a.to_dict() for a in failed] + carried)
        return len(carried)

    def _load(self) -> list:
        """Raw stored items; [] when the key is absent.

        Raises:
            StoreError: If the store read fails
            ValueError: If the stored value is not a JSON array
        """
        raw = self.store.get(self.key)
        if not raw:
            return []
        items = json.loads(raw)
        if not isinstance(items, list):
            raise ValueError("pending list is not a JSON array")
        return items

    def _write(self, items: list) -> None:
        self.store.set(self.key, json.dumps(items))
