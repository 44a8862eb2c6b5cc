"""Offline mode for the learning app client.

Designed for learners on patchy mobile connections:
- Writes made while disconnected are queued durably on the device
- The queue replays in order once the backend is reachable again
- Read data is cached locally with a TTL

Usage:
    from buddy_sync.offline import OfflineSync, AddXp

    offline = OfflineSync(config)
    handle = await offline.init_offline_sync()

    # Queue a write while offline
    offline.enqueue(AddXp(user_id="u1", amount=10, reason="quiz", source="practice"))

    # Force a pass (normally the reconnect watcher does this)
    result = await offline.sync_pending_actions()
"""
from buddy_sync.offline.actions import (
    ACTION_TYPES,
    AddXp,
    PendingAction,
    SaveAssessment,
    SaveLearningSession,
    SaveXpTransaction,
    SyncAction,
    UnknownActionType,
    UpdateStreak,
    decode_action,
)
from buddy_sync.offline.cache import CacheLayer
from buddy_sync.offline.connectivity import ConnectivityProber, ConnectivityState
from buddy_sync.offline.lifecycle import OfflineSync, SyncHandle
from buddy_sync.offline.queue import ActionQueue, QueueResult
from buddy_sync.offline.sync import SyncEngine, SyncResult

__all__ = [
    # Actions
    "ACTION_TYPES",
    "AddXp",
    "PendingAction",
    "SaveAssessment",
    "SaveLearningSession",
    "SaveXpTransaction",
    "SyncAction",
    "UnknownActionType",
    "UpdateStreak",
    "decode_action",
    # Queue and cache
    "ActionQueue",
    "QueueResult",
    "CacheLayer",
    # Connectivity
    "ConnectivityProber",
    "ConnectivityState",
    # Sync
    "SyncEngine",
    "SyncResult",
    # Lifecycle
    "OfflineSync",
    "SyncHandle",
]
