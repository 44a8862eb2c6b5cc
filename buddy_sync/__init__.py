"""
buddy-sync - Offline action queue and sync engine for the Buddy learning app

Writes made without a connection are queued on the device and replayed,
in order, once the backend answers again.
"""

__version__ = "1.0.0"

from buddy_sync.config import ConfigError, SyncConfig
from buddy_sync.offline import (
    AddXp,
    OfflineSync,
    SaveAssessment,
    SaveLearningSession,
    SaveXpTransaction,
    SyncResult,
    UpdateStreak,
)

__all__ = [
    "ConfigError",
    "SyncConfig",
    "OfflineSync",
    "SyncResult",
    "AddXp",
    "SaveAssessment",
    "SaveLearningSession",
    "SaveXpTransaction",
    "UpdateStreak",
    "__version__",
]
