"""buddy_sync constants and defaults.

All magic numbers live here. No exceptions.
"""

# Durable store layout
PENDING_ACTIONS_KEY = "@buddy_pending_actions"
CACHE_PREFIX = "@cache_"
DEFAULT_STORE_BACKEND = "json"  # json, sqlite, or memory
DEFAULT_STORE_DIR = "~/.buddy_sync"
STORE_BACKENDS = ("json", "sqlite", "memory")

# Sync engine
DEFAULT_MAX_RETRIES = 3
BACKOFF_BASE_MS = 1000       # Linear: 1s, 2s, 3s ...
SYNC_INTERVAL_SECONDS = 30   # Reconnect watcher tick

# Cache layer
CACHE_MAX_AGE_MS = 3_600_000  # 1 hour

# Remote service
REMOTE_REQUEST_TIMEOUT_MS = 10_000
REMOTE_CLIENT_INFO = "buddy-learning-app/1.0.0"
PROBE_TABLE = "user_profiles"

# Sync result reasons
REASON_OFFLINE = "offline"
REASON_IN_PROGRESS = "in_progress"
REASON_ERROR = "error"
