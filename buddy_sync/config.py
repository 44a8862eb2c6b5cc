"""Offline sync configuration.

All settings can be overridden via environment variables with the
BUDDY_SYNC_ prefix.
"""
import os
from dataclasses import dataclass
from pathlib import Path

from .core.constants import (
    BACKOFF_BASE_MS,
    CACHE_MAX_AGE_MS,
    CACHE_PREFIX,
    DEFAULT_MAX_RETRIES,
    DEFAULT_STORE_BACKEND,
    DEFAULT_STORE_DIR,
    PENDING_ACTIONS_KEY,
    PROBE_TABLE,
    REMOTE_CLIENT_INFO,
    REMOTE_REQUEST_TIMEOUT_MS,
    STORE_BACKENDS,
    SYNC_INTERVAL_SECONDS,
)


class ConfigError(Exception):
    """Raised when configuration fails validation."""


@dataclass
class SyncConfig:
    """Offline sync configuration."""

    # Remote service
    remote_url: str = ""
    api_key: str = ""
    client_info: str = REMOTE_CLIENT_INFO
    request_timeout_ms: int = REMOTE_REQUEST_TIMEOUT_MS
    probe_table: str = PROBE_TABLE

    # Durable store
    store_backend: str = DEFAULT_STORE_BACKEND
    store_path: str = ""  # Empty means <store dir>/store.<ext>
    pending_actions_key: str = PENDING_ACTIONS_KEY
    cache_prefix: str = CACHE_PREFIX

    # Sync engine
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_base_ms: int = BACKOFF_BASE_MS
    sync_interval_seconds: float = SYNC_INTERVAL_SECONDS

    # Cache layer
    cache_max_age_ms: int = CACHE_MAX_AGE_MS

    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Load configuration from environment variables."""
        config = cls()

        # Remote service
        if "BUDDY_SYNC_REMOTE_URL" in os.environ:
            config.remote_url = os.environ["BUDDY_SYNC_REMOTE_URL"]
        if "BUDDY_SYNC_API_KEY" in os.environ:
            config.api_key = os.environ["BUDDY_SYNC_API_KEY"]
        if "BUDDY_SYNC_REQUEST_TIMEOUT_MS" in os.environ:
            config.request_timeout_ms = int(os.environ["BUDDY_SYNC_REQUEST_TIMEOUT_MS"])
        if "BUDDY_SYNC_PROBE_TABLE" in os.environ:
            config.probe_table = os.environ["BUDDY_SYNC_PROBE_TABLE"]

        # Durable store
        if "BUDDY_SYNC_STORE_BACKEND" in os.environ:
            config.store_backend = os.environ["BUDDY_SYNC_STORE_BACKEND"].lower()
        if "BUDDY_SYNC_STORE_PATH" in os.environ:
            config.store_path = os.environ["BUDDY_SYNC_STORE_PATH"]

        # Sync engine
        if "BUDDY_SYNC_MAX_RETRIES" in os.environ:
            config.max_retries = int(os.environ["BUDDY_SYNC_MAX_RETRIES"])
        if "BUDDY_SYNC_BACKOFF_BASE_MS" in os.environ:
            config.backoff_base_ms = int(os.environ["BUDDY_SYNC_BACKOFF_BASE_MS"])
        if "BUDDY_SYNC_INTERVAL_SECONDS" in os.environ:
            config.sync_interval_seconds = float(os.environ["BUDDY_SYNC_INTERVAL_SECONDS"])

        # Cache layer
        if "BUDDY_SYNC_CACHE_MAX_AGE_MS" in os.environ:
            config.cache_max_age_ms = int(os.environ["BUDDY_SYNC_CACHE_MAX_AGE_MS"])

        return config

    def resolved_store_path(self) -> Path:
        """Path of the durable store file for file-backed backends."""
        if self.store_path:
            return Path(self.store_path).expanduser()
        ext = "db" if self.store_backend == "sqlite" else "json"
        return Path(DEFAULT_STORE_DIR).expanduser() / f"store.{ext}"

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not self.remote_url:
            errors.append("remote_url is not configured")
        elif not self.remote_url.startswith(("http://", "https://")):
            errors.append(f"remote_url must be http(s), got {self.remote_url}")

        if not self.api_key:
            errors.append("api_key is not configured")

        if self.store_backend not in STORE_BACKENDS:
            errors.append(f"store_backend must be one of {', '.join(STORE_BACKENDS)}, got {self.store_backend}")

        if self.max_retries < 1:
            errors.append(f"max_retries must be >= 1, got {self.max_retries}")

        if self.backoff_base_ms < 0:
            errors.append(f"backoff_base_ms must be >= 0, got {self.backoff_base_ms}")

        if self.sync_interval_seconds <= 0:
            errors.append(f"sync_interval_seconds must be > 0, got {self.sync_interval_seconds}")

        if self.request_timeout_ms < 1:
            errors.append(f"request_timeout_ms must be >= 1, got {self.request_timeout_ms}")

        if self.cache_max_age_ms < 0:
            errors.append(f"cache_max_age_ms must be >= 0, got {self.cache_max_age_ms}")

        return errors

    def require_valid(self) -> "SyncConfig":
        """Raise ConfigError listing every problem, or return self."""
        errors = self.validate()
        if errors:
            raise ConfigError("; ".join(errors))
        return self
