"""JSON document store on the local filesystem.

The whole store lives in one JSON object mapping key to value. Every
mutation rewrites the document to a temp file and swaps it in with
os.replace, so a reader never sees a half-written store.
Thread-safe with file locking on write.
"""
import fcntl
import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .backend import KeyValueStore, StoreError


class JsonFileStore(KeyValueStore):
    """Key-value store backed by a single JSON file.

    Attributes:
        path: Path to the JSON document
    """

    def __init__(self, path: str | Path):
        """Initialize JsonFileStore.

        Args:
            path: Path to JSON file for storage
        """
        self.path = Path(path)
        self._lock_path = self.path.with_name(self.path.name + ".lock")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create store directory {self.path.parent}: {e}") from e

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold an exclusive lock for a read-modify-write cycle."""
        try:
            lock_file = open(self._lock_path, "a")
        except OSError as e:
            raise StoreError(f"Cannot open lock file {self._lock_path}: {e}") from e
        with lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Store {self.path} is not a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=self.path.name + ".", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            # Leave no stray temp file behind
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Cannot write store {self.path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(f"Store values must be str, got {type(value).__name__}")
        with self._locked():
            data = self._read()
            data[key] = value
            self._write(data)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def remove(self, key: str) -> None:
        self.remove_many([key])

    def remove_many(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if not keys:
            return
        with self._locked():
            data = self._read()
            changed = False
            for key in keys:
                if key in data:
                    del data[key]
                    changed = True
            if changed:
                self._write(data)

    def list_keys(self) -> list[str]:
        return list(self._read())
