"""Pytest fixtures for buddy_sync tests."""
import json

import httpx
import pytest

from buddy_sync.config import SyncConfig
from buddy_sync.offline.lifecycle import OfflineSync
from buddy_sync.remote.client import RemoteService
from buddy_sync.store.backend import MemoryStore, StoreError

BASE_URL = "https://buddy.test"
API_KEY = "test-anon-key"


class FakeBackend:
    """In-process stand-in for the hosted backend, served via MockTransport.

    Attributes:
        online: When False every request fails with a connect error
        calls: (method, path, json body) for every request that reached it
        failures: path -> failures left (-1 means always fail)
    """

    def __init__(self):
        self.online = True
        self.calls: list[tuple[str, str, object]] = []
        self.failures: dict[str, int] = {}

    def fail(self, path: str, times: int = -1) -> None:
        self.failures["/rest/v1" + path] = times

    def posts(self) -> list[tuple[str, object]]:
        return [(path, body) for method, path, body in self.calls if method == "POST"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if not self.online:
            raise httpx.ConnectError("network unreachable", request=request)

        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, path, body))

        remaining = self.failures.get(path)
        if remaining:
            if remaining > 0:
                self.failures[path] = remaining - 1
            return httpx.Response(400, json={"message": "violates check constraint"})

        if request.method == "GET":
            return httpx.Response(200, json=[{"id": "row-1"}])
        if "/rpc/" in path:
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(201)


class SleepRecorder:
    """Awaitable sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays: list[float] = []
        self.hooks: list = []  # coroutine functions run on each call

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        for hook in self.hooks:
            await hook()


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FlakyStore(MemoryStore):
    """MemoryStore whose reads or writes can be made to fail."""

    def __init__(self):
        super().__init__()
        self.fail_reads = False
        self.fail_writes = False

    def set(self, key, value):
        if self.fail_writes:
            raise StoreError("disk full")
        super().set(key, value)

    def get(self, key):
        if self.fail_reads:
            raise StoreError("I/O error")
        return super().get(key)

    def list_keys(self):
        if self.fail_reads:
            raise StoreError("I/O error")
        return super().list_keys()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def remote(backend) -> RemoteService:
    return RemoteService(BASE_URL, API_KEY, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig(
        remote_url=BASE_URL,
        api_key=API_KEY,
        store_backend="memory",
        sync_interval_seconds=0.01,
    )


@pytest.fixture
def offline(config, store, remote, sleeper, clock) -> OfflineSync:
    """Fully wired controller over fakes."""
    return OfflineSync(config, store=store, remote=remote, sleep=sleeper, clock=clock)
