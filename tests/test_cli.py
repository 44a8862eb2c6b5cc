"""Tests for the buddy-sync CLI."""
import json

import httpx
import pytest
from click.testing import CliRunner

from buddy_sync.config import SyncConfig
from buddy_sync.store.backend import MemoryStore
from buddy_sync_cli.main import cli


class ClosingStore(MemoryStore):
    def __init__(self):
        super().__init__()
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def cli_config(tmp_path) -> SyncConfig:
    return SyncConfig(
        remote_url="https://buddy.test",
        api_key="k",
        store_backend="json",
        store_path=str(tmp_path / "store.json"),
    )


@pytest.fixture
def invoke(cli_config, backend):
    """Run the CLI against a temp store and the fake backend."""
    runner = CliRunner()

    def _invoke(*args):
        obj = {"config": cli_config, "transport": httpx.MockTransport(backend.handler)}
        return runner.invoke(cli, list(args), obj=obj)

    return _invoke


class TestOfflineCommands:
    """offline group."""

    def test_enqueue_then_list(self, invoke):
        result = invoke("offline", "enqueue", "update_streak", '{"user_id": "u1"}')
        assert result.exit_code == 0, result.output
        assert "Queued update_streak" in result.output

        result = invoke("offline", "queue")
        assert result.exit_code == 0
        assert "Showing 1 of 1 pending actions" in result.output
        assert "update_streak" in result.output

    def test_empty_queue(self, invoke):
        result = invoke("offline", "queue")
        assert "Queue is empty" in result.output

    def test_enqueue_rejects_bad_json(self, invoke):
        result = invoke("offline", "enqueue", "update_streak", "{oops")
        assert result.exit_code == 2
        assert "Invalid JSON payload" in result.output

    def test_enqueue_rejects_unknown_type(self, invoke):
        result = invoke("offline", "enqueue", "award_badge", "{}")
        assert result.exit_code != 0

    def test_sync_drains_queue(self, invoke, backend):
        invoke("offline", "enqueue", "update_streak", '{"user_id": "u1"}')

        result = invoke("offline", "sync")

        assert result.exit_code == 0, result.output
        assert "Synced 1 actions, 0 will retry later" in result.output
        assert backend.posts() == [("/rest/v1/rpc/update_learning_streak", {"p_user_id": "u1"})]
        assert "Queue is empty" in invoke("offline", "queue").output

    def test_sync_offline(self, invoke, backend):
        backend.online = False
        result = invoke("offline", "sync")
        assert result.exit_code == 1
        assert "Sync failed: offline" in result.output

    def test_sync_needs_backend_config(self, invoke, cli_config):
        cli_config.api_key = ""
        result = invoke("offline", "sync")
        assert result.exit_code == 2
        assert "api_key" in result.output

    def test_status(self, invoke):
        invoke("offline", "enqueue", "update_streak", '{"user_id": "u1"}')
        result = invoke("offline", "status")
        assert result.exit_code == 0, result.output
        assert '"pending_count": 1' in result.output
        assert '"status": "online"' in result.output

    def test_connected_offline(self, invoke, backend):
        backend.online = False
        result = invoke("offline", "connected")
        assert '"connected": false' in result.output


class TestCacheCommands:
    """cache group."""

    def test_set_get_clear(self, invoke, cli_config):
        assert invoke("cache", "set", "grades", '[6, 7, 8]').exit_code == 0

        result = invoke("cache", "get", "grades")
        assert result.exit_code == 0
        assert json.loads(result.output[result.output.index("{"):]) == {"key": "grades", "data": [6, 7, 8]}

        invoke("offline", "enqueue", "update_streak", '{"user_id": "u1"}')
        result = invoke("cache", "clear")
        assert "Removed 1 cache entries" in result.output

        assert invoke("cache", "get", "grades").exit_code == 1
        assert "Showing 1 of 1" in invoke("offline", "queue").output

    def test_set_rejects_bad_json(self, invoke):
        result = invoke("cache", "set", "k", "not json")
        assert result.exit_code == 2


class TestStoreCleanup:
    """Commands close the store they open."""

    @pytest.mark.parametrize("args", [
        ("offline", "queue"),
        ("offline", "enqueue", "update_streak", '{"user_id": "u1"}'),
        ("cache", "get", "grades"),
        ("cache", "clear"),
    ])
    def test_store_closed_after_command(self, invoke, monkeypatch, args):
        opened: list[ClosingStore] = []

        def fake_open_store(config):
            store = ClosingStore()
            opened.append(store)
            return store

        monkeypatch.setattr("buddy_sync_cli.context.open_store", fake_open_store)

        invoke(*args)

        assert len(opened) == 1
        assert opened[0].closed is True

    def test_sqlite_store_released(self, invoke, cli_config, tmp_path):
        cli_config.store_backend = "sqlite"
        cli_config.store_path = str(tmp_path / "store.db")

        assert invoke("offline", "enqueue", "update_streak", '{"user_id": "u1"}').exit_code == 0
        assert "Showing 1 of 1" in invoke("offline", "queue").output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output
