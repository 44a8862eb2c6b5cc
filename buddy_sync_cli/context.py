"""Builds the queue, cache and controller a command needs from ctx.obj."""
import click

from buddy_sync.config import SyncConfig
from buddy_sync.offline.cache import CacheLayer
from buddy_sync.offline.lifecycle import OfflineSync
from buddy_sync.offline.queue import ActionQueue
from buddy_sync.remote.client import RemoteService
from buddy_sync.store import KeyValueStore, open_store


def get_config(ctx: click.Context) -> SyncConfig:
    return ctx.obj["config"]


def local_store(ctx: click.Context) -> KeyValueStore:
    """Open the configured store, closed when the command finishes."""
    store = open_store(get_config(ctx))
    ctx.call_on_close(store.close)
    return store


def local_queue(ctx: click.Context) -> ActionQueue:
    """Queue over the configured store. No backend settings needed."""
    return ActionQueue(local_store(ctx), get_config(ctx).pending_actions_key)


def local_cache(ctx: click.Context) -> CacheLayer:
    """Cache over the configured store. No backend settings needed."""
    return CacheLayer(local_store(ctx), get_config(ctx).cache_prefix)


def connected_sync(ctx: click.Context) -> OfflineSync:
    """Controller wired to the backend. Fails on invalid configuration."""
    config = get_config(ctx).require_valid()
    remote = RemoteService.from_config(config, transport=ctx.obj.get("transport"))
    return OfflineSync(config, store=open_store(config), remote=remote)
