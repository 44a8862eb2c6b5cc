"""Offline queue CLI commands."""
import asyncio
import json

import click

from buddy_sync.config import ConfigError
from buddy_sync.offline.actions import ACTION_TYPES
from buddy_sync.store import StoreError
from .context import connected_sync, get_config, local_queue
from .output import print_actions, print_error, print_json, print_success


@click.group()
def offline():
    """Offline queue commands."""
    pass


@offline.command()
@click.pass_context
def status(ctx):
    """Show pending count, store location and backend reachability."""
    async def _run():
        sync = connected_sync(ctx)
        try:
            online = await sync.check_connection()
            return {
                "pending_count": sync.queue.pending_count(),
                "connected": online,
                "status": "online" if online else "offline",
                "store_backend": sync.config.store_backend,
                "store_path": str(sync.config.resolved_store_path()),
            }
        finally:
            await sync.aclose()

    try:
        print_json(asyncio.run(_run()))
    except (ConfigError, StoreError) as e:
        print_error(f"Status check failed: {e}")
        ctx.exit(2)


@offline.command('queue')
@click.option('--limit', '-n', default=10, help='Number of actions to show')
@click.pass_context
def show_queue(ctx, limit: int):
    """List pending actions in enqueue order."""
    try:
        actions = local_queue(ctx).get_pending_actions()
    except StoreError as e:
        print_error(f"Queue list failed: {e}")
        ctx.exit(2)

    if not actions:
        click.echo("Queue is empty")
        return

    click.echo(f"Showing {min(limit, len(actions))} of {len(actions)} pending actions:\n")
    print_actions(actions[:limit])


@offline.command()
@click.argument('action_type', type=click.Choice(sorted(ACTION_TYPES)))
@click.argument('data')
@click.pass_context
def enqueue(ctx, action_type: str, data: str):
    """Queue an action. DATA is the JSON payload."""
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON payload: {e}")
        ctx.exit(2)

    if not isinstance(payload, dict):
        print_error("Payload must be a JSON object")
        ctx.exit(2)

    try:
        result = local_queue(ctx).queue_action(action_type, payload)
    except StoreError as e:
        print_error(f"Enqueue failed: {e}")
        ctx.exit(2)

    if result.success:
        print_success(f"Queued {action_type}")
    else:
        print_error(f"Enqueue failed: {result.error}")
        ctx.exit(1)


@offline.command('sync')
@click.option('--max-retries', type=int, default=None, help='Attempts per action')
@click.pass_context
def do_sync(ctx, max_retries: int | None):
    """Replay the pending queue against the backend."""
    async def _run():
        sync = connected_sync(ctx)
        try:
            return await sync.sync_pending_actions(max_retries)
        finally:
            await sync.aclose()

    try:
        result = asyncio.run(_run())
    except (ConfigError, StoreError) as e:
        print_error(f"Sync failed: {e}")
        ctx.exit(2)

    if result.success:
        print_success(f"Synced {result.synced} actions, {result.failed} will retry later")
        print_json(result.to_dict())
    else:
        print_error(f"Sync failed: {result.reason}")
        print_json(result.to_dict())
        ctx.exit(1)


@offline.command()
@click.pass_context
def connected(ctx):
    """Check if the backend is reachable."""
    async def _run():
        sync = connected_sync(ctx)
        try:
            return await sync.check_connection()
        finally:
            await sync.aclose()

    try:
        is_connected = asyncio.run(_run())
    except (ConfigError, StoreError) as e:
        print_error(f"Connection check failed: {e}")
        ctx.exit(2)

    print_json({
        "connected": is_connected,
        "status": "online" if is_connected else "offline",
    })


@offline.command()
@click.option('--interval', type=float, default=None, help='Seconds between probes')
@click.pass_context
def watch(ctx, interval: float | None):
    """Sync now, then keep syncing whenever the backend comes back."""
    config = get_config(ctx)
    if interval is not None:
        config.sync_interval_seconds = interval

    async def _run():
        sync = connected_sync(ctx)
        try:
            handle = await sync.init_offline_sync()
            click.echo(f"Watching every {config.sync_interval_seconds}s, Ctrl-C to stop")
            await handle.wait_stopped()
        finally:
            await sync.aclose()

    try:
        asyncio.run(_run())
    except (ConfigError, StoreError) as e:
        print_error(f"Watch failed: {e}")
        ctx.exit(2)
    except KeyboardInterrupt:
        click.echo("Stopped")
