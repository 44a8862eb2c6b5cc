"""Local cache CLI commands."""
import json

import click

from buddy_sync.store import StoreError
from .context import get_config, local_cache
from .output import print_error, print_json, print_success


@click.group()
def cache():
    """Local read cache commands."""
    pass


@cache.command('get')
@click.argument('key')
@click.option('--max-age-ms', type=int, default=None, help='Treat older entries as absent')
@click.pass_context
def get_entry(ctx, key: str, max_age_ms: int | None):
    """Show a cached value if still fresh."""
    if max_age_ms is None:
        max_age_ms = get_config(ctx).cache_max_age_ms
    try:
        value = local_cache(ctx).get_cached_data(key, max_age_ms)
    except StoreError as e:
        print_error(f"Cache read failed: {e}")
        ctx.exit(2)

    if value is None:
        click.echo(f"No fresh entry for {key}")
        ctx.exit(1)
    print_json({"key": key, "data": value})


@cache.command('set')
@click.argument('key')
@click.argument('value')
@click.pass_context
def set_entry(ctx, key: str, value: str):
    """Cache VALUE (JSON) under KEY."""
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON value: {e}")
        ctx.exit(2)

    try:
        local_cache(ctx).cache_data(key, data)
    except StoreError as e:
        print_error(f"Cache write failed: {e}")
        ctx.exit(2)
    print_success(f"Cached {key}")


@cache.command()
@click.pass_context
def clear(ctx):
    """Remove every cache entry. Pending actions are kept."""
    try:
        removed = local_cache(ctx).clear_cache()
    except StoreError as e:
        print_error(f"Clear failed: {e}")
        ctx.exit(2)
    print_success(f"Removed {removed} cache entries")
