"""buddy-sync CLI entry point - assembles all command groups."""
import logging

import click

from buddy_sync.config import SyncConfig
from . import __version__
from .cache_cmd import cache
from .offline_cmd import offline


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Log at DEBUG level')
@click.pass_context
def cli(ctx, verbose: bool):
    """buddy-sync: offline queue and sync for the Buddy learning app."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    ctx.ensure_object(dict)
    ctx.obj.setdefault("config", SyncConfig.from_env())


cli.add_command(offline)
cli.add_command(cache)


if __name__ == "__main__":
    cli()
