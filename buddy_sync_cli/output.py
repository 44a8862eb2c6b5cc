"""Terminal output for buddy-sync commands.

Results go to stdout; errors go to stderr so receipt lines and JSON
results stay machine-readable.
"""
import json
from datetime import datetime, timezone

import click

from buddy_sync.offline.actions import PendingAction

ID_WIDTH = 24


def print_json(data: dict) -> None:
    click.echo(json.dumps(data, indent=2, sort_keys=True, default=str))


def print_error(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)


def print_success(message: str) -> None:
    click.secho(message, fg="green")


def format_ms(ms: int) -> str:
    """Epoch milliseconds as a UTC ISO-8601 string."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def print_actions(actions: list[PendingAction]) -> None:
    """One line per pending action: queued-at, type, shortened id."""
    type_width = max(len(a.type) for a in actions)
    click.echo(click.style(f"{'queued at':<24}  {'type':<{type_width}}  id", bold=True))
    for a in actions:
        short_id = a.id if len(a.id) <= ID_WIDTH else a.id[:ID_WIDTH - 1] + "…"
        click.echo(f"{format_ms(a.timestamp):<24}  {a.type:<{type_width}}  {short_id}")
