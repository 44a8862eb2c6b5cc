"""
Entry point for running buddy-sync as a module.

Usage:
    python -m buddy_sync [command] [options]

Example:
    python -m buddy_sync offline status
    python -m buddy_sync offline enqueue update_streak '{"user_id": "u1"}'
    python -m buddy_sync offline sync --max-retries 5
"""

from buddy_sync_cli.main import cli

if __name__ == "__main__":
    cli()
