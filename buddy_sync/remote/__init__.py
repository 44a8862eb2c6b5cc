"""Remote backend client."""
from buddy_sync.remote.client import RemoteError, RemoteService

__all__ = ["RemoteError", "RemoteService"]
