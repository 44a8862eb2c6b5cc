"""buddy-sync command line interface."""
from buddy_sync import __version__

__all__ = ["__version__"]
