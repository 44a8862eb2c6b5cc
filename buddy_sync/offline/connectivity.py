"""Connectivity probing against the remote backend.

The last probed state lives in a ConnectivityState holder that is passed
to whoever needs it, so tests can flip a device online or offline without
touching module globals.
"""
import logging

from buddy_sync.core.constants import PROBE_TABLE
from buddy_sync.core.receipt import emit_receipt
from buddy_sync.remote.client import RemoteError, RemoteService

logger = logging.getLogger("buddy_sync.connectivity")


class ConnectivityState:
    """Last known reachability of the remote backend.

    Starts optimistic (online) until the first probe says otherwise.
    """

    def __init__(self, online: bool = True):
        self.online = online

    def __repr__(self) -> str:
        return f"ConnectivityState(online={self.online})"


class ConnectivityProber:
    """Checks whether the remote backend answers a minimal read."""

    def __init__(
        self,
        remote: RemoteService,
        state: ConnectivityState,
        probe_table: str = PROBE_TABLE,
    ):
        self.remote = remote
        self.state = state
        self.probe_table = probe_table

    async def check_connection(self) -> bool:
        """Probe the backend and record the outcome.

        Returns:
            True iff the probe completed without error
        """
        try:
            await self.remote.probe(self.probe_table)
            online = True
        except RemoteError as e:
            logger.debug(f"Connectivity probe failed: {e}")
            online = False
        except Exception as e:
            logger.warning(f"Connectivity probe error: {e}")
            online = False

        if online != self.state.online:
            logger.info(f"Connectivity changed: {'online' if online else 'offline'}")
            emit_receipt("connectivity_changed", {
                "online": online,
                "probe_table": self.probe_table,
            })

        self.state.online = online
        return online

    def is_online(self) -> bool:
        """Last probed state. Does not probe."""
        return self.state.online
