"""Remote backend client for replaying queued actions.

Speaks the PostgREST dialect of the hosted learning backend over HTTPS:

- GET  /rest/v1/<table>?select=id&limit=1   connectivity probe
- POST /rest/v1/rpc/<function>              stored procedure call
- POST /rest/v1/<table>                     row insert

Every failure, transport or HTTP, surfaces as RemoteError so the sync
engine has exactly one exception type to retry on.
"""
import logging
from typing import Any, Optional

import httpx

from buddy_sync.config import SyncConfig

logger = logging.getLogger("buddy_sync.remote")

REST_PREFIX = "/rest/v1"


class RemoteError(Exception):
    """A remote call failed.

    Attributes:
        status_code: HTTP status, or None for transport failures
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteService:
    """Async client for the learning backend's REST and RPC endpoints."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        client_info: str = "buddy-learning-app/1.0.0",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize RemoteService.

        Args:
            base_url: Project URL, e.g. "https://xyz.supabase.co"
            api_key: Anonymous or service API key
            client_info: Value of the x-client-info header
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "x-client-info": client_info,
            "Content-Type": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=self.base_url + REST_PREFIX,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: SyncConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RemoteService":
        return cls(
            base_url=config.remote_url,
            api_key=config.api_key,
            client_info=config.client_info,
            timeout=config.request_timeout_ms / 1000,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            logger.debug(f"{method} {path} -> {response.status_code}")
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as exc:
            raise RemoteError(
                f"HTTP error {exc.response.status_code} on {method} {path}: "
                f"{_error_message(exc.response)}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise RemoteError(f"Network error on {method} {path}: {exc}") from exc

    async def probe(self, table: str) -> None:
        """Read at most one id from table. Raises RemoteError if unreachable."""
        await self._request("GET", f"/{table}", params={"select": "id", "limit": "1"})

    async def rpc(self, function: str, params: dict[str, Any]) -> Any:
        """Call a stored procedure and return its decoded JSON result."""
        response = await self._request("POST", f"/rpc/{function}", json=params)
        if not response.content:
            return None
        return response.json()

    async def insert(self, table: str, record: dict[str, Any]) -> None:
        """Insert one row into table."""
        await self._request(
            "POST",
            f"/{table}",
            json=record,
            headers={"Prefer": "return=minimal"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    """Pull the PostgREST error message out of a response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)[:200]
    return str(body)[:200]
