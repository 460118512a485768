"""HTTP client for a remote atelier relay."""

import logging

import httpx

from .core import Action, Location
from .exceptions import RelayError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class RelayClient:
    """Read-only client for the relay's /api/locations and /api/actions."""

    def __init__(self, base_url: str, token: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _get(self, path: str, params: dict) -> dict:
        try:
            async with self._client() as client:
                resp = await client.get(path, params=params)
        except httpx.HTTPError as e:
            raise RelayError(f"request to {self.base_url}{path} failed: {e}") from e

        if resp.status_code != 200:
            raise RelayError(f"{self.base_url}{path} returned status {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise RelayError(f"{self.base_url}{path} returned invalid JSON") from e

    async def fetch_locations(self, filter: str = "all") -> list[Location]:
        data = await self._get("/api/locations", {"filter": filter})
        locations = [Location.from_dict(d) for d in data.get("locations") or []]
        logger.debug("Fetched %d locations from %s", len(locations), self.base_url)
        return locations

    async def fetch_actions(self, path: str) -> tuple[list[Action], bool]:
        """Return the effective actions for ``path`` and whether it is a project."""
        data = await self._get("/api/actions", {"path": path})
        actions = [Action.from_dict(d) for d in data.get("actions") or []]
        return actions, bool(data.get("is_project"))
