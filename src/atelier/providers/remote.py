"""Provider that reads locations from a remote relay."""

from ..client import RelayClient
from ..core import Location
from ..exceptions import ProviderError, RelayError
from ..provider import LocationProvider


class RemoteProvider(LocationProvider):
    """Provider backed by another machine's relay server."""

    name = "Remote"

    def __init__(self, client: RelayClient, filter: str = "all"):
        self.client = client
        self.filter = filter

    async def fetch(self) -> list[Location]:
        try:
            return await self.client.fetch_locations(self.filter)
        except RelayError as e:
            raise ProviderError(str(e)) from e
