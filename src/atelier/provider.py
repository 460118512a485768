"""Abstract base class for location providers."""

from abc import ABC, abstractmethod

from .core import Location


class LocationProvider(ABC):
    """Base class for sources of candidate locations.

    Each source (configured projects, zoxide, a remote relay) implements this
    interface. Providers are fetched concurrently by the Manager, so
    ``fetch`` must not depend on another provider's results.
    """

    name: str  # "Project", "Zoxide", "Remote"

    @abstractmethod
    async def fetch(self) -> list[Location]:
        """Return this source's locations.

        Raise ProviderError for real failures. A provider whose optional
        external tool is missing returns an empty list instead.
        """
        ...
