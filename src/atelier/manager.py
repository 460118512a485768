"""Aggregation of locations from every provider."""

import asyncio
import logging
from typing import Optional

from .core import Location
from .exceptions import AggregationError, LocationNotFoundError
from .provider import LocationProvider
from .utils import sanitize

logger = logging.getLogger(__name__)


class Manager:
    """Runs providers concurrently and merges their results.

    Providers are given in precedence order. When two providers report the
    same canonical path, the location from the earlier provider is kept.
    """

    def __init__(self, *providers: LocationProvider):
        self.providers = list(providers)

    async def get_all(self, timeout: Optional[float] = None) -> list[Location]:
        """Fetch from all providers and return the merged, deduplicated list.

        Waits for every provider before merging. If any provider fails the
        whole call fails; partial results are never returned.
        """
        fetches = asyncio.gather(
            *(p.fetch() for p in self.providers),
            return_exceptions=True,
        )
        try:
            results = await asyncio.wait_for(fetches, timeout)
        except asyncio.TimeoutError as e:
            names = ", ".join(p.name for p in self.providers)
            raise AggregationError(names, f"timed out after {timeout}s") from e

        for provider, result in zip(self.providers, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.error("Provider %s failed: %s", provider.name, result)
                raise AggregationError(provider.name, str(result) or type(result).__name__) from result

        return self.merge(results)

    @staticmethod
    def merge(results: list[list[Location]]) -> list[Location]:
        """Merge per-provider lists in order, first occurrence of a path wins."""
        merged = []
        seen = set()
        for locations in results:
            for location in locations:
                if location.path in seen:
                    continue
                seen.add(location.path)
                merged.append(location)
        return merged

    async def find(self, name: str, timeout: Optional[float] = None) -> Location:
        """Return the first location named ``name`` (exact or sanitized match)."""
        locations = await self.get_all(timeout)
        for location in locations:
            if location.name == name:
                return location
        wanted = sanitize(name)
        for location in locations:
            if sanitize(location.name) == wanted:
                return location
        raise LocationNotFoundError(name)
