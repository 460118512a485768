"""Exception hierarchy for atelier.

Every error the pipeline raises derives from AtelierError so the CLI can turn
them into a single clean message. Cancellation is not an error and never
appears here.
"""


class AtelierError(Exception):
    """Base class for all atelier errors."""


class ConfigError(AtelierError):
    """The configuration could not be read or is invalid."""


class ProviderError(AtelierError):
    """A location provider failed to fetch its locations."""


class AggregationError(AtelierError):
    """Aggregating locations failed because a provider failed or timed out."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"provider {provider!r} failed: {reason}")


class LocationNotFoundError(AtelierError):
    """No location matches the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"location {name!r} not found")


class UnknownActionError(AtelierError):
    """An explicitly requested action does not exist on the location."""

    def __init__(self, action: str, location: str):
        self.action = action
        self.location = location
        super().__init__(f"action {action!r} not found for {location!r}")


class RelayError(AtelierError):
    """The remote relay returned an error or could not be reached."""


class SessionError(AtelierError):
    """The session backend failed."""
