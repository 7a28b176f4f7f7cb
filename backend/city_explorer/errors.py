"""Exception hierarchy for the lookup pipeline.

Every failure raised by the store, the provider clients or the normalizers
derives from CityExplorerError so the HTTP layer can map them in one place.
"""

from typing import Optional


class CityExplorerError(Exception):
    """Base class for all core failures."""


class StoreError(CityExplorerError):
    """A query or connection against the cache tables failed."""


class ProviderUnavailable(CityExplorerError):
    """The provider could not be reached (DNS, connect, timeout)."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider} unavailable: {reason}")
        self.provider = provider


class ProviderError(CityExplorerError):
    """The provider answered with a non-2xx status."""

    def __init__(self, provider: str, status_code: int, body: Optional[str] = None) -> None:
        super().__init__(f"{provider} returned HTTP {status_code}")
        self.provider = provider
        self.status_code = status_code
        self.body = body


class MalformedProviderResponse(CityExplorerError):
    """The provider payload is missing fields the normalizers need."""


class NotFoundAfterFetch(MalformedProviderResponse):
    """The provider call succeeded but returned nothing to normalize."""
