"""Outbound clients for the geocoding, weather and events providers.

Each call issues exactly one GET with a bounded timeout and returns the
parsed JSON body. Network failures raise ProviderUnavailable, non-2xx
answers raise ProviderError.

Providers:
  Geocoding  https://developers.google.com/maps/documentation/geocoding
  Weather    Dark Sky compatible /forecast/{key}/{lat},{lon}
  Events     https://www.eventbrite.com/platform/api
"""

import logging
from typing import Any, Optional

import httpx

from ..config import Settings
from ..errors import MalformedProviderResponse, ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)

USER_AGENT = "city-explorer/0.1"


class ProviderClient:
    """Thin async wrapper around the three third-party APIs."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        # Tests pass an httpx.MockTransport here
        self._transport = transport

    async def geocode(self, address: str) -> Any:
        """Resolve free-form address text to geocoding results."""
        return await self._get(
            "geocode",
            self._settings.geocode_url,
            params={"address": address, "key": self._settings.geocode_api_key},
        )

    async def forecast(self, latitude: float, longitude: float) -> Any:
        """Daily forecast for a coordinate pair."""
        base = self._settings.weather_url.rstrip("/")
        url = f"{base}/{self._settings.weather_api_key}/{latitude},{longitude}"
        return await self._get("weather", url)

    async def events(self, latitude: float, longitude: float) -> Any:
        """Events near a coordinate pair."""
        return await self._get(
            "events",
            self._settings.events_url,
            params={
                "location.latitude": latitude,
                "location.longitude": longitude,
                "expand": "venue",
                "token": self._settings.eventbrite_api_key,
            },
        )

    async def _get(self, provider: str, url: str, params: Optional[dict] = None) -> Any:
        try:
            async with httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                timeout=self._settings.provider_timeout_sec,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("%s request failed: %s", provider, exc)
            raise ProviderUnavailable(provider, str(exc)) from exc

        if not resp.is_success:
            logger.warning("%s returned HTTP %d", provider, resp.status_code)
            raise ProviderError(provider, resp.status_code, resp.text[:500])

        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedProviderResponse(f"{provider} returned invalid JSON") from exc
