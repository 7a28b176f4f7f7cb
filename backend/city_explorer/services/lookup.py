"""Lookup-or-fetch orchestration over the cache store and the providers.

For each request:
1. Look the key up in the cache table for the entity kind.
2. On a hit, return the stored rows (weather rows past their TTL count
   as a miss and are swapped for the new batch in one transaction).
3. On a miss, call the provider, normalize the payload, persist the
   records and return the created rows.

Errors from any step propagate unchanged; nothing is retried.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from starlette.concurrency import run_in_threadpool

from .normalizers import normalize_events, normalize_location, normalize_weather
from .providers import ProviderClient
from .records import EntityKind
from .store import CacheStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationRef:
    """The owning location of a weather or events lookup."""
    id: int
    latitude: float
    longitude: float


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class LookupService:
    """Resolves locations, weather and events through the cache tables."""

    def __init__(
        self,
        store: CacheStore,
        providers: ProviderClient,
        weather_ttl_sec: float,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._providers = providers
        self._weather_ttl_sec = weather_ttl_sec
        self._clock = clock

    # --- Entry points used by the HTTP handlers ---

    async def resolve_location(self, search_text: str):
        rows = await self.resolve(EntityKind.LOCATION, search_text, {"address": search_text})
        return rows[0]

    async def resolve_weather(self, location: LocationRef) -> list:
        return await self.resolve(EntityKind.WEATHER, location.id, self._coords(location))

    async def resolve_events(self, location: LocationRef) -> list:
        return await self.resolve(EntityKind.EVENT, location.id, self._coords(location))

    # --- Core ---

    async def resolve(self, kind: EntityKind, lookup_key: Any, params: dict) -> list:
        """Return cached rows for lookup_key, fetching and storing them on a miss."""
        rows = await run_in_threadpool(self._store.find, kind, lookup_key)
        stale = bool(rows) and kind is EntityKind.WEATHER and self._is_stale(rows)

        if rows and not stale:
            logger.debug("Cache hit: %s %r (%d rows)", kind.value, lookup_key, len(rows))
            return rows

        if stale:
            # Stale rows stay in place until the replacement is ready
            logger.info("Weather for location %s is stale, re-fetching", lookup_key)
        else:
            logger.info("Cache miss: %s %r, fetching from provider", kind.value, lookup_key)
        raw = await self._fetch(kind, params)

        if kind is EntityKind.LOCATION:
            record = normalize_location(lookup_key, raw)
            return [await run_in_threadpool(self._store.insert_one, kind, record)]

        if kind is EntityKind.WEATHER:
            records = normalize_weather(raw)
            if stale:
                return await run_in_threadpool(
                    self._store.replace_batch, kind, lookup_key, records,
                    created_at=self._clock(),
                )
            return await run_in_threadpool(
                self._store.insert_batch, kind, records,
                location_id=lookup_key, created_at=self._clock(),
            )

        records = normalize_events(raw)
        return await run_in_threadpool(
            self._store.insert_batch, kind, records, location_id=lookup_key,
        )

    def _is_stale(self, rows: list) -> bool:
        oldest = min(_as_utc(row.created_at) for row in rows)
        age = (_as_utc(self._clock()) - oldest).total_seconds()
        return age > self._weather_ttl_sec

    def _fetch(self, kind: EntityKind, params: dict) -> Awaitable[Any]:
        fetchers: dict[EntityKind, Callable[..., Awaitable[Any]]] = {
            EntityKind.LOCATION: self._providers.geocode,
            EntityKind.WEATHER: self._providers.forecast,
            EntityKind.EVENT: self._providers.events,
        }
        return fetchers[kind](**params)

    @staticmethod
    def _coords(location: LocationRef) -> dict:
        return {"latitude": location.latitude, "longitude": location.longitude}

