"""Normalizers: raw provider JSON -> immutable records.

All functions are pure. Anything missing from the payload raises
MalformedProviderResponse so that no partial rows reach the store.
"""

from datetime import datetime, timezone
from typing import Any

from ..errors import MalformedProviderResponse, NotFoundAfterFetch
from .records import EventRecord, LocationRecord, WeatherDayRecord

# Calendar date shown to the client, e.g. "Mon Jan 01 2024".
DATE_FORMAT = "%a %b %d %Y"


def _require(data: Any, *path: str) -> Any:
    """Walk a nested dict by key path, raising if any key is missing."""
    obj = data
    for key in path:
        if not isinstance(obj, dict) or obj.get(key) is None:
            raise MalformedProviderResponse(f"missing field: {'.'.join(path)}")
        obj = obj[key]
    return obj


def _require_list(data: Any, *path: str) -> list:
    items = _require(data, *path)
    if not isinstance(items, list):
        raise MalformedProviderResponse(f"expected a list at {'.'.join(path)}")
    return items


def format_epoch_date(value: Any) -> str:
    """Epoch seconds -> calendar date string (UTC)."""
    try:
        ts = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedProviderResponse(f"invalid timestamp: {value!r}") from exc
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc).strftime(DATE_FORMAT)
    except (OverflowError, OSError, ValueError) as exc:
        # nan, inf or beyond the platform time_t range
        raise MalformedProviderResponse(f"timestamp out of range: {value!r}") from exc


def format_iso_date(value: Any) -> str:
    """ISO-8601 UTC datetime -> calendar date string."""
    if not isinstance(value, str):
        raise MalformedProviderResponse(f"invalid datetime: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise MalformedProviderResponse(f"invalid datetime: {value!r}") from exc
    try:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.strftime(DATE_FORMAT)
    except (OverflowError, ValueError) as exc:
        # e.g. 0001-01-01T00:00:00+01:00 falls before datetime.min in UTC
        raise MalformedProviderResponse(f"datetime out of range: {value!r}") from exc


def normalize_location(search_text: str, raw: Any) -> LocationRecord:
    """Build a location from the first geocoding result."""
    results = _require_list(raw, "results")
    if not results:
        raise NotFoundAfterFetch(f"no geocoding results for {search_text!r}")

    first = results[0]
    try:
        latitude = float(_require(first, "geometry", "location", "lat"))
        longitude = float(_require(first, "geometry", "location", "lng"))
    except (TypeError, ValueError) as exc:
        raise MalformedProviderResponse("non-numeric coordinates") from exc

    return LocationRecord(
        search_query=search_text,
        formatted_query=str(_require(first, "formatted_address")),
        latitude=latitude,
        longitude=longitude,
    )


def normalize_weather_day(raw_item: Any) -> WeatherDayRecord:
    return WeatherDayRecord(
        forecast=str(_require(raw_item, "summary")),
        time=format_epoch_date(_require(raw_item, "time")),
    )


def normalize_event(raw_item: Any) -> EventRecord:
    return EventRecord(
        link=raw_item.get("url") if isinstance(raw_item, dict) else None,
        name=str(_require(raw_item, "name", "text")),
        event_date=format_iso_date(_require(raw_item, "start", "utc")),
        summary=raw_item.get("summary"),
    )


def normalize_weather(raw: Any) -> list[WeatherDayRecord]:
    """One record per day in the provider's daily forecast block."""
    return [normalize_weather_day(day) for day in _require_list(raw, "daily", "data")]


def normalize_events(raw: Any) -> list[EventRecord]:
    """One record per event in the provider's search result."""
    return [normalize_event(item) for item in _require_list(raw, "events")]
