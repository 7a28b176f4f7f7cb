"""Immutable records produced by the normalizers, one per entity kind."""

from dataclasses import dataclass, fields
from enum import Enum


class EntityKind(str, Enum):
    """Closed set of cached entities."""
    LOCATION = "locations"
    WEATHER = "weathers"
    EVENT = "events"


@dataclass(frozen=True)
class LocationRecord:
    search_query: str
    formatted_query: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class WeatherDayRecord:
    forecast: str
    time: str


@dataclass(frozen=True)
class EventRecord:
    link: str | None
    name: str
    event_date: str
    summary: str | None


Record = LocationRecord | WeatherDayRecord | EventRecord


def record_columns(record: Record) -> dict:
    """Flatten a record into its column values, in declared order."""
    return {f.name: getattr(record, f.name) for f in fields(record)}
