"""Pydantic schemas for the location, weather and events responses."""

from pydantic import BaseModel, ConfigDict


class LocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    search_query: str
    formatted_query: str
    latitude: float
    longitude: float


class WeatherDayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    forecast: str
    time: str
    location_id: int


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    link: str | None = None
    name: str
    event_date: str
    summary: str | None = None
    location_id: int


class LocationRefIn(BaseModel):
    """The location object a client sends back for weather/events lookups."""
    id: int
    latitude: float
    longitude: float
