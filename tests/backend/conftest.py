"""Shared fixtures: in-memory database and stubbed provider APIs."""

import os

# Must be set before the package reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEOCODE_API_KEY"] = "geo-key"
os.environ["WEATHER_API_KEY"] = "wx-key"
os.environ["EVENTBRITE_API_KEY"] = "eb-key"

import httpx
import pytest
from fastapi.testclient import TestClient

from city_explorer.config import settings
from city_explorer.main import app
from city_explorer.api.dependencies import get_providers
from city_explorer.models.database import Base, SessionLocal, engine, get_db, init_database
from city_explorer.services.providers import ProviderClient


GEOCODE_SEATTLE = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "Seattle, WA, USA",
            "geometry": {"location": {"lat": 47.6062095, "lng": -122.3320708}},
        }
    ],
}

FORECAST_TWO_DAYS = {
    "timezone": "America/Los_Angeles",
    "daily": {
        "data": [
            {"time": 1540018800, "summary": "Rain in the morning."},
            {"time": 1540105200, "summary": "Partly cloudy throughout the day."},
        ]
    },
}

EVENTS_ONE = {
    "events": [
        {
            "url": "https://www.eventbrite.com/e/fall-festival-1",
            "name": {"text": "Fall Festival"},
            "start": {"utc": "2018-10-27T17:00:00Z"},
            "summary": "Pumpkins and cider.",
        }
    ]
}

_HOSTS = {
    "maps.googleapis.com": "geocode",
    "api.darksky.net": "weather",
    "www.eventbriteapi.com": "events",
}


class ProviderStub:
    """Routes provider requests to canned responses and records every call."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: dict[str, tuple[int, object]] = {
            "geocode": (200, GEOCODE_SEATTLE),
            "weather": (200, FORECAST_TWO_DAYS),
            "events": (200, EVENTS_ONE),
        }
        self._failures: dict[str, Exception] = {}

    def respond(self, provider: str, body: object, status: int = 200) -> None:
        self._responses[provider] = (status, body)
        self._failures.pop(provider, None)

    def fail(self, provider: str) -> None:
        self._failures[provider] = httpx.ConnectError("connection refused")

    def time_out(self, provider: str) -> None:
        self._failures[provider] = httpx.ReadTimeout("timed out")

    def calls(self, provider: str) -> int:
        return sum(1 for r in self.requests if _HOSTS.get(r.url.host) == provider)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        provider = _HOSTS[request.url.host]
        if provider in self._failures:
            raise self._failures[provider]
        status, body = self._responses[provider]
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def client(self) -> ProviderClient:
        return ProviderClient(settings, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def db():
    """A session on a freshly created schema."""
    init_database()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def provider_stub() -> ProviderStub:
    return ProviderStub()


@pytest.fixture
def client(db, provider_stub):
    """Test client sharing the test session and the stubbed providers."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_providers] = provider_stub.client

    yield TestClient(app)

    app.dependency_overrides.clear()
