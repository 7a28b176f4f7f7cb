"""End-to-end tests for the HTTP routes."""

import json

from conftest import GEOCODE_SEATTLE


def _location(client) -> dict:
    resp = client.get("/location", params={"data": "Seattle"})
    assert resp.status_code == 200
    return resp.json()


def _bracketed(location: dict) -> dict:
    return {
        "data[id]": location["id"],
        "data[search_query]": location["search_query"],
        "data[latitude]": location["latitude"],
        "data[longitude]": location["longitude"],
    }


class TestLocationRoute:
    def test_first_lookup(self, client, provider_stub):
        body = _location(client)
        assert provider_stub.calls("geocode") == 1
        assert body["search_query"] == "Seattle"
        assert body["formatted_query"] == "Seattle, WA, USA"
        assert isinstance(body["latitude"], float)
        assert isinstance(body["longitude"], float)
        assert isinstance(body["id"], int)

    def test_second_lookup_is_cached(self, client, provider_stub):
        first = _location(client)
        second = _location(client)
        assert second == first
        assert provider_stub.calls("geocode") == 1

    def test_missing_data(self, client, provider_stub):
        resp = client.get("/location")
        assert resp.status_code == 400
        assert provider_stub.calls("geocode") == 0

    def test_no_results_is_500(self, client, provider_stub):
        provider_stub.respond("geocode", {"status": "ZERO_RESULTS", "results": []})
        resp = client.get("/location", params={"data": "qwertyuiop"})
        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == "Sorry, something went wrong"

    def test_provider_down_is_500(self, client, provider_stub):
        provider_stub.fail("geocode")
        resp = client.get("/location", params={"data": "Seattle"})
        assert resp.status_code == 500


class TestWeatherRoute:
    def test_bracketed_location(self, client, provider_stub):
        location = _location(client)
        resp = client.get("/weather", params=_bracketed(location))
        assert resp.status_code == 200
        assert resp.json() == [
            {"forecast": "Rain in the morning.", "time": "Sat Oct 20 2018",
             "location_id": location["id"]},
            {"forecast": "Partly cloudy throughout the day.", "time": "Sun Oct 21 2018",
             "location_id": location["id"]},
        ]

    def test_json_location(self, client, provider_stub):
        location = _location(client)
        resp = client.get("/weather", params={"data": json.dumps(location)})
        assert resp.status_code == 200
        assert len(resp.json()) == 2

    def test_cached_within_ttl(self, client, provider_stub):
        location = _location(client)
        first = client.get("/weather", params=_bracketed(location)).json()
        second = client.get("/weather", params=_bracketed(location)).json()
        assert first == second
        assert provider_stub.calls("weather") == 1

    def test_forecast_request_uses_coordinates(self, client, provider_stub):
        location = _location(client)
        client.get("/weather", params=_bracketed(location))
        request = provider_stub.requests[-1]
        lat = GEOCODE_SEATTLE["results"][0]["geometry"]["location"]["lat"]
        assert request.url.path.startswith(f"/forecast/wx-key/{lat},")

    def test_missing_location(self, client):
        assert client.get("/weather").status_code == 400

    def test_incomplete_location(self, client):
        resp = client.get("/weather", params={"data[id]": 1})
        assert resp.status_code == 400

    def test_not_json(self, client):
        resp = client.get("/weather", params={"data": "Seattle"})
        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("text/plain")

    def test_provider_error_is_500(self, client, provider_stub):
        location = _location(client)
        provider_stub.respond("weather", {"error": "forbidden"}, status=403)
        resp = client.get("/weather", params=_bracketed(location))
        assert resp.status_code == 500
        assert resp.text == "Sorry, something went wrong"


class TestEventsRoute:
    def test_events(self, client, provider_stub):
        location = _location(client)
        resp = client.get("/events", params=_bracketed(location))
        assert resp.status_code == 200
        assert resp.json() == [{
            "link": "https://www.eventbrite.com/e/fall-festival-1",
            "name": "Fall Festival",
            "event_date": "Sat Oct 27 2018",
            "summary": "Pumpkins and cider.",
            "location_id": location["id"],
        }]

    def test_cached(self, client, provider_stub):
        location = _location(client)
        client.get("/events", params=_bracketed(location))
        client.get("/events", params=_bracketed(location))
        assert provider_stub.calls("events") == 1

    def test_malformed_is_500(self, client, provider_stub):
        location = _location(client)
        provider_stub.respond("events", {"pagination": {}})
        resp = client.get("/events", params=_bracketed(location))
        assert resp.status_code == 500


def test_unknown_route_is_plain_404(client):
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith("text/plain")
