"""
HTTP-level tests for the weather, stats, health and root endpoints.

Services are replaced through FastAPI dependency overrides. Only the health
checks touch a database, the in-memory SQLite one.
"""

from __future__ import annotations

import base64
from typing import List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest

from forecast_api.dependencies import (
    get_access_guard,
    get_coordinate_store,
    get_geocoding_service,
    get_resolver,
    get_weather_service,
)
from forecast_api.exceptions import StorageFailure
from forecast_api.models.weather import Coordinates, Credential, ForecastEntry
from forecast_api.services.access_guard import AccessGuard
from forecast_api.services.coordinate_resolver import CoordinateResolver
from forecast_api.services.geocoding_service import GeocodingResult, GeocodingService
from forecast_api.services.weather_service import WeatherService

from conftest import InMemoryCoordinateStore, StubGeocoder


PARIS = Coordinates(latitude=48.85, longitude=2.35)


class StubWeatherService:
    def __init__(self, forecast: Optional[List[ForecastEntry]]):
        self.forecast = forecast
        self.calls: List[Coordinates] = []

    async def fetch(self, coordinates):
        self.calls.append(coordinates)
        return self.forecast


def _basic(username: str, password: str) -> dict:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def weather_stub():
    return StubWeatherService([
        ForecastEntry(time="2024-06-01T00:00", temperature=10.0),
        ForecastEntry(time="2024-06-01T01:00", temperature=9.5),
    ])


@pytest.fixture
def wired(app, store, geocoder, weather_stub):
    resolver = CoordinateResolver(store=store, geocoder=geocoder)
    app.dependency_overrides[get_resolver] = lambda: resolver
    app.dependency_overrides[get_weather_service] = lambda: weather_stub
    app.dependency_overrides[get_coordinate_store] = lambda: store
    app.dependency_overrides[get_access_guard] = lambda: AccessGuard(
        Credential(username="forecast", password="forecast")
    )
    return app


class TestWeatherEndpoint:
    async def test_forecast_for_known_city(self, wired, client, geocoder, weather_stub):
        geocoder.results["Paris"] = GeocodingResult(candidates=[PARIS])

        response = await client.get("/api/v1/weather", params={"city": "Paris"})

        assert response.status_code == 200
        assert response.json() == {
            "city": "Paris",
            "latitude": 48.85,
            "longitude": 2.35,
            "forecasts": [
                {"time": "2024-06-01T00:00", "temperature": 10.0},
                {"time": "2024-06-01T01:00", "temperature": 9.5},
            ],
        }
        assert weather_stub.calls == [PARIS]

    async def test_repeat_request_served_from_store(self, wired, client, geocoder):
        geocoder.results["Paris"] = GeocodingResult(candidates=[PARIS])

        await client.get("/api/v1/weather", params={"city": "Paris"})
        await client.get("/api/v1/weather", params={"city": "Paris"})

        assert geocoder.calls == ["Paris"]

    async def test_unknown_city_is_404(self, wired, client):
        response = await client.get("/api/v1/weather", params={"city": "Nowhereville"})

        assert response.status_code == 404
        assert response.json() == {"detail": "no results found"}

    async def test_forecast_failure_is_502(self, wired, client, geocoder, weather_stub):
        geocoder.results["Paris"] = GeocodingResult(candidates=[PARIS])
        weather_stub.forecast = None

        response = await client.get("/api/v1/weather", params={"city": "Paris"})

        assert response.status_code == 502
        assert response.json() == {"detail": "failed to fetch weather"}

    async def test_storage_failure_is_generic_500(self, app, client, weather_stub):
        store = InMemoryCoordinateStore()
        store.get = AsyncMock(side_effect=StorageFailure("password authentication failed for user"))
        resolver = CoordinateResolver(store=store, geocoder=StubGeocoder())
        app.dependency_overrides[get_resolver] = lambda: resolver
        app.dependency_overrides[get_weather_service] = lambda: weather_stub

        response = await client.get("/api/v1/weather", params={"city": "Paris"})

        assert response.status_code == 500
        assert response.json() == {"detail": "internal server error"}
        assert "password" not in response.text

    async def test_city_parameter_required(self, wired, client):
        response = await client.get("/api/v1/weather")

        assert response.status_code == 422

    async def test_city_passed_untrimmed(self, wired, client, geocoder):
        geocoder.results[" Paris"] = GeocodingResult(candidates=[PARIS])

        response = await client.get("/api/v1/weather", params={"city": " Paris"})

        assert response.status_code == 200
        assert response.json()["city"] == " Paris"
        assert geocoder.calls == [" Paris"]


class TestStatsEndpoint:
    async def test_lists_recent_cities_newest_first(self, wired, client, store):
        for name in ["Paris", "Lyon", "Nice"]:
            await store.put(name, PARIS)

        response = await client.get("/api/v1/stats", headers=_basic("forecast", "forecast"))

        assert response.status_code == 200
        assert response.json() == {"cities": ["Nice", "Lyon", "Paris"]}

    async def test_limited_to_ten(self, wired, client, store):
        for i in range(15):
            await store.put(f"City {i}", PARIS)

        response = await client.get("/api/v1/stats", headers=_basic("forecast", "forecast"))

        assert len(response.json()["cities"]) == 10

    async def test_missing_credentials_challenged(self, wired, client):
        response = await client.get("/api/v1/stats")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == 'Basic realm="Please enter your credentials"'
        assert response.json() == {"detail": "unauthorized"}

    @pytest.mark.parametrize("username,password", [("forecast", "nope"), ("admin", "forecast"), ("", "")])
    async def test_wrong_credentials_challenged(self, wired, client, username, password):
        response = await client.get("/api/v1/stats", headers=_basic(username, password))

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"].startswith("Basic")

    async def test_non_basic_scheme_challenged(self, wired, client):
        response = await client.get("/api/v1/stats", headers={"Authorization": "Bearer abc"})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"].startswith("Basic")

    async def test_utf8_credentials_accepted(self, wired, client):
        wired.dependency_overrides[get_access_guard] = lambda: AccessGuard(
            Credential(username="météo", password="pässwörd")
        )

        response = await client.get("/api/v1/stats", headers=_basic("météo", "pässwörd"))

        assert response.status_code == 200
        assert response.json() == {"cities": []}

    @pytest.mark.parametrize("authorization", [
        "Basic !!!notbase64",
        "Basic " + base64.b64encode(b"forecastforecast").decode(),
        "Basic " + base64.b64encode(b"\xff\xfe:forecast").decode(),
        "Basic",
    ])
    async def test_malformed_basic_header_challenged(self, wired, client, authorization):
        response = await client.get("/api/v1/stats", headers={"Authorization": authorization})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == 'Basic realm="Please enter your credentials"'
        assert response.json() == {"detail": "unauthorized"}


class TestRoot:
    async def test_service_information(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["docs"] == "/docs"
        assert body["health"] == "/api/v1/health"


class TestHealth:
    async def test_healthy_when_database_and_providers_respond(self, db, app, client):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        app.dependency_overrides[get_geocoding_service] = lambda: GeocodingService(
            base_url="https://geocoding.test/v1", transport=transport
        )
        app.dependency_overrides[get_weather_service] = lambda: WeatherService(
            base_url="https://forecast.test/v1", transport=transport
        )

        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["database"] == "connected"
        assert body["geocoding_api"] == "available"
        assert body["weather_api"] == "available"
        assert body["status"] == "healthy"

    async def test_degraded_when_provider_fails(self, db, app, client):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        app.dependency_overrides[get_geocoding_service] = lambda: GeocodingService(transport=transport)
        app.dependency_overrides[get_weather_service] = lambda: WeatherService(transport=transport)

        response = await client.get("/api/v1/health")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["weather_api"] == "error: 503"

    @pytest.mark.parametrize("geocoding_status,weather_status", [(200, 503), (503, 200)])
    async def test_each_provider_checked_with_its_own_client(
        self, db, app, client, geocoding_status, weather_status
    ):
        geocoding_transport = httpx.MockTransport(lambda request: httpx.Response(geocoding_status, json={}))
        weather_transport = httpx.MockTransport(lambda request: httpx.Response(weather_status, json={}))
        app.dependency_overrides[get_geocoding_service] = lambda: GeocodingService(transport=geocoding_transport)
        app.dependency_overrides[get_weather_service] = lambda: WeatherService(transport=weather_transport)

        response = await client.get("/api/v1/health")

        body = response.json()
        expected = {200: "available", 503: "error: 503"}
        assert body["geocoding_api"] == expected[geocoding_status]
        assert body["weather_api"] == expected[weather_status]
        assert body["status"] == "degraded"
