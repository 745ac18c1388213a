"""
Shared test fixtures for the forecast API test suite.

Provides:
- in-memory stand-ins for the coordinate store and geocoder
- a Tortoise ORM database on in-memory SQLite
- an async client for the FastAPI app with service dependencies overridden

No test talks to PostgreSQL or Open-Meteo.
"""

import os
from typing import Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

# Ensure test config before any app imports
os.environ.setdefault("FORECAST_API_CONFIG", os.path.join(os.path.dirname(__file__), "test_config.yaml"))
os.environ.setdefault("STATS_USERNAME", "forecast")
os.environ.setdefault("STATS_PASSWORD", "forecast")

from forecast_api.models.weather import Coordinates  # noqa: E402
from forecast_api.services.geocoding_service import GeocodingResult  # noqa: E402


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------

class InMemoryCoordinateStore:
    """Dict-backed store with the same get/put/recent contract as CoordinateStore."""

    def __init__(self, records: Optional[Dict[str, Coordinates]] = None):
        self.records: Dict[str, Coordinates] = dict(records or {})
        self.inserted: List[str] = list(self.records)
        self.get_calls: List[str] = []
        self.put_calls: List[str] = []

    async def get(self, name: str) -> Optional[Coordinates]:
        self.get_calls.append(name)
        return self.records.get(name)

    async def put(self, name: str, coordinates: Coordinates) -> None:
        self.put_calls.append(name)
        self.records[name] = coordinates
        self.inserted.append(name)

    async def recent(self, limit: int = 10) -> List[str]:
        return list(reversed(self.inserted))[:limit]


class StubGeocoder:
    """Geocoder returning canned results and recording every lookup."""

    def __init__(self, results: Optional[Dict[str, GeocodingResult]] = None):
        self.results = dict(results or {})
        self.calls: List[str] = []

    async def lookup(self, name: str) -> GeocodingResult:
        self.calls.append(name)
        return self.results.get(name, GeocodingResult())


@pytest.fixture
def store():
    return InMemoryCoordinateStore()


@pytest.fixture
def geocoder():
    return StubGeocoder()


# ---------------------------------------------------------------------------
# Tortoise ORM on in-memory SQLite
# ---------------------------------------------------------------------------

@pytest.fixture
async def db():
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["forecast_api.database.models"]},
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------

@pytest.fixture
async def app():
    from forecast_api.main import app as _app

    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
