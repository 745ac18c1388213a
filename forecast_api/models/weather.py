"""
Pydantic models for coordinates, forecasts and provider payloads.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "latitude": 48.85,
                    "longitude": 2.35
                }
            ]
        }
    }


class Credential(BaseModel):
    """Username/password pair presented to the access guard."""

    username: str
    password: str

    model_config = {"frozen": True}


class ForecastEntry(BaseModel):
    """One hourly forecast point."""

    time: str = Field(..., description="Provider timestamp, e.g. 2024-06-01T13:00")
    temperature: float = Field(..., description="Air temperature at 2m (°C)")


class WeatherResponse(BaseModel):
    """Response model for the weather endpoint."""

    city: str = Field(..., description="City name exactly as requested")
    latitude: float
    longitude: float
    forecasts: List[ForecastEntry] = Field(..., description="Hourly temperature forecast")


class StatsResponse(BaseModel):
    """Response model for the stats endpoint."""

    cities: List[str] = Field(..., description="Most recently resolved city names, newest first")


# Provider payloads. Unknown fields are ignored.

class GeocodingPayload(BaseModel):
    """Open-Meteo geocoding search response. ``results`` is absent on zero matches."""

    results: List[Coordinates] = Field(default_factory=list)


class HourlyPayload(BaseModel):
    time: List[str]
    temperature_2m: List[float]


class ForecastPayload(BaseModel):
    """Open-Meteo forecast response restricted to the fields we read."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    hourly: HourlyPayload
