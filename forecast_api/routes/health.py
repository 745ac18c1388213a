"""
Health check endpoint for monitoring API status.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from tortoise import connections
import httpx

from forecast_api.dependencies import get_geocoding_service, get_weather_service
from forecast_api.services.geocoding_service import GeocodingService
from forecast_api.services.weather_service import WeatherService

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(
    geocoding_service: GeocodingService = Depends(get_geocoding_service),
    weather_service: WeatherService = Depends(get_weather_service),
):
    """
    Health check endpoint to verify API status.

    Returns:
        dict: System health status including database and both Open-Meteo APIs
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "unknown",
        "geocoding_api": "unknown",
        "weather_api": "unknown"
    }

    # Check database connection
    try:
        conn = connections.get("default")
        await conn.execute_query("SELECT 1")
        health_status["database"] = "connected"
    except Exception as e:
        health_status["database"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    checks = [
        ("geocoding_api", geocoding_service, f"{geocoding_service.base_url}/search", {"name": "Paris", "count": 1}),
        ("weather_api", weather_service, f"{weather_service.base_url}/forecast", {"latitude": 48.85, "longitude": 2.35, "current": "temperature_2m"}),
    ]

    for key, service, url, params in checks:
        try:
            async with httpx.AsyncClient(timeout=5.0, transport=service.transport) as client:
                response = await client.get(url, params=params)
            health_status[key] = "available" if response.status_code == 200 else f"error: {response.status_code}"
        except httpx.HTTPError as e:
            health_status[key] = f"error: {str(e)}"
        if health_status[key] != "available":
            health_status["status"] = "degraded"

    return health_status
