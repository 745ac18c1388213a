"""
Weather endpoint: city name in, hourly forecast out.
"""
from fastapi import APIRouter, Depends, Query, status

from forecast_api.dependencies import get_resolver, get_weather_service
from forecast_api.exceptions import FetchFailed
from forecast_api.models.weather import WeatherResponse
from forecast_api.services.coordinate_resolver import CoordinateResolver
from forecast_api.services.weather_service import WeatherService

router = APIRouter()


@router.get(
    "/weather",
    response_model=WeatherResponse,
    status_code=status.HTTP_200_OK,
    summary="Hourly forecast for a city",
    description="Resolve a city name to coordinates (cached) and fetch its hourly temperature forecast"
)
async def get_weather(
    city: str = Query(..., description="City name, matched exactly"),
    resolver: CoordinateResolver = Depends(get_resolver),
    weather_service: WeatherService = Depends(get_weather_service),
):
    """
    Get the hourly forecast for a city.

    Process:
    1. Resolve the city name through the coordinate cache
    2. Fetch the hourly forecast for those coordinates
    3. Return both

    Raises:
        404: No coordinates found for the city
        502: Forecast provider unavailable
        500: Storage error
    """
    coordinates = await resolver.resolve(city)

    forecasts = await weather_service.fetch(coordinates)
    if forecasts is None:
        raise FetchFailed()

    return WeatherResponse(
        city=city,
        latitude=coordinates.latitude,
        longitude=coordinates.longitude,
        forecasts=forecasts,
    )
