"""
Async weather service for fetching hourly forecasts.
"""
from typing import List, Optional

import httpx
from pydantic import ValidationError

from forecast_api.models.weather import Coordinates, ForecastEntry, ForecastPayload
from forecast_api.services.open_meteo import OpenMeteoClient, OpenMeteoRequestError


class WeatherService(OpenMeteoClient):
    """
    Async service for fetching hourly temperature forecasts from Open-Meteo.

    Forecasts change over time, so nothing is cached: every call goes to
    the provider.
    """

    def __init__(
        self,
        base_url: str = "https://api.open-meteo.com/v1",
        timeout: float = 10,
        max_retries: int = 1,
        retry_delay: float = 2,
        hourly: str = "temperature_2m",
        timezone: Optional[str] = None,
        forecast_days: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None
    ):
        """
        Initialize weather service.

        Args:
            hourly: Hourly variable requested from the provider
            timezone: Optional provider timezone for timestamps (provider default is GMT)
            forecast_days: Optional number of forecast days (max 16)

        See OpenMeteoClient for the remaining arguments.
        """
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
            transport=transport,
            logger=logger,
        )
        self.hourly = hourly
        self.timezone = timezone
        self.forecast_days = forecast_days

    async def fetch(self, coordinates: Coordinates) -> Optional[List[ForecastEntry]]:
        """
        Fetch the hourly forecast for a location.

        Args:
            coordinates: Location to forecast

        Returns:
            List of hourly entries, or None if the provider gave nothing usable
        """
        params = {
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "hourly": self.hourly,
        }
        if self.timezone:
            params["timezone"] = self.timezone
        if self.forecast_days:
            params["forecast_days"] = min(self.forecast_days, 16)

        try:
            data = await self._make_request(f"{self.base_url}/forecast", params, "forecast")
            payload = ForecastPayload.model_validate(data)
        except OpenMeteoRequestError as e:
            self.logger.warning("Forecast unavailable for %s, %s: %s", coordinates.latitude, coordinates.longitude, e)
            return None
        except ValidationError as e:
            self.logger.warning(
                "Forecast response for %s, %s has unexpected format: %s",
                coordinates.latitude, coordinates.longitude, e
            )
            return None

        return self._parse_hourly(payload, coordinates)

    def _parse_hourly(self, payload: ForecastPayload, coordinates: Coordinates) -> Optional[List[ForecastEntry]]:
        """
        Pair hourly timestamps with temperatures.

        Series of different lengths mean a malformed response and are
        rejected instead of truncated.
        """
        times = payload.hourly.time
        temperatures = payload.hourly.temperature_2m

        if len(times) != len(temperatures):
            self.logger.warning(
                "Forecast for %s, %s has %d timestamps but %d temperatures",
                coordinates.latitude, coordinates.longitude, len(times), len(temperatures)
            )
            return None

        return [
            ForecastEntry(time=time, temperature=temperature)
            for time, temperature in zip(times, temperatures)
        ]
