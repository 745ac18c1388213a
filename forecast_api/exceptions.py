"""
Exception hierarchy for the forecast API.

Each exception maps to one HTTP response in forecast_api.main; the
``detail`` text is what the client sees, so it never carries internals.
"""
from fastapi import status


class ForecastAPIError(Exception):
    """Base class for all forecast API errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "internal server error"


class NotFound(ForecastAPIError):
    """No coordinates could be determined for a city name."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "no results found"

    def __init__(self, city_name: str):
        self.city_name = city_name
        super().__init__(f"No coordinates found for city {city_name!r}")


class FetchFailed(ForecastAPIError):
    """The forecast provider returned nothing usable for valid coordinates."""

    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "failed to fetch weather"


class Unauthorized(ForecastAPIError):
    """The presented credential did not match the expected pair."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "unauthorized"
    challenge = 'Basic realm="Please enter your credentials"'


class StorageFailure(ForecastAPIError):
    """The coordinate store could not complete a read or write."""
