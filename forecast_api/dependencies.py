"""
Dependency injection for FastAPI.
Builds the services once from configuration and caches them in memory.
"""
import base64
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from forecast_api.config import load_api_config
from forecast_api.exceptions import Unauthorized
from forecast_api.models.weather import Credential
from forecast_api.services.access_guard import AccessGuard
from forecast_api.services.coordinate_resolver import CoordinateResolver
from forecast_api.services.coordinate_store import CoordinateStore
from forecast_api.services.geocoding_service import GeocodingService
from forecast_api.services.weather_service import WeatherService


@lru_cache()
def get_coordinate_store() -> CoordinateStore:
    """Store bound to the default Tortoise connection."""
    return CoordinateStore(connection_name="default")


@lru_cache()
def get_geocoding_service() -> GeocodingService:
    config = load_api_config().get("geocoding", {})
    return GeocodingService(
        base_url=config.get("base_url", "https://geocoding-api.open-meteo.com/v1"),
        timeout=config.get("timeout", 10),
        max_retries=config.get("max_retries", 1),
        retry_delay=config.get("retry_delay", 2),
        count=config.get("count", 1),
        language=config.get("language", "en"),
    )


@lru_cache()
def get_weather_service() -> WeatherService:
    config = load_api_config().get("forecast", {})
    return WeatherService(
        base_url=config.get("base_url", "https://api.open-meteo.com/v1"),
        timeout=config.get("timeout", 10),
        max_retries=config.get("max_retries", 1),
        retry_delay=config.get("retry_delay", 2),
        hourly=config.get("hourly", "temperature_2m"),
        timezone=config.get("timezone"),
        forecast_days=config.get("forecast_days"),
    )


@lru_cache()
def get_resolver() -> CoordinateResolver:
    """
    Single resolver per process, so its in-flight map is shared by all requests.
    """
    config = load_api_config().get("resolver", {})
    return CoordinateResolver(
        store=get_coordinate_store(),
        geocoder=get_geocoding_service(),
        dedupe_in_flight=config.get("dedupe_in_flight", True),
    )


@lru_cache()
def get_access_guard() -> AccessGuard:
    auth = load_api_config()["auth"]
    return AccessGuard(Credential(username=auth["username"], password=auth["password"]))


def parse_basic_authorization(authorization: Optional[str]) -> Optional[Credential]:
    """
    Decode an ``Authorization: Basic`` header value.

    Credentials are decoded as UTF-8. The password may contain ':'.

    Returns:
        Credential, or None if the header is missing, uses another scheme,
        or is not valid base64 "username:password"
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "basic":
        return None

    try:
        decoded = base64.b64decode(token.strip(), validate=True).decode("utf-8")
    except ValueError:
        # binascii.Error, UnicodeDecodeError and non-ASCII input all land here
        return None

    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return Credential(username=username, password=password)


async def require_user(
    authorization: Optional[str] = Header(None),
    guard: AccessGuard = Depends(get_access_guard),
) -> str:
    """
    Require valid HTTP Basic credentials.

    Returns:
        str: The authenticated username

    Raises:
        Unauthorized: If the header is missing, malformed, or the
            credentials do not match
    """
    credential = parse_basic_authorization(authorization)

    if not guard.authorize(credential):
        raise Unauthorized()
    return credential.username
