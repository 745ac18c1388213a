"""
Geocoding service: city name -> candidate coordinates via Open-Meteo.
"""
from dataclasses import dataclass, field
from typing import List, Optional

import httpx
from pydantic import ValidationError

from forecast_api.models.weather import Coordinates, GeocodingPayload
from forecast_api.services.open_meteo import OpenMeteoClient, OpenMeteoRequestError


@dataclass
class GeocodingResult:
    """
    Outcome of a geocoding lookup.

    ``candidates`` is ordered by the provider's own ranking. ``error`` is set
    when the lookup could not be completed, in which case there are no
    candidates; an empty list with no error is a genuine zero-result answer.
    """

    candidates: List[Coordinates] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class GeocodingService(OpenMeteoClient):
    """
    Stateless lookup against the Open-Meteo geocoding search endpoint.
    """

    def __init__(
        self,
        base_url: str = "https://geocoding-api.open-meteo.com/v1",
        timeout: float = 10,
        max_retries: int = 1,
        retry_delay: float = 2,
        count: int = 1,
        language: str = "en",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None
    ):
        """
        Initialize geocoding service.

        Args:
            count: Maximum number of candidates to request
            language: Language for provider-side name matching

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
        self.count = count
        self.language = language

    async def lookup(self, name: str) -> GeocodingResult:
        """
        Find candidate coordinates for a city name.

        Never raises: transport failures and malformed payloads come back as
        a result with ``error`` set.

        Args:
            name: City name, sent as-is

        Returns:
            GeocodingResult with candidates in provider order
        """
        params = {
            "name": name,
            "count": self.count,
            "language": self.language,
            "format": "json",
        }

        try:
            data = await self._make_request(f"{self.base_url}/search", params, "geocoding")
            payload = GeocodingPayload.model_validate(data)
        except OpenMeteoRequestError as e:
            return GeocodingResult(error=str(e))
        except ValidationError as e:
            return GeocodingResult(error=f"geocoding response has unexpected format: {e.error_count()} error(s)")

        self.logger.debug("Geocoding %r returned %d candidate(s)", name, len(payload.results))
        return GeocodingResult(candidates=payload.results)
