"""
Open-Meteo HTTP client base.
Handles request retries and error classification shared by the
geocoding and forecast services.
"""
import asyncio
from typing import Any, Dict, Optional

import httpx

from forecast_api.utils.logger import get_logger


class OpenMeteoRequestError(Exception):
    """A request to Open-Meteo failed or returned an unusable body."""


class OpenMeteoClient:
    """
    Async client for Open-Meteo endpoints.

    Subclasses build the query and interpret the payload; this class only
    gets a JSON document back or raises OpenMeteoRequestError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        max_retries: int = 1,
        retry_delay: float = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL for the Open-Meteo API
            timeout: Request timeout in seconds
            max_retries: Total number of attempts per request (1 = no retry)
            retry_delay: Delay between attempts in seconds
            transport: Optional httpx transport, mainly for tests
            logger: Logger instance
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, int(max_retries))
        self.retry_delay = retry_delay
        self.transport = transport
        self.logger = logger or get_logger()

    async def _make_request(
        self,
        endpoint: str,
        params: Dict[str, Any],
        request_type: str
    ) -> Dict[str, Any]:
        """
        Make API request with retry logic.

        Args:
            endpoint: API endpoint URL
            params: Query parameters (httpx URL-escapes them)
            request_type: Type of request (for logging)

        Returns:
            Decoded JSON body

        Raises:
            OpenMeteoRequestError: If every attempt fails or the body is not JSON
        """
        last_error = "no attempt made"

        for attempt in range(self.max_retries):
            is_last = attempt == self.max_retries - 1
            delay = self.retry_delay

            try:
                self.logger.debug(
                    "Making %s request (attempt %d/%d): %s %s",
                    request_type, attempt + 1, self.max_retries, endpoint, params
                )
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    response = await client.get(endpoint, params=params)

                if response.status_code == 200:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise OpenMeteoRequestError(f"{request_type} response is not valid JSON: {e}") from e

                last_error = f"{request_type} request failed: HTTP {response.status_code}"
                if response.status_code == 429:
                    # Rate limit exceeded
                    delay = self.retry_delay * 2
                self.logger.warning(last_error)

            except httpx.TimeoutException:
                last_error = f"{request_type} request timed out"
                self.logger.warning("%s (attempt %d/%d)", last_error, attempt + 1, self.max_retries)

            except httpx.HTTPError as e:
                last_error = f"{request_type} request error: {e}"
                self.logger.warning(last_error)

            if not is_last and delay > 0:
                await asyncio.sleep(delay)

        raise OpenMeteoRequestError(last_error)
