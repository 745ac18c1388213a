"""
Read-through coordinate cache.

Looks a city name up in the coordinate store and, on a miss, asks the
geocoding service, keeps the first candidate and stores it. Stored
coordinates never expire: a city does not move.
"""
import asyncio
from typing import Dict

from forecast_api.exceptions import NotFound
from forecast_api.models.weather import Coordinates
from forecast_api.services.coordinate_store import CoordinateStore
from forecast_api.services.geocoding_service import GeocodingService
from forecast_api.utils.logger import get_logger


class CoordinateResolver:
    """
    Resolve city names to coordinates with populate-on-miss caching.
    """

    def __init__(
        self,
        store: CoordinateStore,
        geocoder: GeocodingService,
        dedupe_in_flight: bool = True,
        logger=None
    ):
        """
        Initialize coordinate resolver.

        Args:
            store: Durable coordinate store (anything with async get/put)
            geocoder: Geocoding lookup (anything with async lookup)
            dedupe_in_flight: Share one lookup between concurrent misses for
                the same name within this process
            logger: Logger instance
        """
        self.store = store
        self.geocoder = geocoder
        self.dedupe_in_flight = dedupe_in_flight
        self.logger = logger or get_logger()
        self._in_flight: Dict[str, asyncio.Future] = {}

    async def resolve(self, city_name: str) -> Coordinates:
        """
        Resolve a city name to coordinates.

        Args:
            city_name: City name, used verbatim as the cache key

        Returns:
            Coordinates for the city

        Raises:
            NotFound: If the geocoder has no match or could not be reached
            StorageFailure: If the store fails to read or write
        """
        coordinates = await self.store.get(city_name)
        if coordinates is not None:
            self.logger.debug("Coordinate cache hit: %r", city_name)
            return coordinates

        self.logger.debug("Coordinate cache miss: %r", city_name)

        if not self.dedupe_in_flight:
            return await self._populate(city_name)

        pending = self._in_flight.get(city_name)
        if pending is None:
            pending = asyncio.ensure_future(self._populate(city_name))
            self._in_flight[city_name] = pending
            pending.add_done_callback(lambda task: self._forget(city_name, task))
        else:
            self.logger.debug("Joining in-flight resolution: %r", city_name)

        # Shielded so one cancelled caller does not cancel the others.
        return await asyncio.shield(pending)

    def _forget(self, city_name: str, task: asyncio.Future) -> None:
        if self._in_flight.get(city_name) is task:
            del self._in_flight[city_name]
        # Mark the outcome as retrieved in case every waiter was cancelled.
        if not task.cancelled():
            task.exception()

    async def _populate(self, city_name: str) -> Coordinates:
        """Geocode a name, store the first candidate and return it."""
        result = await self.geocoder.lookup(city_name)

        if result.failed:
            # Lookup errors are reported to the caller the same way as an
            # empty answer.
            self.logger.warning("Geocoding lookup failed for %r: %s", city_name, result.error)
            raise NotFound(city_name)

        if not result.candidates:
            self.logger.info("No geocoding match for %r", city_name)
            raise NotFound(city_name)

        coordinates = result.candidates[0]
        await self.store.put(city_name, coordinates)
        self.logger.info(
            "Stored coordinates for %r: %s, %s",
            city_name, coordinates.latitude, coordinates.longitude
        )
        return coordinates
