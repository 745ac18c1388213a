"""
Durable city name -> coordinates mapping backed by Tortoise ORM.
"""
from typing import List, Optional

from tortoise import connections
from tortoise.exceptions import BaseORMException

from forecast_api.database.models import City
from forecast_api.exceptions import StorageFailure
from forecast_api.models.weather import Coordinates


class CoordinateStore:
    """
    Persistence for resolved city coordinates.

    Names are matched exactly; no trimming or case-folding happens here.
    Every driver or ORM error is re-raised as StorageFailure.
    """

    def __init__(self, connection_name: str = "default"):
        """
        Initialize coordinate store.

        Args:
            connection_name: Tortoise connection to run queries on. The
                connection pool behind it is shared by all callers.
        """
        self.connection_name = connection_name

    def _connection(self):
        return connections.get(self.connection_name)

    async def get(self, name: str) -> Optional[Coordinates]:
        """
        Look up the stored coordinates for a city name.

        Args:
            name: City name, used verbatim

        Returns:
            Coordinates, or None if the name has never been stored

        Raises:
            StorageFailure: If the query fails
        """
        try:
            city = await City.filter(name=name).using_db(self._connection()).first()
        except (BaseORMException, OSError) as e:
            raise StorageFailure(f"Failed to read coordinates for {name!r}: {e}") from e

        if city is None:
            return None
        return Coordinates(latitude=city.latitude, longitude=city.longitude)

    async def put(self, name: str, coordinates: Coordinates) -> None:
        """
        Insert coordinates for a city name.

        The insert is unconditional; callers are expected to have checked
        with get() first.

        Raises:
            StorageFailure: If the insert fails
        """
        try:
            await City.create(
                name=name,
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
                using_db=self._connection(),
            )
        except (BaseORMException, OSError) as e:
            raise StorageFailure(f"Failed to store coordinates for {name!r}: {e}") from e

    async def recent(self, limit: int = 10) -> List[str]:
        """
        Names of the most recently stored cities, newest first.

        Raises:
            StorageFailure: If the query fails
        """
        try:
            return await (
                City.all()
                .using_db(self._connection())
                .order_by("-id")
                .limit(limit)
                .values_list("name", flat=True)
            )
        except (BaseORMException, OSError) as e:
            raise StorageFailure(f"Failed to list recent cities: {e}") from e
