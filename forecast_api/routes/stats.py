"""
Stats endpoint listing recently resolved cities. Requires HTTP Basic auth.
"""
from fastapi import APIRouter, Depends

from forecast_api.dependencies import get_coordinate_store, require_user
from forecast_api.models.weather import StatsResponse
from forecast_api.services.coordinate_store import CoordinateStore

router = APIRouter()

RECENT_CITIES_LIMIT = 10


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Recently resolved cities",
    description="The ten most recently resolved city names, newest first"
)
async def get_stats(
    _user: str = Depends(require_user),
    store: CoordinateStore = Depends(get_coordinate_store),
):
    cities = await store.recent(limit=RECENT_CITIES_LIMIT)
    return StatsResponse(cities=list(cities))
