"""GET /weather - Daily forecast for a stored location."""

from fastapi import APIRouter, Depends

from ..schemas.lookup import WeatherDayOut
from ..services.lookup import LocationRef, LookupService
from .dependencies import get_location_ref, get_lookup_service

router = APIRouter()


@router.get("/weather", response_model=list[WeatherDayOut])
async def get_weather(
    location: LocationRef = Depends(get_location_ref),
    lookup: LookupService = Depends(get_lookup_service),
):
    """Return cached forecast days, re-fetching when they are older than the TTL."""
    return await lookup.resolve_weather(location)
