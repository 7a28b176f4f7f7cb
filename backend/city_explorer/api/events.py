"""GET /events - Local events for a stored location."""

from fastapi import APIRouter, Depends

from ..schemas.lookup import EventOut
from ..services.lookup import LocationRef, LookupService
from .dependencies import get_location_ref, get_lookup_service

router = APIRouter()


@router.get("/events", response_model=list[EventOut])
async def get_events(
    location: LocationRef = Depends(get_location_ref),
    lookup: LookupService = Depends(get_lookup_service),
):
    return await lookup.resolve_events(location)
