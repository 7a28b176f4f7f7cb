"""GET /location - Geocode free text, cached per search query."""

from fastapi import APIRouter, Depends, HTTPException, Query

from ..schemas.lookup import LocationOut
from ..services.lookup import LookupService
from .dependencies import get_lookup_service

router = APIRouter()


@router.get("/location", response_model=LocationOut)
async def get_location(
    data: str = Query(default="", description="Free-form search text"),
    lookup: LookupService = Depends(get_lookup_service),
):
    """Return the stored location for the search text, geocoding it on first use."""
    if not data.strip():
        raise HTTPException(status_code=400, detail="Missing search text")
    return await lookup.resolve_location(data)
