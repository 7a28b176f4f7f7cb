"""Dependency wiring for the lookup endpoints."""

import json

from fastapi import Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..config import settings
from ..models.database import get_db
from ..schemas.lookup import LocationRefIn
from ..services.lookup import LocationRef, LookupService
from ..services.providers import ProviderClient
from ..services.store import CacheStore


def get_providers() -> ProviderClient:
    """Provider client built from process settings (overridden in tests)."""
    return ProviderClient(settings)


def get_lookup_service(
    db: Session = Depends(get_db),
    providers: ProviderClient = Depends(get_providers),
) -> LookupService:
    return LookupService(
        CacheStore(db),
        providers,
        weather_ttl_sec=settings.weather_cache_ttl_sec,
    )


def get_location_ref(request: Request) -> LocationRef:
    """Parse the ``data`` location object from the query string.

    Accepts bracketed keys (``data[id]=1&data[latitude]=..``) as sent by
    browser form serializers, or a JSON object in ``data``.
    """
    params = request.query_params
    raw: object = {
        key[len("data["):-1]: value
        for key, value in params.items()
        if key.startswith("data[") and key.endswith("]")
    }
    if not raw:
        text = params.get("data")
        if not text:
            raise HTTPException(status_code=400, detail="Missing location data")
        try:
            raw = json.loads(text)
        except ValueError:
            raise HTTPException(status_code=400, detail="Location data must be a JSON object")

    try:
        ref = LocationRefIn.model_validate(raw)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Location data needs id, latitude and longitude")
    return LocationRef(id=ref.id, latitude=ref.latitude, longitude=ref.longitude)
