"""Top-level API router aggregation."""

from fastapi import APIRouter

from . import events, location, weather

api_router = APIRouter()

api_router.include_router(location.router)
api_router.include_router(weather.router)
api_router.include_router(events.router)
