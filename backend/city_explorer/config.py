"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic_settings import BaseSettings

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    # Database
    database_url: str = f"sqlite:///{_PROJECT_ROOT / 'city_explorer.db'}"

    # Provider API keys
    geocode_api_key: str = ""
    weather_api_key: str = ""
    eventbrite_api_key: str = ""

    # Provider endpoints
    geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    weather_url: str = "https://api.darksky.net/forecast"
    events_url: str = "https://www.eventbriteapi.com/v3/events/search/"

    # Outbound HTTP timeout per provider call (seconds)
    provider_timeout_sec: float = 5.0

    # Weather rows older than this are evicted and re-fetched
    weather_cache_ttl_sec: int = 6 * 60 * 60

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = {"env_file": str(_ENV_FILE), "extra": "ignore"}


settings = Settings()
