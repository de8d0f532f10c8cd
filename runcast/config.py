"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the runcast service."""
    model_config = SettingsConfigDict(env_prefix="RUNCAST_", extra="ignore")

    forecast_source: str = "open_meteo"
    default_city: str = "Amsterdam"
    default_latitude: float = 52.3676
    default_longitude: float = 4.9041
    timezone: str = "auto"
    forecast_days: int = 2
    precipitation_unit: str = "mm"  # options: mm, percent
    language: str = "nl"
    request_timeout_seconds: float = 10.0
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    reverse_geocoding_url: str = "https://nominatim.openstreetmap.org/reverse"
    user_agent: str = "runcast/0.1"
    api_key: str | None = None
    hourly_horizon_hours: int = 24
    chart_horizon_hours: int = 48
    log_level: str = "INFO"

    @field_validator("forecast_url", "geocoding_url", "reverse_geocoding_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize endpoint URLs so query strings attach cleanly."""
        return str(v).rstrip("/")

    @field_validator("precipitation_unit", mode="after")
    @classmethod
    def normalize_precipitation_unit(cls, v: str) -> str:
        """Accept a few spellings for the probability feed."""
        lowered = str(v).strip().lower()
        if lowered in {"%", "percent", "probability"}:
            return "percent"
        if lowered in {"mm", "amount"}:
            return "mm"
        raise ValueError(f"Unsupported precipitation unit '{v}'")


settings = Settings()


if __name__ == "__main__":
    logger.logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
