"""HTTP API for the runner's weather advisory."""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel

from .comfort import comfort_rating
from .config import settings
from .data_sources import build_data_source
from .domain import AdvisoryReport, ComfortRating, Location
from .errors import ForecastUnavailableError, GeocodingUnavailableError
from .forecast_service import get_advisory, resolve_location
from .scales import comfort_index, wind_force
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="runcast/api")

FORECAST_UNAVAILABLE_DETAIL = "Could not retrieve weather data."
GEOCODING_UNAVAILABLE_DETAIL = "Could not retrieve location data."


def require_api_key(x_api_key: str | None = Header(default=None)):
    """Validate the X-API-Key header when an api_key is configured; open otherwise."""
    if not settings.api_key:
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
DATA_SOURCE = build_data_source(settings)


class WindForceResponse(BaseModel):
    """Wind-force lookup result."""
    speed_kmh: float
    force: int


class ComfortResponse(BaseModel):
    """Comfort lookup result with the intermediate index."""
    temperature: float
    dew_point: float
    comfort_index_f: float
    rating: ComfortRating


class LocationResponse(BaseModel):
    """Geocoding lookup result."""
    location: Location


def _resolve(city: Optional[str], latitude: Optional[float], longitude: Optional[float]) -> Location:
    """Resolve request parameters to a Location or raise the matching HTTP error."""
    if (latitude is None) != (longitude is None):
        raise HTTPException(status_code=400, detail="Provide both latitude and longitude.")
    try:
        location = resolve_location(city=city, latitude=latitude, longitude=longitude, data_source=DATA_SOURCE)
    except GeocodingUnavailableError as exc:
        logger.warning("Geocoding failed", extra={"city": city, "error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=GEOCODING_UNAVAILABLE_DETAIL)
    if location is None:
        raise HTTPException(status_code=404, detail=f"No location found for '{city}'.")
    return location


@router.get("/advisory", response_model=AdvisoryReport)
def advisory(
    city: Optional[str] = Query(default=None, min_length=1),
    latitude: Optional[float] = Query(default=None, ge=-90, le=90),
    longitude: Optional[float] = Query(default=None, ge=-180, le=180),
):
    """Return weather, comfort, clothing advice and display windows for a location."""
    location = _resolve(city, latitude, longitude)
    logger.info(f"Advisory requested for {location.name} ({location.latitude}, {location.longitude})")
    try:
        return get_advisory(location, data_source=DATA_SOURCE)
    except ForecastUnavailableError as exc:
        logger.warning("Forecast retrieval failed", extra={"location": location.name, "error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=FORECAST_UNAVAILABLE_DETAIL)


@router.get("/locations/search", response_model=LocationResponse)
def search_locations(name: str = Query(min_length=1)):
    """Look up a place by name."""
    return LocationResponse(location=_resolve(name, None, None))


@router.get("/scales/wind-force", response_model=WindForceResponse)
def wind_force_lookup(speed_kmh: float = Query()):
    """Convert a wind speed in km/h to its wind-force category."""
    return WindForceResponse(speed_kmh=speed_kmh, force=wind_force(speed_kmh))


@router.get("/scales/comfort", response_model=ComfortResponse)
def comfort_lookup(temperature: float = Query(), dew_point: float = Query()):
    """Classify running comfort for a temperature and dew point in Celsius."""
    rating = comfort_rating(temperature, dew_point)
    if rating is None:
        raise HTTPException(status_code=422, detail="Temperature and dew point must be numbers.")
    return ComfortResponse(
        temperature=temperature,
        dew_point=dew_point,
        comfort_index_f=comfort_index(temperature, dew_point),
        rating=rating,
    )
