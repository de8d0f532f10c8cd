"""Helpers for fetching forecast and geocoding data from Open-Meteo and Nominatim."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests

from runcast.config import settings
from runcast.domain import Location, PrecipitationUnit
from runcast.errors import ForecastUnavailableError, GeocodingUnavailableError
from utils.logging_utils import get_tagged_logger, mask_secret_params

logger = get_tagged_logger(__name__, tag="open_meteo_client")

# One attempt per call; failures surface as DataRetrievalError subclasses.
session = requests.Session()

CURRENT_VARS = [
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "is_day",
    "weather_code",
    "wind_speed_10m",
    "wind_direction_10m",
]

PRECIPITATION_FIELDS = {
    PrecipitationUnit.AMOUNT_MM: "precipitation",
    PrecipitationUnit.PROBABILITY_PERCENT: "precipitation_probability",
}

EXPECTED_UNITS = {
    "temperature_2m": "°C",
    "apparent_temperature": "°C",
    "dew_point_2m": "°C",
    "wind_speed_10m": "km/h",
    "wind_direction_10m": "°",
    "precipitation": "mm",
    "precipitation_probability": "%",
}

# Acceptable alternative spellings that should not trigger warnings.
ALLOWED_UNIT_SYNONYMS = {
    "wind_speed_10m": {"km/h", "kmh"},
    "wind_direction_10m": {"°", "deg", "degrees"},
    "precipitation_probability": {"%", "percent"},
}


@dataclass
class CurrentWeather:
    """Normalized current-conditions block returned by Open-Meteo."""
    time: dt.datetime
    temperature: float
    apparent_temperature: Optional[float]
    relative_humidity: Optional[float]
    is_day: Optional[bool]
    weather_code: Optional[int]
    wind_speed: Optional[float]
    wind_direction: Optional[float]
    units: Dict[str, str] = field(default_factory=dict)


@dataclass
class HourlyForecast:
    """Parallel hourly arrays as returned by Open-Meteo, with parsed times."""
    time: List[dt.datetime]
    temperature: List[Optional[float]]
    weather_code: List[Optional[int]]
    dew_point: List[Optional[float]]
    precipitation: List[Optional[float]]
    precipitation_unit: PrecipitationUnit
    units: Dict[str, str] = field(default_factory=dict)


@dataclass
class ForecastPayload:
    """Decoded forecast response: current block plus hourly arrays."""
    latitude: float
    longitude: float
    timezone: str
    current: CurrentWeather
    hourly: HourlyForecast


def _resolve_tz(tz_name: str | None, utc_offset_seconds: int | None) -> dt.tzinfo:
    """Prefer the IANA zone Open-Meteo reports; fall back to its fixed offset."""
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone from provider; using fixed offset", extra={"timezone": tz_name})
    return dt.timezone(dt.timedelta(seconds=utc_offset_seconds or 0))


def _iso_to_dt_with_tz(s: str, tz: dt.tzinfo) -> dt.datetime:
    """Interpret an Open-Meteo local time string as being in ``tz``."""
    naive = dt.datetime.fromisoformat(s)
    return naive.replace(tzinfo=tz)


def _warn_on_unexpected_units(units: dict, *, context: str):
    """Log a warning if Open-Meteo returns units we did not request."""
    if not units:
        return
    for name, expected in EXPECTED_UNITS.items():
        actual = units.get(name)
        if not actual or actual == expected:
            continue
        allowed = ALLOWED_UNIT_SYNONYMS.get(name, set())
        if actual not in allowed:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": name, "unit": actual, "expected": expected},
            )


def _normalize_is_day(value: Any) -> Optional[bool]:
    """Open-Meteo sends is_day as 0/1."""
    if value is None:
        return None
    return bool(int(value))


def _hourly_values(hourly: Dict[str, Any], key: str, length: int, *, required: bool = False) -> List[Any]:
    """One hourly array, checked against the number of timestamps.

    Optional arrays the provider omits come back as all-None.
    """
    if key not in hourly and not required:
        return [None] * length
    values = list(hourly[key])
    if len(values) != length:
        raise ValueError(f"hourly '{key}' has {len(values)} values for {length} timestamps")
    return values


def _get_json(url: str, params: dict, *, context: str, error_cls: type) -> Any:
    """Single best-effort GET; any transport, status or decode failure becomes ``error_cls``."""
    try:
        resp = session.get(
            url,
            params=params,
            timeout=settings.request_timeout_seconds,
            headers={"User-Agent": settings.user_agent},
        )
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error(
            "Upstream request failed",
            extra={"context": context, "url": mask_secret_params(url), "error": str(exc)},
        )
        raise error_cls(f"{context} request failed: {exc}") from exc


def fetch_forecast(
    latitude: float,
    longitude: float,
    *,
    timezone: str = "auto",
    forecast_days: int = 2,
    precipitation_unit: PrecipitationUnit = PrecipitationUnit.AMOUNT_MM,
) -> ForecastPayload:
    """Fetch current conditions plus hourly series for the given coordinates."""
    precip_field = PRECIPITATION_FIELDS[PrecipitationUnit(precipitation_unit)]
    hourly_vars = ["temperature_2m", "weather_code", "dew_point_2m", precip_field]

    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(CURRENT_VARS),
        "hourly": ",".join(hourly_vars),
        "timezone": timezone,
        "forecast_days": forecast_days,
        "temperature_unit": "celsius",
        "wind_speed_unit": "kmh",
    }
    logger.info(
        "Fetching forecast",
        extra={"latitude": latitude, "longitude": longitude, "forecast_days": forecast_days},
    )
    data = _get_json(settings.forecast_url, params, context="forecast", error_cls=ForecastUnavailableError)

    try:
        tz = _resolve_tz(data.get("timezone"), data.get("utc_offset_seconds"))
        current = data["current"]
        current_units = data.get("current_units", {})
        hourly = data["hourly"]
        hourly_units = data.get("hourly_units", {})
        times = list(hourly["time"])
        if current["temperature_2m"] is None:
            raise ValueError("current temperature_2m is null")

        current_weather = CurrentWeather(
            time=_iso_to_dt_with_tz(current["time"], tz),
            temperature=current["temperature_2m"],
            apparent_temperature=current.get("apparent_temperature", None),
            relative_humidity=current.get("relative_humidity_2m", None),
            is_day=_normalize_is_day(current.get("is_day", None)),
            weather_code=current.get("weather_code", None),
            wind_speed=current.get("wind_speed_10m", None),
            wind_direction=current.get("wind_direction_10m", None),
            units=dict(current_units),
        )

        hourly_forecast = HourlyForecast(
            time=[_iso_to_dt_with_tz(t, tz) for t in times],
            temperature=_hourly_values(hourly, "temperature_2m", len(times), required=True),
            weather_code=_hourly_values(hourly, "weather_code", len(times)),
            dew_point=_hourly_values(hourly, "dew_point_2m", len(times)),
            precipitation=_hourly_values(hourly, precip_field, len(times)),
            precipitation_unit=PrecipitationUnit(precipitation_unit),
            units=dict(hourly_units),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.error("Malformed forecast payload", extra={"error": str(exc)})
        raise ForecastUnavailableError(f"malformed forecast payload: {exc!r}") from exc

    _warn_on_unexpected_units(current_units, context="forecast_current")
    _warn_on_unexpected_units(hourly_units, context="forecast_hourly")

    return ForecastPayload(
        latitude=data.get("latitude", latitude),
        longitude=data.get("longitude", longitude),
        timezone=data.get("timezone") or timezone,
        current=current_weather,
        hourly=hourly_forecast,
    )


def search_location(name: str, *, language: str = "nl") -> Location | None:
    """Resolve a place name to coordinates; None when nothing matches."""
    params = {"name": name, "count": 1, "language": language, "format": "json"}
    data = _get_json(settings.geocoding_url, params, context="geocoding", error_cls=GeocodingUnavailableError)

    results = data.get("results") if isinstance(data, dict) else None
    if not results:
        logger.info("No geocoding match", extra={"query": name})
        return None

    loc = results[0]
    try:
        return Location(
            name=loc["name"],
            latitude=loc["latitude"],
            longitude=loc["longitude"],
            country=loc.get("country"),
            timezone=loc.get("timezone"),
        )
    except KeyError as exc:
        raise GeocodingUnavailableError(f"malformed geocoding result: missing {exc}") from exc


def reverse_geocode(latitude: float, longitude: float) -> str | None:
    """Return the city/town/village name for coordinates, or None if the address has none."""
    params = {"lat": latitude, "lon": longitude, "format": "json"}
    data = _get_json(
        settings.reverse_geocoding_url, params, context="reverse_geocoding", error_cls=GeocodingUnavailableError
    )
    address = data.get("address") if isinstance(data, dict) else None
    if not isinstance(address, dict):
        return None
    return address.get("city") or address.get("town") or address.get("village")
