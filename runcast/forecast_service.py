"""Turn provider payloads into engine inputs and assemble advisories for a location."""
from __future__ import annotations

import sys
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError

from runcast.config import settings
from runcast.data_sources import ForecastDataSource, ForecastPayload, build_data_source
from runcast.domain import AdvisoryReport, HourlySeries, Location, PrecipitationUnit, WeatherSnapshot
from runcast.engine import build_advisory
from runcast.errors import ForecastUnavailableError, GeocodingUnavailableError
from runcast.scales import display_degrees, is_missing
from runcast.windowing import SHORT_HORIZON
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_service")

# Place names used when reverse geocoding cannot name the spot.
UNNAMED_PLACE = "Jouw plekje"
UNKNOWN_PLACE = "Ergens op de wereld"


def _value_at(values: Sequence[Optional[float]], index: int) -> Optional[float]:
    """Value at ``index``, or None when the index is out of range."""
    if 0 <= index < len(values):
        return values[index]
    return None


def _nearest_present(values: Sequence[Optional[float]], index: int) -> Optional[float]:
    """Value at ``index``, else the closest non-missing neighbour, else None."""
    value = _value_at(values, index)
    if not is_missing(value):
        return value
    for offset in range(1, len(values)):
        for candidate in (index - offset, index + offset):
            value = _value_at(values, candidate)
            if not is_missing(value):
                return value
    return None


def series_from_payload(payload: ForecastPayload) -> HourlySeries:
    """Build the immutable hourly series from the provider's parallel arrays."""
    hourly = payload.hourly
    start_date = hourly.time[0].date() if hourly.time else None
    return HourlySeries(
        timestamp=tuple(hourly.time),
        temperature=tuple(hourly.temperature),
        weather_code=tuple(hourly.weather_code),
        dew_point=tuple(hourly.dew_point),
        precipitation=tuple(hourly.precipitation),
        precipitation_unit=hourly.precipitation_unit,
        start_date=start_date,
    )


def snapshot_from_payload(payload: ForecastPayload) -> WeatherSnapshot:
    """Build the current-conditions snapshot.

    The hourly arrays start at local midnight, so the hour of the current
    observation doubles as the index for dew point and precipitation.
    """
    current = payload.current
    hourly = payload.hourly
    reference_hour = current.time.hour

    dew_point = _nearest_present(hourly.dew_point, reference_hour)
    if dew_point is None:
        logger.warning("No dew point available near the reference hour", extra={"reference_hour": reference_hour})

    return WeatherSnapshot(
        temperature=current.temperature,
        apparent_temperature=current.apparent_temperature,
        wind_speed_kmh=current.wind_speed if current.wind_speed is not None else 0.0,
        wind_direction_deg=current.wind_direction,
        weather_code=current.weather_code,
        dew_point=dew_point,
        reference_hour=reference_hour,
        precipitation=_value_at(hourly.precipitation, reference_hour),
        precipitation_unit=hourly.precipitation_unit,
        observed_at=current.time,
    )


def get_weather_for_location(
    latitude: float,
    longitude: float,
    *,
    timezone: str | None = None,
    forecast_days: int | None = None,
    precipitation_unit: PrecipitationUnit | str | None = None,
    data_source: ForecastDataSource | None = None,
) -> Tuple[WeatherSnapshot, HourlySeries]:
    """Fetch one forecast and split it into engine inputs.

    Raises ForecastUnavailableError when the provider cannot be reached or
    returns an unusable payload.
    """
    ds = data_source or build_data_source(settings)
    payload = ds.fetch_forecast(
        latitude,
        longitude,
        timezone=timezone or settings.timezone,
        forecast_days=forecast_days or settings.forecast_days,
        precipitation_unit=PrecipitationUnit(precipitation_unit or settings.precipitation_unit),
    )
    logger.debug("Fetched forecast", extra={"hours": len(payload.hourly.time), "timezone": payload.timezone})
    try:
        return snapshot_from_payload(payload), series_from_payload(payload)
    except ValidationError as exc:
        logger.error("Forecast payload failed validation", extra={"error": str(exc)})
        raise ForecastUnavailableError(f"unusable forecast payload: {exc}") from exc


def name_for_coordinates(latitude: float, longitude: float, data_source: ForecastDataSource) -> str:
    """Reverse-geocode coordinates, degrading to a generic label when that fails."""
    try:
        name = data_source.reverse_geocode(latitude, longitude)
    except GeocodingUnavailableError as exc:
        logger.warning("Reverse geocoding failed; using generic place name", extra={"error": str(exc)})
        return UNKNOWN_PLACE
    return name or UNNAMED_PLACE


def resolve_location(
    *,
    city: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    data_source: ForecastDataSource | None = None,
) -> Location | None:
    """Resolve the location to advise on.

    A city name is looked up with the geocoder (None when nothing matches);
    coordinates are named by reverse geocoding; with neither, the configured
    home location is used.
    """
    ds = data_source or build_data_source(settings)
    if city:
        return ds.search_location(city, language=settings.language)
    if latitude is not None and longitude is not None:
        return Location(
            name=name_for_coordinates(latitude, longitude, ds),
            latitude=latitude,
            longitude=longitude,
        )
    return Location(
        name=settings.default_city,
        latitude=settings.default_latitude,
        longitude=settings.default_longitude,
    )


def get_advisory(location: Location, *, data_source: ForecastDataSource | None = None) -> AdvisoryReport:
    """Fetch the forecast for a location and run the interpretation engine on it."""
    snapshot, series = get_weather_for_location(
        location.latitude,
        location.longitude,
        timezone=location.timezone or settings.timezone,
        data_source=data_source,
    )
    logger.info(
        "Building advisory",
        extra={"location": location.name, "reference_hour": snapshot.reference_hour},
    )
    return build_advisory(
        snapshot,
        series,
        location=location,
        hourly_horizon=settings.hourly_horizon_hours,
        chart_horizon=settings.chart_horizon_hours,
    )


def main(argv: List[str] | None = None):
    """Manual helper: print the advisory and the next few hours for a city (or the home location)."""
    from utils.logging_utils import setup_logging

    setup_logging(level=settings.log_level, job_name="runcast_cli")
    args = sys.argv[1:] if argv is None else argv
    location = resolve_location(city=" ".join(args) if args else None)
    if location is None:
        print(f"No location found for '{' '.join(args)}'")
        return 1

    report = get_advisory(location)
    print(f"{location.name}: {display_degrees(report.temperature)} °C, {report.weather.emoji} {report.weather.label}\n"
          f"    wind: {report.wind.force} Bft ({report.wind.speed_kmh:.0f} km/h {report.wind.compass or ''})\n"
          f"    comfort: {report.comfort.label if report.comfort else 'n/a'}\n"
          f"    advice: {report.recommendation.badge_text} {report.recommendation.clothing_advice}")
    for hazard in report.recommendation.hazards:
        print(f"    ! {hazard.message}")
    for entry in report.hourly.entries[:SHORT_HORIZON]:
        print(f"    {entry.label:>9} {entry.category.emoji} {display_degrees(entry.temperature)}°")
    return 0


if __name__ == "__main__":
    sys.exit(main())
