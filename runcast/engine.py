"""Orchestrates the interpretation engine for one snapshot of forecast data.

Every step is a pure function of the snapshot and series; the call order
below only fixes the order of fields in the assembled report.
"""

from __future__ import annotations

import datetime as dt

from runcast.comfort import comfort_rating
from runcast.domain import AdvisoryReport, HourlySeries, Location, WeatherSnapshot, WindReading
from runcast.recommendation import recommend
from runcast.scales import compass_point, wind_force
from runcast.weather_codes import classify
from runcast.windowing import (
    CHART_HORIZON,
    HOURLY_HORIZON,
    start_index_for_hour,
    start_index_for_time,
    window,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="engine")


def wind_reading(snapshot: WeatherSnapshot) -> WindReading:
    """Raw wind speed and direction alongside the derived wind force."""
    return WindReading(
        speed_kmh=snapshot.wind_speed_kmh,
        force=wind_force(snapshot.wind_speed_kmh),
        direction_deg=snapshot.wind_direction_deg,
        compass=compass_point(snapshot.wind_direction_deg),
    )


def build_advisory(
    snapshot: WeatherSnapshot,
    series: HourlySeries,
    *,
    location: Location | None = None,
    now: dt.datetime | None = None,
    hourly_horizon: int = HOURLY_HORIZON,
    chart_horizon: int = CHART_HORIZON,
) -> AdvisoryReport:
    """Assemble the full advisory for a snapshot and its hourly series."""
    now = now or snapshot.observed_at or dt.datetime.now(dt.timezone.utc)

    weather = classify(snapshot.weather_code)
    wind = wind_reading(snapshot)

    comfort = comfort_rating(snapshot.temperature, snapshot.dew_point)

    recommendation = recommend(
        snapshot.temperature,
        snapshot.apparent_temperature,
        wind.force,
        snapshot.dew_point,
    )

    hourly = window(series, start_index_for_hour(snapshot.reference_hour), hourly_horizon)
    chart = window(series, start_index_for_time(series, now), chart_horizon)

    logger.debug(
        "Built advisory",
        extra={
            "weather_code": snapshot.weather_code,
            "wind_force": wind.force,
            "comfort_tier": comfort.tier if comfort else None,
            "hazards": [h.code.value for h in recommendation.hazards],
            "hourly_entries": len(hourly.entries),
            "chart_entries": len(chart.entries),
        },
    )

    return AdvisoryReport(
        location=location,
        generated_at=now,
        temperature=snapshot.temperature,
        apparent_temperature=snapshot.apparent_temperature,
        dew_point=snapshot.dew_point,
        weather=weather,
        wind=wind,
        comfort=comfort,
        recommendation=recommendation,
        hourly=hourly,
        chart=chart,
    )
