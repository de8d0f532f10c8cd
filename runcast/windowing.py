"""Forward-looking windows over an hourly series for charts and the hourly strip.

A window starts at a given index and emits consecutive hours until the
requested horizon is reached or the series runs out of temperature data,
whichever comes first. Truncation is silent.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Sequence

from runcast.domain import DisplayWindow, HourlySeries, WindowEntry
from runcast.weather_codes import classify
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="windowing")

SHORT_HORIZON = 8
HOURLY_HORIZON = 24
CHART_HORIZON = 48

# Monday first, matching date.weekday().
WEEKDAY_ABBREVIATIONS: Sequence[str] = ("ma", "di", "wo", "do", "vr", "za", "zo")


def hour_label(hour: int, weekday: str | None = None) -> str:
    """Format an hour as ``H:00``, prefixed with the weekday when given."""
    label = f"{hour}:00"
    return f"{weekday} {label}" if weekday else label


def _hour_of(series: HourlySeries, index: int) -> int:
    ts = series.timestamp[index]
    if isinstance(ts, dt.datetime):
        return ts.hour
    return int(ts) % 24


def _weekday_of(series: HourlySeries, index: int) -> str | None:
    """Weekday abbreviation for an index, or None when no date is known."""
    ts = series.timestamp[index]
    if isinstance(ts, dt.datetime):
        return WEEKDAY_ABBREVIATIONS[ts.weekday()]
    if series.start_date is None:
        return None
    day = series.start_date + dt.timedelta(days=index // 24)
    return WEEKDAY_ABBREVIATIONS[day.weekday()]


def _entry(series: HourlySeries, index: int) -> WindowEntry:
    hour = _hour_of(series, index)
    day_boundary = hour == 0
    weekday = _weekday_of(series, index) if day_boundary else None
    ts = series.timestamp[index]
    code = series.weather_code[index]
    precip = series.precipitation[index]
    return WindowEntry(
        index=index,
        hour=hour,
        label=hour_label(hour, weekday),
        day_boundary=day_boundary,
        weekday=weekday,
        time=ts if isinstance(ts, dt.datetime) else None,
        temperature=series.temperature[index],
        weather_code=code,
        category=classify(code),
        dew_point=series.dew_point[index],
        precipitation=precip if precip is not None else 0.0,
    )


def window(series: HourlySeries, start_index: int, horizon_hours: int) -> DisplayWindow:
    """Slice up to ``horizon_hours`` consecutive hours starting at ``start_index``.

    Stops early, without error, at the first index past the end of the
    series or whose temperature is missing. Never pads and never wraps.
    """
    start = max(0, start_index)
    entries: List[WindowEntry] = []
    truncated = False
    for i in range(start, start + max(0, horizon_hours)):
        if i >= len(series) or series.temperature[i] is None:
            truncated = True
            break
        entries.append(_entry(series, i))

    if truncated:
        logger.debug(
            "Display window truncated",
            extra={"start_index": start, "horizon_hours": horizon_hours, "emitted": len(entries)},
        )

    return DisplayWindow(
        start_index=start,
        horizon_hours=horizon_hours,
        truncated=truncated,
        precipitation_unit=series.precipitation_unit,
        entries=tuple(entries),
    )


def start_index_for_hour(reference_hour: int) -> int:
    """Hourly-strip alignment: series index == hour of day on the first day."""
    return max(0, reference_hour)


def _floor_hour(value: dt.datetime) -> dt.datetime:
    return value.replace(minute=0, second=0, microsecond=0)


def _comparable(ts: dt.datetime, now: dt.datetime) -> dt.datetime:
    """Express ``now`` so it can be compared with ``ts``.

    Naive series timestamps are wall-clock time at the forecast location,
    so an aware ``now`` is compared on its own wall clock.
    """
    if ts.tzinfo is None and now.tzinfo is not None:
        return now.replace(tzinfo=None)
    if ts.tzinfo is not None and now.tzinfo is None:
        return now.replace(tzinfo=ts.tzinfo)
    if ts.tzinfo is not None:
        return now.astimezone(ts.tzinfo)
    return now


def start_index_for_time(series: HourlySeries, now: dt.datetime) -> int:
    """Chart alignment: first index whose timestamp is at or after the current hour.

    Falls back to 0 when no timestamp qualifies or the series carries bare
    hour integers instead of datetimes.
    """
    for i, ts in enumerate(series.timestamp):
        if not isinstance(ts, dt.datetime):
            return 0
        if _floor_hour(ts) >= _floor_hour(_comparable(ts, now)):
            return i
    return 0
