"""Stateless numeric scale conversions used by the engine."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

# (inclusive upper bound in km/h, wind force); first match wins.
# The first bound is exclusive: anything below 1 km/h is calm.
WIND_FORCE_BREAKPOINTS: Tuple[Tuple[float, int], ...] = (
    (5.0, 1),
    (11.0, 2),
    (19.0, 3),
    (28.0, 4),
    (38.0, 5),
    (49.0, 6),
    (61.0, 7),
    (74.0, 8),
    (88.0, 9),
    (102.0, 10),
    (117.0, 11),
)
CALM_BELOW_KMH = 1.0
MAX_WIND_FORCE = 12

COMPASS_POINTS: Sequence[str] = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def is_missing(value: float | None) -> bool:
    """True for None and NaN; provider gaps arrive as either."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def wind_force(speed_kmh: float | None) -> int:
    """Map a wind speed in km/h to a 0-12 wind-force category.

    Negative or missing speeds are treated as calm; anything above the
    last breakpoint is force 12.
    """
    if is_missing(speed_kmh) or speed_kmh < CALM_BELOW_KMH:
        return 0
    for upper_bound, force in WIND_FORCE_BREAKPOINTS:
        if speed_kmh <= upper_bound:
            return force
    return MAX_WIND_FORCE


def celsius_to_fahrenheit(temp_c: float) -> float:
    """Convert degrees Celsius to Fahrenheit."""
    return temp_c * 9 / 5 + 32


def comfort_index(temp_c: float, dew_point_c: float) -> float:
    """Sum of air temperature and dew point, both in Fahrenheit."""
    return celsius_to_fahrenheit(temp_c) + celsius_to_fahrenheit(dew_point_c)


def compass_point(degrees: float | None) -> str | None:
    """Return the 16-point compass direction for a bearing, or None."""
    if is_missing(degrees):
        return None
    idx = int(((degrees % 360) + 11.25) // 22.5) % len(COMPASS_POINTS)
    return COMPASS_POINTS[idx]


def display_degrees(value: float | None) -> int | None:
    """Round a temperature for display, halves rounding up."""
    if is_missing(value):
        return None
    return math.floor(value + 0.5)
