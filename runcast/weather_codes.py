"""Weather condition code lookup.

Codes follow the WMO interpretation used by Open-Meteo
(https://open-meteo.com/en/docs). Only the canonical bucket codes are
listed; every other code maps to ``UNKNOWN_WEATHER``.
"""

from __future__ import annotations

from typing import Any, Tuple

from runcast.domain import WeatherCategory

WEATHER_CATEGORIES: Tuple[WeatherCategory, ...] = (
    WeatherCategory(code=0, label="Strakblauwe lucht, heerlijk!", icon="sun", emoji="☀️"),
    WeatherCategory(code=1, label="Appeltje-eitje zonnetje", icon="sun", emoji="🌤️"),
    WeatherCategory(code=2, label="Wat wolkjes, prima zo", icon="cloud", emoji="⛅"),
    WeatherCategory(code=3, label="Helemaal grijs, maar ach", icon="cloud", emoji="☁️"),
    WeatherCategory(code=45, label="Mist! Pas op de paaltjes", icon="cloud", emoji="🌫️"),
    WeatherCategory(code=51, label="Miezeren, word je hard van!", icon="cloud-drizzle", emoji="🌦️"),
    WeatherCategory(code=61, label="Regen! Gratis verfrissing", icon="cloud-rain", emoji="🌧️"),
    WeatherCategory(code=71, label="Sneeuw! Pas op voor de gladheid", icon="snowflake", emoji="❄️"),
    WeatherCategory(code=95, label="Onweer! Blijf maar lekker binnen", icon="cloud-lightning", emoji="⛈️"),
)

UNKNOWN_WEATHER = WeatherCategory(
    code=None,
    label="Vreemd weertje vandaag",
    icon="thermometer",
    emoji="🌡️",
)


def _as_code(value: Any) -> int | None:
    """Coerce integral numbers (including 61.0) to int; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def classify(code: Any) -> WeatherCategory:
    """Return the category for a weather code, or ``UNKNOWN_WEATHER``. Never raises."""
    normalized = _as_code(code)
    if normalized is None:
        return UNKNOWN_WEATHER
    for category in WEATHER_CATEGORIES:
        if category.code == normalized:
            return category
    return UNKNOWN_WEATHER
