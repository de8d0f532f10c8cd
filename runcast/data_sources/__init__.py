"""Data source factories for plugging different forecast backends."""

from .base import CallableForecastDataSource, ForecastDataSource
from .factory import build_data_source
from .open_meteo_client import (
    CurrentWeather,
    ForecastPayload,
    HourlyForecast,
    fetch_forecast,
    reverse_geocode,
    search_location,
)

__all__ = [
    "build_data_source",
    "ForecastDataSource",
    "CallableForecastDataSource",
    "CurrentWeather",
    "ForecastPayload",
    "HourlyForecast",
    "fetch_forecast",
    "reverse_geocode",
    "search_location",
]
