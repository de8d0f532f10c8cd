"""Interfaces and helpers for forecast data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from runcast.data_sources.open_meteo_client import ForecastPayload
from runcast.domain import Location, PrecipitationUnit


class ForecastDataSource(Protocol):
    """Interface for anything that can provide forecasts and resolve places."""

    def fetch_forecast(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone: str = "auto",
        forecast_days: int = 2,
        precipitation_unit: PrecipitationUnit = PrecipitationUnit.AMOUNT_MM,
    ) -> ForecastPayload:
        """Return current conditions plus the hourly series."""
        ...

    def search_location(self, name: str, *, language: str = "nl") -> Location | None:
        """Return the best match for a place name, or None."""
        ...

    def reverse_geocode(self, latitude: float, longitude: float) -> str | None:
        """Return a place name for coordinates, or None."""
        ...


@dataclass
class CallableForecastDataSource(ForecastDataSource):
    """Wrap three callables so they can be swapped for different backends."""

    forecast: Callable[..., ForecastPayload]
    geocode: Callable[..., Location | None]
    reverse: Callable[..., str | None]

    def fetch_forecast(self, *args, **kwargs) -> ForecastPayload:
        """Delegate to the configured forecast callable."""
        return self.forecast(*args, **kwargs)

    def search_location(self, *args, **kwargs) -> Location | None:
        """Delegate to the configured geocoding callable."""
        return self.geocode(*args, **kwargs)

    def reverse_geocode(self, *args, **kwargs) -> str | None:
        """Delegate to the configured reverse-geocoding callable."""
        return self.reverse(*args, **kwargs)
