"""Domain vocabulary and strict schemas for the weather-interpretation engine.

This module defines the stable contract between the forecast layer, the
deterministic engine, and any presentation layer: enums, input snapshots,
and the Pydantic models for every derived value. No interpretation logic
lives here.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _FrozenModel(BaseModel):
    """Base model with strict extra handling; instances are immutable."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class PrecipitationUnit(str, Enum):
    """What the precipitation series holds; the engine never converts between them."""
    AMOUNT_MM = "mm"
    PROBABILITY_PERCENT = "percent"


class Severity(str, Enum):
    """Badge severity for a recommendation."""
    NORMAL = "normal"
    CAUTION = "caution"


class ClothingTier(str, Enum):
    """Temperature tier that selected the clothing advice."""
    COLD = "cold"
    MODERATE = "moderate"
    WARM = "warm"


class HazardCode(str, Enum):
    """Independently triggered warning conditions, in output order."""
    WIND = "wind"
    HEAT = "heat"
    HUMIDITY = "humidity"


class Location(_FrozenModel):
    """A resolved place to fetch forecasts for."""
    name: str
    latitude: float
    longitude: float
    country: str | None = None
    timezone: str | None = None


class WeatherSnapshot(_FrozenModel):
    """Current conditions for one engine invocation (degC, km/h)."""
    temperature: float
    apparent_temperature: float | None = None
    wind_speed_kmh: float = 0.0
    wind_direction_deg: float | None = None
    weather_code: int | None = None
    dew_point: float | None = None
    reference_hour: int = Field(default=0, ge=0, le=23)
    precipitation: float | None = None
    precipitation_unit: PrecipitationUnit = PrecipitationUnit.AMOUNT_MM
    observed_at: datetime | None = None


class HourlySeries(_FrozenModel):
    """Parallel hourly sequences; index i across all of them is the same hour.

    ``timestamp`` holds either datetimes (ISO strings are parsed) or bare
    hour integers. ``start_date`` lets the windower name weekdays when the
    timestamps carry no date.
    """
    timestamp: Tuple[datetime | int, ...]
    temperature: Tuple[float | None, ...]
    weather_code: Tuple[int | None, ...]
    dew_point: Tuple[float | None, ...]
    precipitation: Tuple[float | None, ...]
    precipitation_unit: PrecipitationUnit = PrecipitationUnit.AMOUNT_MM
    start_date: date | None = None

    @model_validator(mode="after")
    def check_equal_lengths(self) -> "HourlySeries":
        """Reject series whose parallel sequences disagree in length."""
        lengths = {
            "timestamp": len(self.timestamp),
            "temperature": len(self.temperature),
            "weather_code": len(self.weather_code),
            "dew_point": len(self.dew_point),
            "precipitation": len(self.precipitation),
        }
        if len(set(lengths.values())) > 1:
            raise ValueError(f"hourly sequences must have equal length, got {lengths}")
        return self

    def __len__(self) -> int:
        return len(self.timestamp)


class WindReading(_FrozenModel):
    """Raw wind speed next to its wind-force category."""
    speed_kmh: float
    force: int = Field(ge=0, le=12)
    direction_deg: float | None = None
    compass: str | None = None


class ComfortRating(_FrozenModel):
    """One of ten ordered running-comfort bands."""
    tier: int = Field(ge=1, le=10)
    label: str
    pace_adjustment: str
    style: str
    upper_bound_f: float | None = None


class WeatherCategory(_FrozenModel):
    """Description and icon for a weather condition code."""
    code: int | None
    label: str
    icon: str
    emoji: str


class Hazard(_FrozenModel):
    """A single warning attached to a recommendation."""
    code: HazardCode
    message: str


class Recommendation(_FrozenModel):
    """Clothing advice, badge and ordered hazard list."""
    badge_text: str
    severity: Severity
    clothing_tier: ClothingTier
    clothing_advice: str
    hazards: Tuple[Hazard, ...] = ()


class WindowEntry(_FrozenModel):
    """One hour of a display window."""
    index: int
    hour: int = Field(ge=0, le=23)
    label: str
    day_boundary: bool = False
    weekday: str | None = None
    time: datetime | None = None
    temperature: float
    weather_code: int | None = None
    category: WeatherCategory
    dew_point: float | None = None
    precipitation: float = 0.0


class DisplayWindow(_FrozenModel):
    """Forward-looking, truncated slice of an hourly series."""
    start_index: int
    horizon_hours: int
    truncated: bool = False
    precipitation_unit: PrecipitationUnit = PrecipitationUnit.AMOUNT_MM
    entries: Tuple[WindowEntry, ...] = ()

    def labels(self) -> List[str]:
        """Axis labels for charting."""
        return [e.label for e in self.entries]

    def temperatures(self) -> List[float]:
        """Temperature series for charting."""
        return [e.temperature for e in self.entries]

    def precipitation(self) -> List[float]:
        """Precipitation series for charting, in ``precipitation_unit``."""
        return [e.precipitation for e in self.entries]


class AdvisoryReport(_FrozenModel):
    """Everything the presentation layer needs for one location and instant."""
    location: Location | None = None
    generated_at: datetime
    temperature: float
    apparent_temperature: float | None = None
    dew_point: float | None = None
    weather: WeatherCategory
    wind: WindReading
    comfort: ComfortRating | None = None
    recommendation: Recommendation
    hourly: DisplayWindow
    chart: DisplayWindow
