"""Running-comfort classification from temperature and dew point.

The index is the sum of air temperature and dew point in Fahrenheit, a
runner's rule of thumb for how much heat and humidity slow you down.
Bands have inclusive upper bounds every 10F from 100 to 180, plus an open
band above 180. Labels and pace annotations are product copy and are kept
as-is.
"""

from __future__ import annotations

from typing import Tuple

from runcast.domain import ComfortRating
from runcast.scales import comfort_index, is_missing

COMFORT_BANDS: Tuple[ComfortRating, ...] = (
    ComfortRating(
        tier=1,
        upper_bound_f=100.0,
        label="Perfect: gaan met die banaan!",
        pace_adjustment="Lekker knallen op volle snelheid!",
        style="very-comfortable",
    ),
    ComfortRating(
        tier=2,
        upper_bound_f=110.0,
        label="Prima renweertje",
        pace_adjustment="Tempo: 0% - 0.5% langzamer",
        style="comfortable",
    ),
    ComfortRating(
        tier=3,
        upper_bound_f=120.0,
        label="Beetje klammig hoor",
        pace_adjustment="Tempo: 0.5% - 1.0% langzamer",
        style="humid",
    ),
    ComfortRating(
        tier=4,
        upper_bound_f=130.0,
        label="Lekker warmpjes!",
        pace_adjustment="Tempo: 1.0% - 2.0% langzamer",
        style="uncomfortable",
    ),
    ComfortRating(
        tier=5,
        upper_bound_f=140.0,
        label="Plakkerig!",
        pace_adjustment="Tempo: 2.0% - 3.0% langzamer",
        style="uncomfortable",
    ),
    ComfortRating(
        tier=6,
        upper_bound_f=150.0,
        label="Pittig hoor, rustig aan!",
        pace_adjustment="Tempo: 3.0% - 4.5% langzamer",
        style="oppressive",
    ),
    ComfortRating(
        tier=7,
        upper_bound_f=160.0,
        label="Zwaar hoor, pas op jezelf",
        pace_adjustment="Tempo: 4.5% - 6.0% langzamer",
        style="oppressive",
    ),
    ComfortRating(
        tier=8,
        upper_bound_f=170.0,
        label="Poeh, echt afzien dit!",
        pace_adjustment="Tempo: 6.0% - 8.0% langzamer",
        style="oppressive",
    ),
    ComfortRating(
        tier=9,
        upper_bound_f=180.0,
        label="Extreem! Blijf drinken!",
        pace_adjustment="Tempo: 8.0% - 10.0% langzamer",
        style="oppressive",
    ),
    ComfortRating(
        tier=10,
        upper_bound_f=None,
        label="Niet doen! Veel te risicovol",
        pace_adjustment="Stop met rennen, zoek de schaduw!",
        style="oppressive",
    ),
)


def rating_for_index(index_f: float) -> ComfortRating:
    """Select the first band whose upper bound is >= the index."""
    for band in COMFORT_BANDS:
        if band.upper_bound_f is None or index_f <= band.upper_bound_f:
            return band
    return COMFORT_BANDS[-1]


def comfort_rating(temp_c: float | None, dew_point_c: float | None) -> ComfortRating | None:
    """Classify running comfort for an air temperature and dew point in Celsius.

    Returns None when either input is missing or NaN.
    """
    if is_missing(temp_c) or is_missing(dew_point_c):
        return None
    return rating_for_index(comfort_index(temp_c, dew_point_c))
