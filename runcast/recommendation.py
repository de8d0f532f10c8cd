"""Deterministic clothing advice and hazard warnings.

Converts four scalars (temperature, apparent temperature, wind force, dew
point) into a structured Recommendation. Clothing tiers are first-match;
hazards are evaluated independently and appended in a fixed order.
"""

from __future__ import annotations

from typing import List

from runcast.domain import ClothingTier, Hazard, HazardCode, Recommendation, Severity
from runcast.scales import is_missing

# clothing tier bounds, degC
FREEZING_C = 0.0
MODERATE_MAX_C = 7.0

# glove refinement inside the moderate tier
GLOVES_WIND_FORCE = 4

# hazard thresholds
HAZARD_WIND_FORCE = 6
HAZARD_HEAT_C = 25.0
HAZARD_DEW_POINT_C = 18.0

_ADVICE_HEADER = "Wat trekken we aan?"

COLD_BADGE = "Brrr, ijskoud!"
COLD_ADVICE = (
    "Onder de 0°C zijn we geen helden: lange broek (tights) is een must! "
    "Trek ook een lekker jasje, een muts en handschoentjes aan."
)
MODERATE_BADGE = "Lekker frisjes hoor!"
MODERATE_ADVICE = (
    "Korte broek kan prima tot 0 graden voor de bikkels! "
    "Maar gooi er wel een jasje overheen."
)
GLOVES_CLAUSE = (
    "Door die gure wind die snijdt zijn handschoentjes misschien toch "
    "een goed idee voor je vingertoppen."
)
WARM_BADGE = "Heerlijk renweertje!"
WARM_ADVICE = "Boven de 7 graden is het T-shirt weer! Korte broek aan en vlammen maar."

WIND_HAZARD = "💨 Oei, flinke wind (6+ Bft)! Blijf uit de buurt van krakende takken."
HEAT_HAZARD = "🔥 Heet hoor! Drink genoeg water, anders droog je uit."
HUMIDITY_HAZARD = "💦 Pfff, wat een luchtvochtigheid. Rustig aan doen!"


def _needs_gloves(apparent_temp_c: float | None, force: int) -> bool:
    """Moderate-tier refinement: biting wind or sub-zero feels-like temperature."""
    if not is_missing(apparent_temp_c) and apparent_temp_c < FREEZING_C:
        return True
    return force >= GLOVES_WIND_FORCE


def _clothing(temp_c: float, apparent_temp_c: float | None, force: int) -> tuple[ClothingTier, str, Severity, str]:
    """Pick the clothing tier; returns (tier, badge, severity, advice)."""
    if temp_c < FREEZING_C:
        return ClothingTier.COLD, COLD_BADGE, Severity.CAUTION, COLD_ADVICE
    if temp_c <= MODERATE_MAX_C:
        advice = MODERATE_ADVICE
        if _needs_gloves(apparent_temp_c, force):
            advice = f"{advice} {GLOVES_CLAUSE}"
        return ClothingTier.MODERATE, MODERATE_BADGE, Severity.NORMAL, advice
    return ClothingTier.WARM, WARM_BADGE, Severity.NORMAL, WARM_ADVICE


def hazards_for(temp_c: float, force: int, dew_point_c: float | None) -> List[Hazard]:
    """Evaluate each hazard independently; order is wind, heat, humidity."""
    hazards: List[Hazard] = []
    if force >= HAZARD_WIND_FORCE:
        hazards.append(Hazard(code=HazardCode.WIND, message=WIND_HAZARD))
    if temp_c > HAZARD_HEAT_C:
        hazards.append(Hazard(code=HazardCode.HEAT, message=HEAT_HAZARD))
    if not is_missing(dew_point_c) and dew_point_c > HAZARD_DEW_POINT_C:
        hazards.append(Hazard(code=HazardCode.HUMIDITY, message=HUMIDITY_HAZARD))
    return hazards


def recommend(
    temperature_c: float,
    apparent_temperature_c: float | None,
    wind_force: int,
    dew_point_c: float | None,
) -> Recommendation:
    """Pure function: build clothing advice and hazards for the given conditions."""
    force = wind_force or 0
    tier, badge, severity, advice = _clothing(temperature_c, apparent_temperature_c, force)
    return Recommendation(
        badge_text=badge,
        severity=severity,
        clothing_tier=tier,
        clothing_advice=f"{_ADVICE_HEADER} {advice}",
        hazards=tuple(hazards_for(temperature_c, force, dew_point_c)),
    )
