"""
Suitability scorers: parameter, climate, soil, season and market.

Every function returns a fitness in [0, 1] and is pure: same inputs, same
output. Malformed numeric input raises InvalidInputError rather than leaking
NaN into the ranking.

Parameter score:
    outside [min, max]  → max(0, 1 - distance_outside / (max - min))
    inside, optimal set → 1 - |value - optimal| / max(optimal - min, max - optimal)
    inside, no optimal  → 1.0
    min == max          → 1.0 if value == min else 0.0
"""

import logging
from datetime import date

from agri_advisor.config import (
    FERTILITY_SCORES,
    UNKNOWN_FERTILITY_SCORE,
    SEASON_MONTHS,
    SEASON_ALIASES,
    YEAR_ROUND_TAGS,
    SEASON_MATCH_SCORE,
    SEASON_YEAR_ROUND_SCORE,
    SEASON_OFF_SCORE,
    DEMAND_SCORES,
    EXPORT_SCORE,
    VOLATILITY_SCORES,
    VOLATILITY_FLOOR_SCORE,
)
from agri_advisor.exceptions import InvalidInputError
from agri_advisor.models import CropProfile, EnvironmentReading, Range, SoilReading, require_number

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Parameter scorer
# ---------------------------------------------------------------------------

def score_parameter(value, min_value, max_value, optimal=None) -> float:
    """
    Score one numeric reading against a required range.

    Parameters
    ----------
    value : float
        Observed value (temperature, humidity, annual rainfall, pH ...).
    min_value, max_value : float
        Tolerable range. A degenerate range (min == max) only accepts
        exactly that value.
    optimal : float or None
        Optimum inside the range. None means "anywhere in range is ideal".

    Returns
    -------
    float in [0, 1].
    """
    value = require_number(value, "value")
    lo = require_number(min_value, "min")
    hi = require_number(max_value, "max")
    if lo > hi:
        raise InvalidInputError(f"range min {lo} is greater than max {hi}")

    if lo == hi:
        return 1.0 if value == lo else 0.0

    if value < lo or value > hi:
        distance = lo - value if value < lo else value - hi
        return max(0.0, 1.0 - distance / (hi - lo))

    if optimal is None:
        return 1.0

    opt = require_number(optimal, "optimal")
    max_distance = max(opt - lo, hi - opt)
    if max_distance <= 0:
        return 1.0
    return max(0.0, 1.0 - abs(value - opt) / max_distance)


def score_range(value, req: Range) -> float:
    return score_parameter(value, req.min, req.max, req.optimal)


# ---------------------------------------------------------------------------
# Climate and soil
# ---------------------------------------------------------------------------

def climate_score(crop: CropProfile, weather: EnvironmentReading) -> float:
    """Mean of temperature, annual rainfall and humidity fitness."""
    temp = score_range(weather.temperature, crop.temperature)
    rain = score_range(weather.annual_rainfall, crop.rainfall)
    humid = score_range(weather.humidity, crop.humidity)
    return (temp + rain + humid) / 3


def fertility_score(fertility: str | None) -> float:
    key = (fertility or "").strip().lower()
    return FERTILITY_SCORES.get(key, UNKNOWN_FERTILITY_SCORE)


def soil_score(crop: CropProfile, soil: SoilReading) -> float:
    """Mean of pH fitness and the fertility scalar. Soil type is checked by the ranker."""
    ph = score_range(soil.ph, crop.ph)
    return (ph + fertility_score(soil.fertility)) / 2


def normalise_soil_type(name: str) -> str:
    """'Sandy loam' → 'sandy_loam', 'Loamy' → 'loam'."""
    key = (name or "").strip().lower().replace("-", " ")
    key = "_".join(key.split())
    if key.endswith("y") and key[:-1] in ("loam", "sand", "clay", "silt"):
        key = key[:-1]
    return key


def soil_type_matches(crop: CropProfile, soil_type: str | None) -> bool:
    """
    Pass/fail soil-type prerequisite. True when no soil type is known or the
    crop lists no accepted types; otherwise the normalized tags must overlap.
    """
    if not soil_type or not crop.soil_types:
        return True
    wanted = normalise_soil_type(soil_type)
    return any(normalise_soil_type(t) == wanted for t in crop.soil_types)


# ---------------------------------------------------------------------------
# Season
# ---------------------------------------------------------------------------

def get_current_season(month: int | None = None) -> str:
    """Kharif (Jun-Oct), Rabi (Nov-Mar) or Zaid (Apr-May) for a calendar month."""
    if month is None:
        month = date.today().month
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidInputError(f"month must be an integer 1-12, got {month!r}")
    for season, months in SEASON_MONTHS.items():
        if month in months:
            return season
    raise InvalidInputError(f"month {month} is not mapped to a season")


def _season_tokens(tag: str) -> list[str]:
    clean = (tag or "").lower().replace(",", "/")
    return [t.strip() for t in clean.split("/") if t.strip()]


def is_year_round(tag: str) -> bool:
    return any(t in YEAR_ROUND_TAGS for t in _season_tokens(tag))


def season_matches(tag: str, season: str) -> bool:
    """True if a crop's season tag (e.g. 'Kharif', 'Spring/Summer') covers season."""
    aliases = SEASON_ALIASES.get(season, (season.lower(),))
    return any(t in aliases for t in _season_tokens(tag))


def season_score(crop: CropProfile, month: int | None = None, season: str | None = None) -> float:
    """Fitness of the crop for `season`, or for the season of `month` when no season is given."""
    season = season or get_current_season(month)
    if season_matches(crop.season, season):
        return SEASON_MATCH_SCORE
    if is_year_round(crop.season):
        return SEASON_YEAR_ROUND_SCORE
    return SEASON_OFF_SCORE


# ---------------------------------------------------------------------------
# Market
# ---------------------------------------------------------------------------

def price_volatility(crop: CropProfile) -> float:
    low, high = (require_number(p, "price") for p in crop.price_range)
    mean = (low + high) / 2
    if mean <= 0:
        raise InvalidInputError(f"{crop.name}: price range {crop.price_range} has no positive mean")
    return (high - low) / mean


def market_score(crop: CropProfile) -> float:
    """Demand (≤0.4) + export (0.3) + price stability (≤0.3), clamped to 1."""
    score = DEMAND_SCORES.get((crop.demand or "").lower(), 0.0)
    if crop.export_potential:
        score += EXPORT_SCORE

    volatility = price_volatility(crop)
    for bound, bonus in VOLATILITY_SCORES:
        if volatility < bound:
            score += bonus
            break
    else:
        score += VOLATILITY_FLOOR_SCORE

    return min(score, 1.0)
