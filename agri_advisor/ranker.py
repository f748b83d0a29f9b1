"""
Composite recommendation ranker for crops and fertilizers.

Crop suitability = weighted mean of climate (0.40), soil (0.25), season (0.20)
and market (0.15) fitness. Components that cannot be computed because the
optional input is absent (no soil reading, no weather) are dropped and the
sum is divided by the weights actually applied, so missing optional data is
never punished by a fixed denominator.

Pipeline per request:
    hard filter (soil type) → score each candidate → tier →
    user filters → stable sort by (-score, input index) → truncate

Scores are fitness values in [0, 1] until the ScoredCandidate is built, where
they are rescaled to [0, 100].
"""

import json
import logging
import warnings
from typing import Iterable

from agri_advisor.config import (
    CROP_WEIGHTS,
    FERTILIZER_WEIGHTS,
    CROP_RESULT_LIMIT,
    EXTENDED_RESULT_LIMIT,
    FERTILIZER_RESULT_LIMIT,
    TIER_HIGH_THRESHOLD,
    TIER_MEDIUM_THRESHOLD,
    PROFITABILITY_MODE,
    DEMAND_TIER_BONUS,
    EXPORT_TIER_BONUS,
    PRICE_LEVEL_BONUS,
    PROFITABILITY_MULTIPLIER,
    PRICE_TIER_HIGH,
    PRICE_TIER_MEDIUM,
    GROWTH_STAGES,
    ALL_CROPS_TAG,
    ACIDIC_SOIL_PH,
    SOIL_FIT_MATCH,
    SOIL_FIT_DEFAULT,
    CROP_FIT_NAMED,
    CROP_FIT_GENERIC,
)
from agri_advisor.exceptions import InvalidInputError, MissingOptionalDataWarning, WeightConfigError
from agri_advisor.models import (
    CropFilters,
    CropProfile,
    EnvironmentReading,
    FertilizerProfile,
    ScoredCandidate,
    SoilReading,
)
from agri_advisor.scoring import (
    climate_score,
    soil_score,
    season_score,
    market_score,
    get_current_season,
    soil_type_matches,
    season_matches,
    is_year_round,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Weighting helpers
# ---------------------------------------------------------------------------

def validate_weights(weights: dict[str, float], allowed: Iterable[str]) -> dict[str, float]:
    allowed = set(allowed)
    unknown = set(weights) - allowed
    if unknown:
        raise WeightConfigError(f"Unknown score components: {sorted(unknown)}")
    if any(w < 0 for w in weights.values()):
        raise WeightConfigError(f"Weights must be non-negative: {weights}")
    if sum(weights.values()) <= 0:
        raise WeightConfigError(f"Weights must sum to a positive value: {weights}")
    return dict(weights)


def weighted_score(components: dict[str, float | None], weights: dict[str, float]) -> float:
    """
    Weighted mean over the components that are present (not None).
    Returns 0.0 if no weighted component is present.
    """
    total = 0.0
    applied = 0.0
    for name, value in components.items():
        if value is None:
            continue
        w = weights.get(name, 0.0)
        total += w * value
        applied += w
    return total / applied if applied > 0 else 0.0


def tier_from_value(value: float) -> str:
    if value > TIER_HIGH_THRESHOLD:
        return "high"
    if value > TIER_MEDIUM_THRESHOLD:
        return "medium"
    return "low"


# ---------------------------------------------------------------------------
# Profitability
# ---------------------------------------------------------------------------

def price_profitability_score(crop: CropProfile) -> float:
    """Alternative heuristic: mean market price × demand multiplier (₹-scaled, unbounded)."""
    return crop.mean_price * PROFITABILITY_MULTIPLIER.get(crop.demand, 1.0)


def profitability_tier(crop: CropProfile, suitability: float, mode: str | None = None) -> str:
    """
    Canonical ("suitability") mode: suitability (0-1) + demand, export and
    price-level bonuses, thresholded at TIER_HIGH/MEDIUM_THRESHOLD.
    "price" mode: mean price × demand multiplier against the
    PRICE_TIER_HIGH/MEDIUM floors; suitability is ignored.
    """
    mode = (mode or PROFITABILITY_MODE).lower()
    if mode == "price":
        value = price_profitability_score(crop)
        if value >= PRICE_TIER_HIGH:
            return "high"
        if value >= PRICE_TIER_MEDIUM:
            return "medium"
        return "low"
    if mode != "suitability":
        raise WeightConfigError(f"Unknown profitability mode: {mode!r}")

    value = suitability + DEMAND_TIER_BONUS.get(crop.demand, 0.0)
    if crop.export_potential:
        value += EXPORT_TIER_BONUS
    mean_price = crop.mean_price
    for floor, bonus in PRICE_LEVEL_BONUS:
        if mean_price > floor:
            value += bonus
            break
    return tier_from_value(value)


# ---------------------------------------------------------------------------
# Crop ranking
# ---------------------------------------------------------------------------

def crop_components(
    crop: CropProfile,
    weather: EnvironmentReading | None,
    soil: SoilReading | None,
    month: int | None = None,
    season: str | None = None,
) -> dict[str, float | None]:
    """Sub-scores in [0, 1]; None marks a component whose input is absent."""
    return {
        "climate": climate_score(crop, weather) if weather is not None else None,
        "soil":    soil_score(crop, soil) if soil is not None else None,
        "season":  season_score(crop, month, season),
        "market":  market_score(crop),
    }


def _passes_filters(candidate: ScoredCandidate, filters: CropFilters | None) -> bool:
    if filters is None:
        return True
    crop = candidate.profile
    if filters.season and not (
        season_matches(crop.season, filters.season) or is_year_round(crop.season)
    ):
        return False
    if filters.profitability and candidate.tier != filters.profitability.lower():
        return False
    if filters.crops:
        wanted = {c.strip().lower() for c in filters.crops}
        if crop.name.lower() not in wanted and crop.id.lower() not in wanted:
            return False
    if filters.min_score is not None and candidate.score < filters.min_score:
        return False
    return True


def sort_candidates(candidates: list[ScoredCandidate]) -> list[ScoredCandidate]:
    """Descending score; equal scores keep input order."""
    return sorted(candidates, key=lambda c: (-c.score, c.index))


def rank_crops(
    crops: Iterable[CropProfile],
    weather: EnvironmentReading | None = None,
    soil: SoilReading | None = None,
    filters: CropFilters | None = None,
    month: int | None = None,
    limit: int | None = None,
    extended: bool = False,
    weights: dict[str, float] | None = None,
    mode: str | None = None,
) -> list[ScoredCandidate]:
    """
    Rank crops by composite suitability.

    Parameters
    ----------
    crops : iterable of CropProfile
        Candidates (usually catalog.crops). Empty input → empty list.
    weather : EnvironmentReading or None
        Without weather the climate component is dropped.
    soil : SoilReading or None
        Without soil the soil component is dropped (MissingOptionalDataWarning).
        With soil.soil_type set, crops whose soil types do not overlap are
        excluded before scoring.
    filters : CropFilters or None
        Season / profitability / crop-name / minimum-score filters.
    month : int or None
        Calendar month for the season component (default: today).
        Invalid months raise InvalidInputError before any scoring.
    limit : int or None
        Result size; default 6, or 8 when extended=True.
    weights : dict or None
        Override for CROP_WEIGHTS.
    mode : str or None
        Profitability tier mode ("suitability" or "price").

    Returns
    -------
    list of ScoredCandidate sorted by score (0-100) descending.
    """
    weights = validate_weights(weights or CROP_WEIGHTS, CROP_WEIGHTS)
    if limit is None:
        limit = EXTENDED_RESULT_LIMIT if extended else CROP_RESULT_LIMIT
    # raises InvalidInputError for a bad month before any crop is scored
    season = get_current_season(month)

    crops = list(crops)
    if not crops:
        log.info("No crop candidates supplied; returning empty recommendation list.")
        return []

    if soil is None:
        warnings.warn(
            "Soil data absent; soil weight redistributed across remaining components.",
            MissingOptionalDataWarning,
            stacklevel=2,
        )
    if weather is None:
        log.info("Weather data absent; ranking on season, market and soil only.")

    scored = []
    excluded = 0
    for idx, crop in enumerate(crops):
        if soil is not None and not soil_type_matches(crop, soil.soil_type):
            excluded += 1
            continue
        try:
            components = crop_components(crop, weather, soil, season=season)
            suitability = weighted_score(components, weights)
            tier = profitability_tier(crop, suitability, mode)
        except InvalidInputError as exc:
            log.warning("Crop %r could not be scored (%s); scoring it 0.", getattr(crop, "name", crop), exc)
            components, suitability, tier = {}, 0.0, "low"

        scored.append(ScoredCandidate(
            profile=crop,
            score=suitability * 100,
            tier=tier,
            components={k: v for k, v in components.items() if v is not None},
            index=idx,
        ))

    if excluded:
        log.debug("Excluded %d crop(s) with no soil-type overlap for %r.", excluded, soil.soil_type)

    filtered = [c for c in scored if _passes_filters(c, filters)]
    ranked = sort_candidates(filtered)[:limit]
    log.info("Ranked %d of %d crop candidates (returning %d).", len(filtered), len(crops), len(ranked))
    return ranked


def seasonal_crops(crops: Iterable[CropProfile], season: str) -> list[CropProfile]:
    """Crops tagged for season or year-round, in catalog order."""
    return [
        c for c in crops
        if season_matches(c.season, season) or is_year_round(c.season)
    ]


# ---------------------------------------------------------------------------
# Fertilizer ranking
# ---------------------------------------------------------------------------

def _crop_name(crop: CropProfile | str | None) -> str | None:
    if crop is None:
        return None
    return (crop if isinstance(crop, str) else crop.name).strip()


def _tag_matches_crop(tag: str, crop: CropProfile | str) -> bool:
    """'Rice' matches 'Basmati Rice'; 'Vegetables' matches a crop of category 'vegetable'."""
    tag = tag.strip().lower()
    name = _crop_name(crop).lower()
    if tag == name or tag in name.split():
        return True
    category = "" if isinstance(crop, str) else (crop.category or "").lower()
    return bool(category) and tag.rstrip("s") == category.rstrip("s")


def fertilizer_crop_fit(fertilizer: FertilizerProfile, crop: CropProfile | str | None) -> float | None:
    """CROP_FIT_NAMED for a named match, CROP_FIT_GENERIC for 'All crops' or no crop; None if unsuitable."""
    if crop is None:
        return CROP_FIT_GENERIC
    if any(_tag_matches_crop(t, crop) for t in fertilizer.suitable_crops):
        return CROP_FIT_NAMED
    if any(t.strip().lower() == ALL_CROPS_TAG for t in fertilizer.suitable_crops):
        return CROP_FIT_GENERIC
    return None


def fertilizer_suits_soil(fertilizer: FertilizerProfile, soil: SoilReading) -> bool:
    """Acidic soil → organic only; low fertility → balanced complex or organic."""
    if soil.ph < ACIDIC_SOIL_PH:
        return fertilizer.is_organic
    if soil.fertility == "low":
        return fertilizer.is_balanced_complex or fertilizer.is_organic
    return True


def fertilizer_soil_fit(fertilizer: FertilizerProfile, soil: SoilReading) -> float:
    if soil.ph < ACIDIC_SOIL_PH and fertilizer.is_organic:
        return SOIL_FIT_MATCH
    if soil.fertility == "low" and (fertilizer.is_balanced_complex or fertilizer.is_organic):
        return SOIL_FIT_MATCH
    return SOIL_FIT_DEFAULT


def fertilizer_price_fit(fertilizer: FertilizerProfile, max_price_per_kg: float) -> float:
    """Free → 1.0; otherwise cheaper per kg is better, relative to the dearest candidate."""
    if fertilizer.price <= 0:
        return 1.0
    if max_price_per_kg <= 0:
        return 0.0
    return max(0.0, 1.0 - fertilizer.price_per_kg / max_price_per_kg)


def rank_fertilizers(
    catalog,
    crop: CropProfile | str | None = None,
    soil: SoilReading | None = None,
    growth_stage: str | None = None,
    limit: int = FERTILIZER_RESULT_LIMIT,
    weights: dict[str, float] | None = None,
) -> list[ScoredCandidate]:
    """
    Rank fertilizers by relevance to a crop, soil and growth stage.

    catalog may be a Catalog or any iterable of FertilizerProfile.
    Crop, soil and growth stage are hard filters; the survivors are scored on
    crop fit (0.5), soil fit (0.25) and price (0.25), renormalized when soil
    is absent. Returns at most `limit` candidates, score 0-100 descending.
    """
    weights = validate_weights(weights or FERTILIZER_WEIGHTS, FERTILIZER_WEIGHTS)
    fertilizers = list(getattr(catalog, "fertilizers", catalog))
    if not fertilizers:
        return []

    stage = None
    if growth_stage:
        stage = growth_stage.strip().lower()
        if stage not in GROWTH_STAGES:
            raise InvalidInputError(f"growth_stage must be one of {GROWTH_STAGES}, got {growth_stage!r}")

    max_price_per_kg = max((f.price_per_kg for f in fertilizers), default=0.0)

    scored = []
    for idx, fert in enumerate(fertilizers):
        crop_fit = fertilizer_crop_fit(fert, crop)
        if crop_fit is None:
            continue
        if soil is not None and not fertilizer_suits_soil(fert, soil):
            continue
        if stage is not None and stage not in fert.growth_stages:
            continue
        try:
            components = {
                "crop":  crop_fit,
                "soil":  fertilizer_soil_fit(fert, soil) if soil is not None else None,
                "price": fertilizer_price_fit(fert, max_price_per_kg),
            }
            relevance = weighted_score(components, weights)
        except (InvalidInputError, TypeError, ZeroDivisionError) as exc:
            log.warning("Fertilizer %r could not be scored (%s); scoring it 0.", fert.name, exc)
            components, relevance = {}, 0.0
        scored.append(ScoredCandidate(
            profile=fert,
            score=relevance * 100,
            tier=tier_from_value(relevance),
            components={k: v for k, v in components.items() if v is not None},
            index=idx,
        ))

    ranked = sort_candidates(scored)[:limit]
    log.info(
        "Ranked %d fertilizer(s) for crop=%s stage=%s (returning %d).",
        len(scored), _crop_name(crop), stage, len(ranked),
    )
    return ranked


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def candidate_to_dict(candidate: ScoredCandidate) -> dict:
    from agri_advisor.catalog import crop_to_record, fertilizer_to_record

    if isinstance(candidate.profile, CropProfile):
        kind, record = "crop", crop_to_record(candidate.profile)
    else:
        kind, record = "fertilizer", fertilizer_to_record(candidate.profile)
    return {
        "kind":       kind,
        "name":       candidate.name,
        "score":      candidate.score,
        "tier":       candidate.tier,
        "components": dict(candidate.components),
        "index":      candidate.index,
        "profile":    record,
    }


def candidate_from_dict(d: dict) -> ScoredCandidate:
    from agri_advisor.catalog import crop_from_record, fertilizer_from_record

    if d["kind"] == "crop":
        profile = crop_from_record(d["profile"])
    else:
        profile = fertilizer_from_record(d["profile"])
    return ScoredCandidate(
        profile=profile,
        score=float(d["score"]),
        tier=d["tier"],
        components={k: float(v) for k, v in d.get("components", {}).items()},
        index=int(d.get("index", 0)),
    )


def candidates_to_json(candidates: list[ScoredCandidate]) -> str:
    return json.dumps([candidate_to_dict(c) for c in candidates])


def candidates_from_json(text: str) -> list[ScoredCandidate]:
    return [candidate_from_dict(d) for d in json.loads(text)]


def rerank(candidates: list[ScoredCandidate]) -> list[ScoredCandidate]:
    """Re-sort already scored candidates (e.g. after deserialization)."""
    return sort_candidates(list(candidates))
