"""
Ranking tests: composite crop suitability, filters, tie order, fertilizer
relevance and JSON round trip.
Run from project root: python -m pytest tests/test_ranker.py -v
"""

import sys
import warnings
from dataclasses import replace
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor.catalog import default_catalog
from agri_advisor.config import CROP_WEIGHTS, SCORE_EPSILON
from agri_advisor.exceptions import InvalidInputError, MissingOptionalDataWarning, WeightConfigError
from agri_advisor.models import CropFilters, EnvironmentReading, SoilReading
from agri_advisor.ranker import (
    rank_crops,
    rank_fertilizers,
    seasonal_crops,
    tier_from_value,
    weighted_score,
    profitability_tier,
    price_profitability_score,
    candidates_to_json,
    candidates_from_json,
    rerank,
)
from agri_advisor.scoring import season_matches, is_year_round

WEATHER = EnvironmentReading(temperature=28, humidity=75, rainfall=800)
LOAMY = SoilReading(ph=6.8, fertility="medium", soil_type="Loamy")


@pytest.fixture
def catalog():
    return default_catalog()


def _names(ranked):
    return [c.name for c in ranked]


# ---------------------------------------------------------------------------
# Crop ranking
# ---------------------------------------------------------------------------

def test_rank_without_soil_warns_and_returns_sorted(catalog):
    with pytest.warns(MissingOptionalDataWarning):
        ranked = rank_crops(catalog.crops, weather=WEATHER, month=7)
    assert 0 < len(ranked) <= 6
    scores = [c.score for c in ranked]
    assert scores == sorted(scores, reverse=True)
    assert all(0.0 <= s <= 100.0 for s in scores)
    assert all("soil" not in c.components for c in ranked)


def test_missing_soil_weight_is_renormalized(catalog):
    with pytest.warns(MissingOptionalDataWarning):
        ranked = rank_crops(catalog.crops, weather=WEATHER, month=7, limit=20)
    applied = CROP_WEIGHTS["climate"] + CROP_WEIGHTS["season"] + CROP_WEIGHTS["market"]
    for c in ranked:
        comp = c.components
        expected = (
            CROP_WEIGHTS["climate"] * comp["climate"]
            + CROP_WEIGHTS["season"] * comp["season"]
            + CROP_WEIGHTS["market"] * comp["market"]
        ) / applied * 100
        assert c.score == pytest.approx(expected)


def test_no_warning_when_soil_given(catalog):
    with warnings.catch_warnings():
        warnings.simplefilter("error", MissingOptionalDataWarning)
        ranked = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7)
    assert all(set(c.components) == set(CROP_WEIGHTS) for c in ranked)


def test_soil_type_excludes_incompatible_crops(catalog):
    sandy = SoilReading(ph=6.5, fertility="medium", soil_type="Sandy")
    ranked = rank_crops(catalog.crops, weather=WEATHER, soil=sandy, month=7, limit=20)
    assert set(_names(ranked)) == {"Groundnut", "Watermelon"}


def test_ranking_is_deterministic(catalog):
    first = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=11)
    second = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=11)
    assert [(c.name, c.score, c.tier) for c in first] == [(c.name, c.score, c.tier) for c in second]


def test_result_limits(catalog):
    assert len(rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7)) == 6
    assert len(rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7, extended=True)) == 8
    assert len(rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7, limit=3)) == 3


def test_empty_candidates_return_empty_list():
    assert rank_crops([], weather=WEATHER, soil=LOAMY) == []


def test_equal_scores_keep_input_order(catalog):
    wheat = catalog.crop("Wheat")
    twin = replace(wheat, id="crop_twin", name="Wheat twin")
    ranked = rank_crops([twin, wheat], weather=WEATHER, soil=LOAMY, month=12)
    assert ranked[0].score == ranked[1].score
    assert _names(ranked) == ["Wheat twin", "Wheat"]


def test_bad_candidate_scores_zero_without_aborting(catalog):
    broken = replace(catalog.crop("Maize"), id="crop_broken", name="Broken", price_range=(0, 0))
    crops = [broken] + list(catalog.crops)
    ranked = rank_crops(crops, weather=WEATHER, soil=LOAMY, month=7, limit=50)
    assert ranked[-1].name == "Broken"
    assert ranked[-1].score == 0.0
    assert ranked[-1].tier == "low"
    assert all(c.score > 0 for c in ranked[:-1])


def test_season_filter(catalog):
    ranked = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7,
                        filters=CropFilters(season="Rabi"), limit=20)
    assert ranked
    for c in ranked:
        assert season_matches(c.profile.season, "Rabi") or is_year_round(c.profile.season)


def test_filters_apply_before_truncation(catalog):
    filters = CropFilters(profitability="high")
    ranked = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7, filters=filters)
    everything = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7, limit=50)
    high = [c.name for c in everything if c.tier == "high"]
    assert _names(ranked) == high[:6]


def test_crop_name_and_min_score_filters(catalog):
    only_wheat = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=11,
                            filters=CropFilters(crops=("wheat",)))
    assert _names(only_wheat) == ["Wheat"]
    none = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=11,
                      filters=CropFilters(min_score=100.1))
    assert none == []


def test_invalid_weights_raise(catalog):
    with pytest.raises(WeightConfigError):
        rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, weights={"climate": -1.0, "season": 1.0})
    with pytest.raises(WeightConfigError):
        rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, weights={"taste": 1.0})
    with pytest.raises(WeightConfigError):
        rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, weights={"climate": 0.0})


def test_unknown_profitability_mode_raises(catalog):
    with pytest.raises(WeightConfigError):
        profitability_tier(catalog.crop("Wheat"), 0.5, mode="vibes")
    assert profitability_tier(catalog.crop("Potato"), 0.5, mode="price") == "low"


def test_invalid_month_fails_whole_request(catalog):
    with pytest.raises(InvalidInputError):
        rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=13)
    with pytest.raises(InvalidInputError):
        rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=0)


def test_price_mode_tier_follows_market_price(catalog):
    # mean price × demand multiplier: 325 × 1.5, 2200 × 1.5, 6600 × 1.5
    assert price_profitability_score(catalog.crop("Sugarcane")) == pytest.approx(487.5)
    assert profitability_tier(catalog.crop("Sugarcane"), 0.0, mode="price") == "low"
    assert profitability_tier(catalog.crop("Wheat"), 0.0, mode="price") == "medium"
    assert profitability_tier(catalog.crop("Cotton"), 0.0, mode="price") == "high"

    dear_cane = replace(catalog.crop("Sugarcane"), price_range=(3000, 3800))
    assert profitability_tier(dear_cane, 0.0, mode="price") == "high"


def test_price_mode_ignores_suitability(catalog):
    cane = catalog.crop("Sugarcane")
    assert profitability_tier(cane, 1.0, mode="price") == profitability_tier(cane, 0.0, mode="price")
    ranked = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7, limit=50, mode="price")
    tiers = {c.name: c.tier for c in ranked}
    assert tiers["Sugarcane"] == "low"
    assert tiers["Cotton"] == "high"


def test_tier_thresholds():
    assert tier_from_value(0.71) == "high"
    assert tier_from_value(0.7) == "medium"
    assert tier_from_value(0.41) == "medium"
    assert tier_from_value(0.4) == "low"


def test_weighted_score_skips_absent_components():
    assert weighted_score({"a": 1.0, "b": None}, {"a": 0.5, "b": 0.5}) == 1.0
    assert weighted_score({"a": None}, {"a": 1.0}) == 0.0


def test_seasonal_crops(catalog):
    names = [c.name for c in seasonal_crops(catalog.crops, "Zaid")]
    assert "Watermelon" in names
    assert "Banana" in names
    assert "Wheat" not in names


def test_json_round_trip(catalog):
    ranked = rank_crops(catalog.crops, weather=WEATHER, soil=LOAMY, month=7)
    restored = candidates_from_json(candidates_to_json(ranked))
    assert _names(restored) == _names(ranked)
    for a, b in zip(ranked, restored):
        assert abs(a.score - b.score) <= SCORE_EPSILON
        assert a.tier == b.tier
        assert a.profile == b.profile
    assert _names(rerank(reversed(restored))) == _names(ranked)


# ---------------------------------------------------------------------------
# Fertilizer ranking
# ---------------------------------------------------------------------------

def test_fertilizers_for_named_crop(catalog):
    ranked = rank_fertilizers(catalog, crop="Wheat")
    assert 0 < len(ranked) <= 5
    assert ranked[0].profile.id == "urea"
    scores = [c.score for c in ranked]
    assert scores == sorted(scores, reverse=True)


def test_fertilizer_tag_matches_crop_words_and_category(catalog):
    rice = rank_fertilizers(catalog, crop=catalog.crop("Basmati Rice"), limit=20)
    assert "urea" in [c.profile.id for c in rice]
    tomato = rank_fertilizers(catalog, crop=catalog.crop("Tomato"), limit=20)
    npk = next(c for c in tomato if c.profile.id == "npk_19_19_19")
    assert npk.components["crop"] == 1.0


def test_acidic_soil_only_organic(catalog):
    acidic = SoilReading(ph=5.5, fertility="medium")
    ranked = rank_fertilizers(catalog, crop="Tomato", soil=acidic, limit=20)
    assert ranked
    assert all(c.profile.is_organic for c in ranked)


def test_low_fertility_prefers_complex_or_organic(catalog):
    poor = SoilReading(ph=6.8, fertility="low")
    ranked = rank_fertilizers(catalog, crop="Tomato", soil=poor, limit=20)
    assert ranked
    assert all(c.profile.is_balanced_complex or c.profile.is_organic for c in ranked)


def test_growth_stage_filter(catalog):
    ranked = rank_fertilizers(catalog.fertilizers, growth_stage="Fruiting", limit=20)
    assert ranked
    assert all("fruiting" in c.profile.growth_stages for c in ranked)


def test_invalid_growth_stage_raises(catalog):
    with pytest.raises(InvalidInputError):
        rank_fertilizers(catalog, crop="Wheat", growth_stage="harvest")


def test_no_crop_gives_generic_fit(catalog):
    ranked = rank_fertilizers(catalog)
    assert len(ranked) == 5
    assert all(c.components["crop"] == 0.5 for c in ranked)
