"""
Disease knowledge base, canned detector and weather risk tests.
Run from project root: python -m pytest tests/test_disease.py -v
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor.disease import (
    DISEASE_DB,
    get_disease,
    get_diseases_by_crop,
    severity_from_confidence,
    detect_disease,
    disease_risk,
    crop_disease_risks,
    get_all_prevention_measures,
    disease_analytics,
)
from agri_advisor.models import EnvironmentReading


def test_lookup_by_id_and_crop():
    assert get_disease("disease_001")["name"] == "Late Blight"
    assert get_disease("disease_999") is None
    tomato = [d["name"] for d in get_diseases_by_crop("tomato")]
    assert tomato == ["Late Blight"]
    assert [d["name"] for d in get_diseases_by_crop("Basmati Rice")] == ["Rice Blast"]


def test_detector_returns_canned_candidates():
    results = detect_disease(b"\x89PNG fake bytes")
    assert len(results) == 3
    assert [r["confidence"] for r in results] == [87, 42, 18]
    assert results[0]["name"] == DISEASE_DB[0]["name"]


def test_detector_restricted_to_crop():
    results = detect_disease(crop="Wheat")
    assert [r["name"] for r in results] == ["Yellow Rust"]
    assert results[0]["severity"] == "high"


def test_severity_from_confidence():
    assert severity_from_confidence(0.87, "high") == "high"
    assert severity_from_confidence(0.42, "medium") == "medium"
    assert severity_from_confidence(0.18, "low") == "low"


def test_late_blight_risk_in_cool_humid_weather():
    blight = get_disease("disease_001")
    cool_wet = EnvironmentReading(temperature=20, humidity=90, rainfall=5, rainfall_basis="daily")
    hot_dry = EnvironmentReading(temperature=38, humidity=30, rainfall=0, rainfall_basis="daily")
    assert disease_risk(blight, cool_wet)["risk"] == "high"
    assert disease_risk(blight, hot_dry)["risk"] == "low"


def test_crop_risks_sorted():
    weather = EnvironmentReading(temperature=22, humidity=85, rainfall=900)
    risks = crop_disease_risks("Tomato", weather)
    scores = [r["score"] for r in risks]
    assert scores == sorted(scores, reverse=True)
    assert crop_disease_risks("Sugarcane", weather) == []


def test_prevention_measures_deduplicated():
    measures = get_all_prevention_measures(DISEASE_DB)
    assert len(measures) == len(set(measures))
    assert measures.count("Maintain proper plant spacing") == 1


def test_disease_analytics():
    stats = disease_analytics()
    assert stats["total_diseases"] == len(DISEASE_DB)
    assert sum(stats["by_spread_rate"].values()) == len(DISEASE_DB)
