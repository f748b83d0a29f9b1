"""
Soil-test advice tests.
Run from project root: python -m pytest tests/test_soil_health.py -v
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor.models import EnvironmentReading, SoilReading
from agri_advisor.soil_health import (
    assess_soil_status,
    soil_test_recommendations,
    get_soil_health_messages,
    get_crop_specific_suggestions,
)


def test_acidic_soil_needs_lime():
    advice = soil_test_recommendations(SoilReading(ph=5.2, fertility="medium"))
    assert advice["soil_status"] == "Needs improvement"
    assert advice["recommendations"][0]["issue"] == "Acidic soil"
    assert "lime" in advice["recommendations"][0]["recommendation"]
    assert advice["general_advice"]


def test_alkaline_low_fertility_soil():
    advice = soil_test_recommendations(SoilReading(ph=8.6, fertility="low"))
    issues = [r["issue"] for r in advice["recommendations"]]
    assert issues == ["Alkaline soil", "Low soil fertility"]
    assert all(r["priority"] == "High" for r in advice["recommendations"])


def test_soil_status_levels():
    assert assess_soil_status(SoilReading(ph=7.0, fertility="high")) == "Excellent"
    assert assess_soil_status(SoilReading(ph=6.5, fertility="medium")) == "Good"
    assert soil_test_recommendations(SoilReading(ph=6.5))["recommendations"] == []


def test_messages_for_low_nutrients_and_dry_weather():
    soil = SoilReading(ph=6.5, nitrogen=10, phosphorus=30, potassium=40)
    weather = EnvironmentReading(temperature=26, humidity=60, rainfall=300)
    messages = get_soil_health_messages(soil, weather)
    assert any(m.startswith("Low nitrogen") for m in messages)
    assert any(m.startswith("Low rainfall") for m in messages)
    assert not any("phosphorus" in m.lower() for m in messages)


def test_no_nutrient_messages_without_measurements():
    messages = get_soil_health_messages(SoilReading(ph=6.5))
    assert messages == []


def test_crop_specific_suggestions():
    soil = SoilReading(ph=6.5, nitrogen=40, phosphorus=20, potassium=10)
    banana = get_crop_specific_suggestions("Banana", soil)
    assert banana and "potassium" in banana[0].lower()
    assert get_crop_specific_suggestions("Wheat", soil) == [
        "Potassium helps stress tolerance and quality; low K may reduce yield."
    ]
    assert get_crop_specific_suggestions("Potato", SoilReading(ph=8.0)) == [
        "Potato does best in slightly acidic soil; avoid liming above pH 6.5."
    ]
