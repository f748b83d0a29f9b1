"""
End-to-end advisory tests: weather/soil resolution and the combined result.
Run from project root: python -m pytest tests/test_advisor.py -v
"""

import json
import sys
from pathlib import Path

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor import advisor
from agri_advisor.advisor import get_advisory, advisory_to_dict, resolve_weather, resolve_soil, resolve_forecast
from agri_advisor.mock_data import default_weather_for_state
from agri_advisor.models import CropFilters, EnvironmentReading, SoilReading

WEATHER = EnvironmentReading(temperature=18, humidity=55, rainfall=550)
SOIL = SoilReading(ph=6.9, fertility="medium", soil_type="Loamy", nitrogen=30, phosphorus=12, potassium=45)


def test_explicit_inputs_take_precedence():
    assert resolve_weather("Punjab", WEATHER) == (WEATHER, "input")
    assert resolve_soil("Punjab", None, SOIL) == (SOIL, "input")


def test_weather_falls_back_to_zone_without_key():
    reading, source = resolve_weather("Kerala", api_key=None, latitude=None, longitude=None)
    assert source == "zone_default"
    assert reading.rainfall_basis == "annual"


def test_weather_falls_back_when_api_fails(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(advisor, "fetch_current_weather", boom)
    reading, source = resolve_weather("Punjab", latitude=30.7, longitude=76.7, api_key="k")
    assert source == "zone_default"
    assert reading.location == "Punjab"


def test_live_weather_keeps_zone_annual_rainfall(monkeypatch):
    def live(lat, lon, api_key=None, location=""):
        # one shower of 2 mm/h reported as 48 mm for the day
        return EnvironmentReading(temperature=31, humidity=72, rainfall=48, rainfall_basis="daily",
                                  wind_speed=3.5, location=location)

    monkeypatch.setattr(advisor, "fetch_current_weather", live)
    reading, source = resolve_weather("Punjab", latitude=30.7, longitude=76.7, api_key="k")
    assert source == "openweathermap"
    assert (reading.temperature, reading.humidity, reading.wind_speed) == (31, 72, 3.5)
    assert reading.rainfall_basis == "annual"
    assert reading.rainfall == default_weather_for_state("Punjab").rainfall
    assert reading.annual_rainfall == reading.rainfall


def test_forecast_sources(monkeypatch):
    given = [{"date": "2025-07-01", "temp_min": 24, "temp_max": 31, "humidity": 80, "rainfall": 12}]
    assert resolve_forecast("Kerala", given) == (given, "input")

    days, source = resolve_forecast("Kerala", api_key=None)
    assert source == "mock"
    assert len(days) == 5

    monkeypatch.setattr(advisor, "fetch_forecast", lambda lat, lon, api_key=None, days=5: given * days)
    days, source = resolve_forecast("Kerala", latitude=10.0, longitude=76.3, api_key="k")
    assert source == "openweathermap"
    assert len(days) == 5


def test_rabi_advisory_with_soil_test():
    result = get_advisory(state="Punjab", weather=WEATHER, soil=SOIL, month=12)
    assert result["season"] == "Rabi"
    assert result["weather_source"] == "input"
    assert result["soil_source"] == "input"
    crops = result["crops"]
    assert 0 < len(crops) <= 6
    assert crops[0].name == result["fertilizer_crop"]
    assert len(result["fertilizers"]) <= 5
    assert [p.id for p in result["dosage_plans"]] == [
        "balanced_approach", "straight_fertilizers", "organic_approach",
    ]
    assert set(result["crop_suggestions"]) == {c.name for c in crops}


def test_advisory_for_named_crop_and_stage():
    result = get_advisory(state="Uttar Pradesh", weather=WEATHER, soil=SOIL, month=11,
                          fertilizer_crop="Wheat", growth_stage="vegetative", yield_target=120)
    assert result["fertilizer_crop"] == "Wheat"
    assert all("vegetative" in f.profile.growth_stages for f in result["fertilizers"])
    # Wheat 120/60/40 × 1.2 minus measured 30/12/45
    assert result["dosage_plans"][0].deficits.as_dict() == pytest.approx({"N": 114.0, "P": 60.0, "K": 3.0})


def test_advisory_from_zone_defaults():
    result = get_advisory(state="Maharashtra", month=7)
    assert result["weather_source"] == "zone_default"
    assert result["soil_source"] == "zone_default"
    assert result["soil"].soil_type == "Black"
    assert result["crops"]


def test_no_match_gives_empty_recommendations():
    result = get_advisory(weather=WEATHER, soil=SOIL, month=12,
                          filters=CropFilters(crops=("Quinoa",)))
    assert result["crops"] == []
    assert result["fertilizer_crop"] is None
    assert result["dosage_plans"] == []


def test_advisory_is_json_serializable():
    result = get_advisory(state="Karnataka", weather=WEATHER, soil=SOIL, month=6)
    payload = json.loads(json.dumps(advisory_to_dict(result)))
    assert payload["season"] == "Kharif"
    assert payload["crops"][0]["score"] >= payload["crops"][-1]["score"]
    assert len(payload["dosage_plans"]) == 3


def test_advisory_carries_weather_alerts_and_advice():
    hot_humid = EnvironmentReading(temperature=42, humidity=93, rainfall=1200)
    wet_week = [
        {"date": f"2025-07-0{i}", "temp_min": 27, "temp_max": 38, "humidity": 90, "rainfall": 20}
        for i in range(1, 6)
    ]
    result = get_advisory(state="Odisha", weather=hot_humid, soil=SOIL, month=7,
                          forecast=wet_week, fertilizer_crop="Basmati Rice")
    assert result["forecast_source"] == "input"
    assert [a["type"] for a in result["weather_alerts"]] == ["heat_wave", "heavy_rain", "high_humidity"]
    advice = result["agro_advisory"]
    assert "Reduce irrigation as rainfall is expected" in advice["irrigation"]
    assert "Monitor Basmati Rice for weather-related stress" in advice["general"]

    payload = json.loads(json.dumps(advisory_to_dict(result)))
    assert payload["weather_alerts"][0]["severity"] == "high"
    assert len(payload["forecast"]) == 5
