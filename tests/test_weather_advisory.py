"""
Weather alert and agro-advisory tests.
Run from project root: python -m pytest tests/test_weather_advisory.py -v
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor.models import EnvironmentReading
from agri_advisor.weather_advisory import ADVISORY_SECTIONS, agro_advisory, weather_alerts

MILD = EnvironmentReading(temperature=26, humidity=60, rainfall=900)


def _days(rain: list[float]) -> list[dict]:
    return [
        {"date": f"2025-08-{i + 1:02d}", "temp_min": 22, "temp_max": 30, "humidity": 70, "rainfall": mm}
        for i, mm in enumerate(rain)
    ]


def test_no_alerts_in_mild_weather():
    assert weather_alerts(MILD, _days([2, 3, 1, 0, 0])) == []
    assert weather_alerts(MILD) == []


def test_heat_wave_alert():
    alerts = weather_alerts(EnvironmentReading(temperature=41, humidity=30, rainfall=300))
    assert len(alerts) == 1
    heat = alerts[0]
    assert heat["type"] == "heat_wave"
    assert heat["severity"] == "high"
    assert heat["recommendations"] == [
        "Provide shade for crops", "Increase irrigation frequency", "Harvest early morning",
    ]
    # 40 °C itself does not trigger
    assert weather_alerts(EnvironmentReading(temperature=40, humidity=30, rainfall=300)) == []


def test_heavy_rain_counts_only_next_three_days():
    assert [a["type"] for a in weather_alerts(MILD, _days([20, 20, 11]))] == ["heavy_rain"]
    assert weather_alerts(MILD, _days([20, 20, 10])) == []
    # rain on day four is outside the alert window
    assert weather_alerts(MILD, _days([0, 0, 0, 80, 80])) == []


def test_high_humidity_alert():
    alerts = weather_alerts(EnvironmentReading(temperature=30, humidity=91, rainfall=1500))
    assert [(a["type"], a["severity"]) for a in alerts] == [("high_humidity", "medium")]


def test_advisory_sections_always_present():
    advice = agro_advisory(MILD, _days([0, 0, 0]))
    assert tuple(advice) == ADVISORY_SECTIONS
    assert all(v == [] for v in advice.values())


def test_hot_humid_advisory():
    advice = agro_advisory(EnvironmentReading(temperature=36, humidity=85, rainfall=1500))
    assert advice["general"] == [
        "Provide shade nets for sensitive crops",
        "Ensure good air circulation around plants",
    ]
    assert advice["irrigation"] == ["Increase irrigation frequency during hot weather"]
    assert advice["pest_management"] == ["Monitor for fungal diseases due to high humidity"]


def test_rainy_forecast_advisory_uses_mean_daily_rain():
    advice = agro_advisory(MILD, _days([0, 0, 0, 0, 30]))   # mean 6 mm/day
    assert advice["irrigation"] == ["Reduce irrigation as rainfall is expected"]
    assert advice["fertilization"] == ["Delay fertilizer application until after rain"]
    assert advice["harvesting"]
    assert agro_advisory(MILD, _days([5, 5, 5, 5, 5]))["irrigation"] == []


def test_crop_specific_advice():
    advice = agro_advisory(MILD, crop="Wheat")
    assert advice["general"] == ["Monitor Wheat for weather-related stress"]
