"""
Weather alerts and weather-driven agro advisory.

Alerts (current reading + first ALERT_FORECAST_DAYS forecast days):
  heat_wave      temperature > HEAT_WAVE_TEMP                     severity high
  heavy_rain     forecast rainfall sum > HEAVY_RAIN_MM            severity medium
  high_humidity  humidity > HIGH_HUMIDITY_ALERT                   severity medium

Agro advisory (current reading + up to ADVISORY_FORECAST_DAYS forecast days)
is grouped as general / irrigation / fertilization / pest_management /
harvesting advice.

Forecast entries are the daily dicts produced by mock_forecast() and
forecast_from_openweathermap(): {date, temp_min, temp_max, humidity, rainfall}
with rainfall in mm for that day.
"""

import logging

from agri_advisor.config import (
    HEAT_WAVE_TEMP,
    HEAVY_RAIN_MM,
    ALERT_FORECAST_DAYS,
    HIGH_HUMIDITY_ALERT,
    ADVISORY_FORECAST_DAYS,
    HOT_ADVISORY_TEMP,
    HUMID_ADVISORY,
    RAINY_FORECAST_AVG_MM,
)
from agri_advisor.models import EnvironmentReading

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Alert catalogue
# ---------------------------------------------------------------------------
ALERTS: dict[str, dict] = {
    "heat_wave": {
        "severity": "high",
        "message": "Extreme heat warning. Take precautions to avoid heat stress.",
        "recommendations": [
            "Provide shade for crops",
            "Increase irrigation frequency",
            "Harvest early morning",
        ],
    },
    "heavy_rain": {
        "severity": "medium",
        "message": "Heavy rainfall expected in the next 3 days.",
        "recommendations": [
            "Ensure proper drainage",
            "Protect crops from waterlogging",
            "Delay fertilizer application",
        ],
    },
    "high_humidity": {
        "severity": "medium",
        "message": "Very high humidity may promote fungal diseases.",
        "recommendations": [
            "Monitor for disease symptoms",
            "Improve air circulation",
            "Consider preventive fungicide spray",
        ],
    },
}

ADVISORY_SECTIONS = ("general", "irrigation", "fertilization", "pest_management", "harvesting")


def _alert(kind: str) -> dict:
    entry = ALERTS[kind]
    return {
        "type": kind,
        "severity": entry["severity"],
        "message": entry["message"],
        "recommendations": list(entry["recommendations"]),
    }


def forecast_rainfall(forecast: list[dict] | None, days: int) -> list[float]:
    """Daily rainfall (mm) of the first `days` forecast entries; missing values count as 0."""
    return [float(d.get("rainfall") or 0.0) for d in (forecast or [])[:days]]


def weather_alerts(weather: EnvironmentReading, forecast: list[dict] | None = None) -> list[dict]:
    """
    Alerts for the current reading and the short-range forecast.

    Returns a list of {type, severity, message, recommendations}, in the
    order heat_wave, heavy_rain, high_humidity; empty when nothing triggers.
    """
    alerts = []
    if weather.temperature > HEAT_WAVE_TEMP:
        alerts.append(_alert("heat_wave"))
    if sum(forecast_rainfall(forecast, ALERT_FORECAST_DAYS)) > HEAVY_RAIN_MM:
        alerts.append(_alert("heavy_rain"))
    if weather.humidity > HIGH_HUMIDITY_ALERT:
        alerts.append(_alert("high_humidity"))
    if alerts:
        log.info("Weather alerts for %s: %s", weather.location or "location",
                 ", ".join(a["type"] for a in alerts))
    return alerts


def agro_advisory(
    weather: EnvironmentReading,
    forecast: list[dict] | None = None,
    crop: str | None = None,
) -> dict[str, list[str]]:
    """Weather-driven field advice keyed by ADVISORY_SECTIONS."""
    advice: dict[str, list[str]] = {section: [] for section in ADVISORY_SECTIONS}

    if weather.temperature > HOT_ADVISORY_TEMP:
        advice["general"].append("Provide shade nets for sensitive crops")
        advice["irrigation"].append("Increase irrigation frequency during hot weather")
        advice["harvesting"].append("Harvest during the cooler early-morning hours")

    if weather.humidity > HUMID_ADVISORY:
        advice["pest_management"].append("Monitor for fungal diseases due to high humidity")
        advice["general"].append("Ensure good air circulation around plants")

    rain = forecast_rainfall(forecast, ADVISORY_FORECAST_DAYS)
    if rain and sum(rain) / len(rain) > RAINY_FORECAST_AVG_MM:
        advice["irrigation"].append("Reduce irrigation as rainfall is expected")
        advice["fertilization"].append("Delay fertilizer application until after rain")
        advice["harvesting"].append("Harvest mature produce before the expected rain")

    if crop:
        advice["general"].append(f"Monitor {crop} for weather-related stress")
    return advice
