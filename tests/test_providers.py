"""
Provider tests: upstream payload conversion and the OpenWeatherMap client
(requests.get is monkeypatched; no network access).
Run from project root: python -m pytest tests/test_providers.py -v
"""

import sys
from pathlib import Path

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor import providers
from agri_advisor.exceptions import InvalidInputError
from agri_advisor.providers import (
    reading_from_openweathermap,
    forecast_from_openweathermap,
    reading_from_imd,
    soil_from_soil_health,
    crop_from_kvk,
    fetch_current_weather,
)

OWM_PAYLOAD = {
    "name": "New Delhi",
    "main": {"temp": 31.2, "humidity": 58, "pressure": 1006},
    "wind": {"speed": 3.4},
    "rain": {"1h": 0.5},
    "weather": [{"description": "light rain"}],
}


class _FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


def test_openweathermap_conversion():
    reading = reading_from_openweathermap(OWM_PAYLOAD)
    assert reading.temperature == 31.2
    assert reading.humidity == 58
    assert reading.rainfall == pytest.approx(12.0)
    assert reading.rainfall_basis == "daily"
    assert reading.annual_rainfall == pytest.approx(12.0 * 365)
    assert reading.description == "light rain"
    assert reading.location == "New Delhi"


def test_openweathermap_three_hour_rain_and_dry_days():
    three_hour = dict(OWM_PAYLOAD, rain={"3h": 2.0})
    assert reading_from_openweathermap(three_hour).rainfall == pytest.approx(16.0)
    dry = {k: v for k, v in OWM_PAYLOAD.items() if k != "rain"}
    assert reading_from_openweathermap(dry).rainfall == 0.0


def test_openweathermap_forecast():
    payload = {"list": [
        {"dt": 1735689600, "main": {"temp": 20, "humidity": 60, "temp_min": 15, "temp_max": 24}, "rain": {"3h": 1.5}},
        {"dt": 1735776000, "main": {"temp": 22, "humidity": 55}},
    ]}
    days = forecast_from_openweathermap(payload, days=5)
    assert len(days) == 2
    assert days[0] == {"date": "2025-01-01", "temp_min": 15, "temp_max": 24, "humidity": 60, "rainfall": 1.5}
    assert days[1]["temp_min"] == days[1]["temp_max"] == 22
    assert days[1]["rainfall"] == 0.0


def test_openweathermap_forecast_groups_three_hourly_entries_by_day():
    start = 1735689600  # 2025-01-01 00:00 UTC
    entries = []
    for step in range(6 * 8):  # six days of 3-hourly entries
        entries.append({
            "dt": start + step * 3 * 3600,
            "main": {"temp": 10 + step % 8, "humidity": 50 + 10 * (step % 2)},
            "rain": {"3h": 0.5} if step < 8 else None,
        })
    days = forecast_from_openweathermap({"list": entries}, days=5)
    assert [d["date"] for d in days] == [
        "2025-01-01", "2025-01-02", "2025-01-03", "2025-01-04", "2025-01-05",
    ]
    first = days[0]
    assert first["temp_min"] == 10
    assert first["temp_max"] == 17
    assert first["humidity"] == pytest.approx(55.0)
    assert first["rainfall"] == pytest.approx(4.0)
    assert days[1]["rainfall"] == 0.0


def test_imd_conversion():
    reading = reading_from_imd({"current": {"temp": 27, "humidity": 80, "rainfall": 12}}, location="Pune")
    assert reading.rainfall_basis == "daily"
    assert reading.rainfall == 12
    assert reading.location == "Pune"
    with pytest.raises(InvalidInputError):
        reading_from_imd({"forecast": []})


def test_soil_health_conversion():
    soil = soil_from_soil_health(
        {"properties": {"ph": 6.2, "fertility": "High", "nitrogen": 40, "phosphorus": 18, "potassium": 55}},
        soil_type="Loamy",
    )
    assert soil.fertility == "high"
    assert soil.soil_type == "Loamy"
    assert soil.has_measured_nutrients
    with pytest.raises(InvalidInputError):
        soil_from_soil_health({"recommendations": []})


def test_kvk_crop_defaults_are_permissive():
    crop = crop_from_kvk({
        "crop_name": "Pearl Millet",
        "season": "Kharif",
        "min_temp": 25, "max_temp": 35,
        "min_ph": 6.5, "max_ph": 8.0,
        "market_price": 2350,
    })
    assert crop.id == "pearl_millet"
    assert (crop.temperature.min, crop.temperature.max) == (25, 35)
    assert (crop.rainfall.min, crop.rainfall.max) == (0.0, 5000.0)
    assert crop.temperature.optimal is None
    assert crop.price_range == (2350, 2350)
    assert crop.demand == "medium"


def test_fetch_current_weather(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append((url, params, timeout))
        return _FakeResponse(OWM_PAYLOAD)

    monkeypatch.setattr(providers.requests, "get", fake_get)
    reading = fetch_current_weather(28.61, 77.21, api_key="test-key", location="Delhi")
    assert reading.location == "Delhi"
    assert reading.rainfall == pytest.approx(12.0)
    url, params, timeout = calls[0]
    assert url.endswith("/weather")
    assert params == {"lat": 28.61, "lon": 77.21, "appid": "test-key", "units": "metric"}
    assert timeout is not None


def test_fetch_current_weather_http_error(monkeypatch):
    monkeypatch.setattr(providers.requests, "get", lambda *a, **kw: _FakeResponse({}, status=401))
    with pytest.raises(requests.HTTPError):
        fetch_current_weather(28.61, 77.21, api_key="bad-key")


def test_fetch_without_api_key_raises(monkeypatch):
    monkeypatch.setattr(providers, "WEATHER_API_KEY", "")
    with pytest.raises(ValueError):
        fetch_current_weather(28.61, 77.21)
