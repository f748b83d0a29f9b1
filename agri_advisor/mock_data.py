"""
Offline data sources: synthetic weather and zone-based soil defaults.
Used by the app and CLI when no API key is configured, and by tests.
No Streamlit dependency.

Mock weather:
    climate zone from latitude (> 30° temperate, > 23.5° subtropical, else tropical)
    → zone mean + seasonal adjustment + seeded uniform noise.
    Rainfall is a daily rate (monthly seasonal total / 30).
"""

import zlib
from datetime import date, timedelta

import numpy as np

from agri_advisor.config import ZONE_DEFAULTS, STATE_ZONE, DEFAULT_ZONE
from agri_advisor.models import EnvironmentReading, SoilReading

CLIMATE_PATTERNS = {
    "tropical": {
        "temperature": (20, 35, 5),     # min, max, variation
        "humidity":    (60, 90, 15),
        "rainfall":    {"monsoon": 1200, "winter": 50, "summer": 100},   # mm/month
    },
    "subtropical": {
        "temperature": (15, 40, 10),
        "humidity":    (40, 80, 20),
        "rainfall":    {"monsoon": 800, "winter": 100, "summer": 200},
    },
    "temperate": {
        "temperature": (5, 30, 15),
        "humidity":    (30, 70, 25),
        "rainfall":    {"monsoon": 600, "winter": 200, "summer": 300},
    },
}

SEASONAL_ADJUSTMENT = {
    "monsoon": {"temperature": -3, "humidity": 15,  "rainfall": 0},
    "winter":  {"temperature": -8, "humidity": -10, "rainfall": -20},
    "summer":  {"temperature": 5,  "humidity": -5,  "rainfall": -15},
}


def climate_zone(latitude: float | None) -> str:
    if latitude is None:
        return "tropical"
    if latitude > 30:
        return "temperate"
    if latitude > 23.5:
        return "subtropical"
    return "tropical"


def weather_season(month: int) -> str:
    """monsoon Jun-Sep, winter Oct-Feb, summer Mar-May."""
    if 6 <= month <= 9:
        return "monsoon"
    if month >= 10 or month <= 2:
        return "winter"
    return "summer"


def _seed(*parts) -> int:
    return zlib.crc32("|".join(str(p) for p in parts).encode("utf-8"))


def _generate(day: date, zone: str, rng: np.random.Generator) -> dict:
    pattern = CLIMATE_PATTERNS[zone]
    season = weather_season(day.month)
    adj = SEASONAL_ADJUSTMENT[season]

    t_min, t_max, t_var = pattern["temperature"]
    h_min, h_max, h_var = pattern["humidity"]
    temperature = (t_min + t_max) / 2 + adj["temperature"] + rng.uniform(-1, 1) * t_var / 2
    humidity = (h_min + h_max) / 2 + adj["humidity"] + rng.uniform(-1, 1) * h_var / 2
    daily_rain = max(0.0, pattern["rainfall"][season] + adj["rainfall"]) / 30
    rainfall = daily_rain * (1 + rng.uniform(-0.5, 0.5))

    return {
        "temperature": round(float(temperature), 1),
        "humidity": float(np.clip(round(humidity), 0, 100)),
        "rainfall": round(float(rainfall), 1),
        "wind_speed": round(float(10 + rng.uniform(-5, 5)), 1),
        "pressure": round(float(1013 + rng.uniform(-20, 20)), 1),
        "uv_index": round(float(np.clip(6 + rng.uniform(-3, 3), 0, 11)), 1),
    }


def mock_weather(
    latitude: float | None = None,
    on: date | None = None,
    seed: int | None = None,
    location: str = "",
) -> EnvironmentReading:
    """Deterministic synthetic current weather for a latitude and date (daily rainfall)."""
    on = on or date.today()
    zone = climate_zone(latitude)
    rng = np.random.default_rng(seed if seed is not None else _seed(zone, on.isoformat()))
    values = _generate(on, zone, rng)
    return EnvironmentReading(
        rainfall_basis="daily",
        description=f"Simulated {weather_season(on.month)} conditions ({zone})",
        location=location,
        **values,
    )


def mock_forecast(
    latitude: float | None = None,
    start: date | None = None,
    days: int = 5,
    seed: int | None = None,
) -> list[dict]:
    """`days` daily entries {date, temp_min, temp_max, humidity, rainfall} from start (default tomorrow)."""
    start = start or date.today() + timedelta(days=1)
    zone = climate_zone(latitude)
    rng = np.random.default_rng(seed if seed is not None else _seed(zone, start.isoformat(), days))
    out = []
    for i in range(days):
        day = start + timedelta(days=i)
        values = _generate(day, zone, rng)
        spread = float(rng.uniform(3, 6))
        out.append({
            "date": day.isoformat(),
            "temp_min": round(values["temperature"] - spread, 1),
            "temp_max": round(values["temperature"] + spread, 1),
            "humidity": values["humidity"],
            "rainfall": values["rainfall"],
        })
    return out


# ---------------------------------------------------------------------------
# Zone-based defaults by state
# ---------------------------------------------------------------------------

def zone_for_state(state: str | None) -> str:
    return STATE_ZONE.get(state or "", DEFAULT_ZONE)


def _state_offset(state: str, district: str | None, feature: str) -> float:
    """Deterministic offset in [-1, 1] per state+district so defaults vary by region."""
    h = _seed(state, district or "", feature) % 100
    return (h - 50) / 50.0


def default_soil_for_state(state: str | None, district: str | None = None) -> SoilReading:
    """
    Agro-climatic zone soil for a state, nudged per district.
    Unknown states get the central-zone profile unchanged.
    """
    base = ZONE_DEFAULTS[zone_for_state(state)]
    if not state or state not in STATE_ZONE:
        return SoilReading(
            ph=base["ph"], fertility=base["fertility"], soil_type=base["soil_type"],
            nitrogen=base["N"], phosphorus=base["P"], potassium=base["K"],
        )
    ph = base["ph"] + _state_offset(state, district, "ph") * 0.4
    nutrients = {
        k: max(0, base[k] + int(_state_offset(state, district, k) * 8))
        for k in ("N", "P", "K")
    }
    return SoilReading(
        ph=round(min(9.5, max(4.5, ph)), 2),
        fertility=base["fertility"],
        soil_type=base["soil_type"],
        nitrogen=nutrients["N"],
        phosphorus=nutrients["P"],
        potassium=nutrients["K"],
    )


def default_weather_for_state(state: str | None) -> EnvironmentReading:
    """Long-run zone climate (annual rainfall) for a state."""
    zone = zone_for_state(state)
    base = ZONE_DEFAULTS[zone]
    return EnvironmentReading(
        temperature=base["temperature"],
        humidity=base["humidity"],
        rainfall=base["rainfall"],
        rainfall_basis="annual",
        description=f"Typical climate ({zone.replace('_', ' ')} zone)",
        location=state or "",
    )


def latitude_for_state(state: str | None) -> float:
    return ZONE_DEFAULTS[zone_for_state(state)]["latitude"]
