"""
Upstream provider payloads and their conversion into engine readings.

Each upstream (OpenWeatherMap, IMD, soil-health service, KVK crop feed) has
its own pydantic model; the converters below are the only place those shapes
are interpreted, so the scorers only ever see EnvironmentReading, SoilReading
and CropProfile.

Rainfall units:
    OpenWeatherMap reports rain over the last 1 h / 3 h; it is extrapolated to
    a daily rate (×24 / ×8) and tagged rainfall_basis="daily".
    IMD "rainfall" is a daily total (mm), also tagged "daily".
    KVK min/max rainfall is annual (mm).

Usage:
    from agri_advisor.providers import fetch_current_weather
    reading = fetch_current_weather(28.61, 77.21, api_key="...")
"""

import logging
from datetime import datetime, timezone

import requests
from pydantic import BaseModel, Field

from agri_advisor.config import WEATHER_API_KEY, WEATHER_BASE_URL, REQUEST_TIMEOUT
from agri_advisor.exceptions import InvalidInputError
from agri_advisor.models import CropProfile, EnvironmentReading, Range, SoilReading

log = logging.getLogger(__name__)

# Permissive bounds used when a KVK record omits a requirement
KVK_DEFAULT_TEMPERATURE = (0.0, 50.0)
KVK_DEFAULT_RAINFALL    = (0.0, 5000.0)
KVK_DEFAULT_HUMIDITY    = (0.0, 100.0)


# ---------------------------------------------------------------------------
# OpenWeatherMap
# ---------------------------------------------------------------------------

class OWMMain(BaseModel):
    temp: float
    humidity: float
    pressure: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None


class OWMWind(BaseModel):
    speed: float | None = None


class OWMRain(BaseModel):
    one_hour: float | None = Field(default=None, alias="1h")
    three_hours: float | None = Field(default=None, alias="3h")


class OWMCondition(BaseModel):
    description: str = ""


class OpenWeatherMapResponse(BaseModel):
    name: str = ""
    main: OWMMain
    wind: OWMWind = OWMWind()
    rain: OWMRain | None = None
    weather: list[OWMCondition] = []


class OWMForecastItem(BaseModel):
    dt: int
    main: OWMMain
    rain: OWMRain | None = None


class OpenWeatherMapForecastResponse(BaseModel):
    items: list[OWMForecastItem] = Field(default=[], alias="list")


def _owm_daily_rain(rain: OWMRain | None) -> float:
    if rain is None:
        return 0.0
    if rain.one_hour is not None:
        return rain.one_hour * 24
    if rain.three_hours is not None:
        return rain.three_hours * 8
    return 0.0


def reading_from_openweathermap(payload: OpenWeatherMapResponse | dict, location: str = "") -> EnvironmentReading:
    if isinstance(payload, dict):
        payload = OpenWeatherMapResponse.model_validate(payload)
    return EnvironmentReading(
        temperature=payload.main.temp,
        humidity=payload.main.humidity,
        rainfall=_owm_daily_rain(payload.rain),
        rainfall_basis="daily",
        wind_speed=payload.wind.speed,
        pressure=payload.main.pressure,
        description=payload.weather[0].description if payload.weather else "",
        location=location or payload.name,
    )


def forecast_from_openweathermap(payload: OpenWeatherMapForecastResponse | dict, days: int = 5) -> list[dict]:
    """
    Daily {date, temp_min, temp_max, humidity, rainfall} for the first `days`
    UTC dates of the 3-hourly forecast: min/max temperature, mean humidity
    and summed 3 h rain per date.
    """
    if isinstance(payload, dict):
        payload = OpenWeatherMapForecastResponse.model_validate(payload)
    by_date: dict[str, list[OWMForecastItem]] = {}
    for item in payload.items:
        day = datetime.fromtimestamp(item.dt, tz=timezone.utc).date().isoformat()
        by_date.setdefault(day, []).append(item)

    out = []
    for day in sorted(by_date)[:days]:
        items = by_date[day]
        lows = [i.main.temp_min if i.main.temp_min is not None else i.main.temp for i in items]
        highs = [i.main.temp_max if i.main.temp_max is not None else i.main.temp for i in items]
        out.append({
            "date": day,
            "temp_min": min(lows),
            "temp_max": max(highs),
            "humidity": round(sum(i.main.humidity for i in items) / len(items), 1),
            "rainfall": round(sum((i.rain.three_hours or 0.0) if i.rain else 0.0 for i in items), 2),
        })
    return out


# ---------------------------------------------------------------------------
# IMD
# ---------------------------------------------------------------------------

class IMDCurrent(BaseModel):
    temp: float | None = None
    humidity: float | None = None
    rainfall: float | None = None
    wind_speed: float | None = None
    pressure: float | None = None
    description: str = ""


class IMDForecast(BaseModel):
    date: str
    temp_min: float
    temp_max: float
    humidity: float
    rainfall: float


class IMDWeatherResponse(BaseModel):
    current: IMDCurrent | None = None
    forecast: list[IMDForecast] = []


def reading_from_imd(payload: IMDWeatherResponse | dict, location: str = "") -> EnvironmentReading:
    if isinstance(payload, dict):
        payload = IMDWeatherResponse.model_validate(payload)
    cur = payload.current
    if cur is None or cur.temp is None or cur.humidity is None:
        raise InvalidInputError("IMD response has no current temperature/humidity")
    return EnvironmentReading(
        temperature=cur.temp,
        humidity=cur.humidity,
        rainfall=cur.rainfall or 0.0,
        rainfall_basis="daily",
        wind_speed=cur.wind_speed,
        pressure=cur.pressure,
        description=cur.description,
        location=location,
    )


# ---------------------------------------------------------------------------
# Soil health service
# ---------------------------------------------------------------------------

class SoilProperties(BaseModel):
    ph: float
    fertility: str = "medium"
    nitrogen: float | None = None
    phosphorus: float | None = None
    potassium: float | None = None


class SoilHealthResponse(BaseModel):
    properties: SoilProperties | None = None
    recommendations: list[str] = []


def soil_from_soil_health(payload: SoilHealthResponse | dict, soil_type: str | None = None) -> SoilReading:
    if isinstance(payload, dict):
        payload = SoilHealthResponse.model_validate(payload)
    props = payload.properties
    if props is None:
        raise InvalidInputError("Soil health response has no properties")
    return SoilReading(
        ph=props.ph,
        fertility=props.fertility,
        soil_type=soil_type,
        nitrogen=props.nitrogen,
        phosphorus=props.phosphorus,
        potassium=props.potassium,
    )


# ---------------------------------------------------------------------------
# KVK crop feed
# ---------------------------------------------------------------------------

class KVKCrop(BaseModel):
    crop_name: str
    scientific_name: str = ""
    season: str = ""
    suitable_soil_types: list[str] = []
    min_temp: float | None = None
    max_temp: float | None = None
    min_rainfall: float | None = None
    max_rainfall: float | None = None
    min_humidity: float | None = None
    max_humidity: float | None = None
    min_ph: float | None = None
    max_ph: float | None = None
    growth_period: int | None = None
    expected_yield: str | None = None
    expected_yield_value: float | None = None
    market_price: float | None = None
    input_cost: float | None = None
    crop_id: str | None = None


def _kvk_range(lo: float | None, hi: float | None, default: tuple[float, float]) -> Range:
    return Range(default[0] if lo is None else lo, default[1] if hi is None else hi)


def crop_from_kvk(payload: KVKCrop | dict) -> CropProfile:
    """
    KVK records carry no optimum, demand or price spread: ranges have no
    optimal, demand is 'medium' and the price range collapses to market_price.
    """
    if isinstance(payload, dict):
        payload = KVKCrop.model_validate(payload)
    price = payload.market_price or 0.0
    return CropProfile(
        id=payload.crop_id or payload.crop_name.lower().replace(" ", "_"),
        name=payload.crop_name,
        scientific_name=payload.scientific_name,
        season=payload.season,
        temperature=_kvk_range(payload.min_temp, payload.max_temp, KVK_DEFAULT_TEMPERATURE),
        rainfall=_kvk_range(payload.min_rainfall, payload.max_rainfall, KVK_DEFAULT_RAINFALL),
        humidity=_kvk_range(payload.min_humidity, payload.max_humidity, KVK_DEFAULT_HUMIDITY),
        ph=_kvk_range(payload.min_ph, payload.max_ph, (0.0, 14.0)),
        soil_types=tuple(payload.suitable_soil_types),
        growth_period=payload.growth_period or 0,
        yield_avg=payload.expected_yield_value or 0.0,
        yield_max=payload.expected_yield_value or 0.0,
        price_range=(price, price),
    )


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

def _get_json(url: str, params: dict) -> dict:
    resp = requests.get(url, params=params, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def fetch_current_weather(lat: float, lon: float, api_key: str | None = None, location: str = "") -> EnvironmentReading:
    """
    Current weather from OpenWeatherMap (metric units).

    Raises requests.HTTPError on a non-2xx response and ValueError when no
    API key is configured (set WEATHER_API_KEY in .env).
    """
    key = api_key or WEATHER_API_KEY
    if not key:
        raise ValueError("No OpenWeatherMap API key; set WEATHER_API_KEY in .env or pass api_key.")
    log.info("Fetching current weather for (%.4f, %.4f)...", lat, lon)
    data = _get_json(
        f"{WEATHER_BASE_URL}/weather",
        {"lat": lat, "lon": lon, "appid": key, "units": "metric"},
    )
    return reading_from_openweathermap(data, location=location)


def fetch_forecast(lat: float, lon: float, api_key: str | None = None, days: int = 5) -> list[dict]:
    key = api_key or WEATHER_API_KEY
    if not key:
        raise ValueError("No OpenWeatherMap API key; set WEATHER_API_KEY in .env or pass api_key.")
    log.info("Fetching %d-day forecast for (%.4f, %.4f)...", days, lat, lon)
    data = _get_json(
        f"{WEATHER_BASE_URL}/forecast",
        {"lat": lat, "lon": lon, "appid": key, "units": "metric"},
    )
    return forecast_from_openweathermap(data, days=days)
