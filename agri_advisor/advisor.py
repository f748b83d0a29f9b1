"""
Advisory module: one call that assembles the full farm advisory.

get_advisory() resolves weather and soil (explicit readings, OpenWeatherMap
when coordinates and an API key are available, otherwise the state's
agro-climatic zone defaults), then returns:
  - ranked crops with sub-scores and profitability tier
  - ranked fertilizers for the chosen (or top) crop
  - three dosage plans for that crop
  - soil-test advice and soil/climate messages
  - weather-driven disease risks for the recommended crops
  - a short-range forecast with weather alerts and agro advisory
"""

import logging
from dataclasses import replace

import requests

from agri_advisor.catalog import Catalog, default_catalog
from agri_advisor.config import WEATHER_API_KEY
from agri_advisor.disease import crop_disease_risks, get_diseases_by_crop, get_all_prevention_measures
from agri_advisor.dosage import recommend_dosage
from agri_advisor.mock_data import (
    default_soil_for_state,
    default_weather_for_state,
    latitude_for_state,
    mock_forecast,
)
from agri_advisor.models import CropFilters, CropProfile, EnvironmentReading, ScoredCandidate, SoilReading
from agri_advisor.providers import fetch_current_weather, fetch_forecast
from agri_advisor.ranker import rank_crops, rank_fertilizers
from agri_advisor.scoring import get_current_season
from agri_advisor.soil_health import (
    soil_test_recommendations,
    get_soil_health_messages,
    get_crop_specific_suggestions,
)
from agri_advisor.weather_advisory import weather_alerts, agro_advisory

log = logging.getLogger(__name__)


def resolve_weather(
    state: str | None,
    weather: EnvironmentReading | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    api_key: str | None = None,
) -> tuple[EnvironmentReading, str]:
    """
    Return (reading, source) where source is 'input', 'openweathermap' or 'zone_default'.

    A live OpenWeatherMap reading only supplies temperature, humidity, wind
    and pressure; its rainfall is replaced by the zone's annual climate
    rainfall, since one hour of rain says nothing about the growing season.
    """
    if weather is not None:
        return weather, "input"
    key = api_key or WEATHER_API_KEY
    if key and latitude is not None and longitude is not None:
        try:
            live = fetch_current_weather(latitude, longitude, api_key=key, location=state or "")
        except (requests.RequestException, ValueError) as exc:
            log.warning("Weather API unavailable (%s); using zone climate for %s.", exc, state)
        else:
            zone = default_weather_for_state(state)
            return replace(live, rainfall=zone.rainfall, rainfall_basis="annual"), "openweathermap"
    return default_weather_for_state(state), "zone_default"


def resolve_forecast(
    state: str | None,
    forecast: list[dict] | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    api_key: str | None = None,
    days: int = 5,
) -> tuple[list[dict], str]:
    """Return (daily forecast, source) where source is 'input', 'openweathermap' or 'mock'."""
    if forecast is not None:
        return list(forecast), "input"
    key = api_key or WEATHER_API_KEY
    if key and latitude is not None and longitude is not None:
        try:
            return fetch_forecast(latitude, longitude, api_key=key, days=days), "openweathermap"
        except (requests.RequestException, ValueError) as exc:
            log.warning("Forecast API unavailable (%s); using simulated forecast for %s.", exc, state)
    lat = latitude if latitude is not None else latitude_for_state(state)
    return mock_forecast(lat, days=days), "mock"


def resolve_soil(state: str | None, district: str | None = None, soil: SoilReading | None = None) -> tuple[SoilReading, str]:
    if soil is not None:
        return soil, "input"
    return default_soil_for_state(state, district), "zone_default"


def candidate_summary(c: ScoredCandidate) -> dict:
    """Flat dict for display / JSON output."""
    p = c.profile
    out = {
        "name": c.name,
        "score": round(c.score, 1),
        "tier": c.tier,
        "components": {k: round(v, 3) for k, v in c.components.items()},
    }
    if isinstance(p, CropProfile):
        out.update({
            "season": p.season,
            "expected_yield": p.expected_yield,
            "growth_period_days": p.growth_period,
            "price_range_inr_per_quintal": list(p.price_range),
            "demand": p.demand,
            "export_potential": p.export_potential,
        })
    else:
        out.update({
            "kind": p.kind,
            "npk": p.npk_ratio,
            "price_inr": p.price,
            "price_unit": p.price_unit,
            "application": p.application,
        })
    return out


def plan_summary(plan) -> dict:
    return {
        "id": plan.id,
        "name": plan.name,
        "description": plan.description,
        "items": [
            {"name": i.name, "quantity": i.label, "timing": i.timing, "method": i.method, "cost": round(i.cost)}
            for i in plan.items
        ],
        "total_cost": plan.total_cost,
        "expected_yield_increase": plan.expected_yield_increase,
        "soil_health_impact": plan.soil_health_impact,
        "schedule": list(plan.schedule),
        "benefits": list(plan.benefits),
    }


def get_advisory(
    state: str | None = None,
    district: str | None = None,
    weather: EnvironmentReading | None = None,
    soil: SoilReading | None = None,
    month: int | None = None,
    filters: CropFilters | None = None,
    fertilizer_crop: str | None = None,
    growth_stage: str | None = None,
    yield_target: float | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    api_key: str | None = None,
    extended: bool = False,
    catalog: Catalog | None = None,
    forecast: list[dict] | None = None,
) -> dict:
    """
    Build the complete advisory for a location.

    Parameters
    ----------
    state, district : str or None
        Used for zone defaults when weather / soil are not supplied.
    weather, soil : readings or None
        Explicit inputs take precedence over API / zone defaults.
    month : int or None
        Calendar month for the season component (default: today).
    filters : CropFilters or None
        User filters on the crop ranking.
    fertilizer_crop : str or None
        Crop for fertilizer ranking and dosage; default is the top-ranked crop.
    growth_stage : str or None
        seedling / vegetative / flowering / fruiting.
    yield_target : float or None
        Target yield (% of normal) for the dosage plans.
    catalog : Catalog or None
        Reference catalog (default_catalog() if None).
    forecast : list of dict or None
        Daily forecast entries; default is the OpenWeatherMap forecast when
        coordinates and an API key are available, else a simulated one.

    Returns
    -------
    dict with keys: state, season, weather_source, soil_source, weather, soil,
    crops, fertilizer_crop, fertilizers, dosage_plans, soil_advice,
    soil_messages, crop_suggestions, disease_risks, prevention_measures,
    forecast_source, forecast, weather_alerts, agro_advisory.
    """
    catalog = catalog or default_catalog()
    season = get_current_season(month)
    weather, weather_source = resolve_weather(state, weather, latitude, longitude, api_key)
    soil, soil_source = resolve_soil(state, district, soil)
    forecast, forecast_source = resolve_forecast(state, forecast, latitude, longitude, api_key)
    log.info(
        "Advisory for %s (%s season): weather=%s, soil=%s",
        state or "unspecified state", season, weather_source, soil_source,
    )

    ranked = rank_crops(catalog.crops, weather=weather, soil=soil, filters=filters,
                        month=month, extended=extended)

    target = fertilizer_crop or (ranked[0].name if ranked else None)
    target_profile = catalog.crop(target) if target else None
    fertilizers = rank_fertilizers(catalog, crop=target_profile or target, soil=soil, growth_stage=growth_stage)
    plans = recommend_dosage(target, soil=soil, yield_target=yield_target, catalog=catalog) if target else []

    disease_risks = {c.name: crop_disease_risks(c.name, weather) for c in ranked}
    diseases = [d for c in ranked for d in get_diseases_by_crop(c.name)]

    return {
        "state": state,
        "season": season,
        "weather_source": weather_source,
        "soil_source": soil_source,
        "weather": weather,
        "soil": soil,
        "crops": ranked,
        "fertilizer_crop": target,
        "fertilizers": fertilizers,
        "dosage_plans": plans,
        "soil_advice": soil_test_recommendations(soil),
        "soil_messages": get_soil_health_messages(soil, weather),
        "crop_suggestions": {c.name: get_crop_specific_suggestions(c.name, soil, weather) for c in ranked},
        "disease_risks": {k: v for k, v in disease_risks.items() if v},
        "prevention_measures": get_all_prevention_measures(diseases),
        "forecast_source": forecast_source,
        "forecast": forecast,
        "weather_alerts": weather_alerts(weather, forecast),
        "agro_advisory": agro_advisory(weather, forecast, crop=target),
    }


def advisory_to_dict(advisory: dict) -> dict:
    """JSON-ready view of get_advisory() output."""
    w, s = advisory["weather"], advisory["soil"]
    return {
        "state": advisory["state"],
        "season": advisory["season"],
        "weather_source": advisory["weather_source"],
        "soil_source": advisory["soil_source"],
        "weather": {
            "temperature": w.temperature,
            "humidity": w.humidity,
            "rainfall": w.rainfall,
            "rainfall_basis": w.rainfall_basis,
            "description": w.description,
        },
        "soil": {
            "ph": s.ph,
            "fertility": s.fertility,
            "soil_type": s.soil_type,
            "nitrogen": s.nitrogen,
            "phosphorus": s.phosphorus,
            "potassium": s.potassium,
        },
        "crops": [candidate_summary(c) for c in advisory["crops"]],
        "fertilizer_crop": advisory["fertilizer_crop"],
        "fertilizers": [candidate_summary(c) for c in advisory["fertilizers"]],
        "dosage_plans": [plan_summary(p) for p in advisory["dosage_plans"]],
        "soil_advice": advisory["soil_advice"],
        "soil_messages": advisory["soil_messages"],
        "crop_suggestions": advisory["crop_suggestions"],
        "disease_risks": advisory["disease_risks"],
        "prevention_measures": advisory["prevention_measures"],
        "forecast_source": advisory["forecast_source"],
        "forecast": advisory["forecast"],
        "weather_alerts": advisory["weather_alerts"],
        "agro_advisory": advisory["agro_advisory"],
    }
