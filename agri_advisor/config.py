"""
Configuration and constants for the Farm Advisory System.
Centralizes paths, scoring weights, tier thresholds, season calendar,
market and dosage constants, regional defaults, and upstream API settings.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Base paths (project root = parent of 'agri_advisor')
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
REPORTS_DIR = PROJECT_ROOT / "reports"
FIGURES_DIR = REPORTS_DIR / "figures"

load_dotenv(PROJECT_ROOT / ".env")

# ---------------------------------------------------------------------------
# Reference dataset file names (optional; place JSON files in data/)
# If files are absent the embedded reference dataset is used.
#
# Expected schemas:
#   crops.json       : {"crops": [ {id, name, scientific_name, season,
#                        climate_requirements, soil_requirements,
#                        growth_data, yield_data, market_data, ...} ]}
#   fertilizers.json : {"fertilizers": [ {id, name, kind, composition,
#                        price, unit_kg, timing, suitable_crops, ...} ]}
# ---------------------------------------------------------------------------
CROPS_FNAME       = "crops.json"
FERTILIZERS_FNAME = "fertilizers.json"

# ---------------------------------------------------------------------------
# Composite scoring weights (renormalized over the components present)
# ---------------------------------------------------------------------------
CROP_WEIGHTS: dict[str, float] = {
    "climate": 0.40,
    "soil":    0.25,
    "season":  0.20,
    "market":  0.15,
}
FERTILIZER_WEIGHTS: dict[str, float] = {
    "crop":  0.50,
    "soil":  0.25,
    "price": 0.25,
}

# Result-set sizes
CROP_RESULT_LIMIT       = 6
EXTENDED_RESULT_LIMIT   = 8
FERTILIZER_RESULT_LIMIT = 5

# Round-trip tolerance for serialized scores
SCORE_EPSILON = 1e-9

# ---------------------------------------------------------------------------
# Tier derivation
# Thresholds apply to the adjusted profitability score (0-1 scale + bonuses).
# ---------------------------------------------------------------------------
TIER_HIGH_THRESHOLD   = 0.7
TIER_MEDIUM_THRESHOLD = 0.4

PROFITABILITY_MODE = "suitability"   # "suitability" | "price"

DEMAND_TIER_BONUS = {"high": 0.20, "medium": 0.10, "low": 0.0}
EXPORT_TIER_BONUS = 0.15
# (minimum mean price in ₹/quintal, bonus) checked in order
PRICE_LEVEL_BONUS: list[tuple[float, float]] = [(3000, 0.10), (2000, 0.05)]

# "price" mode: mean market price × multiplier for the demand tier
PROFITABILITY_MULTIPLIER = {"high": 1.5, "medium": 1.0, "low": 0.5}
# price-mode tier floors on mean price × multiplier (₹/quintal)
PRICE_TIER_HIGH   = 5000
PRICE_TIER_MEDIUM = 2000

# ---------------------------------------------------------------------------
# Soil scoring
# ---------------------------------------------------------------------------
FERTILITY_SCORES = {"high": 1.0, "medium": 0.7, "low": 0.4}
UNKNOWN_FERTILITY_SCORE = 0.5

# ---------------------------------------------------------------------------
# Season calendar
# Kharif = Jun-Oct, Rabi = Nov-Mar, Zaid = Apr-May. Every month maps to
# exactly one season.
# ---------------------------------------------------------------------------
SEASON_MONTHS: dict[str, tuple[int, ...]] = {
    "Kharif": (6, 7, 8, 9, 10),
    "Rabi":   (11, 12, 1, 2, 3),
    "Zaid":   (4, 5),
}
SEASON_ALIASES: dict[str, tuple[str, ...]] = {
    "Kharif": ("kharif", "monsoon", "summer"),
    "Rabi":   ("rabi", "winter", "fall", "autumn"),
    "Zaid":   ("zaid", "spring", "summer"),
}
YEAR_ROUND_TAGS = ("year-round", "year round", "perennial", "all seasons")

SEASON_MATCH_SCORE      = 1.0
SEASON_YEAR_ROUND_SCORE = 0.8
SEASON_OFF_SCORE        = 0.3

# ---------------------------------------------------------------------------
# Market scoring
# ---------------------------------------------------------------------------
DEMAND_SCORES = {"high": 0.40, "medium": 0.25, "low": 0.10}
EXPORT_SCORE  = 0.30
# (volatility upper bound, score) checked in order; else VOLATILITY_FLOOR_SCORE
VOLATILITY_SCORES: list[tuple[float, float]] = [(0.2, 0.30), (0.4, 0.20)]
VOLATILITY_FLOOR_SCORE = 0.10

# ---------------------------------------------------------------------------
# Fertilizer relevance
# ---------------------------------------------------------------------------
GROWTH_STAGES = ("seedling", "vegetative", "flowering", "fruiting")
ALL_CROPS_TAG = "all crops"
ACIDIC_SOIL_PH = 6.0
SOIL_FIT_MATCH   = 1.0
SOIL_FIT_DEFAULT = 0.6
CROP_FIT_NAMED   = 1.0
CROP_FIT_GENERIC = 0.5

# ---------------------------------------------------------------------------
# Dosage planning (kg/ha)
# ---------------------------------------------------------------------------
DEFAULT_NUTRIENT_REQUIREMENT = {"N": 100, "P": 50, "K": 50}
YIELD_FACTOR_CAP = 2.0

# Soil nutrient supply estimate: base × fertility multiplier × pH factor
SOIL_SUPPLY_BASE = {"N": 30, "P": 25, "K": 40}
SOIL_SUPPLY_DEFAULT = {"N": 20, "P": 15, "K": 25}   # no soil data at all
FERTILITY_SUPPLY_MULTIPLIER = {"high": 1.5, "medium": 1.0, "low": 0.5}
SUPPLY_PH_RANGE = (6.0, 7.5)
SUPPLY_PH_PENALTY = 0.8

NPK_COMPLEX_CAP_KG   = 200    # max NPK 19:19:19 in the balanced plan
NPK_COMPLEX_PER_UNIT = 5      # kg of complex per kg of largest deficit
BALANCED_COMPOST_T   = 5
ORGANIC_VERMICOMPOST_T = 3
ORGANIC_NEEM_CAKE_KG   = 300
ORGANIC_COMPOST_T      = 8

SPLIT_FIRST_DAY  = 30
SPLIT_SECOND_DAY = 60

# ---------------------------------------------------------------------------
# Soil-test advisory
# ---------------------------------------------------------------------------
LIME_BELOW_PH   = 6.0
GYPSUM_ABOVE_PH = 8.0

# ---------------------------------------------------------------------------
# Weather alerts and agro advisory
# ---------------------------------------------------------------------------
HEAT_WAVE_TEMP        = 40     # °C, current temperature
HEAVY_RAIN_MM         = 50     # mm, summed over the alert window
ALERT_FORECAST_DAYS   = 3
HIGH_HUMIDITY_ALERT   = 90     # %
ADVISORY_FORECAST_DAYS = 7
HOT_ADVISORY_TEMP     = 35     # °C
HUMID_ADVISORY        = 80     # %
RAINY_FORECAST_AVG_MM = 5      # mm/day, mean over the advisory window

# ---------------------------------------------------------------------------
# Upstream APIs (values from environment / .env)
# ---------------------------------------------------------------------------
WEATHER_API_KEY  = os.getenv("WEATHER_API_KEY", "")
WEATHER_BASE_URL = os.getenv("WEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")
SOIL_API_BASE_URL = os.getenv("SOIL_API_BASE_URL", "https://rest.soilgrids.org")
REQUEST_TIMEOUT  = float(os.getenv("REQUEST_TIMEOUT", "10"))

# ---------------------------------------------------------------------------
# Agro-climatic zone defaults (state → climate + soil)
# Used by the mock providers when no API key is configured.
# rainfall is annual mm; N, P, K are available kg/ha.
# ---------------------------------------------------------------------------
ZONE_DEFAULTS: dict[str, dict] = {
    "arid_nw":       {"temperature": 32.0, "humidity": 44.0, "rainfall": 400.0,  "ph": 7.9, "fertility": "low",    "soil_type": "Sandy",    "N": 20, "P": 14, "K": 32, "latitude": 28.0},
    "eastern_humid": {"temperature": 27.0, "humidity": 85.0, "rainfall": 1800.0, "ph": 5.7, "fertility": "high",   "soil_type": "Alluvial", "N": 45, "P": 22, "K": 38, "latitude": 24.0},
    "southern":      {"temperature": 28.0, "humidity": 72.0, "rainfall": 1000.0, "ph": 6.4, "fertility": "medium", "soil_type": "Red",      "N": 32, "P": 24, "K": 40, "latitude": 14.0},
    "west_coast":    {"temperature": 27.5, "humidity": 84.0, "rainfall": 2800.0, "ph": 5.6, "fertility": "medium", "soil_type": "Laterite", "N": 35, "P": 18, "K": 30, "latitude": 12.0},
    "central":       {"temperature": 26.5, "humidity": 62.0, "rainfall": 1050.0, "ph": 7.0, "fertility": "medium", "soil_type": "Loamy",    "N": 30, "P": 25, "K": 41, "latitude": 23.0},
    "himalayan":     {"temperature": 16.5, "humidity": 70.0, "rainfall": 1500.0, "ph": 5.9, "fertility": "medium", "soil_type": "Loamy",    "N": 38, "P": 20, "K": 36, "latitude": 31.5},
    "western_dry":   {"temperature": 29.0, "humidity": 58.0, "rainfall": 700.0,  "ph": 7.6, "fertility": "medium", "soil_type": "Black",    "N": 26, "P": 20, "K": 45, "latitude": 20.0},
}
STATE_ZONE: dict[str, str] = {
    "Rajasthan": "arid_nw", "Haryana": "arid_nw", "Punjab": "arid_nw", "Delhi": "arid_nw", "Chandigarh": "arid_nw",
    "West Bengal": "eastern_humid", "Odisha": "eastern_humid", "Assam": "eastern_humid",
    "Arunachal Pradesh": "eastern_humid", "Manipur": "eastern_humid", "Meghalaya": "eastern_humid",
    "Mizoram": "eastern_humid", "Nagaland": "eastern_humid", "Tripura": "eastern_humid",
    "Andhra Pradesh": "southern", "Telangana": "southern", "Karnataka": "southern", "Tamil Nadu": "southern", "Puducherry": "southern",
    "Kerala": "west_coast", "Goa": "west_coast",
    "Maharashtra": "western_dry", "Gujarat": "western_dry", "Dadra and Nagar Haveli and Daman and Diu": "western_dry",
    "Madhya Pradesh": "central", "Chhattisgarh": "central", "Uttar Pradesh": "central", "Bihar": "central", "Jharkhand": "central",
    "Himachal Pradesh": "himalayan", "Uttarakhand": "himalayan", "Jammu and Kashmir": "himalayan", "Ladakh": "himalayan", "Sikkim": "himalayan",
    "Andaman and Nicobar Islands": "eastern_humid", "Lakshadweep": "west_coast",
}
DEFAULT_ZONE = "central"

# Indian states list (for UI dropdown)
INDIAN_STATES: list[str] = sorted(STATE_ZONE.keys())


def ensure_dirs():
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    FIGURES_DIR.mkdir(parents=True, exist_ok=True)
