"""
Plant disease knowledge base, canned detector and weather-driven disease risk.

detect_disease() does not classify images: it returns canned candidates from
the knowledge base (optionally restricted to a crop) so the dashboard and CLI
have a stable disease panel to render.

Weather risk per disease (0-1):
    0.5 × (temperature inside the disease's favourable range)
  + 0.3 × (humidity ≥ the disease's humidity threshold)
  + spread bonus (high 0.2, medium 0.1)
    → > 0.7 high, > 0.4 medium, else low

Disease data note:
    Compiled from ICAR / NIPHM extension bulletins; indicative, not clinical.
"""

import logging

from agri_advisor.models import EnvironmentReading
from agri_advisor.ranker import tier_from_value

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Disease knowledge base
# ---------------------------------------------------------------------------
DISEASE_DB: list[dict] = [
    {
        "id": "disease_001",
        "name": "Late Blight",
        "scientific_name": "Phytophthora infestans",
        "affected_crops": ["Potato", "Tomato"],
        "symptoms": ["Dark brown spots on leaves", "White fuzzy growth on leaf undersides",
                     "Rapid wilting of affected areas", "Brown lesions on stems"],
        "causes": ["High humidity", "Cool temperatures", "Poor air circulation"],
        "treatment": ["Apply copper-based fungicide", "Remove affected plant parts",
                      "Spray Mancozeb or Metalaxyl at first symptoms"],
        "prevention": ["Maintain proper plant spacing", "Ensure good drainage",
                       "Use certified disease-free seed tubers", "Rotate crops annually"],
        "severity": "high",
        "temperature_range": (15, 25),
        "humidity_threshold": 85,
        "spread_rate": "high",
    },
    {
        "id": "disease_002",
        "name": "Powdery Mildew",
        "scientific_name": "Erysiphe spp.",
        "affected_crops": ["Watermelon", "Mung Bean", "Chickpea"],
        "symptoms": ["White powdery coating on leaves", "Yellowing of affected leaves",
                     "Premature leaf drop"],
        "causes": ["High humidity with dry conditions", "Poor air circulation", "Overcrowded plants"],
        "treatment": ["Apply wettable sulfur", "Remove affected leaves", "Improve air circulation"],
        "prevention": ["Maintain proper plant spacing", "Avoid overhead watering",
                       "Choose resistant varieties"],
        "severity": "medium",
        "temperature_range": (20, 30),
        "humidity_threshold": 60,
        "spread_rate": "medium",
    },
    {
        "id": "disease_003",
        "name": "Rice Blast",
        "scientific_name": "Magnaporthe oryzae",
        "affected_crops": ["Basmati Rice", "Rice"],
        "symptoms": ["Spindle-shaped lesions with grey centres", "Neck rot at panicle base"],
        "causes": ["Excess nitrogen", "Prolonged leaf wetness", "Cool nights"],
        "treatment": ["Spray Tricyclazole or Propiconazole at tillering stage"],
        "prevention": ["Use blast-resistant varieties", "Avoid excess nitrogen application",
                       "Ensure proper field drainage"],
        "severity": "high",
        "temperature_range": (20, 28),
        "humidity_threshold": 90,
        "spread_rate": "high",
    },
    {
        "id": "disease_004",
        "name": "Yellow Rust",
        "scientific_name": "Puccinia striiformis",
        "affected_crops": ["Wheat"],
        "symptoms": ["Yellow stripes of pustules on leaves", "Powdery yellow spores on touch"],
        "causes": ["Cool humid weather", "Susceptible varieties"],
        "treatment": ["Spray Propiconazole 25 EC @ 0.1%", "Repeat after 15 days if needed"],
        "prevention": ["Use rust-resistant varieties", "Avoid late sowing", "Monitor fields from January"],
        "severity": "high",
        "temperature_range": (10, 20),
        "humidity_threshold": 80,
        "spread_rate": "high",
    },
    {
        "id": "disease_005",
        "name": "Cotton Leaf Curl",
        "scientific_name": "Cotton leaf curl virus (whitefly-borne)",
        "affected_crops": ["Cotton"],
        "symptoms": ["Upward or downward curling of leaves", "Vein thickening", "Stunted growth"],
        "causes": ["Whitefly infestation", "Hot dry weather"],
        "treatment": ["Control whitefly with Flonicamid or neem oil", "Uproot infected plants early"],
        "prevention": ["Use tolerant hybrids", "Remove weed hosts", "Install yellow sticky traps"],
        "severity": "high",
        "temperature_range": (28, 38),
        "humidity_threshold": 50,
        "spread_rate": "medium",
    },
    {
        "id": "disease_006",
        "name": "Purple Blotch",
        "scientific_name": "Alternaria porri",
        "affected_crops": ["Onion"],
        "symptoms": ["Small water-soaked lesions turning purple", "Leaf tip dieback"],
        "causes": ["Warm humid weather", "Thrips damage"],
        "treatment": ["Spray Mancozeb 0.25% at 10-day intervals"],
        "prevention": ["Use healthy seed", "Ensure wide spacing", "Rotate with non-allium crops"],
        "severity": "medium",
        "temperature_range": (21, 30),
        "humidity_threshold": 80,
        "spread_rate": "medium",
    },
]

# Canned detector confidences, in DISEASE_DB order of the matching entries
CANNED_CONFIDENCES = (0.87, 0.42, 0.18)

_SPREAD_BONUS = {"high": 0.2, "medium": 0.1, "low": 0.0}
_TEMPERATURE_WEIGHT = 0.5
_HUMIDITY_WEIGHT = 0.3


def get_disease(disease_id: str) -> dict | None:
    for d in DISEASE_DB:
        if d["id"] == disease_id:
            return d
    return None


def get_diseases_by_crop(crop: str) -> list[dict]:
    """Diseases whose affected crops mention crop (case-insensitive substring, either way)."""
    key = crop.strip().lower()
    out = []
    for d in DISEASE_DB:
        names = [c.lower() for c in d["affected_crops"]]
        if any(key in n or n in key for n in names):
            out.append(d)
    return out


def severity_from_confidence(confidence: float, spread_rate: str | None = None) -> str:
    """Detection severity: confidence plus the disease's spread bonus."""
    return tier_from_value(confidence + _SPREAD_BONUS.get(spread_rate or "", 0.0))


def detect_disease(image: bytes | None = None, crop: str | None = None) -> list[dict]:
    """
    Canned detection result.

    Parameters
    ----------
    image : bytes or None
        Uploaded image; accepted for interface compatibility, not inspected.
    crop : str or None
        Restrict candidates to diseases of this crop.

    Returns
    -------
    list of dicts: id, name, scientific_name, confidence (0-100), severity,
    symptoms, treatment, prevention, affected_crops.
    """
    candidates = get_diseases_by_crop(crop) if crop else DISEASE_DB
    if image is not None:
        log.info("Disease detection stub received %d-byte image; returning canned result.", len(image))
    results = []
    for d, conf in zip(candidates, CANNED_CONFIDENCES):
        results.append({
            "id": d["id"],
            "name": d["name"],
            "scientific_name": d["scientific_name"],
            "confidence": round(conf * 100),
            "severity": severity_from_confidence(conf, d["spread_rate"]),
            "symptoms": list(d["symptoms"]),
            "treatment": list(d["treatment"]),
            "prevention": list(d["prevention"]),
            "affected_crops": list(d["affected_crops"]),
        })
    return results


def disease_risk(disease: dict, weather: EnvironmentReading) -> dict:
    """Weather-driven risk of one disease: {name, score (0-1), risk, favourable_temperature, humid}."""
    t_lo, t_hi = disease["temperature_range"]
    temp_ok = t_lo <= weather.temperature <= t_hi
    humid = weather.humidity >= disease["humidity_threshold"]
    score = (
        _TEMPERATURE_WEIGHT * temp_ok
        + _HUMIDITY_WEIGHT * humid
        + _SPREAD_BONUS.get(disease["spread_rate"], 0.0)
    )
    return {
        "id": disease["id"],
        "name": disease["name"],
        "score": round(score, 2),
        "risk": tier_from_value(score),
        "favourable_temperature": temp_ok,
        "humid": humid,
    }


def crop_disease_risks(crop: str, weather: EnvironmentReading) -> list[dict]:
    """Risks for every disease of crop, highest first."""
    risks = [disease_risk(d, weather) for d in get_diseases_by_crop(crop)]
    return sorted(risks, key=lambda r: -r["score"])


def get_all_prevention_measures(disease_list: list[dict]) -> list[str]:
    """Flatten and deduplicate prevention measures, preserving order."""
    seen = set()
    measures = []
    for d in disease_list:
        for measure in d.get("prevention", []):
            if measure not in seen:
                seen.add(measure)
                measures.append(measure)
    return measures


def disease_analytics() -> dict:
    """Counts by spread rate, most vulnerable crops and average favourable conditions."""
    by_spread = {"high": 0, "medium": 0, "low": 0}
    crop_counts: dict[str, int] = {}
    for d in DISEASE_DB:
        by_spread[d["spread_rate"]] += 1
        for c in d["affected_crops"]:
            crop_counts[c] = crop_counts.get(c, 0) + 1
    vulnerable = sorted(crop_counts.items(), key=lambda kv: -kv[1])[:10]
    n = len(DISEASE_DB)
    return {
        "total_diseases": n,
        "by_spread_rate": by_spread,
        "crop_vulnerability": [{"crop": c, "disease_count": k} for c, k in vulnerable],
        "average_temperature_range": (
            round(sum(d["temperature_range"][0] for d in DISEASE_DB) / n),
            round(sum(d["temperature_range"][1] for d in DISEASE_DB) / n),
        ),
        "average_humidity_threshold": round(sum(d["humidity_threshold"] for d in DISEASE_DB) / n),
    }
