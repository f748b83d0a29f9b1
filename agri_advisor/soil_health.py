"""
Soil-test interpretation and advisory messages.
- THRESHOLDS: approximate agronomic ranges for available N/P/K (kg/ha) and pH.
- soil_test_recommendations: lime / gypsum / organic-matter actions with priority,
  overall soil status and general advice.
- get_soil_health_messages: short warnings about a soil reading and weather.
- get_crop_specific_suggestions: crop-specific hints (e.g. banana + low K).
"""

from agri_advisor.config import LIME_BELOW_PH, GYPSUM_ABOVE_PH, SUPPLY_PH_RANGE
from agri_advisor.models import EnvironmentReading, SoilReading

# Available-nutrient ranges (kg/ha) and pH; weather keys use annual rainfall (mm)
THRESHOLDS = {
    "N": {"low": 25, "high": 60},
    "P": {"low": 15, "high": 40},
    "K": {"low": 25, "high": 60},
    "ph": {"low": 5.5, "high": 7.5},
    "rainfall": {"low": 500, "high": 2000},
    "temperature": {"low": 15, "high": 35},
    "humidity": {"low": 40, "high": 85},
}

CROP_SUGGESTIONS = {
    "banana": [
        ("K", "Banana is potassium-demanding. Low K may reduce yield; consider MOP before planting."),
        ("humidity", "Banana prefers high humidity for best growth."),
    ],
    "basmati rice": [
        ("N", "Rice benefits from adequate nitrogen; low N can limit yield."),
        ("rainfall", "Rice typically needs assured water; plan irrigation if rainfall is low."),
    ],
    "maize": [
        ("N", "Maize is nitrogen-responsive; consider N application if low."),
        ("temperature", "Maize prefers warm temperatures; very low temp can delay growth."),
    ],
    "cotton": [
        ("K", "Cotton yield and fibre quality respond to potassium."),
    ],
    "potato": [
        ("ph", "Potato does best in slightly acidic soil; avoid liming above pH 6.5."),
        ("K", "Potato tuber quality responds to potassium."),
    ],
    "default": [
        ("N", "Nitrogen influences vegetative growth; consider soil test and fertilizer if low."),
        ("P", "Phosphorus supports root and flowering; low P can limit yield."),
        ("K", "Potassium helps stress tolerance and quality; low K may reduce yield."),
    ],
}

GENERAL_ADVICE = [
    "Conduct soil test every 2-3 years",
    "Maintain soil organic matter above 2%",
    "Practice crop rotation",
    "Use balanced fertilization",
]


def _get_level(value: float, key: str) -> str:
    """Return 'low', 'ok', or 'high' based on thresholds."""
    t = THRESHOLDS.get(key, {})
    if not t:
        return "ok"
    if value < t["low"]:
        return "low"
    if value > t["high"]:
        return "high"
    return "ok"


def _feature_dict(soil: SoilReading | None, weather: EnvironmentReading | None) -> dict[str, float]:
    features = {}
    if soil is not None:
        features["ph"] = soil.ph
        for key, value in (("N", soil.nitrogen), ("P", soil.phosphorus), ("K", soil.potassium)):
            if value is not None:
                features[key] = value
    if weather is not None:
        features["temperature"] = weather.temperature
        features["humidity"] = weather.humidity
        features["rainfall"] = weather.annual_rainfall
    return features


def assess_soil_status(soil: SoilReading) -> str:
    lo, hi = SUPPLY_PH_RANGE
    ph_good = lo <= soil.ph <= hi
    if ph_good and soil.fertility == "high":
        return "Excellent"
    if ph_good and soil.fertility == "medium":
        return "Good"
    return "Needs improvement"


def soil_test_recommendations(soil: SoilReading) -> dict:
    """
    Corrective actions for a soil test.

    Returns
    -------
    dict with keys:
        soil_status      : 'Excellent' | 'Good' | 'Needs improvement'
        recommendations  : list of {parameter, issue, recommendation, priority}
        general_advice   : list[str]
    """
    recs = []
    if soil.ph < LIME_BELOW_PH:
        recs.append({
            "parameter": "pH",
            "issue": "Acidic soil",
            "recommendation": "Apply lime @ 2-4 tons/ha to raise pH",
            "priority": "High",
        })
    elif soil.ph > GYPSUM_ABOVE_PH:
        recs.append({
            "parameter": "pH",
            "issue": "Alkaline soil",
            "recommendation": "Apply gypsum @ 2-3 tons/ha to lower pH",
            "priority": "High",
        })

    if soil.fertility == "low":
        recs.append({
            "parameter": "Fertility",
            "issue": "Low soil fertility",
            "recommendation": "Increase organic matter through compost and green manuring",
            "priority": "High",
        })

    return {
        "soil_status": assess_soil_status(soil),
        "recommendations": recs,
        "general_advice": list(GENERAL_ADVICE),
    }


def get_soil_health_messages(soil: SoilReading | None, weather: EnvironmentReading | None = None) -> list[str]:
    """Short human-readable messages about soil and climate conditions."""
    messages = []
    for key, value in _feature_dict(soil, weather).items():
        level = _get_level(value, key)
        if level == "low":
            if key == "N":
                messages.append("Low nitrogen detected. Consider nitrogen fertilizer for better vegetative growth.")
            elif key == "P":
                messages.append("Low phosphorus detected. Phosphorus supports root development and flowering.")
            elif key == "K":
                messages.append("Low potassium detected. K-loving crops may yield poorly; consider potash before planting.")
            elif key == "ph":
                messages.append("Soil pH is low (acidic). Consider liming; prefer acid-tolerant crops meanwhile.")
            elif key == "rainfall":
                messages.append("Low rainfall expected. Prefer drought-tolerant crops or plan for irrigation.")
            elif key == "temperature":
                messages.append("Low temperature. Cold-sensitive crops may be at risk; choose suitable varieties.")
            elif key == "humidity":
                messages.append("Low humidity. Irrigation or mulching can help in dry conditions.")
        elif level == "high":
            if key == "N":
                messages.append("High nitrogen. Good for leafy crops; avoid excess to prevent lodging.")
            elif key == "ph":
                messages.append("Soil pH is high (alkaline). Gypsum and organic matter help; prefer tolerant crops.")
            elif key == "rainfall":
                messages.append("High rainfall expected. Ensure drainage and disease management for susceptible crops.")
            elif key == "temperature":
                messages.append("High temperature. Heat-tolerant crops are preferable.")
    if soil is not None and soil.fertility == "low":
        messages.append("Low soil fertility. Add compost or green manure before the next crop.")
    return messages


def get_crop_specific_suggestions(
    crop_name: str,
    soil: SoilReading | None,
    weather: EnvironmentReading | None = None,
) -> list[str]:
    """For a recommended crop, return suggestions based on current soil/climate."""
    suggestions = []
    features = _feature_dict(soil, weather)
    hints = CROP_SUGGESTIONS.get((crop_name or "").strip().lower(), CROP_SUGGESTIONS["default"])
    for factor, message in hints:
        value = features.get(factor)
        if value is None:
            continue
        level = _get_level(value, factor)
        if level == "low" or (factor == "ph" and level != "ok"):
            suggestions.append(message)
    return suggestions
