"""
Embedded reference dataset for the advisory engine.

Used when no crops.json / fertilizers.json is present in data/. Records use
the same nested JSON schema as those files so the same validation path in
catalog.py handles both.

Units:
    temperature °C, rainfall annual mm, humidity %, price_range ₹/quintal,
    fertilizer price ₹ per unit_kg kg (50 kg bag, 1000 kg ton, retail pack),
    nutrient requirement kg/ha at normal yield.

Sources: ICAR Package of Practices, state agriculture university crop
calendars, IFFCO/NFL retail prices (MRP), FAO Ecocrop ranges.
"""

# ──────────────────────────────────────────────────────────────────────────────
# Crops
# ──────────────────────────────────────────────────────────────────────────────

def _crop(id, name, scientific_name, variety, season, category,
          temperature, rainfall, humidity, ph, soil_types,
          growth_period, yield_avg, yield_max, price_range, demand,
          export_potential, storage_life, drainage="Good"):
    """Compact constructor; ranges are (min, max, optimal)."""
    def rng(t):
        return {"min": t[0], "max": t[1], "optimal": t[2]}

    return {
        "id": id,
        "name": name,
        "scientific_name": scientific_name,
        "variety": variety,
        "season": season,
        "category": category,
        "climate_requirements": {
            "temperature": rng(temperature),
            "rainfall": rng(rainfall),
            "humidity": rng(humidity),
        },
        "soil_requirements": {
            "ph": rng(ph),
            "type": list(soil_types),
            "drainage": drainage,
        },
        "growth_data": {"growth_period": growth_period},
        "yield_data": {"average_yield": yield_avg, "max_yield": yield_max, "unit": "tons/hectare"},
        "market_data": {
            "price_range": list(price_range),
            "demand": demand,
            "export_potential": export_potential,
            "storage_life": storage_life,
        },
    }


CROP_RECORDS: list[dict] = [
    # Cereals
    _crop("crop_001", "Basmati Rice", "Oryza sativa", "Basmati 370", "Kharif", "cereal",
          (20, 35, 28), (1000, 2000, 1200), (70, 90, 80), (5.5, 7.0, 6.5),
          ("Clay", "Loamy", "Alluvial", "Laterite"), 120, 4.5, 8.0, (2200, 2800), "high", True, 12,
          drainage="Poor to moderate"),
    _crop("crop_002", "Wheat", "Triticum aestivum", "HD 2967", "Rabi", "cereal",
          (10, 25, 18), (350, 750, 500), (40, 70, 55), (6.0, 7.8, 6.8),
          ("Loamy", "Alluvial", "Clay loam", "Black"), 135, 3.5, 6.0, (2000, 2400), "high", True, 12),
    _crop("crop_003", "Maize", "Zea mays", "HQPM-1", "Kharif/Rabi", "cereal",
          (18, 32, 26), (500, 1000, 700), (50, 80, 65), (5.5, 7.5, 6.5),
          ("Loamy", "Sandy loam", "Alluvial", "Red"), 100, 3.0, 7.0, (1800, 2200), "medium", False, 9),

    # Pulses
    _crop("crop_004", "Chickpea", "Cicer arietinum", "JG 11", "Rabi", "pulse",
          (15, 30, 22), (400, 700, 550), (30, 60, 45), (6.0, 8.0, 7.0),
          ("Loamy", "Sandy loam", "Black"), 110, 1.2, 2.5, (4500, 5500), "high", False, 10),
    _crop("crop_005", "Mung Bean", "Vigna radiata", "SML 668", "Zaid/Kharif", "pulse",
          (25, 35, 30), (400, 800, 600), (50, 80, 65), (6.2, 7.5, 6.8),
          ("Loamy", "Sandy loam", "Red"), 65, 0.8, 1.5, (6500, 8000), "medium", False, 8),

    # Oilseeds
    _crop("crop_006", "Mustard", "Brassica juncea", "Pusa Bold", "Rabi", "oilseed",
          (10, 25, 18), (250, 500, 400), (35, 65, 50), (6.0, 7.5, 7.0),
          ("Loamy", "Sandy loam", "Alluvial"), 120, 1.3, 2.5, (5000, 5800), "medium", False, 9),
    _crop("crop_007", "Groundnut", "Arachis hypogaea", "TAG 24", "Kharif", "oilseed",
          (22, 32, 28), (500, 1200, 800), (50, 75, 60), (6.0, 7.5, 6.5),
          ("Sandy", "Sandy loam", "Red"), 115, 1.8, 3.5, (5500, 6500), "medium", True, 6),
    _crop("crop_008", "Soybean", "Glycine max", "JS 335", "Kharif", "oilseed",
          (20, 32, 27), (600, 1000, 800), (60, 80, 70), (6.0, 7.5, 6.5),
          ("Black", "Loamy", "Clay loam"), 100, 1.2, 2.5, (3800, 4600), "high", True, 9),

    # Cash crops
    _crop("crop_009", "Cotton", "Gossypium hirsutum", "Bt hybrid", "Kharif", "cash",
          (21, 35, 28), (500, 1000, 700), (50, 80, 60), (5.8, 8.0, 7.0),
          ("Black", "Alluvial", "Loamy"), 165, 1.8, 3.0, (6000, 7200), "high", True, 18),
    _crop("crop_010", "Sugarcane", "Saccharum officinarum", "Co 0238", "Year-round", "cash",
          (20, 35, 30), (1500, 2500, 1800), (70, 90, 80), (6.0, 8.0, 7.0),
          ("Loamy", "Alluvial", "Clay loam", "Black"), 330, 70.0, 110.0, (300, 350), "high", False, 1),

    # Vegetables
    _crop("crop_011", "Tomato", "Solanum lycopersicum", "Arka Rakshak", "Rabi/Zaid", "vegetable",
          (18, 30, 24), (400, 800, 600), (50, 75, 65), (6.0, 7.0, 6.5),
          ("Loamy", "Sandy loam", "Red"), 120, 25.0, 60.0, (800, 2000), "high", False, 1),
    _crop("crop_012", "Onion", "Allium cepa", "Agrifound Light Red", "Rabi", "vegetable",
          (13, 30, 22), (350, 750, 550), (50, 70, 60), (6.0, 7.5, 6.8),
          ("Loamy", "Sandy loam", "Alluvial"), 140, 25.0, 40.0, (1000, 2500), "high", True, 6),
    _crop("crop_013", "Potato", "Solanum tuberosum", "Kufri Jyoti", "Rabi", "vegetable",
          (15, 25, 20), (500, 800, 650), (60, 85, 75), (5.0, 6.5, 5.8),
          ("Loamy", "Sandy loam", "Alluvial"), 100, 22.0, 40.0, (800, 1400), "medium", False, 4),

    # Fruits
    _crop("crop_014", "Watermelon", "Citrullus lanatus", "Sugar Baby", "Zaid", "fruit",
          (22, 35, 30), (300, 600, 450), (40, 70, 55), (6.0, 7.0, 6.5),
          ("Sandy", "Sandy loam", "Alluvial"), 85, 25.0, 50.0, (800, 1200), "medium", False, 1),
    _crop("crop_015", "Banana", "Musa acuminata", "Grand Naine", "Year-round", "fruit",
          (20, 35, 27), (1200, 2500, 1800), (70, 90, 80), (6.0, 7.5, 6.5),
          ("Loamy", "Alluvial", "Clay loam", "Laterite"), 330, 40.0, 70.0, (1000, 1800), "high", True, 1),
]


# ──────────────────────────────────────────────────────────────────────────────
# Fertilizers
# timing: pre_planting | at_sowing | split
# ──────────────────────────────────────────────────────────────────────────────

FERTILIZER_RECORDS: list[dict] = [
    # Straight and complex fertilizers (₹ per 50 kg bag)
    {
        "id": "urea", "name": "Urea", "kind": "inorganic",
        "composition": {"N": 46, "P": 0, "K": 0},
        "price": 266, "unit_kg": 50,
        "application": "Broadcast or side dressing",
        "timing": "split", "timing_note": "Split application - basal and top dressing",
        "dosage": "100-150 kg/ha",
        "suitable_crops": ["Rice", "Wheat", "Maize", "Sugarcane"],
        "growth_stages": ["vegetative"],
        "benefits": ["Quick nitrogen release", "Promotes vegetative growth", "Cost effective"],
    },
    {
        "id": "dap", "name": "DAP (Di-Ammonium Phosphate)", "kind": "inorganic",
        "composition": {"N": 18, "P": 46, "K": 0},
        "price": 1350, "unit_kg": 50,
        "application": "Basal application",
        "timing": "at_sowing", "timing_note": "At sowing/planting",
        "dosage": "100-125 kg/ha",
        "suitable_crops": ["Wheat", "Rice", "Cotton", "Soybean"],
        "growth_stages": ["seedling"],
        "benefits": ["Root development", "Early plant establishment", "Flower and fruit formation"],
    },
    {
        "id": "mop", "name": "MOP (Muriate of Potash)", "kind": "inorganic",
        "composition": {"N": 0, "P": 0, "K": 60},
        "price": 1700, "unit_kg": 50,
        "application": "Basal or split application",
        "timing": "pre_planting", "timing_note": "Before flowering/fruiting",
        "dosage": "50-100 kg/ha",
        "suitable_crops": ["Cotton", "Sugarcane", "Potato", "Tomato"],
        "growth_stages": ["flowering", "fruiting"],
        "benefits": ["Disease resistance", "Quality improvement", "Water use efficiency"],
    },
    {
        "id": "npk_19_19_19", "name": "NPK 19:19:19", "kind": "inorganic",
        "composition": {"N": 19, "P": 19, "K": 19},
        "price": 850, "unit_kg": 50,
        "application": "Basal and top dressing",
        "timing": "split", "timing_note": "Split application",
        "dosage": "150-200 kg/ha",
        "suitable_crops": ["Vegetables", "Fruits", "Flowers"],
        "growth_stages": ["vegetative", "fruiting"],
        "benefits": ["Balanced nutrition", "Uniform growth", "Easy application"],
    },
    {
        "id": "ssp", "name": "SSP (Single Super Phosphate)", "kind": "inorganic",
        "composition": {"N": 0, "P": 16, "K": 0, "S": 11},
        "price": 450, "unit_kg": 50,
        "application": "Basal application",
        "timing": "at_sowing", "timing_note": "At sowing",
        "dosage": "200-250 kg/ha",
        "suitable_crops": ["Groundnut", "Mustard", "Pulses"],
        "growth_stages": ["seedling", "flowering"],
        "benefits": ["Phosphorus and sulfur supply", "Oil content improvement", "Cost effective"],
    },

    # Bulk organics (₹ per ton)
    {
        "id": "organic_compost", "name": "Organic Compost", "kind": "organic",
        "composition": {"N": 1.5, "P": 1, "K": 1.5},
        "price": 300, "unit_kg": 1000,
        "application": "Broadcasting and incorporation",
        "timing": "pre_planting", "timing_note": "Before sowing/planting",
        "dosage": "5-10 tons/ha",
        "suitable_crops": ["All crops"],
        "growth_stages": ["seedling"],
        "benefits": ["Soil health improvement", "Water retention", "Microbial activity"],
    },
    {
        "id": "vermicompost", "name": "Vermicompost", "kind": "organic",
        "composition": {"N": 2, "P": 1.5, "K": 1.8},
        "price": 800, "unit_kg": 1000,
        "application": "Broadcasting or pit application",
        "timing": "pre_planting", "timing_note": "Before sowing/planting",
        "dosage": "2-5 tons/ha",
        "suitable_crops": ["Vegetables", "Fruits", "Flowers"],
        "growth_stages": ["seedling", "vegetative"],
        "benefits": ["Slow nutrient release", "Soil structure improvement", "Disease suppression"],
    },
    {
        "id": "neem_cake", "name": "Neem Cake", "kind": "organic",
        "composition": {"N": 5, "P": 1, "K": 1.4},
        "price": 1200, "unit_kg": 1000,
        "application": "Broadcasting and incorporation",
        "timing": "pre_planting", "timing_note": "Before sowing",
        "dosage": "200-500 kg/ha",
        "suitable_crops": ["All crops"],
        "growth_stages": ["seedling", "vegetative"],
        "benefits": ["Pest control", "Soil conditioning", "Slow nitrogen release"],
    },

    # Horticulture and kitchen-garden inputs (₹ per retail pack)
    {
        "id": "npk_20_20_20", "name": "NPK 20-20-20 (water soluble)", "kind": "inorganic",
        "composition": {"N": 20, "P": 20, "K": 20},
        "price": 180, "unit_kg": 1,
        "application": "Dissolve 5 g per litre of water and apply every 2-3 weeks",
        "timing": "split", "timing_note": "Every 2-3 weeks during the growing season",
        "dosage": "5 g/litre",
        "suitable_crops": ["Tomato", "Onion", "Potato", "Watermelon", "Vegetables"],
        "growth_stages": ["vegetative", "fruiting"],
        "benefits": ["Balanced nutrition for all plants", "Promotes healthy root development",
                     "Enhances flowering and fruiting"],
    },
    {
        "id": "fish_emulsion", "name": "Fish Emulsion", "kind": "organic",
        "composition": {"N": 5, "P": 1, "K": 1},
        "price": 350, "unit_kg": 1,
        "application": "Dilute 15 ml per litre of water and apply every 2 weeks",
        "timing": "split", "timing_note": "Every 2 weeks",
        "dosage": "15 ml/litre",
        "suitable_crops": ["Onion", "Vegetables", "Leafy vegetables"],
        "growth_stages": ["vegetative"],
        "benefits": ["Natural source of nitrogen", "Improves soil microbial activity",
                     "Gentle on plant roots"],
    },
    {
        "id": "bone_meal", "name": "Bone Meal", "kind": "organic",
        "composition": {"N": 3, "P": 15, "K": 0},
        "price": 90, "unit_kg": 1,
        "application": "Mix into soil before planting",
        "timing": "pre_planting", "timing_note": "Before planting",
        "dosage": "100-150 g per square metre",
        "suitable_crops": ["Tomato", "Potato", "Onion", "Root vegetables"],
        "growth_stages": ["flowering"],
        "benefits": ["High phosphorus content", "Promotes strong root development",
                     "Natural source of calcium"],
    },
    {
        "id": "compost_tea", "name": "Compost Tea", "kind": "organic",
        "composition": {"N": 1, "P": 1, "K": 1},
        "price": 0, "unit_kg": 1,
        "application": "Apply as foliar spray or soil drench every 1-2 weeks",
        "timing": "split", "timing_note": "Every 1-2 weeks",
        "dosage": "Undiluted drench",
        "suitable_crops": ["All crops"],
        "growth_stages": ["seedling"],
        "benefits": ["Improves soil structure", "Suppresses soil-borne diseases",
                     "Increases beneficial microorganisms"],
    },
    {
        "id": "calcium_nitrate", "name": "Calcium Nitrate", "kind": "inorganic",
        "composition": {"N": 15.5, "P": 0, "K": 0},
        "price": 120, "unit_kg": 1,
        "application": "Dissolve 5 g per litre of water and apply every 2 weeks",
        "timing": "split", "timing_note": "Every 2 weeks from fruit set",
        "dosage": "5 g/litre",
        "suitable_crops": ["Tomato", "Watermelon", "Fruiting vegetables"],
        "growth_stages": ["fruiting"],
        "benefits": ["Prevents blossom end rot", "Provides quick nitrogen boost", "Improves fruit quality"],
    },
    {
        "id": "seaweed_extract", "name": "Seaweed Extract", "kind": "organic",
        "composition": {"N": 1, "P": 1, "K": 2},
        "price": 450, "unit_kg": 1,
        "application": "Dilute 2-3 ml per litre and apply as foliar spray",
        "timing": "split", "timing_note": "Every 2-3 weeks",
        "dosage": "2-3 ml/litre",
        "suitable_crops": ["All crops"],
        "growth_stages": ["vegetative"],
        "benefits": ["Natural growth stimulant", "Improves stress tolerance", "Contains trace minerals"],
    },
    {
        "id": "epsom_salt", "name": "Epsom Salt (Magnesium Sulphate)", "kind": "inorganic",
        "composition": {"N": 0, "P": 0, "K": 0, "S": 13},
        "price": 60, "unit_kg": 1,
        "application": "Dissolve 10 g per litre of water and apply monthly",
        "timing": "split", "timing_note": "Monthly",
        "dosage": "10 g/litre",
        "suitable_crops": ["Tomato", "Potato", "Leafy greens"],
        "growth_stages": ["fruiting"],
        "benefits": ["Provides magnesium and sulfur", "Improves chlorophyll production",
                     "Prevents magnesium deficiency"],
    },
    {
        "id": "worm_castings", "name": "Worm Castings", "kind": "organic",
        "composition": {"N": 2, "P": 1, "K": 1},
        "price": 40, "unit_kg": 1,
        "application": "Mix into soil or use as top dressing",
        "timing": "pre_planting", "timing_note": "Before planting or as top dressing",
        "dosage": "1-2 kg per square metre",
        "suitable_crops": ["All crops"],
        "growth_stages": ["seedling"],
        "benefits": ["Rich in beneficial microorganisms", "Slow-release nutrients", "Natural pest deterrent"],
    },
    {
        "id": "rhizobium", "name": "Rhizobium Culture", "kind": "bio",
        "composition": {"N": 0, "P": 0, "K": 0},
        "price": 50, "unit_kg": 0.2,
        "application": "Seed treatment before sowing",
        "timing": "at_sowing", "timing_note": "Seed treatment",
        "dosage": "200 g per 10 kg seed",
        "suitable_crops": ["Pulses", "Soybean", "Groundnut"],
        "growth_stages": ["seedling"],
        "benefits": ["Biological nitrogen fixation", "Reduces urea requirement", "Improves nodulation"],
    },
]


# ──────────────────────────────────────────────────────────────────────────────
# Crop nutrient requirement at normal yield (kg/ha)
# ──────────────────────────────────────────────────────────────────────────────

NUTRIENT_REQUIREMENTS: dict[str, dict[str, float]] = {
    "Rice":      {"N": 120, "P": 60,  "K": 40},
    "Wheat":     {"N": 120, "P": 60,  "K": 40},
    "Maize":     {"N": 150, "P": 75,  "K": 50},
    "Cotton":    {"N": 150, "P": 75,  "K": 75},
    "Soybean":   {"N": 30,  "P": 75,  "K": 50},   # N-fixing
    "Sugarcane": {"N": 200, "P": 100, "K": 150},
    "Groundnut": {"N": 25,  "P": 50,  "K": 75},
    "Mustard":   {"N": 100, "P": 50,  "K": 40},
    "Tomato":    {"N": 150, "P": 100, "K": 100},
    "Onion":     {"N": 100, "P": 50,  "K": 100},
    "Potato":    {"N": 150, "P": 80,  "K": 100},
    "Chickpea":  {"N": 20,  "P": 50,  "K": 20},
    "Banana":    {"N": 200, "P": 60,  "K": 300},
}
