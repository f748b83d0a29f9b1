"""
Fertilizer dosage planner: nutrient deficits → three costed fertilizer plans.

    scaled requirement = requirement × min(2, yield_target / 100)
    deficit            = max(0, scaled requirement − soil supply)   per nutrient

Plans, always in this order:
    balanced_approach    NPK 19:19:19 + urea top-up + compost
    straight_fertilizers urea / DAP / MOP sized to each deficit
    organic_approach     vermicompost + neem cake + compost

Item cost = quantity_kg / unit_kg × unit price (₹). Quantities are kg/ha for
bagged fertilizers and tons/ha for bulk organics.
"""

import logging

from agri_advisor.config import (
    DEFAULT_NUTRIENT_REQUIREMENT,
    YIELD_FACTOR_CAP,
    SOIL_SUPPLY_BASE,
    SOIL_SUPPLY_DEFAULT,
    FERTILITY_SUPPLY_MULTIPLIER,
    SUPPLY_PH_RANGE,
    SUPPLY_PH_PENALTY,
    NPK_COMPLEX_CAP_KG,
    NPK_COMPLEX_PER_UNIT,
    BALANCED_COMPOST_T,
    ORGANIC_VERMICOMPOST_T,
    ORGANIC_NEEM_CAKE_KG,
    ORGANIC_COMPOST_T,
    SPLIT_FIRST_DAY,
    SPLIT_SECOND_DAY,
)
from agri_advisor.exceptions import InvalidInputError
from agri_advisor.models import (
    FertilizerPlan,
    FertilizerProfile,
    NutrientAmounts,
    PlanItem,
    SoilReading,
    require_number,
)

log = logging.getLogger(__name__)

TIMING_ORDER = ("pre_planting", "at_sowing", "split")


# ---------------------------------------------------------------------------
# Requirement, supply, deficit
# ---------------------------------------------------------------------------

def yield_factor(yield_target) -> float:
    """Requirement multiplier for a target yield (% of normal), capped at 2."""
    if yield_target is None:
        return 1.0
    target = require_number(yield_target, "yield_target")
    if target <= 0:
        raise InvalidInputError(f"yield_target must be positive, got {target}")
    return min(YIELD_FACTOR_CAP, target / 100)


def estimate_soil_supply(soil: SoilReading | None) -> NutrientAmounts:
    """
    Plant-available N/P/K (kg/ha) the soil is expected to supply.

    Measured nutrients are used as-is when all three are present; otherwise
    the supply is estimated from fertility and pH. No soil data at all gives
    a conservative default.
    """
    if soil is None:
        return NutrientAmounts.from_dict(SOIL_SUPPLY_DEFAULT)
    if soil.has_measured_nutrients:
        return NutrientAmounts(soil.nitrogen, soil.phosphorus, soil.potassium)

    multiplier = FERTILITY_SUPPLY_MULTIPLIER.get(soil.fertility, FERTILITY_SUPPLY_MULTIPLIER["low"])
    ph_lo, ph_hi = SUPPLY_PH_RANGE
    ph_factor = 1.0 if ph_lo <= soil.ph <= ph_hi else SUPPLY_PH_PENALTY
    return NutrientAmounts.from_dict({
        k: round(base * multiplier * ph_factor) for k, base in SOIL_SUPPLY_BASE.items()
    })


def compute_deficits(
    requirement: NutrientAmounts,
    supply: NutrientAmounts,
    yield_target=None,
) -> NutrientAmounts:
    factor = yield_factor(yield_target)
    return NutrientAmounts(
        nitrogen=max(0.0, requirement.nitrogen * factor - supply.nitrogen),
        phosphorus=max(0.0, requirement.phosphorus * factor - supply.phosphorus),
        potassium=max(0.0, requirement.potassium * factor - supply.potassium),
    )


# ---------------------------------------------------------------------------
# Plan items
# ---------------------------------------------------------------------------

def item_cost(fertilizer: FertilizerProfile, quantity_kg: float) -> float:
    if not fertilizer.unit_kg:
        return 0.0
    return quantity_kg / fertilizer.unit_kg * fertilizer.price


def _bag_item(fertilizer: FertilizerProfile, kg: float, timing: str | None = None) -> PlanItem:
    return PlanItem(
        fertilizer_id=fertilizer.id,
        name=fertilizer.name,
        quantity=kg,
        unit="kg/ha",
        timing=timing or fertilizer.timing,
        method=fertilizer.application,
        cost=item_cost(fertilizer, kg),
    )


def _bulk_item(fertilizer: FertilizerProfile, tons: float) -> PlanItem:
    return PlanItem(
        fertilizer_id=fertilizer.id,
        name=fertilizer.name,
        quantity=tons,
        unit="tons/ha",
        timing=fertilizer.timing,
        method=fertilizer.application,
        cost=item_cost(fertilizer, tons * 1000),
    )


def build_application_schedule(items) -> tuple[str, ...]:
    """
    One line per timing bucket in pre-planting → at sowing → split order.
    Split items produce two lines (50 % at day 30, the rest at day 60).
    """
    buckets = {t: [i.name for i in items if i.timing == t] for t in TIMING_ORDER}
    schedule = []
    if buckets["pre_planting"]:
        schedule.append(f"Pre-planting: Apply {', '.join(buckets['pre_planting'])}")
    if buckets["at_sowing"]:
        schedule.append(f"At sowing: Apply {', '.join(buckets['at_sowing'])}")
    if buckets["split"]:
        names = ", ".join(buckets["split"])
        schedule.append(f"{SPLIT_FIRST_DAY} days after sowing: Apply 50% of {names}")
        schedule.append(f"{SPLIT_SECOND_DAY} days after sowing: Apply remaining 50% of {names}")
    return tuple(schedule)


def _plan(plan_id, name, description, items, yield_increase, soil_impact, benefits, deficits) -> FertilizerPlan:
    items = tuple(i for i in items if i.quantity > 0)
    return FertilizerPlan(
        id=plan_id,
        name=name,
        description=description,
        items=items,
        total_cost=round(sum(i.cost for i in items)),
        expected_yield_increase=yield_increase,
        soil_health_impact=soil_impact,
        schedule=build_application_schedule(items),
        benefits=tuple(benefits),
        deficits=deficits,
    )


# ---------------------------------------------------------------------------
# The three plans
# ---------------------------------------------------------------------------

def balanced_plan(deficits: NutrientAmounts, catalog) -> FertilizerPlan:
    npk = catalog.fertilizer("npk_19_19_19")
    urea = catalog.fertilizer("urea")
    compost = catalog.fertilizer("organic_compost")

    largest = max(deficits.nitrogen, deficits.phosphorus, deficits.potassium)
    npk_kg = min(NPK_COMPLEX_CAP_KG, largest * NPK_COMPLEX_PER_UNIT)
    items = [_bag_item(npk, npk_kg)]

    extra_n = deficits.nitrogen - npk_kg * npk.nitrogen / 100
    if extra_n > 0:
        items.append(_bag_item(urea, round(extra_n / (urea.nitrogen / 100)), timing="split"))

    items.append(_bulk_item(compost, BALANCED_COMPOST_T))
    return _plan(
        "balanced_approach", "Balanced NPK + Organic",
        "Combination of complex fertilizer with organic matter for sustained nutrition",
        items, "15-25%", "Positive",
        ["Balanced nutrition supply", "Improved soil health",
         "Sustained nutrient release", "Cost-effective approach"],
        deficits,
    )


def straight_plan(deficits: NutrientAmounts, catalog) -> FertilizerPlan:
    urea = catalog.fertilizer("urea")
    dap = catalog.fertilizer("dap")
    mop = catalog.fertilizer("mop")

    items = []
    if deficits.nitrogen > 0:
        items.append(_bag_item(urea, round(deficits.nitrogen / (urea.nitrogen / 100))))
    if deficits.phosphorus > 0:
        items.append(_bag_item(dap, round(deficits.phosphorus / (dap.phosphorus / 100))))
    if deficits.potassium > 0:
        items.append(_bag_item(mop, round(deficits.potassium / (mop.potassium / 100))))

    return _plan(
        "straight_fertilizers", "Straight Fertilizers",
        "Individual fertilizers for precise nutrient management",
        items, "20-30%", "Neutral",
        ["Precise nutrient control", "Maximum yield potential",
         "Flexible application timing", "Quick nutrient availability"],
        deficits,
    )


def organic_plan(deficits: NutrientAmounts, catalog) -> FertilizerPlan:
    vermicompost = catalog.fertilizer("vermicompost")
    neem_cake = catalog.fertilizer("neem_cake")
    compost = catalog.fertilizer("organic_compost")

    items = [
        _bulk_item(vermicompost, ORGANIC_VERMICOMPOST_T),
        _bag_item(neem_cake, ORGANIC_NEEM_CAKE_KG),
        _bulk_item(compost, ORGANIC_COMPOST_T),
    ]
    return _plan(
        "organic_approach", "Organic Nutrition",
        "Complete organic approach for sustainable farming",
        items, "10-20%", "Highly Positive",
        ["Excellent soil health improvement", "Sustainable nutrition",
         "Pest and disease suppression", "Long-term soil fertility"],
        deficits,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def plan_fertilizer_dosage(
    requirement: NutrientAmounts,
    supply: NutrientAmounts,
    yield_target=None,
    catalog=None,
) -> list[FertilizerPlan]:
    """
    Build the balanced, straight and organic plans for one crop.

    Parameters
    ----------
    requirement : NutrientAmounts
        Crop N/P/K requirement in kg/ha at normal yield.
    supply : NutrientAmounts
        Soil-available N/P/K in kg/ha (see estimate_soil_supply).
    yield_target : float or None
        Target yield as % of normal; scales the requirement, capped at 2×.
    catalog : Catalog or None
        Source of fertilizer prices and compositions (default catalog if None).

    Returns
    -------
    list of exactly three FertilizerPlan.
    """
    if catalog is None:
        from agri_advisor.catalog import default_catalog
        catalog = default_catalog()

    deficits = compute_deficits(requirement, supply, yield_target)
    log.debug("Nutrient deficits (kg/ha): %s", deficits.as_dict())
    return [
        balanced_plan(deficits, catalog),
        straight_plan(deficits, catalog),
        organic_plan(deficits, catalog),
    ]


def recommend_dosage(
    crop_name: str,
    soil: SoilReading | None = None,
    yield_target=None,
    catalog=None,
) -> list[FertilizerPlan]:
    """Resolve the crop's requirement and the soil supply, then plan."""
    if catalog is None:
        from agri_advisor.catalog import default_catalog
        catalog = default_catalog()

    requirement = catalog.nutrient_requirement(crop_name)
    if requirement is None:
        log.info("No nutrient requirement for %r; using default N/P/K.", crop_name)
        requirement = NutrientAmounts.from_dict(DEFAULT_NUTRIENT_REQUIREMENT)
    supply = estimate_soil_supply(soil)
    plans = plan_fertilizer_dosage(requirement, supply, yield_target, catalog)
    log.info(
        "Dosage plans for %s: %s",
        crop_name, ", ".join(f"{p.name} ₹{p.total_cost}" for p in plans),
    )
    return plans
