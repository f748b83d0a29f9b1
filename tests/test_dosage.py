"""
Dosage planner tests: deficits, the three plans, costs and schedules.
Run from project root: python -m pytest tests/test_dosage.py -v
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor.catalog import default_catalog
from agri_advisor.exceptions import InvalidInputError
from agri_advisor.models import NutrientAmounts, SoilReading
from agri_advisor.dosage import (
    yield_factor,
    estimate_soil_supply,
    compute_deficits,
    plan_fertilizer_dosage,
    recommend_dosage,
)

NO_SUPPLY = NutrientAmounts(0, 0, 0)


def _quantities(plan) -> dict[str, float]:
    return {i.fertilizer_id: i.quantity for i in plan.items}


@pytest.fixture
def plans():
    return plan_fertilizer_dosage(NutrientAmounts(90, 35, 0), NO_SUPPLY, catalog=default_catalog())


def test_three_plans_in_order(plans):
    assert [p.id for p in plans] == ["balanced_approach", "straight_fertilizers", "organic_approach"]


def test_balanced_plan_quantities(plans):
    q = _quantities(plans[0])
    assert q["npk_19_19_19"] == 200      # 90 × 5 capped at 200
    assert q["urea"] == 113              # (90 − 38) / 0.46
    assert q["organic_compost"] == 5
    assert plans[0].total_cost == 5501


def test_straight_plan_skips_nutrients_without_deficit(plans):
    q = _quantities(plans[1])
    assert q == {"urea": 196, "dap": 76}
    assert "mop" not in q
    assert plans[1].total_cost == 3095


def test_organic_plan_is_fixed(plans):
    items = {i.fertilizer_id: i.label for i in plans[2].items}
    assert items == {"vermicompost": "3 tons/ha", "neem_cake": "300 kg/ha", "organic_compost": "8 tons/ha"}
    assert plans[2].total_cost == 5160


def test_soil_test_deficits_feed_the_plans():
    # requirement 120/60/40, soil supplies 30/25/40
    deficits = compute_deficits(NutrientAmounts(120, 60, 40), NutrientAmounts(30, 25, 40))
    assert deficits.as_dict() == {"N": 90, "P": 35, "K": 0}
    plans = plan_fertilizer_dosage(NutrientAmounts(120, 60, 40), NutrientAmounts(30, 25, 40),
                                   catalog=default_catalog())
    assert plans[0].deficits == deficits
    assert [p.total_cost for p in plans] == [5501, 3095, 5160]


def test_schedule_follows_timing_order(plans):
    balanced = plans[0].schedule
    assert balanced[0] == "Pre-planting: Apply Organic Compost"
    assert balanced[1].startswith("30 days after sowing: Apply 50% of")
    assert balanced[2].startswith("60 days after sowing: Apply remaining 50% of")
    straight = plans[1].schedule
    assert straight[0].startswith("At sowing: Apply DAP")


def test_deficits_never_negative():
    deficits = compute_deficits(NutrientAmounts(50, 20, 10), NutrientAmounts(80, 30, 40))
    assert deficits.as_dict() == {"N": 0.0, "P": 0.0, "K": 0.0}
    plans = plan_fertilizer_dosage(NutrientAmounts(50, 20, 10), NutrientAmounts(80, 30, 40))
    assert plans[1].items == ()
    assert plans[1].total_cost == 0


def test_yield_factor_is_capped():
    assert yield_factor(None) == 1.0
    assert yield_factor(50) == 0.5
    assert yield_factor(150) == 1.5
    assert yield_factor(400) == 2.0
    with pytest.raises(InvalidInputError):
        yield_factor(0)


def test_yield_target_scales_requirement():
    deficits = compute_deficits(NutrientAmounts(100, 50, 50), NutrientAmounts(20, 10, 10), yield_target=300)
    assert deficits.as_dict() == {"N": 180.0, "P": 90.0, "K": 90.0}


def test_soil_supply_estimates():
    assert estimate_soil_supply(None).as_dict() == {"N": 20, "P": 15, "K": 25}
    measured = SoilReading(ph=6.5, nitrogen=41, phosphorus=12, potassium=70)
    assert estimate_soil_supply(measured).as_dict() == {"N": 41, "P": 12, "K": 70}
    rich = SoilReading(ph=6.5, fertility="high")
    assert estimate_soil_supply(rich).as_dict() == {"N": 45, "P": 38, "K": 60}
    acidic_poor = SoilReading(ph=5.0, fertility="low")
    assert estimate_soil_supply(acidic_poor).as_dict() == {"N": 12, "P": 10, "K": 16}


def test_recommend_dosage_uses_crop_table_and_default():
    catalog = default_catalog()
    rice = recommend_dosage("Basmati Rice", soil=None, catalog=catalog)
    # Rice 120/60/40 minus default supply 20/15/25
    assert rice[0].deficits.as_dict() == {"N": 100.0, "P": 45.0, "K": 15.0}
    unknown = recommend_dosage("Dragon Fruit", catalog=catalog)
    # default 100/50/50 minus 20/15/25
    assert unknown[0].deficits.as_dict() == {"N": 80.0, "P": 35.0, "K": 25.0}


def test_plan_items_have_positive_quantities():
    for plan in recommend_dosage("Banana", soil=SoilReading(ph=7.0, fertility="medium")):
        assert all(i.quantity > 0 for i in plan.items)
        assert plan.total_cost == round(sum(i.cost for i in plan.items))
