"""
Catalog tests: embedded dataset, JSON loading, record validation, lookups.
Run from project root: python -m pytest tests/test_catalog.py -v
"""

import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor.catalog import (
    Catalog,
    default_catalog,
    load_catalog,
    npk_explanation,
    crop_from_record,
    crop_to_record,
    fertilizer_from_record,
    fertilizer_to_record,
)
from agri_advisor.exceptions import CatalogError, InvalidInputError
from agri_advisor.reference_data import CROP_RECORDS, FERTILIZER_RECORDS


def test_default_catalog_contents():
    catalog = default_catalog()
    assert len(catalog.crops) == len(CROP_RECORDS)
    assert len(catalog.fertilizers) == len(FERTILIZER_RECORDS)
    for fid in ("urea", "dap", "mop", "npk_19_19_19", "organic_compost", "vermicompost", "neem_cake"):
        assert catalog.fertilizer(fid).id == fid


def test_default_catalog_is_cached():
    assert default_catalog() is default_catalog()


def test_crop_lookup_by_name_or_id():
    catalog = default_catalog()
    assert catalog.crop("wheat").name == "Wheat"
    assert catalog.crop("crop_001").name == "Basmati Rice"
    assert catalog.crop("Quinoa") is None


def test_unknown_fertilizer_raises():
    with pytest.raises(CatalogError):
        default_catalog().fertilizer("unobtainium")


def test_nutrient_requirement_lookup():
    catalog = default_catalog()
    assert catalog.nutrient_requirement("Wheat").as_dict() == {"N": 120, "P": 60, "K": 40}
    assert catalog.nutrient_requirement("Basmati Rice").as_dict() == {"N": 120, "P": 60, "K": 40}
    assert catalog.nutrient_requirement("Watermelon") is None


def test_load_catalog_skips_invalid_records(tmp_path):
    crops_file = tmp_path / "crops.json"
    bad = {"id": "crop_bad", "name": "No ranges", "season": "Kharif"}
    crops_file.write_text(json.dumps({"crops": [CROP_RECORDS[0], bad, CROP_RECORDS[1]]}), encoding="utf-8")
    catalog = load_catalog(crops_file)
    assert [c.name for c in catalog.crops] == ["Basmati Rice", "Wheat"]
    assert len(catalog.fertilizers) == len(FERTILIZER_RECORDS)


def test_load_catalog_accepts_bare_lists(tmp_path):
    crops_file = tmp_path / "crops.json"
    ferts_file = tmp_path / "fertilizers.json"
    crops_file.write_text(json.dumps(CROP_RECORDS[:3]), encoding="utf-8")
    ferts_file.write_text(json.dumps({"fertilizers": FERTILIZER_RECORDS[:2]}), encoding="utf-8")
    catalog = load_catalog(crops_file, ferts_file, nutrient_table={})
    assert len(catalog.crops) == 3
    assert [f.id for f in catalog.fertilizers] == ["urea", "dap"]
    assert catalog.nutrient_requirements == {}


def test_load_catalog_missing_file_raises(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "nope.json")


def test_load_catalog_malformed_json_raises(tmp_path):
    crops_file = tmp_path / "crops.json"
    crops_file.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(crops_file)


def test_catalog_without_valid_records_raises():
    with pytest.raises(CatalogError):
        Catalog.from_records([{"id": "x"}], [{"name": "missing id"}])


def test_record_round_trip():
    crop = crop_from_record(CROP_RECORDS[4])
    assert crop_from_record(crop_to_record(crop)) == crop
    fert = fertilizer_from_record(FERTILIZER_RECORDS[0])
    assert fertilizer_from_record(fertilizer_to_record(fert)) == fert


def test_fertilizer_prices_frame():
    prices = default_catalog().fertilizer_prices().set_index("id")
    assert list(prices.columns) == ["name", "price", "unit"]
    assert prices.loc["urea", "unit"] == "per 50kg bag"
    assert prices.loc["organic_compost", "unit"] == "per ton"
    assert (prices["price"] >= 0).all()


def test_fertilizers_by_kind():
    organic = default_catalog().fertilizers_by_kind("Organic")
    assert organic
    assert all(f.kind == "organic" for f in organic)


def test_npk_explanation():
    text = npk_explanation("19-19-19")
    assert "Nitrogen (19%)" in text
    assert "Potassium (19%)" in text
    assert "Phosphorus (46%)" in npk_explanation("18:46:0")
    with pytest.raises(InvalidInputError):
        npk_explanation("19-19")
    with pytest.raises(InvalidInputError):
        npk_explanation("a-b-c")
