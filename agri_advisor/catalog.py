"""
Reference catalog: crops, fertilizers and the crop nutrient table.

The Catalog is a plain value passed explicitly to the rankers and the dosage
planner. default_catalog() builds it once per process from data/*.json when
present, otherwise from the embedded reference dataset; load_catalog() reads
explicit files and fails loudly when they are missing or hold no valid record.

Raw JSON records are validated with pydantic before conversion to the frozen
profiles in models.py; malformed records are logged and skipped.
"""

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import pandas as pd
from pydantic import BaseModel, ValidationError

from agri_advisor.config import DATA_DIR, CROPS_FNAME, FERTILIZERS_FNAME
from agri_advisor.exceptions import CatalogError, InvalidInputError
from agri_advisor.models import CropProfile, FertilizerProfile, NutrientAmounts, Range
from agri_advisor.reference_data import CROP_RECORDS, FERTILIZER_RECORDS, NUTRIENT_REQUIREMENTS

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Record schemas (JSON file layout)
# ---------------------------------------------------------------------------

class RangeRecord(BaseModel):
    min: float
    max: float
    optimal: float | None = None


class ClimateRequirements(BaseModel):
    temperature: RangeRecord
    rainfall: RangeRecord
    humidity: RangeRecord


class SoilRequirements(BaseModel):
    ph: RangeRecord
    type: list[str] = []
    drainage: str | None = None


class GrowthData(BaseModel):
    growth_period: int = 0


class YieldData(BaseModel):
    average_yield: float = 0.0
    max_yield: float = 0.0
    unit: str = "tons/hectare"


class MarketData(BaseModel):
    price_range: tuple[float, float]
    demand: str = "medium"
    export_potential: bool = False
    storage_life: int = 0


class CropRecord(BaseModel):
    id: str
    name: str
    scientific_name: str = ""
    variety: str = ""
    season: str
    category: str = ""
    climate_requirements: ClimateRequirements
    soil_requirements: SoilRequirements
    growth_data: GrowthData = GrowthData()
    yield_data: YieldData = YieldData()
    market_data: MarketData
    nutrient_requirement: dict[str, float] | None = None


class Composition(BaseModel):
    N: float = 0.0
    P: float = 0.0
    K: float = 0.0
    S: float = 0.0


class FertilizerRecord(BaseModel):
    id: str
    name: str
    kind: str = "inorganic"
    composition: Composition = Composition()
    price: float = 0.0
    unit_kg: float = 50.0
    application: str = ""
    timing: str = "pre_planting"
    timing_note: str = ""
    dosage: str = ""
    suitable_crops: list[str] = []
    growth_stages: list[str] = []
    benefits: list[str] = []


# ---------------------------------------------------------------------------
# Record ↔ profile converters
# ---------------------------------------------------------------------------

def _range(r: RangeRecord) -> Range:
    return Range(r.min, r.max, r.optimal)


def _range_dict(r: Range) -> dict:
    return {"min": r.min, "max": r.max, "optimal": r.optimal}


def crop_from_record(record: dict) -> CropProfile:
    """Validate a raw crop record and build the profile (pydantic ValidationError on bad shape)."""
    rec = CropRecord.model_validate(record)
    climate, soil, market = rec.climate_requirements, rec.soil_requirements, rec.market_data
    return CropProfile(
        id=rec.id,
        name=rec.name,
        scientific_name=rec.scientific_name,
        season=rec.season,
        temperature=_range(climate.temperature),
        rainfall=_range(climate.rainfall),
        humidity=_range(climate.humidity),
        ph=_range(soil.ph),
        soil_types=tuple(soil.type),
        growth_period=rec.growth_data.growth_period,
        nutrient_requirement=(
            NutrientAmounts.from_dict(rec.nutrient_requirement)
            if rec.nutrient_requirement else None
        ),
        yield_avg=rec.yield_data.average_yield,
        yield_max=rec.yield_data.max_yield,
        yield_unit=rec.yield_data.unit,
        price_range=tuple(market.price_range),
        demand=market.demand.lower(),
        export_potential=market.export_potential,
        variety=rec.variety,
        category=rec.category,
        storage_life=market.storage_life,
    )


def crop_to_record(crop: CropProfile) -> dict:
    record = {
        "id": crop.id,
        "name": crop.name,
        "scientific_name": crop.scientific_name,
        "variety": crop.variety,
        "season": crop.season,
        "category": crop.category,
        "climate_requirements": {
            "temperature": _range_dict(crop.temperature),
            "rainfall": _range_dict(crop.rainfall),
            "humidity": _range_dict(crop.humidity),
        },
        "soil_requirements": {"ph": _range_dict(crop.ph), "type": list(crop.soil_types)},
        "growth_data": {"growth_period": crop.growth_period},
        "yield_data": {
            "average_yield": crop.yield_avg,
            "max_yield": crop.yield_max,
            "unit": crop.yield_unit,
        },
        "market_data": {
            "price_range": list(crop.price_range),
            "demand": crop.demand,
            "export_potential": crop.export_potential,
            "storage_life": crop.storage_life,
        },
    }
    if crop.nutrient_requirement is not None:
        record["nutrient_requirement"] = crop.nutrient_requirement.as_dict()
    return record


def fertilizer_from_record(record: dict) -> FertilizerProfile:
    rec = FertilizerRecord.model_validate(record)
    comp = rec.composition
    return FertilizerProfile(
        id=rec.id,
        name=rec.name,
        kind=rec.kind.lower(),
        nitrogen=comp.N,
        phosphorus=comp.P,
        potassium=comp.K,
        sulfur=comp.S,
        price=rec.price,
        unit_kg=rec.unit_kg,
        application=rec.application,
        timing=rec.timing,
        timing_note=rec.timing_note,
        suitable_crops=tuple(rec.suitable_crops),
        growth_stages=tuple(s.lower() for s in rec.growth_stages),
        benefits=tuple(rec.benefits),
        dosage=rec.dosage,
    )


def fertilizer_to_record(fert: FertilizerProfile) -> dict:
    return {
        "id": fert.id,
        "name": fert.name,
        "kind": fert.kind,
        "composition": {"N": fert.nitrogen, "P": fert.phosphorus, "K": fert.potassium, "S": fert.sulfur},
        "price": fert.price,
        "unit_kg": fert.unit_kg,
        "application": fert.application,
        "timing": fert.timing,
        "timing_note": fert.timing_note,
        "dosage": fert.dosage,
        "suitable_crops": list(fert.suitable_crops),
        "growth_stages": list(fert.growth_stages),
        "benefits": list(fert.benefits),
    }


def _convert_all(records: list[dict], convert, label: str) -> list:
    """Convert records, skipping (and logging) those that fail validation."""
    out = []
    for i, record in enumerate(records):
        try:
            out.append(convert(record))
        except (ValidationError, InvalidInputError, TypeError) as exc:
            rid = record.get("id", i) if isinstance(record, dict) else i
            log.warning("Skipping invalid %s record %s: %s", label, rid, exc)
    return out


# ---------------------------------------------------------------------------
# Catalog value
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Catalog:
    crops: tuple[CropProfile, ...]
    fertilizers: tuple[FertilizerProfile, ...]
    nutrient_requirements: dict[str, NutrientAmounts] = field(default_factory=dict)

    @classmethod
    def from_records(
        cls,
        crop_records: list[dict],
        fertilizer_records: list[dict],
        nutrient_table: dict[str, dict[str, float]] | None = None,
    ) -> "Catalog":
        crops = _convert_all(crop_records, crop_from_record, "crop")
        fertilizers = _convert_all(fertilizer_records, fertilizer_from_record, "fertilizer")
        if not crops and not fertilizers:
            raise CatalogError("Catalog contains no valid crop or fertilizer records.")
        table = {
            name: NutrientAmounts.from_dict(req)
            for name, req in (nutrient_table or {}).items()
        }
        return cls(tuple(crops), tuple(fertilizers), table)

    def crop(self, name: str) -> CropProfile | None:
        key = name.strip().lower()
        for c in self.crops:
            if c.name.lower() == key or c.id.lower() == key:
                return c
        return None

    def fertilizer(self, fertilizer_id: str) -> FertilizerProfile:
        for f in self.fertilizers:
            if f.id == fertilizer_id:
                return f
        raise CatalogError(f"Fertilizer {fertilizer_id!r} not in catalog.")

    def nutrient_requirement(self, crop_name: str) -> NutrientAmounts | None:
        """
        Table entry for the crop name ('Rice' also serves 'Basmati Rice'),
        else the requirement carried on the crop profile, else None.
        """
        key = crop_name.strip().lower()
        table = {k.lower(): v for k, v in self.nutrient_requirements.items()}
        if key in table:
            return table[key]
        for word in key.split():
            if word in table:
                return table[word]
        crop = self.crop(crop_name)
        return crop.nutrient_requirement if crop is not None else None

    def fertilizer_prices(self) -> pd.DataFrame:
        """id, name, price (₹) and price unit for every fertilizer."""
        return pd.DataFrame(
            [{"id": f.id, "name": f.name, "price": f.price, "unit": f.price_unit} for f in self.fertilizers],
            columns=["id", "name", "price", "unit"],
        )

    def fertilizers_by_kind(self, kind: str) -> list[FertilizerProfile]:
        return [f for f in self.fertilizers if f.kind == kind.lower()]

    def crops_frame(self) -> pd.DataFrame:
        """One row per crop with flattened requirement and market columns."""
        rows = []
        for c in self.crops:
            rows.append({
                "id": c.id,
                "name": c.name,
                "season": c.season,
                "category": c.category,
                "temp_min": c.temperature.min,
                "temp_max": c.temperature.max,
                "rainfall_min": c.rainfall.min,
                "rainfall_max": c.rainfall.max,
                "humidity_min": c.humidity.min,
                "humidity_max": c.humidity.max,
                "ph_min": c.ph.min,
                "ph_max": c.ph.max,
                "soil_types": ", ".join(c.soil_types),
                "growth_period": c.growth_period,
                "yield_avg": c.yield_avg,
                "yield_max": c.yield_max,
                "price_min": c.price_range[0],
                "price_max": c.price_range[1],
                "demand": c.demand,
                "export_potential": c.export_potential,
            })
        return pd.DataFrame(rows)


def npk_explanation(npk_ratio: str) -> str:
    """Plain-language meaning of an 'N-P-K' ratio string such as '19-19-19'."""
    parts = npk_ratio.replace(":", "-").split("-")
    if len(parts) != 3:
        raise InvalidInputError(f"NPK ratio must look like 'N-P-K', got {npk_ratio!r}")
    try:
        n, p, k = (float(x) for x in parts)
    except ValueError as exc:
        raise InvalidInputError(f"NPK ratio must be numeric, got {npk_ratio!r}") from exc
    return (
        f"Nitrogen ({n:g}%): Promotes leaf growth. "
        f"Phosphorus ({p:g}%): Supports root development and flowering. "
        f"Potassium ({k:g}%): Enhances fruit quality and disease resistance."
    )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _read_json(path: Path, key: str) -> list[dict]:
    """Read a JSON file holding either a list of records or {key: [records]}."""
    if not path.exists():
        raise CatalogError(f"{key} file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Could not read {key} from {path}: {exc}") from exc
    records = data.get(key, []) if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise CatalogError(f"{path}: '{key}' must be a list of records")
    log.info("Loaded %s from %s (%d records).", key, path, len(records))
    return records


def load_catalog(
    crops_path: str | Path,
    fertilizers_path: str | Path | None = None,
    nutrient_table: dict[str, dict[str, float]] | None = None,
) -> Catalog:
    """
    Build a Catalog from JSON files.

    Parameters
    ----------
    crops_path : path
        JSON with {"crops": [...]} (or a bare list) in the crop record schema.
    fertilizers_path : path or None
        JSON with {"fertilizers": [...]}; None uses the embedded fertilizers.
    nutrient_table : dict or None
        Crop name → {"N", "P", "K"}; None uses the embedded table.

    Raises
    ------
    CatalogError if a file is missing/unreadable or no record is valid.
    """
    crop_records = _read_json(Path(crops_path), "crops")
    fert_records = (
        _read_json(Path(fertilizers_path), "fertilizers")
        if fertilizers_path is not None else FERTILIZER_RECORDS
    )
    catalog = Catalog.from_records(
        crop_records, fert_records,
        NUTRIENT_REQUIREMENTS if nutrient_table is None else nutrient_table,
    )
    if not catalog.crops:
        raise CatalogError(f"No valid crop records in {crops_path}")
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """data/crops.json + data/fertilizers.json when present, else the embedded dataset."""
    crops_path = DATA_DIR / CROPS_FNAME
    ferts_path = DATA_DIR / FERTILIZERS_FNAME
    if crops_path.exists():
        return load_catalog(crops_path, ferts_path if ferts_path.exists() else None)
    log.debug("No %s in %s; using embedded reference dataset.", CROPS_FNAME, DATA_DIR)
    return Catalog.from_records(CROP_RECORDS, FERTILIZER_RECORDS, NUTRIENT_REQUIREMENTS)
