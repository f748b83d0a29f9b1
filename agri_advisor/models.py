"""
Typed records passed through the advisory engine.

Readings (weather, soil) are immutable snapshots produced by the providers;
profiles (crop, fertilizer) are read-only reference data held by the Catalog;
ScoredCandidate and FertilizerPlan are transient results owned by one call.
Constructors validate their numeric fields and raise InvalidInputError, so an
untyped or malformed payload never reaches the scorers.
"""

import math
import numbers
from dataclasses import dataclass, field

from agri_advisor.exceptions import InvalidInputError

RAINFALL_BASES = ("annual", "daily")


def require_number(value, name: str) -> float:
    """Return value as float, or raise InvalidInputError for None/NaN/inf/non-numeric."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return value


def _set(obj, name: str, value) -> None:
    object.__setattr__(obj, name, value)


# ---------------------------------------------------------------------------
# Readings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnvironmentReading:
    """Weather snapshot. rainfall is in mm per rainfall_basis ('annual' or 'daily')."""
    temperature: float
    humidity: float
    rainfall: float
    rainfall_basis: str = "annual"
    wind_speed: float | None = None
    pressure: float | None = None
    uv_index: float | None = None
    description: str = ""
    location: str = ""

    def __post_init__(self):
        _set(self, "temperature", require_number(self.temperature, "temperature"))
        humidity = require_number(self.humidity, "humidity")
        if not 0.0 <= humidity <= 100.0:
            raise InvalidInputError(f"humidity must be within 0-100 %, got {humidity}")
        _set(self, "humidity", humidity)
        rainfall = require_number(self.rainfall, "rainfall")
        if rainfall < 0:
            raise InvalidInputError(f"rainfall cannot be negative, got {rainfall}")
        _set(self, "rainfall", rainfall)
        if self.rainfall_basis not in RAINFALL_BASES:
            raise InvalidInputError(
                f"rainfall_basis must be one of {RAINFALL_BASES}, got {self.rainfall_basis!r}"
            )
        for name in ("wind_speed", "pressure", "uv_index"):
            value = getattr(self, name)
            if value is not None:
                _set(self, name, require_number(value, name))

    @property
    def annual_rainfall(self) -> float:
        if self.rainfall_basis == "daily":
            return self.rainfall * 365
        return self.rainfall


@dataclass(frozen=True)
class SoilReading:
    ph: float
    fertility: str = "medium"
    soil_type: str | None = None
    nitrogen: float | None = None
    phosphorus: float | None = None
    potassium: float | None = None

    def __post_init__(self):
        ph = require_number(self.ph, "ph")
        if not 0.0 <= ph <= 14.0:
            raise InvalidInputError(f"ph must be within 0-14, got {ph}")
        _set(self, "ph", ph)
        _set(self, "fertility", str(self.fertility or "unknown").strip().lower())
        for name in ("nitrogen", "phosphorus", "potassium"):
            value = getattr(self, name)
            if value is not None:
                value = require_number(value, name)
                if value < 0:
                    raise InvalidInputError(f"{name} cannot be negative, got {value}")
                _set(self, name, value)

    @property
    def has_measured_nutrients(self) -> bool:
        return None not in (self.nitrogen, self.phosphorus, self.potassium)


# ---------------------------------------------------------------------------
# Reference profiles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Range:
    """Tolerable interval with an optional optimum."""
    min: float
    max: float
    optimal: float | None = None


@dataclass(frozen=True)
class NutrientAmounts:
    """N, P, K in kg/ha (requirement, soil supply or net deficit)."""
    nitrogen: float = 0.0
    phosphorus: float = 0.0
    potassium: float = 0.0

    def __post_init__(self):
        for name in ("nitrogen", "phosphorus", "potassium"):
            value = require_number(getattr(self, name), name)
            if value < 0:
                raise InvalidInputError(f"{name} cannot be negative, got {value}")
            _set(self, name, value)

    @classmethod
    def from_dict(cls, d: dict) -> "NutrientAmounts":
        return cls(d.get("N", 0.0), d.get("P", 0.0), d.get("K", 0.0))

    def as_dict(self) -> dict[str, float]:
        return {"N": self.nitrogen, "P": self.phosphorus, "K": self.potassium}


@dataclass(frozen=True)
class CropProfile:
    id: str
    name: str
    scientific_name: str
    season: str
    temperature: Range
    rainfall: Range            # annual mm
    humidity: Range
    ph: Range
    soil_types: tuple[str, ...] = ()
    growth_period: int = 0
    nutrient_requirement: NutrientAmounts | None = None
    yield_avg: float = 0.0
    yield_max: float = 0.0
    yield_unit: str = "tons/hectare"
    price_range: tuple[float, float] = (0.0, 0.0)   # ₹ per quintal
    demand: str = "medium"
    export_potential: bool = False
    variety: str = ""
    category: str = ""
    storage_life: int = 0

    @property
    def mean_price(self) -> float:
        low, high = self.price_range
        return (low + high) / 2

    @property
    def expected_yield(self) -> str:
        return f"{self.yield_avg:g}-{self.yield_max:g} {self.yield_unit}"


@dataclass(frozen=True)
class FertilizerProfile:
    """
    price is per standard unit of unit_kg kilograms (50 kg bag, 1000 kg ton).
    timing is one of 'pre_planting', 'at_sowing', 'split'.
    """
    id: str
    name: str
    kind: str                  # organic | inorganic | bio
    nitrogen: float = 0.0      # percent
    phosphorus: float = 0.0
    potassium: float = 0.0
    sulfur: float = 0.0
    price: float = 0.0
    unit_kg: float = 50.0
    application: str = ""
    timing: str = "pre_planting"
    timing_note: str = ""
    suitable_crops: tuple[str, ...] = ()
    growth_stages: tuple[str, ...] = ()
    benefits: tuple[str, ...] = ()
    dosage: str = ""

    @property
    def npk_ratio(self) -> str:
        return "-".join(f"{v:g}" for v in (self.nitrogen, self.phosphorus, self.potassium))

    @property
    def is_organic(self) -> bool:
        return self.kind == "organic"

    @property
    def is_balanced_complex(self) -> bool:
        return self.nitrogen > 0 and self.nitrogen == self.phosphorus == self.potassium

    @property
    def price_per_kg(self) -> float:
        return self.price / self.unit_kg if self.unit_kg else 0.0

    @property
    def price_unit(self) -> str:
        return "per ton" if self.unit_kg >= 1000 else f"per {self.unit_kg:g}kg bag"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CropFilters:
    """User-selected pass/fail filters applied after scoring, before truncation."""
    season: str | None = None
    profitability: str | None = None
    crops: tuple[str, ...] = ()
    min_score: float | None = None


@dataclass(frozen=True)
class ScoredCandidate:
    """A profile with its 0-100 suitability score and derived tier."""
    profile: CropProfile | FertilizerProfile
    score: float
    tier: str
    components: dict[str, float] = field(default_factory=dict)
    index: int = 0

    @property
    def name(self) -> str:
        return self.profile.name


@dataclass(frozen=True)
class PlanItem:
    fertilizer_id: str
    name: str
    quantity: float
    unit: str                  # "kg/ha" | "tons/ha"
    timing: str
    method: str
    cost: float

    @property
    def label(self) -> str:
        return f"{self.quantity:g} {self.unit}"


@dataclass(frozen=True)
class FertilizerPlan:
    id: str
    name: str
    description: str
    items: tuple[PlanItem, ...]
    total_cost: int
    expected_yield_increase: str
    soil_health_impact: str
    schedule: tuple[str, ...]
    benefits: tuple[str, ...]
    deficits: NutrientAmounts
