"""
Farm Advisory System: core package.
"""

from agri_advisor.config import (
    PROJECT_ROOT,
    DATA_DIR,
    FIGURES_DIR,
    CROP_WEIGHTS,
    ensure_dirs,
)
from agri_advisor.catalog import Catalog, default_catalog, load_catalog
from agri_advisor.dosage import plan_fertilizer_dosage, recommend_dosage
from agri_advisor.ranker import rank_crops, rank_fertilizers
from agri_advisor.scoring import (
    score_parameter,
    climate_score,
    soil_score,
    season_score,
    market_score,
    get_current_season,
)

__all__ = [
    "PROJECT_ROOT",
    "DATA_DIR",
    "FIGURES_DIR",
    "CROP_WEIGHTS",
    "ensure_dirs",
    "Catalog",
    "default_catalog",
    "load_catalog",
    "plan_fertilizer_dosage",
    "recommend_dosage",
    "rank_crops",
    "rank_fertilizers",
    "score_parameter",
    "climate_score",
    "soil_score",
    "season_score",
    "market_score",
    "get_current_season",
]
