"""
Catalog analytics and report figures.
Summaries (season mix, yield potential, market trends, climate adaptation) are
computed from Catalog.crops_frame(); figures are saved to reports/figures/.
"""

from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

from agri_advisor.config import FIGURES_DIR, ensure_dirs
from agri_advisor.models import FertilizerPlan, ScoredCandidate

SEASON_GROUPS = ("Kharif", "Rabi", "Zaid", "Year-round")

# max yield (tons/ha) bands
HIGH_YIELD_ABOVE = 10
LOW_YIELD_BELOW = 5

ADAPTABLE_TOP_N = 5
EXPORT_TOP_N = 5


def _setup_style():
    """Use a consistent style for all figures (suitable for reports)."""
    try:
        plt.style.use("seaborn-v0_8-whitegrid")
    except OSError:
        try:
            plt.style.use("seaborn-whitegrid")
        except OSError:
            pass
    plt.rcParams["figure.dpi"] = 100
    plt.rcParams["savefig.dpi"] = 150
    plt.rcParams["font.size"] = 10


def _out_dir(out_dir: Path | None) -> Path:
    if out_dir is None:
        ensure_dirs()
        return FIGURES_DIR
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def season_group(tag: str) -> str:
    """First of Kharif / Rabi / Zaid named in the tag, else 'Year-round'."""
    for season in SEASON_GROUPS[:-1]:
        if season.lower() in tag.lower():
            return season
    return "Year-round"


def crops_by_season(df: pd.DataFrame) -> dict[str, int]:
    counts = df["season"].map(season_group).value_counts()
    return {s: int(counts.get(s, 0)) for s in SEASON_GROUPS}


def yield_potential(df: pd.DataFrame) -> dict:
    if df.empty:
        return {"average_max_yield": 0.0, "highest_yield_crop": None,
                "distribution": {"high": 0, "medium": 0, "low": 0}}
    y = df["yield_max"]
    return {
        "average_max_yield": round(float(y.mean()), 2),
        "highest_yield_crop": df.loc[y.idxmax(), "name"],
        "distribution": {
            "high": int((y > HIGH_YIELD_ABOVE).sum()),
            "medium": int(y.between(LOW_YIELD_BELOW, HIGH_YIELD_ABOVE).sum()),
            "low": int((y < LOW_YIELD_BELOW).sum()),
        },
    }


def market_trends(df: pd.DataFrame) -> dict:
    demand = df["demand"].value_counts() if not df.empty else pd.Series(dtype=int)
    exporters = df[df["export_potential"]] if not df.empty else df
    return {
        "demand_distribution": {k: int(demand.get(k, 0)) for k in ("high", "medium", "low")},
        "export_potential_crops": int(len(exporters)),
        "top_export_crops": exporters["name"].head(EXPORT_TOP_N).tolist() if not df.empty else [],
    }


def climate_adaptation(df: pd.DataFrame) -> dict:
    if df.empty:
        return {"most_adaptable": [], "average_temperature_tolerance": 0.0}
    tolerance = (df["temp_max"] - df["temp_min"]).rename("tolerance")
    ranked = df.assign(tolerance=tolerance).sort_values("tolerance", ascending=False, kind="stable")
    return {
        "most_adaptable": ranked["name"].head(ADAPTABLE_TOP_N).tolist(),
        "average_temperature_tolerance": round(float(tolerance.mean()), 2),
    }


def catalog_analytics(catalog) -> dict:
    """All catalog summaries in one dict (dashboard analytics tab)."""
    df = catalog.crops_frame()
    return {
        "total_crops": int(len(df)),
        "crops_by_season": crops_by_season(df) if not df.empty else dict.fromkeys(SEASON_GROUPS, 0),
        "yield_analysis": yield_potential(df),
        "market_trends": market_trends(df),
        "climate_adaptation": climate_adaptation(df),
    }


def candidates_frame(candidates: list[ScoredCandidate]) -> pd.DataFrame:
    """One row per candidate: rank, name, score, tier and one column per sub-score."""
    rows = []
    for rank, c in enumerate(candidates, start=1):
        row = {"rank": rank, "name": c.name, "score": round(c.score, 2), "tier": c.tier}
        row.update({k: round(v, 3) for k, v in c.components.items()})
        rows.append(row)
    return pd.DataFrame(rows)


def plans_frame(plans: list[FertilizerPlan]) -> pd.DataFrame:
    """One row per plan item, with the plan name and total cost repeated."""
    rows = []
    for p in plans:
        for item in p.items:
            rows.append({
                "plan": p.name,
                "fertilizer": item.name,
                "quantity": item.label,
                "timing": item.timing.replace("_", " "),
                "cost_inr": round(item.cost),
                "plan_total_inr": p.total_cost,
            })
    return pd.DataFrame(rows)


# ---------------------------------------------------------------------------
# Figures
# ---------------------------------------------------------------------------

def plot_score_breakdown(candidates: list[ScoredCandidate], out_dir: Path | None = None) -> Path:
    """
    Heatmap of sub-scores (rows = candidates, columns = components).
    Saves score_breakdown.png
    """
    out_dir = _out_dir(out_dir)
    _setup_style()
    df = candidates_frame(candidates)
    components = [c for c in df.columns if c not in ("rank", "name", "score", "tier")]
    matrix = df.set_index("name")[components] if components else pd.DataFrame()
    fig, ax = plt.subplots(figsize=(max(5, 1.4 * len(components) + 3), max(3, 0.5 * len(df) + 1.5)))
    if matrix.empty:
        ax.text(0.5, 0.5, "No candidates", ha="center", va="center")
        ax.set_axis_off()
    else:
        sns.heatmap(matrix.astype(float), annot=True, fmt=".2f", cmap="YlGn", vmin=0, vmax=1, ax=ax)
        ax.set_ylabel("")
    ax.set_title("Suitability sub-scores")
    plt.tight_layout()
    out = out_dir / "score_breakdown.png"
    fig.savefig(out, bbox_inches="tight")
    plt.close()
    return out


def plot_nutrient_deficits(plans: list[FertilizerPlan], out_dir: Path | None = None) -> Path:
    """
    Bar chart of the N/P/K deficit the plans address, with plan costs alongside.
    Saves nutrient_deficits.png
    """
    out_dir = _out_dir(out_dir)
    _setup_style()
    deficits = plans[0].deficits.as_dict() if plans else {"N": 0, "P": 0, "K": 0}
    fig, axes = plt.subplots(1, 2, figsize=(10, 4))
    axes[0].bar(list(deficits), list(deficits.values()), color=["#2e7d32", "#f9a825", "#6a1b9a"])
    axes[0].set_ylabel("kg/ha")
    axes[0].set_title("Nutrient deficit")
    names = [p.name for p in plans]
    costs = np.array([p.total_cost for p in plans], dtype=float)
    axes[1].barh(names, costs, color="steelblue", edgecolor="white")
    axes[1].set_xlabel("₹ per hectare")
    axes[1].set_title("Plan cost")
    plt.tight_layout()
    out = out_dir / "nutrient_deficits.png"
    fig.savefig(out, bbox_inches="tight")
    plt.close()
    return out


def plot_crops_by_season(catalog, out_dir: Path | None = None) -> Path:
    """Bar plot of catalog crops per season group. Saves crops_by_season.png"""
    out_dir = _out_dir(out_dir)
    _setup_style()
    counts = pd.Series(catalog_analytics(catalog)["crops_by_season"])
    fig, ax = plt.subplots(figsize=(6, 4))
    counts.plot(kind="bar", ax=ax, color="seagreen", edgecolor="white")
    ax.set_ylabel("Number of crops")
    ax.set_title("Catalog crops by season")
    plt.xticks(rotation=0)
    plt.tight_layout()
    out = out_dir / "crops_by_season.png"
    fig.savefig(out, bbox_inches="tight")
    plt.close()
    return out
