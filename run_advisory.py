"""
One-command advisory: resolve weather and soil → rank crops → fertilizers → dosage plans.
Run from project root: python run_advisory.py --state Punjab --month 11
Add --json for machine-readable output, --figures to save report figures.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor.config import GROWTH_STAGES, FIGURES_DIR, ensure_dirs
from agri_advisor.advisor import get_advisory, advisory_to_dict
from agri_advisor.analytics import (
    candidates_frame,
    plans_frame,
    plot_score_breakdown,
    plot_nutrient_deficits,
    plot_crops_by_season,
)
from agri_advisor.catalog import default_catalog
from agri_advisor.exceptions import AdvisoryError
from agri_advisor.models import CropFilters, EnvironmentReading, SoilReading


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Farm advisory: crop, fertilizer and dosage recommendations.")
    p.add_argument("--state", help="Indian state (used for zone defaults)")
    p.add_argument("--district", help="District within the state")
    p.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12", help="Planting month")
    p.add_argument("--temperature", type=float, help="°C; with --humidity and --rainfall overrides zone weather")
    p.add_argument("--humidity", type=float, help="%% relative humidity")
    p.add_argument("--rainfall", type=float, help="Annual rainfall, mm")
    p.add_argument("--ph", type=float, help="Soil pH; overrides zone soil")
    p.add_argument("--fertility", choices=["low", "medium", "high"], default="medium")
    p.add_argument("--soil-type", help="e.g. Loamy, Clay, Sandy")
    p.add_argument("--season", help="Only crops for this season (Kharif / Rabi / Zaid)")
    p.add_argument("--profitability", choices=["high", "medium", "low"])
    p.add_argument("--crop", help="Crop for fertilizer ranking and dosage (default: top-ranked crop)")
    p.add_argument("--growth-stage", choices=GROWTH_STAGES)
    p.add_argument("--yield-target", type=float, help="Target yield, %% of normal (capped at 200)")
    p.add_argument("--extended", action="store_true", help="Show up to 8 crops instead of 6")
    p.add_argument("--json", action="store_true", help="Print the advisory as JSON")
    p.add_argument("--figures", action="store_true", help=f"Save report figures to {FIGURES_DIR}")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def _weather_from_args(args) -> EnvironmentReading | None:
    values = (args.temperature, args.humidity, args.rainfall)
    if all(v is None for v in values):
        return None
    if any(v is None for v in values):
        raise SystemExit("--temperature, --humidity and --rainfall must be given together")
    return EnvironmentReading(temperature=args.temperature, humidity=args.humidity, rainfall=args.rainfall)


def _soil_from_args(args) -> SoilReading | None:
    if args.ph is None:
        return None
    return SoilReading(ph=args.ph, fertility=args.fertility, soil_type=args.soil_type)


def _print_report(advisory: dict):
    w, s = advisory["weather"], advisory["soil"]
    print("Farm Advisory")
    print("=" * 50)
    print(f"State: {advisory['state'] or '-'}   Season: {advisory['season']}")
    print(f"Weather ({advisory['weather_source']}): {w.temperature:.1f} °C, "
          f"{w.humidity:.0f} % RH, {w.annual_rainfall:,.0f} mm/yr")
    print(f"Soil ({advisory['soil_source']}): pH {s.ph:.1f}, {s.fertility} fertility, {s.soil_type or 'type unknown'}")

    print("\nRecommended crops:")
    crops = candidates_frame(advisory["crops"])
    print(crops.to_string(index=False) if not crops.empty else "  No recommendations match your criteria.")

    print(f"\nFertilizers for {advisory['fertilizer_crop'] or '-'}:")
    ferts = candidates_frame(advisory["fertilizers"])
    print(ferts[["rank", "name", "score"]].to_string(index=False) if not ferts.empty else "  None.")

    if advisory["dosage_plans"]:
        print("\nDosage plans (per hectare):")
        with pd.option_context("display.width", 120):
            print(plans_frame(advisory["dosage_plans"]).to_string(index=False))

    advice = advisory["soil_advice"]
    print(f"\nSoil status: {advice['soil_status']}")
    for rec in advice["recommendations"]:
        print(f"  - {rec['issue']}: {rec['recommendation']}")
    for msg in advisory["soil_messages"]:
        print(f"  * {msg}")

    for crop, risks in advisory["disease_risks"].items():
        for r in risks:
            if r["risk"] != "low":
                print(f"  ! {crop}: {r['name']} risk {r['risk']}")

    print(f"\nWeather alerts ({advisory['forecast_source']} forecast):")
    if not advisory["weather_alerts"]:
        print("  None.")
    for alert in advisory["weather_alerts"]:
        print(f"  [{alert['severity']}] {alert['message']}")
    for section, tips in advisory["agro_advisory"].items():
        for tip in tips:
            print(f"  {section.replace('_', ' ')}: {tip}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    filters = None
    if args.season or args.profitability:
        filters = CropFilters(season=args.season, profitability=args.profitability)

    try:
        catalog = default_catalog()
        advisory = get_advisory(
            state=args.state,
            district=args.district,
            weather=_weather_from_args(args),
            soil=_soil_from_args(args),
            month=args.month,
            filters=filters,
            fertilizer_crop=args.crop,
            growth_stage=args.growth_stage,
            yield_target=args.yield_target,
            extended=args.extended,
            catalog=catalog,
        )
    except AdvisoryError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(advisory_to_dict(advisory), indent=2, ensure_ascii=False))
    else:
        _print_report(advisory)

    if args.figures:
        ensure_dirs()
        plot_score_breakdown(advisory["crops"])
        plot_nutrient_deficits(advisory["dosage_plans"])
        plot_crops_by_season(catalog)
        if not args.json:
            print(f"\nFigures saved to {FIGURES_DIR}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
