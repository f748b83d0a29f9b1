"""
Streamlit UI: Farm Advisory System.
Home: state, district, season filters, optional soil test → "Get Advisory".
Results: ranked crops with sub-scores, fertilizer ranking, three dosage plans,
soil-test advice, disease risk and a CSV report. Light agricultural theme.
Run with: streamlit run app.py
"""

import sys
import pandas as pd
import streamlit as st
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from agri_advisor.config import INDIAN_STATES, GROWTH_STAGES, SEASON_MONTHS, WEATHER_API_KEY, ensure_dirs
from agri_advisor.advisor import get_advisory, candidate_summary
from agri_advisor.analytics import catalog_analytics, candidates_frame, plans_frame
from agri_advisor.catalog import default_catalog, npk_explanation
from agri_advisor.disease import detect_disease
from agri_advisor.exceptions import AdvisoryError
from agri_advisor.models import CropFilters, SoilReading

MONTH_NAMES = ["January", "February", "March", "April", "May", "June", "July",
               "August", "September", "October", "November", "December"]
FERTILITY_LEVELS = ["low", "medium", "high"]
SOIL_TYPES = ["Loamy", "Sandy loam", "Sandy", "Clay", "Clay loam", "Alluvial", "Black", "Red", "Laterite"]


@st.cache_resource
def load_catalog_cached():
    return default_catalog()


def _tier_colour(tier: str) -> str:
    return {"high": "green", "medium": "orange", "low": "red"}.get(tier, "grey")


def build_download_df(crops) -> pd.DataFrame:
    """Ranked crops with sub-scores for the CSV report."""
    df = candidates_frame(crops)
    if df.empty:
        return df
    extra = pd.DataFrame([candidate_summary(c) for c in crops])[["season", "expected_yield", "demand"]]
    return pd.concat([df, extra], axis=1).rename(columns={
        "rank": "Rank", "name": "Crop", "score": "Suitability (%)", "tier": "Profitability",
        "season": "Season", "expected_yield": "Expected yield", "demand": "Demand",
    })


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

def apply_theme():
    st.markdown("""
    <style>
    .stApp { background: linear-gradient(180deg, #f7faf5 0%, #eef5ea 60%, #f7faf5 100%); }
    .main .block-container { padding-top: 1.5rem; }
    h1, h2, h3 { color: #2d5a2d !important; }
    div[data-testid="stExpander"] { background: #ffffff; border-radius: 8px; border: 1px solid #cfe0c8; }
    .stButton > button { background: #2d5a2d !important; color: white !important; border-radius: 8px; }
    .stButton > button:hover { background: #3d7a3d !important; }
    </style>
    """, unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Main app
# ---------------------------------------------------------------------------

def main():
    st.set_page_config(page_title="Farm Advisory System", page_icon="🌾", layout="wide")
    apply_theme()
    ensure_dirs()

    st.title("🌾 Farm Advisory System")
    st.caption("Crop suitability • Fertilizer plans • Soil advice • Disease risk • Prices in ₹")

    try:
        catalog = load_catalog_cached()
    except AdvisoryError as exc:
        st.error(f"Failed to load data: {exc}")
        st.stop()

    # -----------------------------------------------------------------------
    # Inputs
    # -----------------------------------------------------------------------
    st.header("Location and season")
    col1, col2, col3 = st.columns(3)
    with col1:
        state_raw = st.selectbox("State", options=["Select State"] + INDIAN_STATES, index=0)
    state = None if state_raw == "Select State" else state_raw
    with col2:
        district = st.text_input("District (optional)", value="") or None
    with col3:
        month_name = st.selectbox("Planting month", MONTH_NAMES, index=pd.Timestamp.today().month - 1)
    month = MONTH_NAMES.index(month_name) + 1

    col4, col5, col6 = st.columns(3)
    with col4:
        season_filter = st.selectbox("Season filter", ["Any"] + list(SEASON_MONTHS))
    with col5:
        tier_filter = st.selectbox("Profitability", ["Any", "high", "medium", "low"])
    with col6:
        stage_raw = st.selectbox("Growth stage (fertilizers)", ["Any"] + list(GROWTH_STAGES))

    with st.expander("I have a soil test"):
        use_soil = st.checkbox("Use my soil test instead of regional defaults")
        s1, s2, s3 = st.columns(3)
        ph = s1.number_input("pH", min_value=3.0, max_value=10.0, value=6.8, step=0.1)
        fertility = s2.selectbox("Fertility", FERTILITY_LEVELS, index=1)
        soil_type = s3.selectbox("Soil type", SOIL_TYPES)
        n1, n2, n3 = st.columns(3)
        nitrogen = n1.number_input("Available N (kg/ha)", min_value=0.0, value=30.0)
        phosphorus = n2.number_input("Available P (kg/ha)", min_value=0.0, value=20.0)
        potassium = n3.number_input("Available K (kg/ha)", min_value=0.0, value=40.0)
        yield_target = st.slider("Target yield (% of normal)", 50, 200, 100, step=10)

    proceed = st.button("Get Advisory", type="primary", use_container_width=True)

    if proceed:
        soil = None
        if use_soil:
            soil = SoilReading(ph=ph, fertility=fertility, soil_type=soil_type,
                               nitrogen=nitrogen, phosphorus=phosphorus, potassium=potassium)
        filters = CropFilters(
            season=None if season_filter == "Any" else season_filter,
            profitability=None if tier_filter == "Any" else tier_filter,
        )
        with st.spinner("Computing recommendations..."):
            try:
                st.session_state["advisory"] = get_advisory(
                    state=state, district=district, soil=soil, month=month, filters=filters,
                    growth_stage=None if stage_raw == "Any" else stage_raw,
                    yield_target=yield_target, catalog=catalog,
                    latitude=st.session_state.get("lat"), longitude=st.session_state.get("lon"),
                    api_key=st.session_state.get("api_key"),
                )
            except AdvisoryError as exc:
                st.error(f"Failed to load data: {exc}")
                st.stop()

    advisory = st.session_state.get("advisory")
    if advisory is None:
        st.info("Select a state and month, then click **Get Advisory**.")
        _render_sidebar(catalog)
        return

    _render_conditions(advisory)
    _render_alerts(advisory)
    _render_crops(advisory)
    _render_fertilizers(advisory)
    _render_soil(advisory)
    _render_disease(advisory)

    st.divider()
    st.subheader("Download report")
    report_df = build_download_df(advisory["crops"])
    if not report_df.empty:
        st.dataframe(report_df, use_container_width=True)
        loc_tag = (advisory["state"] or "NoRegion").replace(" ", "_")
        st.download_button(
            label="Download CSV",
            data=report_df.to_csv(index=False).encode("utf-8"),
            file_name=f"advisory_{loc_tag}.csv",
            mime="text/csv",
        )

    if st.button("Start new analysis"):
        st.session_state.pop("advisory", None)
        st.rerun()

    _render_sidebar(catalog)


def _render_conditions(advisory: dict):
    w, s = advisory["weather"], advisory["soil"]
    st.subheader(f"Conditions, {advisory['season']} season")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Temperature", f"{w.temperature:.1f} °C")
    c2.metric("Humidity", f"{w.humidity:.0f} %")
    c3.metric("Rainfall", f"{w.annual_rainfall:,.0f} mm/yr")
    c4.metric("Soil pH", f"{s.ph:.1f} ({s.fertility})")
    st.caption(f"Weather: {advisory['weather_source'].replace('_', ' ')} • "
               f"Soil: {advisory['soil_source'].replace('_', ' ')} • "
               f"Forecast: {advisory['forecast_source']}")

    if advisory["forecast"]:
        with st.expander(f"{len(advisory['forecast'])}-day outlook"):
            forecast = pd.DataFrame(advisory["forecast"]).set_index("date")
            st.line_chart(forecast[["temp_min", "temp_max"]])
            st.bar_chart(forecast[["rainfall"]])


def _render_alerts(advisory: dict):
    alerts = advisory["weather_alerts"]
    advice = {k: v for k, v in advisory["agro_advisory"].items() if v}
    if not alerts and not advice:
        return
    st.divider()
    st.subheader("Weather alerts")
    if not alerts:
        st.success("No weather alerts for the coming days.")
    for alert in alerts:
        box = st.error if alert["severity"] == "high" else st.warning
        box(f"**{alert['type'].replace('_', ' ').title()}**: {alert['message']}")
        for rec in alert["recommendations"]:
            st.markdown(f"- {rec}")
    if advice:
        with st.expander("Agro advisory", expanded=bool(alerts)):
            for section, tips in advice.items():
                st.markdown(f"**{section.replace('_', ' ').capitalize()}**")
                for tip in tips:
                    st.markdown(f"- {tip}")


def _render_crops(advisory: dict):
    st.divider()
    crops = advisory["crops"]
    st.subheader("Recommended crops")
    if not crops:
        st.warning("No recommendations match your criteria.")
        return
    for rank, c in enumerate(crops, start=1):
        summary = candidate_summary(c)
        header = f"#{rank}  {c.name}  |  Suitability: {summary['score']}%  |  Profitability: {c.tier}"
        with st.expander(header, expanded=(rank == 1)):
            col1, col2 = st.columns(2)
            with col1:
                st.markdown(f"- **Season:** {summary['season']}")
                st.markdown(f"- **Expected yield:** {summary['expected_yield']}")
                lo, hi = summary["price_range_inr_per_quintal"]
                st.markdown(f"- **Market price:** ₹{lo:,.0f}–₹{hi:,.0f} per quintal")
                st.markdown(f"- **Profitability:** :{_tier_colour(c.tier)}[{c.tier}]")
            with col2:
                st.bar_chart(pd.Series(summary["components"], name="fitness"))
            for tip in advisory["crop_suggestions"].get(c.name, []):
                st.info(tip)


def _render_fertilizers(advisory: dict):
    st.divider()
    crop = advisory["fertilizer_crop"]
    st.subheader(f"Fertilizers for {crop}" if crop else "Fertilizers")
    if advisory["fertilizers"]:
        rows = [candidate_summary(f) for f in advisory["fertilizers"]]
        st.dataframe(pd.DataFrame(rows)[["name", "kind", "npk", "price_inr", "price_unit", "score"]],
                     use_container_width=True)
        with st.expander("What do the NPK numbers mean?"):
            st.write(npk_explanation(rows[0]["npk"]))
    else:
        st.warning("No fertilizers match this crop, soil and growth stage.")

    plans = advisory["dosage_plans"]
    if plans:
        st.markdown("**Dosage plans (per hectare)**")
        tabs = st.tabs([p.name for p in plans])
        for tab, plan in zip(tabs, plans):
            with tab:
                st.caption(plan.description)
                st.metric("Total cost", f"₹{plan.total_cost:,}")
                st.dataframe(plans_frame([plan]).drop(columns=["plan", "plan_total_inr"], errors="ignore"), use_container_width=True)
                st.markdown(f"Expected yield increase: **{plan.expected_yield_increase}** • "
                            f"Soil health impact: **{plan.soil_health_impact}**")
                for line in plan.schedule:
                    st.markdown(f"- {line}")


def _render_soil(advisory: dict):
    st.divider()
    advice = advisory["soil_advice"]
    st.subheader(f"Soil status: {advice['soil_status']}")
    for rec in advice["recommendations"]:
        st.warning(f"**{rec['issue']}**: {rec['recommendation']} (priority: {rec['priority']})")
    for msg in advisory["soil_messages"]:
        st.info(msg)
    with st.expander("General advice"):
        for tip in advice["general_advice"]:
            st.markdown(f"- {tip}")


def _render_disease(advisory: dict):
    st.divider()
    st.subheader("Disease watch")
    risks = advisory["disease_risks"]
    if risks:
        for crop, entries in risks.items():
            for r in entries:
                icon = {"high": "🔴", "medium": "🟡", "low": "🟢"}[r["risk"]]
                st.markdown(f"{icon} **{crop}** ({r['name']}): *{r['risk']}* risk under current weather")
    else:
        st.caption("No known disease risks for the recommended crops.")

    uploaded = st.file_uploader("Upload a leaf photo", type=["jpg", "jpeg", "png"])
    if uploaded is not None:
        for d in detect_disease(uploaded.getvalue(), crop=advisory["fertilizer_crop"]):
            with st.expander(f"{d['name']}: {d['confidence']}% ({d['severity']})"):
                st.markdown("**Symptoms:** " + "; ".join(d["symptoms"]))
                st.markdown("**Treatment:** " + "; ".join(d["treatment"]))
                st.markdown("**Prevention:** " + "; ".join(d["prevention"]))


def _render_sidebar(catalog):
    sb = st.sidebar
    sb.divider()
    sb.markdown("**Live weather (optional)**")
    st.session_state["api_key"] = sb.text_input("OpenWeatherMap API key", value=WEATHER_API_KEY, type="password") or None
    lat = sb.number_input("Latitude", value=0.0, format="%.4f")
    lon = sb.number_input("Longitude", value=0.0, format="%.4f")
    use_coords = sb.checkbox("Use these coordinates")
    st.session_state["lat"] = lat if use_coords else None
    st.session_state["lon"] = lon if use_coords else None

    sb.divider()
    stats = catalog_analytics(catalog)
    sb.markdown("**Catalog**")
    sb.caption(f"{stats['total_crops']} crops • {len(catalog.fertilizers)} fertilizers")
    sb.bar_chart(pd.Series(stats["crops_by_season"], name="crops"))
    sb.caption("Most adaptable: " + ", ".join(stats["climate_adaptation"]["most_adaptable"]))
    with sb.expander("Fertilizer prices"):
        st.dataframe(catalog.fertilizer_prices(), use_container_width=True)
    sb.divider()
    sb.caption("Farm Advisory System")


if __name__ == "__main__":
    main()
