import logging
import os
from dataclasses import asdict, replace
from datetime import datetime
from pathlib import Path

import altair as alt
import pandas as pd
import streamlit as st

from aggregations import (
    ADMISSION_TYPE,
    AGE_GROUP,
    GENDER,
    MEDICAL_CONDITION,
    TEST_RESULTS,
    annual_billing_trend,
    billing_by_country_year,
    billing_histogram,
    blood_type_polarity,
    count_by,
    crosstab,
    demographic_kpis,
    financial_kpis,
    hospital_locations,
    insurance_summary,
    mean_by,
    monthly_billing,
    overview_kpis,
)
from filters import FILTER_LABELS, FilterCriteria, FilterManager, filter_options
from loader import DataLoadError, read_records
from preprocessing import PreprocessResult, preprocess, validate_records
from reports import build_kpi_excel, build_pdf

logger = logging.getLogger(__name__)

# ------------------------------
# DATA PATH & SETTINGS
# ------------------------------
DATA_PATH = Path(
    os.environ.get("HEALTHDASH_DATA_PATH", "data/healthcare_dataset_with_coords.csv")
)
LOG_LEVEL = os.environ.get("HEALTHDASH_LOG_LEVEL", "INFO")

MONTH_NAMES = ["", "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Categorical colors stay the same on every page
COLORS = {
    "test_result": {"Normal": "#48BB78", "Abnormal": "#FC8181", "Inconclusive": "#F6AD55"},
    "medical_condition": {
        "Cancer": "#FF6B9D",
        "Diabetes": "#667EEA",
        "Obesity": "#F6AD55",
        "Asthma": "#4ECDC4",
        "Hypertension": "#FC8181",
        "Arthritis": "#9F7AEA",
    },
    "age_group": {"0-18": "#A8D5BA", "19-40": "#7FB3D5", "41-65": "#9B7EBD", "65+": "#E89B9B"},
    "admission_type": {"Emergency": "#FF6B6B", "Urgent": "#FFA500", "Elective": "#4ECDC4"},
    "gender": {"Male": "#6B9BD1", "Female": "#E89AC7"},
    "polarity": {"positive": "#FF6B9D", "negative": "#4ECDC4"},
    "billing_tier": {"high": "#FF6B6B", "medium": "#FFA500", "low": "#4ECDC4"},
}


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure the root logger (no-op when it already has handlers)."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ------------------------------
# DATA LOADING
# ------------------------------
@st.cache_resource
def load_data(path: Path) -> PreprocessResult:
    """Read and clean the dataset once; every session shares the result read-only."""
    raw = read_records(path)
    result = preprocess(raw)
    report = validate_records(result.cleaned)
    for issue in report.issues:
        logger.warning(f"Data quality: {issue}")
    return result


@st.cache_data
def load_filter_options(path: Path) -> dict:
    return filter_options(load_data(path).cleaned)


def get_dataset() -> PreprocessResult:
    """Loaded dataset, or an error message and a stopped script."""
    try:
        return load_data(DATA_PATH)
    except DataLoadError as exc:
        logger.error(f"Dataset load failed: {exc}")
        st.error(f"Could not load the dataset: {exc}")
        st.stop()


def get_filter_manager() -> FilterManager:
    """Per-session filter manager bound to the shared cleaned dataset."""
    dataset = get_dataset()
    manager = st.session_state.get("filter_manager")
    if manager is None or manager.original_data is not dataset.cleaned:
        manager = FilterManager()
        manager.init(dataset.cleaned, on_filter_change=lambda _: _announce_filter_change(manager))
        st.session_state["filter_manager"] = manager
    return manager


def _announce_filter_change(manager: FilterManager) -> None:
    stats = manager.get_stats()
    st.toast(f"Showing {stats.filtered:,} of {stats.total:,} records")


# ------------------------------
# THEME (LIGHT ONLY) + CSS
# ------------------------------
def get_theme(dark_mode: bool = False) -> dict:
    """Return theme colors. We always use the light theme."""
    return {
        "APP_BG": "#f3f4f6",
        "TEXT_COLOR": "#111827",
        "CARD_GRADIENT": "linear-gradient(135deg, #ffffff 0%, #f3f4f6 100%)",
        "BORDER": "#e5e7eb",
        "SUBTXT": "#6b7280",
    }


def apply_theme_css(theme: dict) -> None:
    """Inject CSS for the light theme."""
    APP_BG = theme["APP_BG"]
    TEXT_COLOR = theme["TEXT_COLOR"]

    st.markdown(
        f"""
        <style>
        .stApp {{
            background-color: {APP_BG};
            color: {TEXT_COLOR};
            font-family: "Inter", system-ui, -apple-system, BlinkMacSystemFont,
                         "Segoe UI", sans-serif;
        }}
        .kpi-card {{
            transition: transform 0.2s ease-out, box-shadow 0.2s ease-out;
        }}
        .kpi-card:hover {{
            transform: translateY(-4px);
            box-shadow: 0 12px 30px rgba(15,23,42,0.15);
        }}
        </style>
        """,
        unsafe_allow_html=True,
    )


def _scale(palette: dict) -> alt.Scale:
    return alt.Scale(domain=list(palette), range=list(palette.values()))


# ------------------------------
# FILTERS (USED BY ALL PAGES)
# ------------------------------
def _option_index(values: list, current) -> int:
    return values.index(current) + 1 if current in values else 0


def _all_or(value) -> str:
    return "All" if value is None else str(value)


def get_filtered_data(manager: FilterManager) -> pd.DataFrame:
    """Draw sidebar filters and return filtered dataframe."""
    st.sidebar.markdown("## Filters")
    options = load_filter_options(DATA_PATH)
    current = manager.active_filters

    with st.sidebar.form("filters"):
        year = st.selectbox(
            "Year",
            [None, *options["year"]],
            index=_option_index(options["year"], current.year),
            format_func=_all_or,
        )
        month = st.selectbox(
            "Month",
            [None, *options["month"]],
            index=_option_index(options["month"], current.month),
            format_func=lambda m: "All" if m is None else MONTH_NAMES[m],
        )
        country = st.selectbox(
            "Country",
            [None, *options["country"]],
            index=_option_index(options["country"], current.country),
            format_func=_all_or,
        )
        city = st.selectbox(
            "City",
            [None, *options["city"]],
            index=_option_index(options["city"], current.city),
            format_func=_all_or,
        )
        hospital = st.selectbox(
            "Hospital",
            [None, *options["hospital"]],
            index=_option_index(options["hospital"], current.hospital),
            format_func=_all_or,
        )
        applied = st.form_submit_button("Apply Filters")

    if applied:
        criteria = FilterCriteria(year=year, month=month, country=country, city=city, hospital=hospital)
        if criteria != current:
            manager.set_filter(criteria)

    # Active filter tags, click to remove
    for name, value in manager.active_filters.active().items():
        label = MONTH_NAMES[value] if name == "month" else value
        if st.sidebar.button(f"✕ {FILTER_LABELS[name]}: {label}", key=f"remove_{name}"):
            manager.remove_filter(name)
            st.rerun()

    if st.sidebar.button("Reset All Filters"):
        manager.clear_filter()
        st.rerun()

    return manager.get_filtered_data()


def show_filter_banner(manager: FilterManager) -> None:
    stats = manager.get_stats()
    if stats.active_filter_count > 0:
        plural = "s" if stats.active_filter_count > 1 else ""
        st.info(
            f"📊 Showing **{stats.filtered:,}** of **{stats.total:,}** records "
            f"({stats.active_filter_count} filter{plural} active)"
        )


# ------------------------------
# KPI / METRIC HELPERS
# ------------------------------
def format_currency(value: float) -> str:
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if abs(value) >= 1_000:
        return f"${value / 1_000:.0f}k"
    return f"${value:,.0f}"


def metric_card(theme: dict, title: str, value: str, subtitle: str, icon: str, color: str) -> None:
    st.markdown(
        f"""
        <div class="kpi-card" style='background:{theme["CARD_GRADIENT"]}; padding:1.2rem;
                    border-radius:16px; border:1px solid {theme["BORDER"]};
                    display:flex; gap:1rem; align-items:center;'>
            <div style='width:48px; height:48px; border-radius:12px; background:{color}22;
                        color:{color}; display:flex; align-items:center;
                        justify-content:center; font-size:1.5rem;'>{icon}</div>
            <div>
                <div style='color:{theme["SUBTXT"]}; font-size:0.85rem;'>{title}</div>
                <div style='font-weight:700; font-size:1.5rem; color:{theme["TEXT_COLOR"]};'>{value}</div>
                <div style='color:{theme["SUBTXT"]}; font-size:0.75rem;'>{subtitle}</div>
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def show_metric_cards(theme: dict, cards: list[tuple[str, str, str, str, str]]) -> None:
    for column, card in zip(st.columns(len(cards)), cards):
        with column:
            metric_card(theme, *card)


def show_downloads(manager: FilterManager, df: pd.DataFrame, prefix: str) -> None:
    overview = manager.aggregate(overview_kpis)
    financial = manager.aggregate(financial_kpis)
    filters = manager.active_filters.active()

    c1, c2, c3 = st.columns(3)
    with c1:
        st.download_button(
            "Download KPI Summary (Excel)",
            data=build_kpi_excel(overview, financial, filters),
            file_name="kpi_summary.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key=f"{prefix}_excel",
        )
    with c2:
        st.download_button(
            "Download KPI Report (PDF)",
            data=build_pdf(overview, financial, filters),
            file_name="kpi_report.pdf",
            mime="application/pdf",
            key=f"{prefix}_pdf",
        )
    with c3:
        st.download_button(
            "Download Filtered Dataset (CSV)",
            df.to_csv(index=False).encode("utf-8"),
            f"filtered_data_{prefix}.csv",
            "text/csv",
            key=f"{prefix}_csv",
        )


# ------------------------------
# PAGE RENDERERS
# ------------------------------
def show_home(theme: dict, dataset: PreprocessResult, manager: FilterManager) -> None:
    report = validate_records(dataset.cleaned)
    stats = manager.get_stats()

    show_metric_cards(
        theme,
        [
            ("Records", f"{stats.total:,}", "After cleaning", "🗂️", "#667EEA"),
            ("Duplicates Removed", f"{dataset.duplicates_removed:,}", "Exact copies", "🧹", "#F6AD55"),
            ("Columns", f"{len(dataset.cleaned.columns)}", "Including derived", "📐", "#4ECDC4"),
        ],
    )
    if report.issues:
        st.markdown("### Data Quality Notes")
        for issue in report.issues:
            st.markdown(f"- {issue}")
    st.caption(f"Last updated: {datetime.now().strftime('%d %b %Y, %H:%M')}")


def show_overview(theme: dict, df: pd.DataFrame, manager: FilterManager) -> None:
    """Summary cards plus the clinical overview charts."""
    st.markdown(
        f"""
        <h2 style='margin-bottom:-6px; color:{theme["TEXT_COLOR"]};'>Overview</h2>
        <p style='color:{theme["SUBTXT"]};'>Patients, billing and outcomes at a glance</p>
        """,
        unsafe_allow_html=True,
    )
    show_filter_banner(manager)

    kpis = manager.aggregate(overview_kpis)
    show_metric_cards(
        theme,
        [
            ("Total Patients", f"{kpis['total_patients']:,}", "Active Records", "👥", "#667EEA"),
            ("Total Billing", format_currency(kpis["total_billing"]), "Revenue Generated", "💰", "#48BB78"),
            ("Average Age", f"{kpis['average_age']:.1f}", "Years", "🎂", "#9B7EBD"),
            ("Avg Length of Stay", f"{kpis['average_length_of_stay']:.1f}", "Days", "🏥", "#4299E1"),
        ],
    )

    if df.empty:
        st.info("No data available for current filters.")
        return

    st.markdown("## Key Insights")
    left, right = st.columns(2)

    with left:
        st.subheader("Test Results")
        tests = manager.aggregate(count_by, TEST_RESULTS)
        donut = (
            alt.Chart(tests)
            .mark_arc(innerRadius=70)
            .encode(
                theta=alt.Theta("count:Q"),
                color=alt.Color("test_result:N", scale=_scale(COLORS["test_result"]), title="Result"),
                tooltip=["test_result", "count", alt.Tooltip("percentage:Q", format=".1f")],
            )
        )
        st.altair_chart(donut, use_container_width=True)

        st.subheader("Age Groups by Condition")
        ages = manager.aggregate(crosstab, MEDICAL_CONDITION, AGE_GROUP)
        ages_long = ages.melt(id_vars="medical_condition", var_name="age_group", value_name="count")
        stacked = (
            alt.Chart(ages_long)
            .mark_bar()
            .encode(
                x=alt.X("medical_condition:N", title=None),
                y=alt.Y("count:Q", title="Patients"),
                color=alt.Color("age_group:N", scale=_scale(COLORS["age_group"]), title="Age Group"),
                tooltip=["medical_condition", "age_group", "count"],
            )
        )
        st.altair_chart(stacked, use_container_width=True)

    with right:
        st.subheader("Conditions vs Test Results")
        results = manager.aggregate(crosstab, MEDICAL_CONDITION, TEST_RESULTS)
        results_long = results.melt(id_vars="medical_condition", var_name="test_result", value_name="count")
        grouped = (
            alt.Chart(results_long)
            .mark_bar()
            .encode(
                x=alt.X("medical_condition:N", title=None),
                xOffset="test_result:N",
                y=alt.Y("count:Q", title="Patients"),
                color=alt.Color("test_result:N", scale=_scale(COLORS["test_result"]), title="Result"),
                tooltip=["medical_condition", "test_result", "count"],
            )
        )
        st.altair_chart(grouped, use_container_width=True)

        st.subheader("Average Stay (Days)")
        stay = manager.aggregate(mean_by, [MEDICAL_CONDITION, ADMISSION_TYPE], "Length of Stay")
        stay_chart = (
            alt.Chart(stay)
            .mark_bar()
            .encode(
                x=alt.X("medical_condition:N", title=None),
                xOffset="admission_type:N",
                y=alt.Y("mean:Q", title="Average LOS (days)"),
                color=alt.Color("admission_type:N", scale=_scale(COLORS["admission_type"]), title="Admission"),
                tooltip=["medical_condition", "admission_type", alt.Tooltip("mean:Q", format=".1f"), "count"],
            )
        )
        st.altair_chart(stay_chart, use_container_width=True)

    prevalence_col, admissions_col = st.columns(2)
    with prevalence_col:
        st.subheader("Prevalence")
        for row in manager.aggregate(count_by, MEDICAL_CONDITION).to_dict("records"):
            st.markdown(f"**{row['medical_condition']}**: {row['count']:,} ({row['percentage']:.1f}%)")
    with admissions_col:
        st.subheader("Admissions")
        for row in manager.aggregate(count_by, ADMISSION_TYPE).to_dict("records"):
            st.progress(min(row["percentage"] / 100, 1.0), text=f"{row['admission_type']}: {row['percentage']:.1f}%")

    show_downloads(manager, df, "overview")


def show_demographics(theme: dict, df: pd.DataFrame, manager: FilterManager) -> None:
    st.title("Demographics")
    show_filter_banner(manager)

    kpis = manager.aggregate(demographic_kpis)
    show_metric_cards(
        theme,
        [
            ("Total Patients", f"{kpis['total_patients']:,}", "Active Records", "👥", "#667EEA"),
            (
                "Gender Split",
                f"{kpis['male_percentage']:.1f}% / {kpis['female_percentage']:.1f}%",
                "Male / Female",
                "⚥",
                "#E89AC7",
            ),
            ("Average Age", f"{kpis['average_age']:.1f}", "Years", "🎂", "#9B7EBD"),
        ],
    )

    if df.empty:
        st.info("No data available for current filters.")
        return

    left, right = st.columns(2)
    with left:
        st.subheader("Gender Distribution")
        genders = manager.aggregate(count_by, GENDER)
        st.altair_chart(
            alt.Chart(genders)
            .mark_arc(innerRadius=60)
            .encode(
                theta="count:Q",
                color=alt.Color("gender:N", scale=_scale(COLORS["gender"]), title="Gender"),
                tooltip=["gender", "count", alt.Tooltip("percentage:Q", format=".1f")],
            ),
            use_container_width=True,
        )

        st.subheader("Blood Type Distribution")
        blood = manager.aggregate(blood_type_polarity)
        blood_long = blood.melt(id_vars="group", var_name="polarity", value_name="count")
        st.altair_chart(
            alt.Chart(blood_long)
            .mark_bar()
            .encode(
                x=alt.X("group:N", title="Blood Group", sort=list(blood["group"])),
                xOffset="polarity:N",
                y=alt.Y("count:Q", title="Patients"),
                color=alt.Color("polarity:N", scale=_scale(COLORS["polarity"]), title="Rh"),
                tooltip=["group", "polarity", "count"],
            ),
            use_container_width=True,
        )

    with right:
        st.subheader("Age Group Distribution")
        ages = manager.aggregate(count_by, AGE_GROUP)
        st.altair_chart(
            alt.Chart(ages)
            .mark_bar()
            .encode(
                y=alt.Y("age_group:N", title="Age Group", sort=None),
                x=alt.X("count:Q", title="Patients"),
                color=alt.Color("age_group:N", scale=_scale(COLORS["age_group"]), legend=None),
                tooltip=["age_group", "count", alt.Tooltip("percentage:Q", format=".1f")],
            ),
            use_container_width=True,
        )

        st.subheader("Admission Type by Age Group")
        admissions = manager.aggregate(crosstab, AGE_GROUP, ADMISSION_TYPE)
        admissions_long = admissions.melt(id_vars="age_group", var_name="admission_type", value_name="count")
        st.altair_chart(
            alt.Chart(admissions_long)
            .mark_bar()
            .encode(
                x=alt.X("age_group:N", title="Age Group", sort=list(admissions["age_group"])),
                y=alt.Y("count:Q", title="Patients"),
                color=alt.Color(
                    "admission_type:N", scale=_scale(COLORS["admission_type"]), title="Admission"
                ),
                tooltip=["age_group", "admission_type", "count"],
            ),
            use_container_width=True,
        )


def show_financial(theme: dict, df: pd.DataFrame, manager: FilterManager) -> None:
    st.title("Financial Analysis")
    show_filter_banner(manager)

    kpis = manager.aggregate(financial_kpis)
    show_metric_cards(
        theme,
        [
            ("Total Revenue", format_currency(kpis["total_revenue"]), "Normal bills", "💰", "#48BB78"),
            ("Total Refunds", format_currency(kpis["total_refunds"]), "Negative bills", "↩️", "#FC8181"),
            ("Avg Length of Stay", f"{kpis['average_length_of_stay']:.1f}", "Days", "🏥", "#4299E1"),
            ("Avg Cost", f"${kpis['average_cost']:,.2f}", "Per stay", "🧾", "#9B7EBD"),
            ("Unique Patients", f"{kpis['unique_patients']:,}", "By name", "👥", "#667EEA"),
        ],
    )

    if df.empty:
        st.info("No data available for current filters.")
        return

    st.subheader("Cost Distribution")
    c1, c2 = st.columns(2)
    include_underflow = c1.checkbox("Show refunds (below $0)", value=False)
    include_overflow = c2.checkbox("Show bills of $100,000 and above", value=False)
    histogram = manager.aggregate(
        billing_histogram,
        include_underflow=include_underflow,
        include_overflow=include_overflow,
    )
    st.altair_chart(
        alt.Chart(histogram)
        .mark_bar(color="#667EEA")
        .encode(
            x=alt.X("range:N", title="Billing Amount ($)", sort=list(histogram["range"])),
            y=alt.Y("count:Q", title="Patients"),
            tooltip=["range", "count", alt.Tooltip("percentage:Q", format=".1f")],
        ),
        use_container_width=True,
    )

    st.subheader("Insurance Providers")
    insurance = manager.aggregate(insurance_summary)
    st.altair_chart(
        alt.Chart(insurance)
        .mark_bar(color="#48BB78")
        .encode(
            x=alt.X("provider:N", title=None, sort=list(insurance["provider"])),
            y=alt.Y("total_amount:Q", title="Total Billing ($)"),
            tooltip=[
                "provider",
                alt.Tooltip("total_amount:Q", format=",.0f"),
                alt.Tooltip("avg_amount:Q", format=",.2f"),
                "patient_count",
                alt.Tooltip("refund_percentage:Q", format=".1f"),
            ],
        ),
        use_container_width=True,
    )
    st.dataframe(insurance, use_container_width=True, hide_index=True)

    st.subheader("Monthly Billing Trend")
    monthly = manager.aggregate(monthly_billing)
    monthly = monthly.assign(period=pd.to_datetime(monthly["period"], format="%Y-%m"))
    st.altair_chart(
        alt.Chart(monthly)
        .mark_line(point=True, color="#667EEA")
        .encode(
            x=alt.X("period:T", title=None),
            y=alt.Y("total:Q", title="Total Billing ($)"),
            tooltip=[
                alt.Tooltip("period:T", format="%b %Y"),
                alt.Tooltip("total:Q", format=",.0f"),
                "count",
                alt.Tooltip("avg:Q", format=",.2f"),
            ],
        ),
        use_container_width=True,
    )

    left, right = st.columns(2)
    with left:
        st.subheader("Annual Trend by Month")
        annual = manager.aggregate(annual_billing_trend)
        annual_long = annual.melt(id_vars="year", var_name="month", value_name="amount")
        st.altair_chart(
            alt.Chart(annual_long)
            .mark_line(point=True)
            .encode(
                x=alt.X("month:O", title="Month"),
                y=alt.Y("amount:Q", title="Billing ($)"),
                color=alt.Color("year:N", title="Year"),
                tooltip=["year", "month", alt.Tooltip("amount:Q", format=",.0f")],
            ),
            use_container_width=True,
        )
    with right:
        st.subheader("Billing by Country and Year")
        countries = manager.aggregate(billing_by_country_year)
        if countries.empty:
            st.info("No country information in the current selection.")
        else:
            st.altair_chart(
                alt.Chart(countries)
                .mark_bar()
                .encode(
                    x=alt.X("country:N", title=None),
                    xOffset="year:N",
                    y=alt.Y("amount:Q", title="Billing ($)"),
                    color=alt.Color("year:N", title="Year"),
                    tooltip=["country", "year", alt.Tooltip("amount:Q", format=",.0f")],
                ),
                use_container_width=True,
            )

    show_downloads(manager, df, "financial")


def show_geographic(theme: dict, df: pd.DataFrame, manager: FilterManager) -> None:
    st.title("Geographic Distribution")
    show_filter_banner(manager)

    points = manager.aggregate(hospital_locations)
    if points.empty:
        st.info(
            "No hospital coordinates in the current selection. "
            "Run `python geo_enrichment.py` on the source CSV to add them."
        )
        return

    points = points.assign(
        color=points["billing_tier"].map(COLORS["billing_tier"]),
        size=(points["patient_count"] / 2).clip(8, 22) * 500,
    )
    st.map(points, latitude="latitude", longitude="longitude", size="size", color="color")
    st.caption(
        "Average billing: red > $25,000, orange $15,000 - $25,000, teal < $15,000. "
        "Point size = number of patients."
    )

    st.dataframe(
        points.drop(columns=["color", "size"]),
        use_container_width=True,
        hide_index=True,
    )

    st.subheader("Analyse a Hospital")
    hospital = st.selectbox("Hospital", list(points["hospital"]))
    if st.button("Filter dashboard to this hospital"):
        manager.set_filter(replace(manager.active_filters, hospital=hospital))
        st.switch_page("pages/01_Overview.py")


def show_data_explorer(df: pd.DataFrame, dataset: PreprocessResult) -> None:
    st.title("Data Explorer")

    search = st.text_input("Global search", placeholder="Search across all columns...")
    df_view = df.copy()
    if search:
        mask = df_view.apply(
            lambda col: col.astype(str).str.contains(search, case=False, na=False, regex=False)
        )
        df_view = df_view[mask.any(axis=1)]

    st.write(f"Showing **{len(df_view)}** rows after filters and search.")
    st.download_button(
        "Download Filtered CSV",
        df_view.to_csv(index=False).encode("utf-8"),
        "filtered_data.csv",
        "text/csv",
    )
    st.dataframe(df_view, use_container_width=True)

    summary = dataset.summary
    st.markdown("### Dataset Profile")
    st.caption(
        f"Computed on the full cleaned dataset ({len(dataset.cleaned):,} records, "
        f"{dataset.duplicates_removed:,} duplicates removed)."
    )

    left, right = st.columns(2)
    with left:
        st.markdown("**Missing Values**")
        st.dataframe(
            pd.DataFrame(list(summary.missing_values.items()), columns=["Column", "Missing"]),
            use_container_width=True,
            hide_index=True,
        )
    with right:
        st.markdown("**Column Types**")
        st.dataframe(
            pd.DataFrame(list(summary.column_types.items()), columns=["Column", "Type"]),
            use_container_width=True,
            hide_index=True,
        )

    st.markdown("**Numeric Columns**")
    st.dataframe(
        pd.DataFrame({column: asdict(values) for column, values in summary.numeric_stats.items()}).T,
        use_container_width=True,
    )

    st.markdown("**Categorical Columns**")
    for column, counts in summary.categorical_freq.items():
        with st.expander(column, expanded=False):
            st.dataframe(
                pd.DataFrame(list(counts.items()), columns=[column, "Count"]),
                use_container_width=True,
                hide_index=True,
            )


def show_about_page() -> None:
    st.title("About This Dashboard")

    st.markdown(
        """
    ### Overview
    This dashboard explores a synthetic hospital admissions dataset: who the patients are,
    what they were treated for, how long they stayed and what their stay cost.

    - **Overview**: test results, conditions, age groups and average length of stay
    - **Demographics**: gender, age group, blood type and admission type
    - **Financial**: revenue vs refunds, cost distribution, insurers and billing trends
    - **Geographic**: hospitals on a map, sized by patients and coloured by average billing

    The sidebar filters (year, month, country, city, hospital) apply to every page.
    Percentages are always relative to the filtered records.

    ---

    ### Data Preparation
    - Ages, billing amounts and room numbers are parsed as numbers; unparseable values are left empty.
    - Admission and discharge dates are parsed as dates; length of stay is only computed when the
      discharge comes after the admission.
    - Names of patients, doctors and hospitals are normalized (whitespace, capitalization).
    - Exact duplicate records are removed, keeping the first occurrence.
    - City, country and coordinates are synthetic and assigned per hospital by
      `geo_enrichment.py`.
    """
    )
