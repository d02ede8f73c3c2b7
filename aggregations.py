"""Chart-ready aggregations over cleaned patient records.

Every function takes the (possibly filtered) cleaned frame and returns a new,
small DataFrame or dict. Percentages are always relative to the number of rows
passed in, so results stay consistent with whatever filter the caller applied.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Sequence

import pandas as pd

from preprocessing import AGE_GROUPS

logger = logging.getLogger(__name__)

# ------------------------------
# DIMENSIONS
# ------------------------------
ADMISSION_TYPES = ("Emergency", "Urgent", "Elective")
TEST_RESULT_TYPES = ("Normal", "Abnormal", "Inconclusive")
BILL_TYPES = ("Normal", "Refund")
BLOOD_GROUPS = ("A", "B", "AB", "O")

BILLING_BIN_EDGES = (0, 1000, 5000, 10000, 20000, 50000, 100000)

# Average billing above which a hospital is drawn as high / medium cost
HIGH_BILLING_THRESHOLD = 25000
MEDIUM_BILLING_THRESHOLD = 15000


@dataclass(frozen=True)
class Dimension:
    """A grouping column.

    ``domain`` fixes the emitted keys and their order (zero counts included);
    without it keys are discovered from the data and ordered by descending
    count. ``name`` is the key column of the result frame.
    """

    column: str
    domain: tuple[str, ...] | None = None
    name: str | None = None

    @property
    def key(self) -> str:
        return self.name or self.column


GENDER = Dimension("Gender", name="gender")
AGE_GROUP = Dimension("Age Group", tuple(AGE_GROUPS), name="age_group")
ADMISSION_TYPE = Dimension("Admission Type", ADMISSION_TYPES, name="admission_type")
TEST_RESULTS = Dimension("Test Results", TEST_RESULT_TYPES, name="test_result")
BILL_TYPE = Dimension("Type of Bill", BILL_TYPES, name="bill_type")
MEDICAL_CONDITION = Dimension("Medical Condition", name="medical_condition")
INSURANCE_PROVIDER = Dimension("Insurance Provider", name="insurance_provider")
BLOOD_TYPE = Dimension("Blood Type", name="blood_type")
COUNTRY = Dimension("Country", name="country")
CITY = Dimension("City", name="city")
HOSPITAL = Dimension("Hospital", name="hospital")

DIMENSIONS = {
    dimension.column: dimension
    for dimension in (
        GENDER,
        AGE_GROUP,
        ADMISSION_TYPE,
        TEST_RESULTS,
        BILL_TYPE,
        MEDICAL_CONDITION,
        INSURANCE_PROVIDER,
        BLOOD_TYPE,
        COUNTRY,
        CITY,
        HOSPITAL,
    )
}


# ------------------------------
# HELPERS
# ------------------------------
def percentage(count: float, total: float) -> float:
    """count / total as a percentage, one decimal, rounded half-up."""
    if not total:
        return 0.0
    exact = Decimal(count / total * 100)
    return float(exact.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _as_frame(records: pd.DataFrame | Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        return records
    return pd.DataFrame.from_records(list(records))


def _as_dimension(dimension: Dimension | str) -> Dimension:
    if isinstance(dimension, Dimension):
        return dimension
    return DIMENSIONS.get(dimension, Dimension(dimension))


def _values(frame: pd.DataFrame, column: str) -> pd.Series:
    if column in frame.columns:
        return frame[column]
    return pd.Series(None, index=frame.index, dtype=object)


def _numbers(frame: pd.DataFrame, column: str) -> pd.Series:
    return pd.to_numeric(_values(frame, column), errors="coerce").astype("float64")


def _admission_dates(frame: pd.DataFrame) -> pd.Series:
    return pd.to_datetime(_values(frame, "Date of Admission"), errors="coerce")


def _ordered_keys(counts: pd.Series) -> list:
    """Keys by descending count, ties broken by key."""
    return [key for key, _ in sorted(counts.items(), key=lambda item: (-item[1], str(item[0])))]


def _mean(values: pd.Series) -> float:
    values = values.dropna()
    return float(values.mean()) if len(values) else 0.0


# ------------------------------
# COUNTS & PERCENTAGES
# ------------------------------
def count_by(frame: pd.DataFrame, dimension: Dimension | str) -> pd.DataFrame:
    """Rows of (key, count, percentage) for one categorical dimension."""
    frame = _as_frame(frame)
    dimension = _as_dimension(dimension)
    total = len(frame)

    counts = _values(frame, dimension.column).value_counts(dropna=True)
    if dimension.domain is not None:
        keys = list(dimension.domain)
    else:
        keys = _ordered_keys(counts)

    rows = []
    for key in keys:
        count = int(counts.get(key, 0))
        rows.append(
            {dimension.key: key, "count": count, "percentage": percentage(count, total)}
        )
    return pd.DataFrame(rows, columns=[dimension.key, "count", "percentage"])


def crosstab(
    frame: pd.DataFrame, primary: Dimension | str, secondary: Dimension | str
) -> pd.DataFrame:
    """Wide pivot: one row per primary key, one count column per secondary key."""
    frame = _as_frame(frame)
    primary = _as_dimension(primary)
    secondary = _as_dimension(secondary)

    pairs = pd.DataFrame(
        {
            "primary": _values(frame, primary.column),
            "secondary": _values(frame, secondary.column),
        }
    ).dropna()

    if pairs.empty:
        table = pd.DataFrame()
    else:
        table = pairs.groupby(["primary", "secondary"]).size().unstack(fill_value=0)

    if primary.domain is not None:
        rows = list(primary.domain)
    else:
        rows = _ordered_keys(table.sum(axis=1)) if not table.empty else []
    if secondary.domain is not None:
        columns = list(secondary.domain)
    else:
        columns = _ordered_keys(table.sum(axis=0)) if not table.empty else []

    table = table.reindex(index=rows, columns=columns, fill_value=0).fillna(0).astype(int)
    table.index.name = primary.key
    table.columns.name = None
    return table.reset_index()


def blood_type_polarity(frame: pd.DataFrame) -> pd.DataFrame:
    """Positive / negative counts per ABO group."""
    frame = _as_frame(frame)
    blood_types = _values(frame, "Blood Type")
    rows = [
        {
            "group": group,
            "positive": int(blood_types.eq(f"{group}+").sum()),
            "negative": int(blood_types.eq(f"{group}-").sum()),
        }
        for group in BLOOD_GROUPS
    ]
    return pd.DataFrame(rows, columns=["group", "positive", "negative"])


# ------------------------------
# NUMERIC SUMMARIES
# ------------------------------
def mean_by(
    frame: pd.DataFrame,
    groups: Dimension | str | Sequence[Dimension | str],
    value: str,
) -> pd.DataFrame:
    """Mean (and count of valid values) of a numeric column per group, highest first."""
    frame = _as_frame(frame)
    if isinstance(groups, (Dimension, str)):
        groups = [groups]
    dimensions = [_as_dimension(group) for group in groups]
    keys = [dimension.key for dimension in dimensions]

    data = pd.DataFrame({dimension.key: _values(frame, dimension.column) for dimension in dimensions})
    data["value"] = _numbers(frame, value)
    data = data.dropna()
    if data.empty:
        return pd.DataFrame(columns=[*keys, "mean", "count"])

    result = data.groupby(keys)["value"].agg(["mean", "count"]).reset_index()
    result["count"] = result["count"].astype(int)
    return result.sort_values(
        ["mean", *keys], ascending=[False] + [True] * len(keys)
    ).reset_index(drop=True)


# ------------------------------
# TEMPORAL ROLLUPS
# ------------------------------
def _dated_billing(frame: pd.DataFrame) -> pd.DataFrame:
    """Billing amounts with year/month of admission; undated rows dropped."""
    dates = _admission_dates(frame)
    data = pd.DataFrame(
        {
            "year": dates.dt.year,
            "month": dates.dt.month,
            "amount": _numbers(frame, "Billing Amount"),
            "country": _values(frame, "Country"),
        }
    )
    data = data.loc[dates.notna()].copy()
    data["year"] = data["year"].astype(int)
    data["month"] = data["month"].astype(int)
    return data


def monthly_billing(frame: pd.DataFrame) -> pd.DataFrame:
    """Total, record count and average billing per (year, month), oldest first."""
    columns = ["period", "year", "month", "total", "count", "avg"]
    data = _dated_billing(_as_frame(frame))
    if data.empty:
        return pd.DataFrame(columns=columns)

    result = (
        data.groupby(["year", "month"])
        .agg(total=("amount", "sum"), count=("amount", "size"), avg=("amount", "mean"))
        .reset_index()
    )
    result["count"] = result["count"].astype(int)
    result.insert(
        0, "period", [f"{year}-{month:02d}" for year, month in zip(result["year"], result["month"])]
    )
    return result[columns]


def billing_by_country_year(frame: pd.DataFrame) -> pd.DataFrame:
    columns = ["country", "year", "amount"]
    data = _dated_billing(_as_frame(frame)).dropna(subset=["country"])
    if data.empty:
        return pd.DataFrame(columns=columns)

    result = data.groupby(["country", "year"])["amount"].sum().reset_index()
    return result[columns]


def annual_billing_trend(frame: pd.DataFrame) -> pd.DataFrame:
    """One row per year with the billing total of each month (columns 1-12)."""
    months = list(range(1, 13))
    data = _dated_billing(_as_frame(frame))
    if data.empty:
        return pd.DataFrame(columns=["year", *months])

    table = data.groupby(["year", "month"])["amount"].sum().unstack(fill_value=0.0)
    table = table.reindex(columns=months, fill_value=0.0)
    table.columns.name = None
    return table.reset_index()


# ------------------------------
# BILLING DISTRIBUTION
# ------------------------------
def billing_histogram(
    frame: pd.DataFrame,
    edges: Sequence[float] = BILLING_BIN_EDGES,
    include_underflow: bool = False,
    include_overflow: bool = False,
) -> pd.DataFrame:
    """Counts of billing amounts in half-open bins [lower, upper).

    Amounts below the first edge or at/above the last edge are left out unless
    ``include_underflow`` / ``include_overflow`` add a bin for them.
    """
    frame = _as_frame(frame)
    amounts = _numbers(frame, "Billing Amount")
    total = len(frame)

    bins = []
    if include_underflow:
        bins.append((f"< {edges[0]:,}", -math.inf, edges[0]))
    for lower, upper in zip(edges, edges[1:]):
        bins.append((f"{lower:,} - {upper:,}", lower, upper))
    if include_overflow:
        bins.append((f">= {edges[-1]:,}", edges[-1], math.inf))

    rows = []
    for label, lower, upper in bins:
        count = int(((amounts >= lower) & (amounts < upper)).sum())
        rows.append(
            {
                "range": label,
                "lower": lower,
                "upper": upper,
                "count": count,
                "percentage": percentage(count, total),
            }
        )
    return pd.DataFrame(rows, columns=["range", "lower", "upper", "count", "percentage"])


def insurance_summary(frame: pd.DataFrame) -> pd.DataFrame:
    """Billing and refund figures per insurance provider, largest total first."""
    columns = [
        "provider",
        "avg_amount",
        "total_amount",
        "patient_count",
        "refund_count",
        "refund_percentage",
    ]
    frame = _as_frame(frame)
    data = pd.DataFrame(
        {
            "provider": _values(frame, "Insurance Provider"),
            "amount": _numbers(frame, "Billing Amount"),
            "refund": _values(frame, "Type of Bill").eq("Refund"),
        }
    ).dropna(subset=["provider"])
    if data.empty:
        return pd.DataFrame(columns=columns)

    result = (
        data.groupby("provider")
        .agg(
            avg_amount=("amount", "mean"),
            total_amount=("amount", "sum"),
            patient_count=("amount", "size"),
            refund_count=("refund", "sum"),
        )
        .reset_index()
    )
    result["patient_count"] = result["patient_count"].astype(int)
    result["refund_count"] = result["refund_count"].astype(int)
    result["refund_percentage"] = [
        percentage(refunds, patients)
        for refunds, patients in zip(result["refund_count"], result["patient_count"])
    ]
    result = result.sort_values(["total_amount", "provider"], ascending=[False, True])
    return result[columns].reset_index(drop=True)


# ------------------------------
# GEOGRAPHY
# ------------------------------
def billing_tier(avg_billing: float) -> str:
    if avg_billing > HIGH_BILLING_THRESHOLD:
        return "high"
    if avg_billing > MEDIUM_BILLING_THRESHOLD:
        return "medium"
    return "low"


def hospital_locations(frame: pd.DataFrame) -> pd.DataFrame:
    """One point per hospital: location, patient count, cost and dominant test result."""
    columns = [
        "hospital",
        "latitude",
        "longitude",
        "patient_count",
        "avg_billing",
        "dominant_test_result",
        "billing_tier",
    ]
    frame = _as_frame(frame)
    data = pd.DataFrame(
        {
            "hospital": _values(frame, "Hospital"),
            "latitude": _numbers(frame, "Latitude"),
            "longitude": _numbers(frame, "Longitude"),
            "amount": _numbers(frame, "Billing Amount"),
            "test_result": _values(frame, "Test Results"),
        }
    ).dropna(subset=["hospital"])

    rows = []
    for hospital, records in data.groupby("hospital", sort=False):
        located = records.dropna(subset=["latitude", "longitude"])
        if located.empty:
            continue
        avg_billing = _mean(records["amount"])
        results = Counter(records["test_result"].dropna())
        rows.append(
            {
                "hospital": hospital,
                "latitude": float(located["latitude"].iloc[0]),
                "longitude": float(located["longitude"].iloc[0]),
                "patient_count": len(records),
                "avg_billing": avg_billing,
                "dominant_test_result": results.most_common(1)[0][0] if results else None,
                "billing_tier": billing_tier(avg_billing),
            }
        )
    return pd.DataFrame(rows, columns=columns)


# ------------------------------
# KPIs
# ------------------------------
def overview_kpis(frame: pd.DataFrame) -> dict:
    frame = _as_frame(frame)
    return {
        "total_patients": len(frame),
        "total_billing": float(_numbers(frame, "Billing Amount").sum()),
        "average_age": _mean(_numbers(frame, "Age")),
        "average_length_of_stay": _mean(_numbers(frame, "Length of Stay")),
    }


def demographic_kpis(frame: pd.DataFrame) -> dict:
    frame = _as_frame(frame)
    genders = count_by(frame, GENDER).set_index("gender")["percentage"]
    return {
        "total_patients": len(frame),
        "average_age": _mean(_numbers(frame, "Age")),
        "male_percentage": float(genders.get("Male", 0.0)),
        "female_percentage": float(genders.get("Female", 0.0)),
    }


def financial_kpis(frame: pd.DataFrame) -> dict:
    """Revenue counts normal bills only; refunds are summed separately."""
    frame = _as_frame(frame)
    amounts = _numbers(frame, "Billing Amount")
    bill_types = _values(frame, "Type of Bill")
    return {
        "total_records": len(frame),
        "unique_patients": int(_values(frame, "Name").nunique()),
        "total_revenue": float(amounts[bill_types.eq("Normal")].sum()),
        "total_refunds": float(amounts[bill_types.eq("Refund")].sum()),
        "average_length_of_stay": _mean(_numbers(frame, "Length of Stay")),
        "average_cost": _mean(amounts),
    }
