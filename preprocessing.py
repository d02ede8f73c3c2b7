"""Cleaning and feature engineering for the patient records dataset.

The pipeline turns raw CSV rows (every value still a string) into a typed
DataFrame and a summary report:

1. field coercion (numbers, dates, categorical defaults)
2. name normalization (Name, Doctor, Hospital)
3. derived features (Type of Bill, Dates Valid, Length of Stay, Age Group)
4. deduplication on the canonical form of every field
5. summary statistics over the deduplicated rows

Nothing in here raises for bad data: unparseable values become null or
"Unknown".
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# ------------------------------
# COLUMN GROUPS
# ------------------------------
NUMERIC_COLUMNS = ["Age", "Billing Amount", "Room Number"]
DATE_COLUMNS = ["Date of Admission", "Discharge Date"]
CATEGORICAL_COLUMNS = [
    "Gender",
    "Blood Type",
    "Medical Condition",
    "Doctor",
    "Hospital",
    "Insurance Provider",
    "Admission Type",
]
NAME_COLUMNS = ["Name", "Doctor", "Hospital"]

# Columns the pipeline reads; anything else is passed through untouched.
RECOGNIZED_COLUMNS = [
    "Name",
    "Age",
    "Gender",
    "Blood Type",
    "Medical Condition",
    "Date of Admission",
    "Doctor",
    "Hospital",
    "Insurance Provider",
    "Billing Amount",
    "Room Number",
    "Admission Type",
    "Discharge Date",
    "Medication",
    "Test Results",
    "City",
    "Country",
    "Latitude",
    "Longitude",
]
# Columns every cleaned frame carries, even when the source file lacks them.
CORE_COLUMNS = ["Name", *NUMERIC_COLUMNS, *DATE_COLUMNS, *CATEGORICAL_COLUMNS]

SUMMARY_NUMERIC_COLUMNS = ["Age", "Billing Amount", "Room Number", "Length of Stay"]
SUMMARY_CATEGORICAL_COLUMNS = [
    "Gender",
    "Blood Type",
    "Medical Condition",
    "Admission Type",
    "Age Group",
    "Type of Bill",
    "Insurance Provider",
    "Test Results",
]

UNKNOWN = "Unknown"
AGE_GROUPS = ["0-18", "19-40", "41-65", "65+"]
# (inclusive upper bound, label)
AGE_GROUP_BOUNDS = [(18, "0-18"), (40, "19-40"), (65, "41-65")]

DEDUP_NULL = "NA"
SECONDS_PER_DAY = 24 * 60 * 60


# ------------------------------
# RESULT TYPES
# ------------------------------
@dataclass(frozen=True)
class NumericStats:
    count: int
    mean: float
    median: float
    min: float
    max: float
    std: float


@dataclass(frozen=True)
class SummaryReport:
    """Missing values, numeric statistics and frequency tables of a cleaned frame."""

    missing_values: dict[str, int] = field(default_factory=dict)
    numeric_stats: dict[str, NumericStats] = field(default_factory=dict)
    categorical_freq: dict[str, dict[str, int]] = field(default_factory=dict)
    column_types: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PreprocessResult:
    cleaned: pd.DataFrame
    summary: SummaryReport
    duplicates_removed: int = 0


@dataclass(frozen=True)
class ValidationReport:
    is_valid: bool
    total_records: int
    issues: list[str] = field(default_factory=list)


# ------------------------------
# VALUE HELPERS
# ------------------------------
def _is_null(value: Any) -> bool:
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    return False


def _is_missing(value: Any) -> bool:
    """Null, NaN or a blank string."""
    if isinstance(value, str):
        return value.strip() == ""
    return _is_null(value)


def to_number(value: Any) -> float | None:
    """Parse a number; anything unparseable or non-finite becomes None."""
    if _is_missing(value):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def to_date(value: Any) -> pd.Timestamp | None:
    """Parse a calendar date; invalid input becomes None."""
    if _is_missing(value):
        return None
    try:
        if isinstance(value, (pd.Timestamp, datetime, date)):
            parsed = pd.Timestamp(value)
        else:
            parsed = pd.to_datetime(str(value).strip(), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(None)
    return parsed


def _strip_text(values: pd.Series) -> pd.Series:
    if values.dtype != object:
        return values
    return values.map(lambda value: value.strip() if isinstance(value, str) else value)


def parse_numbers(values: pd.Series) -> pd.Series:
    """Column-wise ``to_number``: float64 with NaN for anything invalid or non-finite."""
    numbers = pd.to_numeric(_strip_text(values), errors="coerce").astype("float64")
    return numbers.where(np.isfinite(numbers))


def parse_dates(values: pd.Series) -> pd.Series:
    """Column-wise ``to_date``: naive datetime64 with NaT for invalid input."""
    if isinstance(values.dtype, pd.DatetimeTZDtype):
        return values.dt.tz_convert(None)
    if pd.api.types.is_datetime64_dtype(values):
        return values
    parsed = pd.to_datetime(_strip_text(values), errors="coerce", format="mixed", utc=True)
    return parsed.dt.tz_convert(None)


def normalize_name(value: Any) -> str | None:
    """Trim, collapse whitespace and capitalize each word."""
    if _is_missing(value):
        return None
    return " ".join(word[:1].upper() + word[1:].lower() for word in str(value).split())


def default_category(value: Any) -> str:
    if _is_missing(value):
        return UNKNOWN
    return str(value).strip()


def age_group(age: Any) -> str:
    if _is_null(age):
        return UNKNOWN
    for upper, label in AGE_GROUP_BOUNDS:
        if age <= upper:
            return label
    return "65+"


def _as_frame(records: pd.DataFrame | Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        return records.copy()
    return pd.DataFrame.from_records(list(records))


# ------------------------------
# PIPELINE STEPS
# ------------------------------
def coerce_fields(frame: pd.DataFrame) -> pd.DataFrame:
    """Type the numeric and date columns and default empty categoricals."""
    cleaned = frame.copy()
    for column in CORE_COLUMNS:
        if column not in cleaned.columns:
            cleaned[column] = None

    for column in NUMERIC_COLUMNS:
        cleaned[column] = parse_numbers(cleaned[column])
    for column in DATE_COLUMNS:
        cleaned[column] = parse_dates(cleaned[column])
    for column in CATEGORICAL_COLUMNS:
        cleaned[column] = cleaned[column].map(default_category).astype(object)
    return cleaned


def normalize_text(frame: pd.DataFrame) -> pd.DataFrame:
    normalized = frame.copy()
    for column in NAME_COLUMNS:
        if column in normalized.columns:
            normalized[column] = normalized[column].map(normalize_name).astype(object)
    # Doctor/Hospital are categorical as well and must never end up empty
    for column in ("Doctor", "Hospital"):
        if column in normalized.columns:
            normalized[column] = normalized[column].fillna(UNKNOWN)
    return normalized


def add_derived_features(frame: pd.DataFrame) -> pd.DataFrame:
    """Type of Bill, Dates Valid, Length of Stay and Age Group."""
    enriched = frame.copy()

    amount = enriched["Billing Amount"]
    enriched["Type of Bill"] = np.select(
        [amount.isna().to_numpy(), (amount < 0).to_numpy()],
        [UNKNOWN, "Refund"],
        default="Normal",
    ).astype(object)

    admitted = enriched["Date of Admission"]
    discharged = enriched["Discharge Date"]
    both_present = admitted.notna() & discharged.notna()
    dates_valid = (discharged > admitted).astype("boolean").mask(~both_present)
    enriched["Dates Valid"] = dates_valid

    days = np.ceil((discharged - admitted).dt.total_seconds() / SECONDS_PER_DAY)
    enriched["Length of Stay"] = days.where(dates_valid.fillna(False).astype(bool)).astype("Int64")

    enriched["Age Group"] = enriched["Age"].map(age_group).astype(object)
    return enriched


def _canonical(value: Any) -> str:
    if _is_null(value):
        return DEDUP_NULL
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    return str(value)


def canonical_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Every field in canonical form, columns sorted by name.

    Text columns are mapped to strings (null as "NA"); typed columns are kept
    as they are, their nulls already compare equal in ``duplicated``.
    """
    columns = sorted(frame.columns, key=str)
    return pd.DataFrame(
        {
            column: frame[column].map(_canonical) if frame[column].dtype == object else frame[column]
            for column in columns
        },
        index=frame.index,
    )


def duplicated_records(frame: pd.DataFrame) -> pd.Series:
    """True for every row whose fields all equal those of an earlier row."""
    if len(frame.columns) == 0:
        return pd.Series(False, index=frame.index)
    return canonical_frame(frame).duplicated(keep="first")


def count_duplicates(frame: pd.DataFrame) -> int:
    return int(duplicated_records(frame).sum())


def drop_duplicates(frame: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """Keep the first row per canonical record; returns (frame, removed count)."""
    duplicated = duplicated_records(frame)
    deduplicated = frame.loc[~duplicated.to_numpy()].reset_index(drop=True)
    return deduplicated, int(duplicated.sum())


# ------------------------------
# SUMMARY
# ------------------------------
def stats(values: Iterable[Any]) -> NumericStats | None:
    """Count, mean, median, min, max and population std of the non-null values.

    The median is the element at index n // 2 of the sorted values, i.e. the
    upper-middle element when n is even.
    """
    series = parse_numbers(pd.Series(list(values), dtype=object))
    valid = series.dropna().sort_values(ignore_index=True)
    if valid.empty:
        return None

    n = len(valid)
    return NumericStats(
        count=n,
        mean=float(valid.mean()),
        median=float(valid.iloc[n // 2]),
        min=float(valid.iloc[0]),
        max=float(valid.iloc[-1]),
        std=float(valid.std(ddof=0)),
    )


def missing_values_report(frame: pd.DataFrame) -> dict[str, int]:
    report = {}
    for column in frame.columns:
        values = frame[column]
        missing = values.isna()
        if values.dtype == object:
            missing = missing | values.map(lambda v: isinstance(v, str) and v == "")
        report[column] = int(missing.sum())
    return report


def frequency_count(frame: pd.DataFrame, column: str) -> dict[str, int]:
    values = frame[column].map(default_category)
    return {str(key): int(count) for key, count in values.value_counts().items()}


def _type_name(value: Any) -> str:
    if _is_null(value):
        return "null"
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return "date"
    if isinstance(value, (bool, np.bool_)):
        return "bool"
    if isinstance(value, (int, np.integer)):
        return "int"
    if isinstance(value, (float, np.floating)):
        return "float"
    return type(value).__name__


def column_types(frame: pd.DataFrame) -> dict[str, str]:
    """Observed value types per column ("float | null" for mixed columns)."""
    types = {}
    for column in frame.columns:
        seen = dict.fromkeys(frame[column].astype(object).map(_type_name))
        types[column] = " | ".join(seen)
    return types


def summarize(frame: pd.DataFrame) -> SummaryReport:
    if frame.empty:
        return SummaryReport()

    numeric_stats = {}
    for column in SUMMARY_NUMERIC_COLUMNS:
        if column in frame.columns:
            column_stats = stats(frame[column])
            if column_stats is not None:
                numeric_stats[column] = column_stats

    categorical_freq = {
        column: frequency_count(frame, column)
        for column in SUMMARY_CATEGORICAL_COLUMNS
        if column in frame.columns
    }

    return SummaryReport(
        missing_values=missing_values_report(frame),
        numeric_stats=numeric_stats,
        categorical_freq=categorical_freq,
        column_types=column_types(frame),
    )


def validate_records(frame: pd.DataFrame) -> ValidationReport:
    """Report data-quality issues of a cleaned frame without failing on them."""
    total = len(frame)
    issues = []
    if total:
        missing_age = int(frame["Age"].isna().sum()) if "Age" in frame.columns else total
        missing_gender = (
            int(frame["Gender"].eq(UNKNOWN).sum()) if "Gender" in frame.columns else total
        )
        negative_billing = (
            int((frame["Billing Amount"] < 0).sum()) if "Billing Amount" in frame.columns else 0
        )
        if missing_age:
            issues.append(f"{missing_age} records with missing age")
        if missing_gender:
            issues.append(f"{missing_gender} records with missing gender")
        if negative_billing:
            issues.append(f"{negative_billing} records with negative billing")

    return ValidationReport(is_valid=not issues, total_records=total, issues=issues)


# ------------------------------
# ENTRY POINT
# ------------------------------
def preprocess(raw_records: pd.DataFrame | Sequence[Mapping[str, Any]]) -> PreprocessResult:
    """Run the full cleaning pipeline over raw rows."""
    frame = _as_frame(raw_records)
    logger.info(f"Preprocessing {len(frame)} raw records")

    cleaned = coerce_fields(frame)
    cleaned = normalize_text(cleaned)
    cleaned = add_derived_features(cleaned)
    cleaned, removed = drop_duplicates(cleaned)
    if removed:
        logger.info(f"Removed {removed} duplicate records")

    summary = summarize(cleaned)
    logger.info(f"Preprocessing done: {len(cleaned)} records, {len(cleaned.columns)} columns")
    return PreprocessResult(cleaned=cleaned, summary=summary, duplicates_removed=removed)
