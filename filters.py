"""Cross-page filtering of the cleaned dataset.

``FilterManager`` owns the active criteria and the filtered frame. Every
change replaces the filtered frame wholesale, clears the aggregation cache and
notifies the single registered callback.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping

import pandas as pd

from preprocessing import to_date

logger = logging.getLogger(__name__)

FILTER_FIELDS = ("year", "month", "country", "city", "hospital")
FIELD_COLUMNS = {"country": "Country", "city": "City", "hospital": "Hospital"}
FILTER_LABELS = {
    "year": "Year",
    "month": "Month",
    "country": "Country",
    "city": "City",
    "hospital": "Hospital",
}


@dataclass(frozen=True)
class FilterCriteria:
    """Sparse filter criteria; a field left as None imposes no constraint."""

    year: int | None = None
    month: int | None = None
    country: str | None = None
    city: str | None = None
    hospital: str | None = None

    def __post_init__(self):
        # form widgets hand over "" for "no selection" and strings for numbers
        for name in FILTER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, str) and value.strip() == "":
                value = None
            if value is not None and name in ("year", "month"):
                value = int(value)
            object.__setattr__(self, name, value)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "FilterCriteria":
        return cls(**{name: values.get(name) for name in FILTER_FIELDS})

    def active(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in FILTER_FIELDS if getattr(self, name) is not None}

    def cache_key(self) -> tuple:
        return tuple(sorted(self.active().items()))

    def without(self, name: str) -> "FilterCriteria":
        if name not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter field: {name}")
        return replace(self, **{name: None})


def _as_criteria(criteria: FilterCriteria | Mapping[str, Any] | None) -> FilterCriteria:
    if criteria is None:
        return FilterCriteria()
    if isinstance(criteria, FilterCriteria):
        return criteria
    return FilterCriteria.from_dict(criteria)


# ------------------------------
# PREDICATES
# ------------------------------
def build_predicate(criteria: FilterCriteria | Mapping[str, Any] | None) -> Callable[[Mapping], bool]:
    """Return ``record -> bool`` that ANDs an equality check per present criterion."""
    criteria = _as_criteria(criteria)
    checks: list[Callable[[Mapping], bool]] = []

    if criteria.year is not None or criteria.month is not None:

        def check_admission(record: Mapping) -> bool:
            admitted = to_date(record.get("Date of Admission"))
            if admitted is None:
                return False
            if criteria.year is not None and admitted.year != criteria.year:
                return False
            if criteria.month is not None and admitted.month != criteria.month:
                return False
            return True

        checks.append(check_admission)

    for name, column in FIELD_COLUMNS.items():
        expected = getattr(criteria, name)
        if expected is not None:
            checks.append(lambda record, column=column, expected=expected: record.get(column) == expected)

    def predicate(record: Mapping) -> bool:
        return all(check(record) for check in checks)

    return predicate


def filter_frame(frame: pd.DataFrame, criteria: FilterCriteria | Mapping[str, Any] | None) -> pd.DataFrame:
    """Vectorized equivalent of ``build_predicate``; unfiltered input is returned as is."""
    criteria = _as_criteria(criteria)
    if not criteria.active():
        return frame

    mask = pd.Series(True, index=frame.index)
    if criteria.year is not None or criteria.month is not None:
        if "Date of Admission" in frame.columns:
            admitted = pd.to_datetime(frame["Date of Admission"], errors="coerce")
        else:
            admitted = pd.Series(pd.NaT, index=frame.index)
        if criteria.year is not None:
            mask &= admitted.dt.year.eq(criteria.year)
        if criteria.month is not None:
            mask &= admitted.dt.month.eq(criteria.month)

    for name, column in FIELD_COLUMNS.items():
        expected = getattr(criteria, name)
        if expected is None:
            continue
        if column in frame.columns:
            mask &= frame[column].eq(expected)
        else:
            mask &= False

    return frame.loc[mask]


def filter_options(frame: pd.DataFrame) -> dict[str, list]:
    """Selectable values for each filter field."""
    if "Date of Admission" in frame.columns:
        admitted = pd.to_datetime(frame["Date of Admission"], errors="coerce").dropna()
    else:
        admitted = pd.Series([], dtype="datetime64[ns]")

    def unique(column: str) -> list:
        if column not in frame.columns:
            return []
        return sorted(frame[column].dropna().astype(str).unique())

    return {
        "year": sorted(int(year) for year in admitted.dt.year.unique()),
        "month": sorted(int(month) for month in admitted.dt.month.unique()),
        "country": unique("Country"),
        "city": unique("City"),
        "hospital": unique("Hospital"),
    }


# ------------------------------
# AGGREGATION CACHE
# ------------------------------
def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, dict):
        return tuple(sorted((key, _freeze(item)) for key, item in value.items()))
    return value


class AggregationCache:
    """Aggregation results keyed by (criteria, aggregation, arguments).

    Bound to one frame at a time; binding a different frame object drops every
    entry.
    """

    def __init__(self):
        self._source: pd.DataFrame | None = None
        self._entries: dict[tuple, Any] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def bind(self, frame: pd.DataFrame) -> None:
        if frame is not self._source:
            self._source = frame
            self._entries.clear()

    def get_or_compute(self, criteria_key: tuple, compute: Callable, *args, **kwargs) -> Any:
        if self._source is None:
            raise RuntimeError("AggregationCache is not bound to a frame")
        key = (criteria_key, compute.__module__, compute.__qualname__, _freeze(args), _freeze(kwargs))
        if key in self._entries:
            self.hits += 1
            return self._entries[key]

        self.misses += 1
        result = compute(self._source, *args, **kwargs)
        self._entries[key] = result
        return result


# ------------------------------
# FILTER MANAGER
# ------------------------------
@dataclass(frozen=True)
class FilterStats:
    total: int
    filtered: int
    active_filter_count: int
    filters: dict[str, Any] = field(default_factory=dict)


class FilterManager:
    """Holds the active filter criteria and the filtered dataset."""

    def __init__(self):
        self.active_filters = FilterCriteria()
        self.original_data: pd.DataFrame | None = None
        self.filtered_data: pd.DataFrame | None = None
        self.on_filter_change: Callable[[pd.DataFrame], None] | None = None
        self.cache = AggregationCache()
        self._busy = False

    def init(
        self,
        data: pd.DataFrame,
        on_filter_change: Callable[[pd.DataFrame], None] | None = None,
    ) -> None:
        self.original_data = data
        self.filtered_data = data
        self.on_filter_change = on_filter_change
        self.active_filters = FilterCriteria()
        self.cache.bind(data)
        logger.info(f"FilterManager initialized with {len(data)} records")

    def set_filter(self, criteria: FilterCriteria | Mapping[str, Any] | None) -> bool:
        return self._apply(_as_criteria(criteria))

    def remove_filter(self, name: str) -> bool:
        return self._apply(self.active_filters.without(name))

    def clear_filter(self) -> bool:
        return self._apply(FilterCriteria())

    def _apply(self, criteria: FilterCriteria) -> bool:
        if self.original_data is None:
            raise RuntimeError("FilterManager.init() must be called before filtering")
        if self._busy:
            logger.warning("Filter change rejected: a previous change is still being applied")
            return False

        self._busy = True
        try:
            self.active_filters = criteria
            self.filtered_data = filter_frame(self.original_data, criteria)
            self.cache.bind(self.filtered_data)
            logger.info(
                f"Filters {criteria.active() or 'cleared'}: "
                f"{len(self.filtered_data)} of {len(self.original_data)} records"
            )
            if self.on_filter_change is not None:
                self.on_filter_change(self.filtered_data)
        finally:
            self._busy = False
        return True

    def get_filtered_data(self) -> pd.DataFrame:
        if self.filtered_data is not None:
            return self.filtered_data
        return self.original_data

    def get_stats(self) -> FilterStats:
        active = self.active_filters.active()
        return FilterStats(
            total=0 if self.original_data is None else len(self.original_data),
            filtered=0 if self.get_filtered_data() is None else len(self.get_filtered_data()),
            active_filter_count=len(active),
            filters=active,
        )

    def aggregate(self, compute: Callable, *args, **kwargs) -> Any:
        """Run ``compute(filtered_frame, *args, **kwargs)`` through the cache."""
        return self.cache.get_or_compute(self.active_filters.cache_key(), compute, *args, **kwargs)
