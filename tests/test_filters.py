"""Tests for filter criteria, predicates, the aggregation cache and FilterManager."""

import pandas as pd
import pytest

from aggregations import MEDICAL_CONDITION, count_by, overview_kpis
from filters import (
    AggregationCache,
    FilterCriteria,
    FilterManager,
    build_predicate,
    filter_frame,
    filter_options,
)
from preprocessing import preprocess


@pytest.fixture
def cleaned(raw_records):
    return preprocess(raw_records).cleaned


@pytest.fixture
def manager(cleaned):
    manager = FilterManager()
    manager.init(cleaned)
    return manager


class TestFilterCriteria:
    def test_blank_values_are_absent(self):
        criteria = FilterCriteria.from_dict({"year": "", "country": "  ", "city": "Paris"})
        assert criteria.active() == {"city": "Paris"}

    def test_year_and_month_are_numbers(self):
        criteria = FilterCriteria(year="2024", month="3")
        assert (criteria.year, criteria.month) == (2024, 3)

    def test_cache_key_is_order_independent(self):
        first = FilterCriteria.from_dict({"country": "France", "year": 2023})
        second = FilterCriteria(year=2023, country="France")
        assert first.cache_key() == second.cache_key()

    def test_without(self):
        criteria = FilterCriteria(year=2023, hospital="Kim Inc")
        assert criteria.without("year").active() == {"hospital": "Kim Inc"}
        with pytest.raises(ValueError):
            criteria.without("ward")


class TestBuildPredicate:
    @pytest.fixture
    def record(self):
        return {
            "Date of Admission": "2024-03-05",
            "Country": "France",
            "City": "Paris",
            "Hospital": "Kim Inc",
        }

    def test_no_criteria_matches_everything(self, record):
        assert build_predicate({})(record)
        assert build_predicate(None)({})

    def test_year_and_month(self, record):
        assert build_predicate({"year": 2024, "month": 3})(record)
        assert not build_predicate({"year": 2024, "month": 4})(record)
        assert not build_predicate({"year": 2023})(record)

    def test_missing_date_never_matches_date_criteria(self, record):
        record["Date of Admission"] = "not a date"
        assert not build_predicate({"year": 2024})(record)
        assert build_predicate({"country": "France"})(record)

    def test_criteria_are_anded(self, record):
        assert build_predicate({"country": "France", "city": "Paris"})(record)
        assert not build_predicate({"country": "France", "city": "Lyon"})(record)

    def test_exact_equality(self, record):
        assert not build_predicate({"hospital": "kim inc"})(record)


class TestFilterFrame:
    def test_matches_predicate(self, cleaned):
        criteria = FilterCriteria(country="Germany")
        predicate = build_predicate(criteria)
        expected = [predicate(record) for record in cleaned.to_dict("records")]
        assert filter_frame(cleaned, criteria).index.tolist() == [
            index for index, keep in zip(cleaned.index, expected) if keep
        ]

    def test_year(self, cleaned):
        result = filter_frame(cleaned, {"year": 2023})
        assert list(result["Name"]) == ["Leslie Terry"]

    def test_unfiltered_returns_same_object(self, cleaned):
        assert filter_frame(cleaned, FilterCriteria()) is cleaned

    def test_missing_column_matches_nothing(self):
        frame = pd.DataFrame({"Name": ["A"]})
        assert filter_frame(frame, {"city": "Paris"}).empty


class TestFilterOptions:
    def test_options(self, cleaned):
        options = filter_options(cleaned)
        assert options["year"] == [2020, 2022, 2023, 2024]
        assert options["country"] == ["France", "Germany"]
        assert options["hospital"] == ["Cook Plc", "Kim Inc", "Sons And Miller"]

    def test_empty_frame(self):
        options = filter_options(pd.DataFrame())
        assert options == {"year": [], "month": [], "country": [], "city": [], "hospital": []}


class TestAggregationCache:
    def test_unbound(self):
        with pytest.raises(RuntimeError):
            AggregationCache().get_or_compute((), overview_kpis)

    def test_hits_and_misses(self, cleaned):
        cache = AggregationCache()
        cache.bind(cleaned)
        first = cache.get_or_compute((), count_by, MEDICAL_CONDITION)
        second = cache.get_or_compute((), count_by, MEDICAL_CONDITION)
        assert first is second
        assert (cache.hits, cache.misses) == (1, 1)

    def test_arguments_are_part_of_the_key(self, cleaned):
        cache = AggregationCache()
        cache.bind(cleaned)
        cache.get_or_compute((), count_by, "Gender")
        cache.get_or_compute((), count_by, "Blood Type")
        assert len(cache) == 2

    def test_rebinding_clears(self, cleaned):
        cache = AggregationCache()
        cache.bind(cleaned)
        cache.get_or_compute((), overview_kpis)
        cache.bind(cleaned)
        assert len(cache) == 1
        cache.bind(cleaned.copy())
        assert len(cache) == 0


class TestFilterManager:
    def test_requires_init(self):
        with pytest.raises(RuntimeError):
            FilterManager().set_filter({"year": 2023})

    def test_initial_state(self, manager, cleaned):
        assert manager.get_filtered_data() is cleaned
        stats = manager.get_stats()
        assert (stats.total, stats.filtered, stats.active_filter_count) == (4, 4, 0)

    def test_set_filter_replaces_filtered_data(self, manager):
        assert manager.set_filter({"country": "Germany"})
        assert manager.get_stats().filtered == 3
        assert manager.set_filter({"hospital": "Kim Inc"})
        stats = manager.get_stats()
        assert stats.filtered == 1
        assert stats.filters == {"hospital": "Kim Inc"}

    def test_remove_and_clear(self, manager, cleaned):
        manager.set_filter(FilterCriteria(year=2024, country="Germany"))
        manager.remove_filter("year")
        assert manager.active_filters.active() == {"country": "Germany"}
        manager.clear_filter()
        assert manager.get_filtered_data() is cleaned
        assert manager.get_stats().active_filter_count == 0

    def test_callback_receives_filtered_data(self, cleaned):
        received = []
        manager = FilterManager()
        manager.init(cleaned, on_filter_change=received.append)
        manager.set_filter({"country": "France"})
        assert len(received) == 1
        assert list(received[0]["Name"]) == ["Leslie Terry"]

    def test_reentrant_change_is_rejected(self, cleaned):
        manager = FilterManager()
        nested = []
        manager.init(cleaned, on_filter_change=lambda _: nested.append(manager.clear_filter()))
        assert manager.set_filter({"country": "France"})
        assert nested == [False]
        assert manager.active_filters.active() == {"country": "France"}
        # the busy flag is released afterwards
        manager.on_filter_change = None
        assert manager.clear_filter()

    def test_aggregate_uses_filtered_data(self, manager):
        assert manager.aggregate(overview_kpis)["total_patients"] == 4
        manager.set_filter({"country": "Germany"})
        assert manager.aggregate(overview_kpis)["total_patients"] == 3
        result = manager.aggregate(count_by, MEDICAL_CONDITION).set_index("medical_condition")
        assert result.loc["Obesity", "percentage"] == pytest.approx(33.3)

    def test_cache_invalidated_on_filter_change(self, manager):
        manager.aggregate(overview_kpis)
        manager.aggregate(overview_kpis)
        assert manager.cache.hits == 1
        manager.set_filter({"country": "Germany"})
        assert len(manager.cache) == 0
