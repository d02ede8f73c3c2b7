"""Tests for the synthetic hospital geocoding utility."""

import random

import pandas as pd
import pytest

from geo_enrichment import (
    CITIES,
    KM_PER_DEGREE,
    RURAL_OFFSET_KM,
    City,
    assign_city,
    enrich_frame,
    hospital_location,
    jitter,
    main,
    stable_hash,
)
from loader import read_records


class TestAssignment:
    def test_stable_hash_is_deterministic(self):
        assert stable_hash("Kim Inc") == stable_hash("Kim Inc")
        assert stable_hash("Kim Inc") != stable_hash("Cook Plc")

    def test_assign_city_from_table(self):
        assert assign_city("Kim Inc") in CITIES

    def test_single_city_table(self):
        only = City("Leipzig", "Germany", 51.3397, 12.3731, 5.0)
        assert assign_city("anything", [only]) is only

    def test_location_uses_normalized_name(self):
        assert hospital_location("  kim   INC ") == hospital_location("Kim Inc")

    def test_location_near_city(self):
        location = hospital_location("Sons And Miller")
        city = next(c for c in CITIES if c.city == location["City"])
        assert location["Country"] == city.country
        max_offset = RURAL_OFFSET_KM / KM_PER_DEGREE
        assert abs(location["Latitude"] - city.lat) <= max_offset

    def test_jitter_is_reproducible(self):
        assert jitter(50.0, 10.0, random.Random(7)) == jitter(50.0, 10.0, random.Random(7))


class TestEnrichFrame:
    def test_adds_location_columns(self):
        frame = pd.DataFrame(
            {
                "Hospital": ["Kim Inc", "kim inc", "Cook Plc"],
                "Date of Admission": ["2024-01-31 00:00:00", "", "2023/08/20"],
            }
        )
        enriched = enrich_frame(frame)
        assert {"City", "Country", "Latitude", "Longitude"} <= set(enriched.columns)
        assert enriched.loc[0, "City"] == enriched.loc[1, "City"]
        assert enriched.loc[0, "Latitude"] == enriched.loc[1, "Latitude"]
        assert list(enriched["Date of Admission"]) == ["2024-01-31", "", "2023-08-20"]
        # input untouched
        assert "City" not in frame.columns

    def test_missing_hospital_column(self):
        enriched = enrich_frame(pd.DataFrame({"Name": ["Ada"]}))
        assert enriched.loc[0, "City"] in {city.city for city in CITIES}


class TestMain:
    def test_writes_output(self, csv_path, tmp_path):
        output = tmp_path / "out" / "enriched.csv"
        assert main([str(csv_path), str(output)]) == 0
        enriched = read_records(output)
        assert len(enriched) == 5
        assert all(enriched["City"] != "")

    def test_is_reproducible(self, csv_path, tmp_path):
        first, second = tmp_path / "a.csv", tmp_path / "b.csv"
        main([str(csv_path), str(first)])
        main([str(csv_path), str(second)])
        assert first.read_text(encoding="utf-8") == second.read_text(encoding="utf-8")

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.csv"), str(tmp_path / "out.csv")]) == 1
        assert "Dataset not found" in capsys.readouterr().err

    def test_requires_arguments(self):
        with pytest.raises(SystemExit):
            main([])
