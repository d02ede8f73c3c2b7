"""Tests for reading the patient records CSV."""

import pytest

from loader import DataLoadError, read_records
from preprocessing import preprocess


class TestReadRecords:
    def test_reads_values_as_text(self, csv_path):
        frame = read_records(csv_path)
        assert len(frame) == 5
        assert frame.loc[0, "Age"] == "30"
        assert frame.loc[4, "Gender"] == ""
        assert frame.loc[3, "Name"] == "  bobby   JACKSON "

    def test_feeds_preprocessing(self, csv_path):
        result = preprocess(read_records(csv_path))
        assert len(result.cleaned) == 4
        assert result.duplicates_removed == 1

    def test_header_names_are_stripped(self, tmp_path):
        path = tmp_path / "padded.csv"
        path.write_text(" Name , Age \nAda,36\n", encoding="utf-8")
        assert list(read_records(path).columns) == ["Name", "Age"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError, match="not found"):
            read_records(tmp_path / "nope.csv")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(DataLoadError, match="empty"):
            read_records(path)

    def test_no_header_row(self, tmp_path):
        path = tmp_path / "headless.csv"
        path.write_text("Bobby Jackson,30,Male\nLeslie Terry,62,Male\n", encoding="utf-8")
        with pytest.raises(DataLoadError, match="expected columns"):
            read_records(path)

    def test_unknown_columns_pass_through(self, tmp_path):
        path = tmp_path / "extra.csv"
        path.write_text("Name,Ward\nAda,7B\n", encoding="utf-8")
        frame = read_records(path)
        assert frame.loc[0, "Ward"] == "7B"
