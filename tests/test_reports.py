"""Tests for the KPI exports."""

import pandas as pd

from aggregations import financial_kpis, overview_kpis
from preprocessing import preprocess
from reports import build_kpi_excel, build_pdf, kpi_rows


def _kpis(raw_records):
    cleaned = preprocess(raw_records).cleaned
    return overview_kpis(cleaned), financial_kpis(cleaned)


def test_kpi_rows(raw_records):
    rows = dict(kpi_rows(*_kpis(raw_records)))
    assert rows["Total Patients"] == "4"
    assert rows["Total Refunds"] == "$-502.50"
    assert rows["Average Length of Stay (days)"] == "7.7"


def test_excel_has_summary_and_filters(raw_records):
    workbook = pd.read_excel(
        build_kpi_excel(*_kpis(raw_records), {"country": "Germany"}), sheet_name=None
    )
    assert set(workbook) == {"KPI Summary", "Filters"}
    assert workbook["KPI Summary"].iloc[0].tolist() == ["Total Patients", "4"]
    assert workbook["Filters"].to_dict("records") == [{"Filter": "Country", "Value": "Germany"}]


def test_pdf(raw_records):
    data = build_pdf(*_kpis(raw_records), {}).getvalue()
    assert data.startswith(b"%PDF")
