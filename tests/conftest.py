"""Shared test fixtures for the dashboard tests."""

import pytest


def make_raw(**overrides):
    """One raw CSV row; every value is a string like ``read_records`` returns."""
    record = {
        "Name": "Bobby Jackson",
        "Age": "30",
        "Gender": "Male",
        "Blood Type": "B-",
        "Medical Condition": "Cancer",
        "Date of Admission": "2024-01-31",
        "Doctor": "Matthew Smith",
        "Hospital": "Sons And Miller",
        "Insurance Provider": "Blue Cross",
        "Billing Amount": "18856.28",
        "Room Number": "328",
        "Admission Type": "Urgent",
        "Discharge Date": "2024-02-02",
        "Medication": "Paracetamol",
        "Test Results": "Normal",
        "City": "Berlin",
        "Country": "Germany",
        "Latitude": "52.52",
        "Longitude": "13.405",
    }
    record.update(overrides)
    return record


@pytest.fixture
def raw_records():
    """A small raw dataset with one messy duplicate and a few bad values."""
    return [
        make_raw(),
        make_raw(
            Name="LESLIE TERRY",
            Age="62",
            Gender="Male",
            **{
                "Blood Type": "A+",
                "Medical Condition": "Obesity",
                "Date of Admission": "2023-08-20",
                "Discharge Date": "2023-08-26",
                "Billing Amount": "33643.33",
                "Admission Type": "Emergency",
                "Test Results": "Inconclusive",
                "Hospital": "Kim Inc",
                "City": "Paris",
                "Country": "France",
                "Latitude": "48.85",
                "Longitude": "2.35",
            },
        ),
        make_raw(
            Name="danny smith",
            Age="76",
            Gender="Female",
            **{
                "Blood Type": "A-",
                "Medical Condition": "Obesity",
                "Date of Admission": "2022-09-22",
                "Discharge Date": "2022-10-07",
                "Billing Amount": "-502.50",
                "Insurance Provider": "Aetna",
                "Admission Type": "Emergency",
                "Test Results": "Normal",
                "Hospital": "Cook Plc",
            },
        ),
        # Same record as the first one, only formatted differently
        make_raw(Name="  bobby   JACKSON ", Hospital="sons and  miller"),
        make_raw(
            Name="Andrew Watts",
            Age="not a number",
            Gender="",
            **{
                "Blood Type": "O+",
                "Medical Condition": "",
                "Date of Admission": "2020-11-18",
                "Discharge Date": "2020-11-18",
                "Billing Amount": "",
                "Admission Type": "Elective",
                "Test Results": "Abnormal",
            },
        ),
    ]


@pytest.fixture
def csv_path(tmp_path, raw_records):
    """The raw records written as a CSV file."""
    columns = list(raw_records[0])
    lines = [",".join(columns)]
    for record in raw_records:
        lines.append(",".join(f'"{record[column]}"' for column in columns))
    path = tmp_path / "patients.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
