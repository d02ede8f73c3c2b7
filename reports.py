from datetime import datetime
from io import BytesIO

import pandas as pd
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def kpi_rows(overview: dict, financial: dict) -> list[tuple[str, str]]:
    """(metric, formatted value) pairs shared by the Excel and PDF exports."""
    return [
        ("Total Patients", f"{overview['total_patients']:,}"),
        ("Unique Patients", f"{financial['unique_patients']:,}"),
        ("Total Billing", f"${overview['total_billing']:,.2f}"),
        ("Total Revenue (normal bills)", f"${financial['total_revenue']:,.2f}"),
        ("Total Refunds", f"${financial['total_refunds']:,.2f}"),
        ("Average Cost per Stay", f"${financial['average_cost']:,.2f}"),
        ("Average Age (years)", f"{overview['average_age']:.1f}"),
        ("Average Length of Stay (days)", f"{overview['average_length_of_stay']:.1f}"),
    ]


def build_kpi_excel(overview: dict, financial: dict, filters: dict) -> BytesIO:
    """Create an Excel file with the KPI summary and the active filters."""
    rows = kpi_rows(overview, financial)
    summary = pd.DataFrame(rows, columns=["Metric", "Value"])
    active = pd.DataFrame(
        [(name.title(), value) for name, value in filters.items()], columns=["Filter", "Value"]
    )

    out = BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        summary.to_excel(writer, index=False, sheet_name="KPI Summary")
        active.to_excel(writer, index=False, sheet_name="Filters")
    out.seek(0)
    return out


def build_pdf(overview: dict, financial: dict, filters: dict) -> BytesIO:
    """Create a one-page PDF KPI report."""
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    width, height = letter

    c.setFont("Helvetica-Bold", 16)
    c.drawString(40, height - 40, "Healthcare Analytics Report")
    c.setFont("Helvetica", 10)
    c.drawString(40, height - 60, f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")

    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, height - 90, "Key Performance Indicators")
    c.setFont("Helvetica", 10)
    y = height - 110
    for metric, value in kpi_rows(overview, financial):
        c.drawString(60, y, f"{metric}: {value}")
        y -= 15

    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, y - 15, "Active Filters")
    c.setFont("Helvetica", 10)
    y -= 35
    if not filters:
        c.drawString(60, y, "None (all records)")
    for name, value in filters.items():
        c.drawString(60, y, f"{name.title()}: {value}")
        y -= 15

    c.showPage()
    c.save()
    buf.seek(0)
    return buf
