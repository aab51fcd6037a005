"""
Report output: CSV rows, JSON document and Excel workbook.
"""

import csv
import io
import json
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.config import CSV_HEADERS, SUMMARY_HEADERS
from models.reports import ClientBucket, Report

HOURS_NUMBER_FORMAT = "0.00"


def format_hours(hours: float) -> str:
    """Hours rounded to two decimals for display."""
    return f"{hours:.2f}"


def report_rows(report: Report) -> list[tuple[str, str, str, int]]:
    """One (week_start, client, hours, count) row per client per week, newest week first."""
    return [
        (week.week_start.isoformat(), bucket.client, format_hours(bucket.hours), bucket.count)
        for week in report
        for bucket in week.clients
    ]


def _bucket_document(bucket: ClientBucket) -> dict[str, Any]:
    return {
        "client": bucket.client,
        "weekStart": bucket.week_start.isoformat(),
        "hours": bucket.hours,
        "count": bucket.count,
        "summaries": [
            {"summary": s.summary, "hours": s.hours, "count": s.count}
            for s in bucket.summaries
        ],
    }


def report_document(report: Report) -> dict[str, Any]:
    """Nested JSON-ready structure, hours at full precision."""
    return {
        "weeks": [
            {
                "weekStart": week.week_start.isoformat(),
                "clients": [_bucket_document(bucket) for bucket in week.clients],
            }
            for week in report
        ]
    }


def format_csv(report: Report) -> str:
    """CSV text with header; fields containing , " or newline are quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(report_rows(report))
    return buffer.getvalue()


def write_csv_report(report: Report, output_path: Path) -> int:
    """Write the CSV report. Returns the number of data rows."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_csv(report), encoding="utf-8")
    return sum(len(week.clients) for week in report)


def write_json_report(report: Report, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report_document(report), indent=2), encoding="utf-8")


# =============================================================================
# EXCEL REPORT GENERATION
# =============================================================================


def _write_header(ws, headers: list[str]):
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def write_excel_weekly_sheet(ws, report: Report):
    """
    Write the Weekly Hours sheet.

    Columns: week_start, client, hours, count. Hours are stored as numbers
    and displayed with two decimals.
    """
    _write_header(ws, CSV_HEADERS)

    row_idx = 2
    for week in report:
        for bucket in week.clients:
            ws.cell(row=row_idx, column=1, value=week.week_start.isoformat())
            ws.cell(row=row_idx, column=2, value=bucket.client)
            hours_cell = ws.cell(row=row_idx, column=3, value=bucket.hours)
            hours_cell.number_format = HOURS_NUMBER_FORMAT
            ws.cell(row=row_idx, column=4, value=bucket.count)
            row_idx += 1


def write_excel_summaries_sheet(ws, report: Report):
    """Write the Summaries sheet: one row per event title within each client and week."""
    _write_header(ws, SUMMARY_HEADERS)

    row_idx = 2
    for week in report:
        for bucket in week.clients:
            for summary in bucket.summaries:
                ws.cell(row=row_idx, column=1, value=week.week_start.isoformat())
                ws.cell(row=row_idx, column=2, value=bucket.client)
                ws.cell(row=row_idx, column=3, value=summary.summary)
                hours_cell = ws.cell(row=row_idx, column=4, value=summary.hours)
                hours_cell.number_format = HOURS_NUMBER_FORMAT
                ws.cell(row=row_idx, column=5, value=summary.count)
                row_idx += 1

    # Widen the summary column so titles stay readable
    ws.column_dimensions[get_column_letter(3)].width = 48


def create_excel_report(report: Report, output_path: Path):
    """Create an Excel workbook with Weekly Hours and Summaries sheets."""
    wb = Workbook()

    ws_weekly = wb.active
    ws_weekly.title = "Weekly Hours"
    write_excel_weekly_sheet(ws_weekly, report)

    ws_summaries = wb.create_sheet(title="Summaries")
    write_excel_summaries_sheet(ws_summaries, report)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
