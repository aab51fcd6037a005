#!/usr/bin/env python3
"""
Create the weekly client hours report from the latest calendar audit snapshot.

Reads .data/calendar-audit/<calendar-id>/<YYYY-MM-DD>/events.json, classifies
events with clients.json and writes CSV and JSON (optionally Excel) reports.

Usage:
    uv run python src/scripts/create_hours_report.py --calendar-id <id>
    uv run python src/scripts/create_hours_report.py --calendar-id <id> --date 2025-11-07 --xlsx-out hours.xlsx
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.aggregation import aggregate_weekly_hours
from core.config import (
    AUDIT_DIR,
    CLIENTS_PATH,
    DEFAULT_CSV_OUT,
    DEFAULT_JSON_OUT,
    PROJECT_ROOT,
    resolve_calendar_arg,
)
from core.taxonomy import load_client_rules
from services.audit import find_snapshot, load_snapshot_events
from services.reports import create_excel_report, write_csv_report, write_json_report


def resolve_output(path: Path) -> Path:
    return path if path.is_absolute() else PROJECT_ROOT / path


def write_reports(
    calendar_id: str,
    date_dir: str | None,
    csv_out: Path,
    json_out: Path,
    xlsx_out: Path | None = None,
    audit_dir: Path = AUDIT_DIR,
    clients_path: Path = CLIENTS_PATH,
) -> int:
    """
    Build and write the hours report for one calendar snapshot.

    Returns:
        Number of (week, client) rows written
    """
    # 1. Taxonomy first so a missing clients.json fails before any work
    rules = load_client_rules(clients_path)

    # 2. Load snapshot events
    snapshot = find_snapshot(calendar_id, date_dir, audit_dir)
    events = load_snapshot_events(snapshot)
    print(f"Loaded {len(events)} events from {snapshot}")

    # 3. Aggregate
    report = aggregate_weekly_hours(events, rules)

    # 4. Write outputs
    rows = write_csv_report(report, csv_out)
    write_json_report(report, json_out)
    if xlsx_out:
        create_excel_report(report, xlsx_out)

    print(f"Wrote {rows} weekly groups from {snapshot.parent.name}")
    print(f"   CSV:  {csv_out}")
    print(f"   JSON: {json_out}")
    return rows


def main(args: argparse.Namespace):
    calendar_id = resolve_calendar_arg(args.calendar_id)
    write_reports(
        calendar_id,
        args.date,
        resolve_output(args.out),
        resolve_output(args.json_out),
        resolve_output(args.xlsx_out) if args.xlsx_out else None,
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate weekly client hours report")
    parser.add_argument(
        "--calendar-id",
        help="Calendar ID under .data/calendar-audit (env: CALENDAR_AUDIT_CALENDAR)",
    )
    parser.add_argument(
        "--date",
        help="Snapshot date directory (YYYY-MM-DD). Defaults to the latest available.",
    )
    parser.add_argument("--out", type=Path, default=DEFAULT_CSV_OUT, help="CSV output path")
    parser.add_argument("--json-out", type=Path, default=DEFAULT_JSON_OUT, help="JSON output path")
    parser.add_argument("--xlsx-out", type=Path, help="Optional Excel output path")
    args = parser.parse_args()

    try:
        main(args)
    except Exception as e:
        print(f"hours report failed: {e}")
        sys.exit(1)
