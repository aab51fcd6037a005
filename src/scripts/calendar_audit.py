#!/usr/bin/env python3
"""
Fetch the last N days of events from a calendar and store them as an audit snapshot.

Snapshots land in .data/calendar-audit/<calendar-id>/<YYYY-MM-DD>/events.json.

Usage:
    uv run python src/scripts/calendar_audit.py --calendar "Consulting" --days 90
    uv run python src/scripts/calendar_audit.py --list-calendars
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import (
    AUDIT_DIR,
    DEFAULT_AUDIT_DAYS,
    PROJECT_ROOT,
    resolve_audit_days,
    resolve_calendar_arg,
)
from services.audit import audit_window, build_snapshot, save_snapshot
from services.calendar import fetch_calendar_events, list_calendars, resolve_calendar


async def print_calendars():
    """List all users and their calendars."""
    calendars = await list_calendars()
    print(f"\nFound {len(calendars)} calendars\n")
    print("=" * 80)
    for cal in calendars:
        print(f"{cal['calendar_name']}  ({cal['user_email']})")
        print(f"  ID: {cal['calendar_id']}")
    print("-" * 80)


async def run_audit(calendar_arg: str, days: int, out_dir: Path) -> Path:
    now = datetime.now(timezone.utc)
    window_start, window_end = audit_window(days, now)
    print(f"Auditing {window_start.date()} to {window_end.date()} ({days} days)")

    # 1. Resolve calendar by ID or name
    calendar = await resolve_calendar(calendar_arg)

    # 2. Fetch every occurrence in the window
    events, pages = await fetch_calendar_events(
        calendar["user_id"],
        calendar["calendar_id"],
        window_start,
        window_end,
        owner_email=calendar["user_email"],
    )

    # 3. Save snapshot
    payload = build_snapshot(
        calendar_id=calendar["calendar_id"],
        calendar_name=calendar["calendar_name"],
        events=events,
        window_start=window_start,
        window_end=window_end,
        fetched_at=now,
        pages=pages,
    )
    out_path = save_snapshot(payload, out_dir, calendar["calendar_id"], now.date())

    print(f'Fetched {len(events)} events from "{calendar["calendar_name"]}" ({calendar["calendar_id"]}).')
    print(f"Saved to {out_path}")
    return out_path


async def main(args: argparse.Namespace):
    if args.list_calendars:
        await print_calendars()
        return

    calendar_arg = resolve_calendar_arg(args.calendar)
    days = resolve_audit_days(args.days)
    out_dir = args.out_dir if args.out_dir.is_absolute() else PROJECT_ROOT / args.out_dir
    await run_audit(calendar_arg, days, out_dir)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Snapshot recent calendar events for auditing")
    parser.add_argument(
        "--calendar",
        help="Calendar ID or name substring to audit (env: CALENDAR_AUDIT_CALENDAR)",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=DEFAULT_AUDIT_DAYS,
        help=f"Number of days to look back from today (env: CALENDAR_AUDIT_DAYS; default {DEFAULT_AUDIT_DAYS})",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=AUDIT_DIR,
        help="Output directory for audit data",
    )
    parser.add_argument(
        "--list-calendars",
        action="store_true",
        help="List calendars visible to the app and exit",
    )
    args = parser.parse_args()

    try:
        asyncio.run(main(args))
    except Exception as e:
        print(f"calendar audit failed: {e}")
        sys.exit(1)
