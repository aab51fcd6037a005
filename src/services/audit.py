"""
Audit snapshot storage.

Each audit run is saved as
    .data/calendar-audit/<calendar-id>/<YYYY-MM-DD>/events.json
"""

import json
import re
from datetime import date, datetime, time, timedelta
from pathlib import Path

from core.config import AUDIT_DIR, SNAPSHOT_FILENAME, ConfigurationError
from models.events import AuditSnapshot, CalendarEvent

DATE_DIR_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def audit_window(days: int, now: datetime) -> tuple[datetime, datetime]:
    """Start of the day `days` ago through the end of today, in now's timezone."""
    window_start = datetime.combine((now - timedelta(days=days)).date(), time.min, tzinfo=now.tzinfo)
    window_end = datetime.combine(now.date(), time.max, tzinfo=now.tzinfo)
    return window_start, window_end


def build_snapshot(
    calendar_id: str,
    calendar_name: str,
    events: list[CalendarEvent],
    window_start: datetime,
    window_end: datetime,
    fetched_at: datetime,
    pages: int,
) -> AuditSnapshot:
    return {
        "metadata": {
            "calendarId": calendar_id,
            "calendarName": calendar_name,
            "fetchedAt": fetched_at.isoformat(timespec="seconds"),
            "windowStart": window_start.isoformat(timespec="seconds"),
            "windowEnd": window_end.isoformat(timespec="seconds"),
            "eventCount": len(events),
            "pagesFetched": pages,
        },
        "events": events,
    }


def snapshot_path(out_dir: Path, calendar_id: str, day: date) -> Path:
    return out_dir / calendar_id / day.isoformat() / SNAPSHOT_FILENAME


def save_snapshot(payload: AuditSnapshot, out_dir: Path, calendar_id: str, day: date) -> Path:
    """Write the snapshot JSON, creating directories as needed. Returns the file path."""
    path = snapshot_path(out_dir, calendar_id, day)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def pick_latest_date_dir(calendar_dir: Path) -> str | None:
    """Name of the newest YYYY-MM-DD directory, or None if there are none."""
    date_dirs = sorted(
        (entry.name for entry in calendar_dir.iterdir()
         if entry.is_dir() and DATE_DIR_PATTERN.match(entry.name)),
        reverse=True,
    )
    return date_dirs[0] if date_dirs else None


def find_snapshot(calendar_id: str, date_dir: str | None = None, audit_dir: Path = AUDIT_DIR) -> Path:
    """
    Locate the snapshot file for a calendar.

    Uses the latest dated directory unless `date_dir` is given.

    Raises:
        ConfigurationError: if there is no audit data for the calendar
    """
    calendar_dir = audit_dir / calendar_id
    if not calendar_dir.exists():
        raise ConfigurationError(f"No audit data found for calendar: {calendar_id} at {calendar_dir}")

    date_dir = date_dir or pick_latest_date_dir(calendar_dir)
    if not date_dir:
        raise ConfigurationError(f"No dated audit directories found in {calendar_dir}")

    path = calendar_dir / date_dir / SNAPSHOT_FILENAME
    if not path.exists():
        raise ConfigurationError(f"Snapshot not found: {path}")
    return path


def parse_snapshot_events(payload) -> list[CalendarEvent]:
    """
    Events list from a decoded snapshot.

    Raises:
        ValueError: if the payload is not a snapshot object
    """
    if not isinstance(payload, dict):
        raise ValueError("Snapshot must be a JSON object with an 'events' list")
    events = payload.get("events") or []
    if not isinstance(events, list):
        raise ValueError("Snapshot 'events' must be a list")
    return events


def load_snapshot_events(path: Path) -> list[CalendarEvent]:
    return parse_snapshot_events(json.loads(path.read_text(encoding="utf-8")))
