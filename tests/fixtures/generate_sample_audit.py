#!/usr/bin/env python3
"""
Generate a synthetic calendar audit snapshot for local report runs.

Writes .data/calendar-audit/sample-calendar/<today>/events.json with a few
weeks of client meetings, internal chatter, all-day blocks and a handful of
malformed events (missing end, end before start).

Usage:
    uv run python tests/fixtures/generate_sample_audit.py --weeks 6
"""

import argparse
import random
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

from faker import Faker

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from core.config import AUDIT_DIR
from services.audit import audit_window, build_snapshot, save_snapshot

fake = Faker()

CALENDAR_ID = "sample-calendar"
LOCAL_TZ = ZoneInfo("America/New_York")
UTC = ZoneInfo("UTC")

# Titles per client, matching clients.example.json
CLIENT_TITLES = {
    "Acme": ["Acme sync", "ACME check-in", "Acme roadmap review", "Wile E. planning"],
    "Beta Labs": ["Beta Labs standup", "beta release triage", "Beta Labs retro"],
    "Globex": ["Globex onboarding", "Globex data migration", "Hank / Globex 1:1"],
}

INTERNAL_TITLES = ["Focus time", "Lunch", "Inbox zero", "Team sync", "Hiring loop"]

DURATIONS = [0.25, 0.5, 0.5, 1, 1, 1.5, 2]


def to_utc_string(local_dt: datetime) -> str:
    return local_dt.replace(tzinfo=LOCAL_TZ).astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def make_event(summary: str | None, start: str | None, end: str | None) -> dict:
    return {
        "id": fake.uuid4(),
        "status": "confirmed",
        "summary": summary,
        "description": fake.sentence(nb_words=8) if random.random() < 0.3 else None,
        "location": fake.city() if random.random() < 0.2 else None,
        "start": start,
        "end": end,
        "created": None,
        "updated": None,
        "online_meeting_url": None,
        "attendees": [],
        "recurring_event_id": None,
        "ical_uid": None,
        "raw": {},
    }


def generate_day(day: date) -> list[dict]:
    """Timed events from 9am local until the day fills up."""
    events = []
    current_hour = 9.0
    while current_hour < 17:
        duration = random.choice(DURATIONS)
        if random.random() < 0.6:
            summary = random.choice(CLIENT_TITLES[random.choice(list(CLIENT_TITLES))])
        else:
            summary = random.choice(INTERNAL_TITLES)

        hour = int(current_hour)
        minute = int((current_hour - hour) * 60)
        start_local = datetime(day.year, day.month, day.day, hour, minute)
        end_local = start_local + timedelta(hours=duration)
        events.append(make_event(summary, to_utc_string(start_local), to_utc_string(end_local)))
        current_hour += duration + random.choice([0, 0, 0.5])
    return events


def generate_events(weeks: int, today: date) -> list[dict]:
    events = []
    first_day = today - timedelta(weeks=weeks)
    day = first_day
    while day <= today:
        if day.weekday() < 5:
            events.extend(generate_day(day))
        day += timedelta(days=1)

    # All-day blocks
    for _ in range(max(1, weeks // 2)):
        off_day = first_day + timedelta(days=random.randrange(weeks * 7))
        events.append(
            make_event("Out of office", off_day.isoformat(), (off_day + timedelta(days=1)).isoformat())
        )

    # Malformed events that the report must skip
    events.append(make_event("Acme sync (no end)", to_utc_string(datetime.combine(today, datetime.min.time())), None))
    events.append(make_event(None, "not-a-date", "also-not-a-date"))
    start = datetime.combine(today, datetime.min.time()).replace(hour=12)
    events.append(make_event("Backwards", to_utc_string(start), to_utc_string(start - timedelta(hours=1))))

    events.sort(key=lambda e: e["start"] or "")
    return events


def main():
    parser = argparse.ArgumentParser(description="Generate a synthetic audit snapshot")
    parser.add_argument("--weeks", type=int, default=6, help="Weeks of history to generate")
    parser.add_argument("--seed", type=int, help="Random seed for repeatable output")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)
        Faker.seed(args.seed)

    now = datetime.now(timezone.utc)
    window_start, window_end = audit_window(args.weeks * 7, now)
    events = generate_events(args.weeks, now.date())

    payload = build_snapshot(
        calendar_id=CALENDAR_ID,
        calendar_name="Sample Calendar",
        events=events,
        window_start=window_start,
        window_end=window_end,
        fetched_at=now,
        pages=1,
    )
    path = save_snapshot(payload, AUDIT_DIR, CALENDAR_ID, now.date())

    print(f"Generated {len(events)} events")
    print(f"Snapshot saved to: {path}")


if __name__ == "__main__":
    main()
