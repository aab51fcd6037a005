"""
Start/end resolution and duration math for calendar events.

Events carry either a timed instant or an all-day date for each endpoint.
Everything that looks at those raw values goes through resolve_instant().
"""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class TimedInstant:
    value: datetime


@dataclass(frozen=True)
class AllDayDate:
    value: date


@dataclass(frozen=True)
class Unresolvable:
    raw: Any = None


Instant = TimedInstant | AllDayDate | Unresolvable


def resolve_instant(value: Any) -> Instant:
    """
    Classify a raw start/end value.

    Accepts ISO strings ("2024-01-01T09:00:00Z" or "2024-01-01"), provider
    style mappings ({"dateTime": ...} / {"date": ...}) and date/datetime
    objects. Anything else is Unresolvable.
    """
    if isinstance(value, Mapping):
        value = value.get("dateTime") or value.get("date")

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return TimedInstant(value)
    if isinstance(value, date):
        return AllDayDate(value)
    if not isinstance(value, str) or not value.strip():
        return Unresolvable(value)

    text = value.strip()
    try:
        if _DATE_ONLY.match(text):
            return AllDayDate(date.fromisoformat(text))
        return TimedInstant(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return Unresolvable(value)


def instant_datetime(instant: Instant) -> datetime | None:
    """Datetime for a resolved instant; all-day dates start at midnight."""
    if isinstance(instant, TimedInstant):
        return instant.value
    if isinstance(instant, AllDayDate):
        return datetime.combine(instant.value, datetime.min.time())
    return None


def _align(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    # A naive endpoint takes the offset of the aware one
    if start.tzinfo is None and end.tzinfo is not None:
        start = start.replace(tzinfo=end.tzinfo)
    elif end.tzinfo is None and start.tzinfo is not None:
        end = end.replace(tzinfo=start.tzinfo)
    return start, end


def event_start(event: Mapping) -> datetime | None:
    if not isinstance(event, Mapping):
        return None
    return instant_datetime(resolve_instant(event.get("start")))


def event_duration_hours(event: Mapping) -> float:
    """
    Elapsed hours between an event's start and end.

    Returns 0.0 when either endpoint is missing or unparseable, when the end
    is not after the start, or when the result is not finite.
    """
    if not isinstance(event, Mapping):
        return 0.0

    start = instant_datetime(resolve_instant(event.get("start")))
    end = instant_datetime(resolve_instant(event.get("end")))
    if start is None or end is None:
        return 0.0

    start, end = _align(start, end)
    hours = (end - start).total_seconds() / 3600
    if not math.isfinite(hours) or hours <= 0:
        return 0.0
    return hours


def week_start(instant: datetime | date) -> date:
    """Monday of the ISO week containing the instant, in its own offset."""
    day = instant.date() if isinstance(instant, datetime) else instant
    return day - timedelta(days=day.weekday())
