"""
Data models for calendar events and audit snapshots.

Currently using TypedDict for type hints on event dictionaries.
Snapshots are stored as JSON, so everything here stays JSON-shaped.
"""

from typing import Any, TypedDict


class CalendarInfo(TypedDict):
    """Calendar discovery result."""
    user_id: str
    user_email: str
    calendar_id: str
    calendar_name: str


class Attendee(TypedDict):
    email: str | None
    response_status: str | None
    self: bool


class CalendarEvent(TypedDict, total=False):
    """
    Normalized calendar event as stored in an audit snapshot.

    ``start`` and ``end`` hold a date string (``2024-01-01``) for all-day events
    and an ISO instant (``2024-01-01T09:00:00Z``) otherwise.
    """
    id: str | None
    status: str | None
    summary: str | None
    description: str | None
    location: str | None
    start: str | None
    end: str | None
    created: str | None
    updated: str | None
    online_meeting_url: str | None
    attendees: list[Attendee]
    recurring_event_id: str | None
    ical_uid: str | None
    raw: dict[str, Any]


class SnapshotMetadata(TypedDict):
    calendarId: str
    calendarName: str
    fetchedAt: str
    windowStart: str
    windowEnd: str
    eventCount: int
    pagesFetched: int


class AuditSnapshot(TypedDict):
    """Contents of one ``events.json`` file."""
    metadata: SnapshotMetadata
    events: list[CalendarEvent]
