"""
Calendar discovery and event fetching from MS Graph.
"""

from datetime import datetime

from msgraph.generated.users.item.calendars.item.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder,
)

from core.config import ConfigurationError
from core.graph_client import get_graph_client
from models.events import CalendarEvent, CalendarInfo

PAGE_SIZE = 250
UTC_ZONE_NAMES = {"UTC", "ETC/UTC", "COORDINATED UNIVERSAL TIME"}


async def list_calendars() -> list[CalendarInfo]:
    """
    Scan all org users and list their calendars.

    Returns:
        List of dicts with user_id, user_email, calendar_id, calendar_name
    """
    graph = get_graph_client()
    calendars_found: list[CalendarInfo] = []

    users_response = await graph.users.get()
    users = users_response.value if users_response.value else []

    print(f"Scanning {len(users)} users for calendars...")

    for user in users:
        try:
            calendars_response = await graph.users.by_user_id(user.id).calendars.get()
            calendars = calendars_response.value if calendars_response.value else []

            for calendar in calendars:
                calendars_found.append(
                    {
                        "user_id": user.id,
                        "user_email": user.user_principal_name,
                        "calendar_id": calendar.id,
                        "calendar_name": calendar.name or "",
                    }
                )
        except Exception as e:
            # Users without mailboxes (service accounts, admin accounts, etc.)
            error_code = getattr(getattr(e, "error", None), "code", None)
            if error_code == "MailboxNotEnabledForRESTAPI":
                continue
            print(f"  Error scanning {user.user_principal_name}: {e}")

    return calendars_found


def match_calendar(calendars: list[CalendarInfo], calendar_id_or_name: str) -> CalendarInfo:
    """
    Pick one calendar by exact ID, else by name/ID substring (case-insensitive).

    Raises:
        ConfigurationError: if nothing matches or the match is ambiguous
    """
    for calendar in calendars:
        if calendar["calendar_id"] == calendar_id_or_name:
            return calendar

    needle = calendar_id_or_name.lower()
    matches = [
        c for c in calendars
        if needle in (c["calendar_name"] or "").lower() or needle in c["calendar_id"].lower()
    ]

    if not matches:
        raise ConfigurationError(
            f'No calendars matched "{calendar_id_or_name}". '
            "Check the calendar name or ID visible in your account."
        )
    if len(matches) > 1:
        listing = "\n".join(f"- {m['calendar_name']} ({m['calendar_id']})" for m in matches)
        raise ConfigurationError(
            f'Ambiguous calendar match for "{calendar_id_or_name}". '
            f"Specify an exact calendar ID.\n{listing}"
        )
    return matches[0]


async def resolve_calendar(calendar_id_or_name: str) -> CalendarInfo:
    calendars = await list_calendars()
    return match_calendar(calendars, calendar_id_or_name)


async def fetch_calendar_events(
    user_id: str,
    calendar_id: str,
    window_start: datetime,
    window_end: datetime,
    owner_email: str | None = None,
) -> tuple[list[CalendarEvent], int]:
    """
    Fetch every event occurrence in the window.

    Uses the calendar view so recurring events come back as individual
    occurrences, and follows @odata.nextLink until exhausted.

    Returns:
        Tuple of (normalized events, pages fetched)
    """
    graph = get_graph_client()
    builder = graph.users.by_user_id(user_id).calendars.by_calendar_id(calendar_id).calendar_view

    query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
        start_date_time=window_start.isoformat(),
        end_date_time=window_end.isoformat(),
        top=PAGE_SIZE,
    )
    config = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetRequestConfiguration(
        query_parameters=query_params
    )

    events: list[CalendarEvent] = []
    pages = 0
    response = await builder.get(request_configuration=config)
    while response is not None:
        pages += 1
        for event in response.value or []:
            events.append(normalize_event(event, owner_email))
        if not response.odata_next_link:
            break
        response = await builder.with_url(response.odata_next_link).get()

    return events, pages


def _graph_datetime(value, all_day: bool) -> str | None:
    """
    Graph DateTimeTimeZone -> ISO string.

    All-day events keep only the date. UTC times get a trailing Z; other
    zones are left as wall-clock time.
    """
    if value is None or not value.date_time:
        return None
    text = value.date_time
    if all_day:
        return text[:10]
    # Graph sends 7 fractional digits
    text = text.split(".")[0]
    if (value.time_zone or "").upper() in UTC_ZONE_NAMES:
        text += "Z"
    return text


def _isoformat(value) -> str | None:
    if value is None:
        return None
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


def normalize_event(event, owner_email: str | None = None) -> CalendarEvent:
    """Parse MS Graph event into our snapshot format."""
    all_day = bool(event.is_all_day)
    owner = (owner_email or "").lower()

    attendees = []
    for attendee in event.attendees or []:
        email = attendee.email_address.address if attendee.email_address else None
        response = attendee.status.response if attendee.status else None
        attendees.append(
            {
                "email": email,
                "response_status": getattr(response, "value", response),
                "self": bool(owner and email and email.lower() == owner),
            }
        )

    return {
        "id": event.id,
        "status": "cancelled" if event.is_cancelled else "confirmed",
        "summary": event.subject,
        "description": event.body_preview,
        "location": event.location.display_name if event.location else None,
        "start": _graph_datetime(event.start, all_day),
        "end": _graph_datetime(event.end, all_day),
        "created": _isoformat(event.created_date_time),
        "updated": _isoformat(event.last_modified_date_time),
        "online_meeting_url": event.online_meeting.join_url if event.online_meeting else None,
        "attendees": attendees,
        "recurring_event_id": event.series_master_id,
        "ical_uid": event.i_cal_u_id,
        "raw": {
            "change_key": event.change_key,
            "web_link": event.web_link,
            "show_as": getattr(event.show_as, "value", event.show_as),
            "type": getattr(event.type, "value", event.type),
        },
    }
