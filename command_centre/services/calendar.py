"""
Google Calendar bookings via a service account.
"""

import json
import re
from datetime import datetime, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo

from command_centre.config import settings
from command_centre.core.logging import get_logger
from command_centre.core.models import BookingEvent, EventType

log = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]

SOURCE_TYPES = {
    "photography": EventType.PHOTOGRAPHY,
    "meetings": EventType.MEETING,
    "travel": EventType.TRAVEL,
    "partners": EventType.PERSONAL,
    "leisure": EventType.PERSONAL,
    "family": EventType.PERSONAL,
}

TRAVEL_WORDS = ("flight", "accommodation", "stay at", "hotel")
RETAINER_WORDS = ("padharo", "popado", "retainer")


def infer_event_type(source: str, summary: str) -> EventType:
    """Booking type from the calendar it lives in, else from summary keywords."""
    if source in SOURCE_TYPES:
        return SOURCE_TYPES[source]
    lower = summary.lower()
    if any(word in lower for word in TRAVEL_WORDS):
        return EventType.TRAVEL
    if any(word in lower for word in RETAINER_WORDS):
        return EventType.RETAINER
    return EventType.PERSONAL


def infer_client(source: str, summary: str) -> str:
    """Friendly client label for the booking list."""
    if source == "photography":
        return summary
    if source == "meetings":
        return "Meeting"
    if source == "travel":
        return "Travel"
    if any(word in summary.lower() for word in TRAVEL_WORDS):
        return "Travel"
    return summary


def sort_and_dedup(events: list[BookingEvent]) -> list[BookingEvent]:
    """Order by date then time (timed first), then drop same title on same date."""
    ordered = sorted(events, key=lambda e: (e.date, e.time is None, e.time or ""))

    seen: set[str] = set()
    deduped = []
    for event in ordered:
        key = f"{re.sub(r'[^a-z0-9]', '', event.title.lower())}-{event.date}"
        if key in seen:
            continue
        seen.add(key)
        deduped.append(event)
    return deduped


class CalendarClient:
    """Reads upcoming events from the configured calendars."""

    def __init__(
        self,
        service_account_key: str | None = None,
        calendar_ids: dict[str, str] | None = None,
        service: Any = None,
    ):
        self.service_account_key = (
            service_account_key if service_account_key is not None else settings.google_service_account_key
        )
        self.calendar_ids = calendar_ids if calendar_ids is not None else settings.calendar_ids
        self._service = service
        self._tz = ZoneInfo(settings.display_timezone)

    @property
    def enabled(self) -> bool:
        return bool(self._service is not None or self.service_account_key)

    def _get_service(self):
        """Get or create the Calendar API service."""
        if self._service is None:
            from google.oauth2 import service_account
            from googleapiclient.discovery import build

            sa_info = json.loads(self.service_account_key)
            credentials = service_account.Credentials.from_service_account_info(sa_info, scopes=SCOPES)
            self._service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        return self._service

    def _local_time(self, value: str | None) -> str | None:
        if not value:
            return None
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return dt.astimezone(self._tz).strftime("%H:%M")

    def _to_booking(self, source: str, event: dict[str, Any]) -> BookingEvent | None:
        summary = event.get("summary")
        if not summary or event.get("status") == "cancelled":
            return None
        if event.get("eventType") == "birthday":
            return None

        start = event.get("start") or {}
        end = event.get("end") or {}
        start_date = start.get("date") or (start.get("dateTime") or "").split("T")[0]
        end_date = end.get("date") or (end.get("dateTime") or "").split("T")[0]

        return BookingEvent(
            id=event.get("id") or f"{source}-{start_date}",
            title=summary,
            client=infer_client(source, summary),
            date=start_date,
            end_date=end_date,
            time=self._local_time(start.get("dateTime")),
            end_time=self._local_time(end.get("dateTime")),
            location=event.get("location") or None,
            description=event.get("description") or None,
            type=infer_event_type(source, summary),
            calendar_source=source,
            all_day=bool(start.get("date")),
        )

    def list_upcoming(self, now: datetime | None = None, days: int = 90) -> list[BookingEvent]:
        """
        List bookings from now until ``days`` ahead across all calendars.

        A calendar that cannot be read is skipped.
        """
        now = now or datetime.now(timezone.utc)
        time_min = now.isoformat()
        time_max = (now + timedelta(days=days)).isoformat()
        service = self._get_service()

        bookings: list[BookingEvent] = []
        for source, calendar_id in self.calendar_ids.items():
            try:
                response = (
                    service.events()
                    .list(
                        calendarId=calendar_id,
                        timeMin=time_min,
                        timeMax=time_max,
                        maxResults=50,
                        singleEvents=True,
                        orderBy="startTime",
                    )
                    .execute()
                )
            except Exception as e:
                log.error("calendar_fetch_error", source=source, error=str(e))
                continue

            for event in response.get("items") or []:
                booking = self._to_booking(source, event)
                if booking:
                    bookings.append(booking)

        return sort_and_dedup(bookings)
