"""
Upcoming bookings endpoint.

GET /api/bookings: next three months from the configured Google calendars.
"""

from fastapi import APIRouter, Depends

from command_centre.core.logging import get_logger
from command_centre.services.calendar import CalendarClient

log = get_logger(__name__)

router = APIRouter(prefix="/api")


def get_calendar_client() -> CalendarClient:
    return CalendarClient()


@router.get("/bookings")
def list_bookings(client: CalendarClient = Depends(get_calendar_client)):
    """Bookings sorted by date; ``live: false`` when calendars are not configured."""
    if not client.enabled:
        log.info("bookings_skipped", reason="service account not configured")
        return {"events": [], "live": False}

    try:
        events = client.list_upcoming()
    except Exception as e:
        log.error("bookings_error", error=str(e))
        return {"events": [], "live": False, "error": "Failed to fetch calendar data"}

    return {"events": [e.to_dict() for e in events], "live": True}
