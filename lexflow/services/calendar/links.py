"""Pre-filled Google Calendar "create event" links.

Used where the API integration is not connected: the user opens the link
and saves the event by hand.
"""

from __future__ import annotations

from datetime import date, timedelta
from urllib.parse import urlencode

TEMPLATE_URL = "https://calendar.google.com/calendar/render"


def google_calendar_url(
    title: str,
    day: str,
    *,
    description: str | None = None,
    location: str | None = None,
) -> str:
    """Build a template URL for an all-day event on ``day`` (``YYYY-MM-DD``)."""
    start = date.fromisoformat(day)
    end = start + timedelta(days=1)
    params = {
        "action": "TEMPLATE",
        "text": title,
        "dates": f"{start:%Y%m%d}/{end:%Y%m%d}",
    }
    if description:
        params["details"] = description
    if location:
        params["location"] = location
    return f"{TEMPLATE_URL}?{urlencode(params)}"
