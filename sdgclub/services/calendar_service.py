"""
iCalendar (.ics) generation for event invites
"""

import re
import time
from datetime import datetime, timedelta
from typing import Optional

from sdgclub.models import Event

PRODID = "-//ASAC SDG Advocacy Club//Events//EN"
DEFAULT_DURATION = timedelta(hours=2)


def format_ics_datetime(value: datetime) -> str:
    return value.strftime("%Y%m%dT%H%M%S")


def escape_text(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace(";", "\\;")
        .replace("\n", "\\n")
    )


def generate_ics(
    title: str,
    start: datetime,
    end: Optional[datetime] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
    uid: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Build a single-event calendar file; a missing end means start + 2 hours"""
    end = end or start + DEFAULT_DURATION
    now = now or datetime.utcnow()

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"DTSTART:{format_ics_datetime(start)}",
        f"DTEND:{format_ics_datetime(end)}",
        f"SUMMARY:{escape_text(title)}",
    ]
    if description:
        lines.append(f"DESCRIPTION:{escape_text(description)}")
    if location:
        lines.append(f"LOCATION:{escape_text(location)}")
    lines += [
        f"UID:{uid or int(time.time() * 1000)}@asac-events",
        f"DTSTAMP:{format_ics_datetime(now)}",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines)


def event_ics(event: Event) -> str:
    return generate_ics(
        title=event.title,
        start=event.start_date,
        end=event.end_date,
        description=event.description,
        location=event.location,
        uid=event.id,
    )


def ics_filename(title: str) -> str:
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', title)}.ics"
