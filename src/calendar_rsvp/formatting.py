"""
Human readable event summary.

Example:

    Team sync

    Weekly status meeting
    When         Fri May 21, 2021 14:00 – 14:30 +0200
    Joining info https://meet.google.com/abc-defg-hij
    Who
           Yes   Rory Mercury
           No    sam@example.com
"""

import sys
from datetime import datetime
from typing import Optional, TextIO

from calendar_rsvp.errors import EventFormatError


NAME_INDENT = " " * 13

STATUS_LABELS = {
    "needsAction": NAME_INDENT,
    "declined": "       No    ",
    "tentative": "       Maybe ",
    "accepted": "       Yes   ",
}


def parse_rfc3339(value: str, field: str) -> datetime:
    """Parse an RFC3339 timestamp, keeping its UTC offset."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise EventFormatError(f"can't parse {field} time") from e


def _format_when(event: dict) -> Optional[str]:
    start_time = (event.get("start") or {}).get("dateTime")
    if not start_time:
        return None

    start = parse_rfc3339(start_time, "start")
    line = f"When         {start:%a %b} {start.day:>2}, {start:%Y %H:%M}"

    end_time = (event.get("end") or {}).get("dateTime")
    if end_time:
        end = parse_rfc3339(end_time, "end")
        line += f" – {end:%H:%M}"

    return f"{line} {start:%z}"


def _joining_uri(event: dict) -> Optional[str]:
    conference_data = event.get("conferenceData") or {}
    for entry_point in conference_data.get("entryPoints") or []:
        if entry_point.get("uri"):
            return entry_point["uri"]
    return None


def format_event(event: dict) -> str:
    """
    Render an event resource for display.

    Attendees with an unrecognized response status are left out.

    Raises:
        EventFormatError: Start or end time is not RFC3339
    """
    lines = []

    if event.get("summary") is not None:
        lines.append(event["summary"])
        lines.append("")

    if event.get("description") is not None:
        lines.append(event["description"])

    when = _format_when(event)
    if when:
        lines.append(when)

    uri = _joining_uri(event)
    if uri:
        lines.append(f"Joining info {uri}")

    attendees = event.get("attendees")
    if attendees is not None:
        lines.append("Who")

        for attendee in attendees:
            name = attendee.get("displayName") or attendee.get("email")
            if not name:
                continue

            label = STATUS_LABELS.get(attendee.get("responseStatus"))
            if label is None:
                continue

            lines.append(f"{label}{name}")

    if not lines:
        return ""

    return "\n".join(lines) + "\n"


def print_event(event: dict, out: TextIO = sys.stdout) -> None:
    """Print a formatted event."""
    out.write(format_event(event))
