"""
Error kinds raised while resolving and applying an RSVP.

Every error derives from RsvpError so callers can report a failure
per event identifier without catching unrelated exceptions.
"""

from typing import Optional


class RsvpError(Exception):
    """Base class for RSVP errors."""
    pass


class DecodeError(RsvpError):
    """Identifier looked like base64 but did not decode to UTF-8 text."""
    pass


class MalformedIdentifierError(RsvpError):
    """Decoded identifier payload has no event ID."""
    pass


class NoMatchFoundError(RsvpError):
    """No event ID could be extracted from an invitation email."""
    pass


class AttendeeNotFoundError(RsvpError):
    """Neither a self attendee nor the hinted email is on the guest list."""

    def __init__(self, event_id: str, email_hint: Optional[str] = None):
        self.event_id = event_id
        self.email_hint = email_hint
        who = f"'{email_hint}' or self" if email_hint else "self"
        super().__init__(f"unable to find {who} in attendees of event '{event_id}'")


class EventFormatError(RsvpError):
    """Event could not be rendered as a summary."""
    pass


class AuthError(RsvpError):
    """OAuth secret, token cache, or authorization flow failure."""
    pass


class RemoteApiError(RsvpError):
    """Calendar API request failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class RemoteTimeoutError(RemoteApiError):
    """Calendar API request timed out."""
    pass


def format_error_chain(error: BaseException) -> str:
    """
    Render an exception and its causes as one line.

    Example: "error: unable to get event 'abc': HTTP 404: Not Found"
    """
    parts = []
    current: Optional[BaseException] = error
    while current is not None:
        text = str(current)
        if text:
            parts.append(text)
        current = current.__cause__
    return ": ".join(["error"] + parts)
