"""
Data model for RSVP operations.

Handles:
- ResponseStatus with its Google Calendar API string
- EventIdentifier (event ID + optional attendee email hint)
- Attendee as read from an event resource
- EventPatch, the single-attendee partial update body
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResponseStatus(Enum):
    """RSVP response status."""

    ACCEPTED = "accepted"
    DECLINED = "declined"
    TENTATIVE = "tentative"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EventIdentifier:
    event_id: str
    email_hint: Optional[str] = None


@dataclass(frozen=True)
class Attendee:
    email: Optional[str] = None
    display_name: Optional[str] = None
    is_self: Optional[bool] = None
    response_status: Optional[str] = None

    @classmethod
    def from_api(cls, resource: dict) -> "Attendee":
        """Build from an attendee entry of a Calendar API event resource."""
        return cls(
            email=resource.get("email"),
            display_name=resource.get("displayName"),
            is_self=resource.get("self"),
            response_status=resource.get("responseStatus"),
        )


@dataclass(frozen=True)
class EventPatch:
    """
    Minimal event update: exactly one attendee with a new response status.

    Other attendees are never included in the body.
    """

    response_status: ResponseStatus
    email: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.email is None

    def to_body(self) -> dict:
        """Request body for events().patch()."""
        attendee = {"responseStatus": str(self.response_status)}
        if self.email is not None:
            attendee["email"] = self.email
        return {"attendees": [attendee]}
