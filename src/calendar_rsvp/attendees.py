"""
Self attendee resolution and RSVP patch construction.
"""

import logging
from typing import Optional, Sequence

from calendar_rsvp.errors import AttendeeNotFoundError
from calendar_rsvp.models import Attendee, EventPatch, ResponseStatus


logger = logging.getLogger(__name__)


def find_attendee(
    attendees: Sequence[Attendee],
    email_hint: Optional[str] = None,
) -> Optional[Attendee]:
    """
    Find the attendee to respond for.

    An exact (case-sensitive) match on email_hint wins. Without a hint,
    or when nobody matches it, the first attendee flagged as self is used.
    """
    if email_hint:
        for attendee in attendees:
            if attendee.email == email_hint:
                return attendee

    for attendee in attendees:
        if attendee.is_self:
            return attendee

    return None


def resolve_patch(
    attendees: Sequence[Attendee],
    email_hint: Optional[str],
    response: ResponseStatus,
    event_id: str = "",
    allow_anonymous: bool = False,
) -> EventPatch:
    """
    Build the patch that sets our response status on an event.

    Args:
        attendees: Guest list of the fetched event, in API order
        email_hint: Attendee email decoded from the eid, if any
        response: Response to set
        event_id: Event ID, used in error messages
        allow_anonymous: Return a patch without an email instead of
            failing when no attendee is found

    Raises:
        AttendeeNotFoundError: No self or hinted attendee and
            allow_anonymous is False
    """
    attendee = find_attendee(attendees, email_hint)

    if attendee is None:
        if not allow_anonymous:
            raise AttendeeNotFoundError(event_id, email_hint)

        logger.warning(
            f"No self attendee in event '{event_id}', sending response without an email"
        )
        return EventPatch(response_status=response)

    return EventPatch(response_status=response, email=attendee.email)
