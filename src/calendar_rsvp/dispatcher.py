"""
RSVP dispatch: decode → fetch → resolve attendee → patch.

Each identifier is processed on its own. A failure is recorded on that
identifier's result and processing moves on to the next one.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, TextIO

from calendar_rsvp.attendees import resolve_patch
from calendar_rsvp.errors import RsvpError
from calendar_rsvp.formatting import print_event
from calendar_rsvp.identifiers import decode
from calendar_rsvp.models import Attendee, ResponseStatus


logger = logging.getLogger(__name__)


class EventsGateway(Protocol):
    def get_event(self, event_id: str) -> dict: ...

    def patch_event(self, event_id: str, body: dict) -> dict: ...


@dataclass
class RsvpResult:
    token: str
    event: Optional[dict] = None
    error: Optional[RsvpError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def rsvp(
    events: EventsGateway,
    token: str,
    response: ResponseStatus,
    allow_anonymous: bool = False,
) -> dict:
    """
    RSVP to the event referenced by token.

    Args:
        events: Calendar events client
        token: Plain event ID or base64 eid
        response: Response to set
        allow_anonymous: Patch even if no self attendee is found

    Returns:
        Updated event resource.
    """
    identifier = decode(token)

    event = events.get_event(identifier.event_id)
    attendees = [Attendee.from_api(a) for a in event.get("attendees") or []]

    patch = resolve_patch(
        attendees,
        identifier.email_hint,
        response,
        event_id=identifier.event_id,
        allow_anonymous=allow_anonymous,
    )

    updated = events.patch_event(identifier.event_id, patch.to_body())

    logger.info(
        f"Responded '{response}' to event '{identifier.event_id}'"
        f" as {patch.email or 'unknown attendee'}"
    )

    return updated


def rsvp_all(
    events: EventsGateway,
    tokens: Iterable[str],
    response: ResponseStatus,
    verbose: bool = False,
    out: TextIO = sys.stdout,
    allow_anonymous: bool = False,
) -> list[RsvpResult]:
    """
    RSVP to every token, in order.

    When verbose, each updated event is printed to out as it completes.

    Returns:
        One RsvpResult per token, in input order.
    """
    results = []

    for token in tokens:
        result = RsvpResult(token=token)

        try:
            result.event = rsvp(events, token, response, allow_anonymous=allow_anonymous)

            if verbose:
                print_event(result.event, out)
        except RsvpError as e:
            logger.warning(f"RSVP failed for '{token}': {e}")
            result.error = e

        results.append(result)

    return results
