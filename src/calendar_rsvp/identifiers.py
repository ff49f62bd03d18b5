"""
Event identifier decoding.

Accepts either a plain Google Calendar event ID or an "eid" as found in
invitation links: base64 of "<event_id> <attendee_email>".
"""

import base64
import binascii
import logging
import re

from calendar_rsvp.errors import DecodeError, MalformedIdentifierError
from calendar_rsvp.models import EventIdentifier


logger = logging.getLogger(__name__)


_BASE64_RE = re.compile(r"[A-Za-z0-9+/]*={0,2}")

# Event IDs use base32hex characters (a-v, 0-9), 5-1024 long
_PLAIN_EVENT_ID_RE = re.compile(r"[a-v0-9]{5,1024}")


def _pad(token: str) -> str:
    """Restore base64 padding stripped from eids in invitation links."""
    if "=" in token:
        return token
    return token + "=" * (-len(token) % 4)


def _is_base64(token: str) -> bool:
    if not _BASE64_RE.fullmatch(token):
        return False
    if "=" in token:
        return len(token) % 4 == 0
    return len(token) % 4 != 1


def decode(token: str) -> EventIdentifier:
    """
    Resolve a command line token to an event identifier.

    Args:
        token: Plain event ID or base64 eid

    Returns:
        EventIdentifier with the event ID and, for eids, the attendee
        email the invitation was addressed to.

    Raises:
        DecodeError: Token is base64 but not UTF-8 text and not a plain ID
        MalformedIdentifierError: Decoded payload has no event ID
    """
    if not _is_base64(token):
        return EventIdentifier(event_id=token)

    try:
        raw = base64.b64decode(_pad(token), validate=True)
    except binascii.Error:
        return EventIdentifier(event_id=token)

    if not raw:
        raise MalformedIdentifierError(f"unable to extract event ID from '{token}'")

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        if _PLAIN_EVENT_ID_RE.fullmatch(token):
            return EventIdentifier(event_id=token)
        raise DecodeError(f"can't parse decoded base64 of '{token}' to UTF-8") from e

    if not text.isprintable():
        if _PLAIN_EVENT_ID_RE.fullmatch(token):
            return EventIdentifier(event_id=token)
        raise DecodeError(f"decoded base64 of '{token}' is not printable text")

    fields = text.split(" ")
    event_id = fields[0]
    if not event_id:
        raise MalformedIdentifierError(f"unable to extract event ID from '{text}'")

    email_hint = fields[1] if len(fields) > 1 and fields[1] else None

    logger.debug(f"Decoded eid '{token}' to event '{event_id}' ({email_hint or 'no email'})")

    return EventIdentifier(event_id=event_id, email_hint=email_hint)
