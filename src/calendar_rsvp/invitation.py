"""
Event ID extraction from Google Calendar invitation emails.

Invitation emails are multipart/mixed with a multipart/alternative
part whose text/plain body links to the event with "eid=<token>&".
"""

import email
import logging
import re
from email import policy
from typing import BinaryIO

from calendar_rsvp.errors import NoMatchFoundError


logger = logging.getLogger(__name__)


EID_RE = re.compile(r"eid=([^&]+)&")


def extract_identifier(raw_email: bytes) -> str:
    """
    Extract the eid token from a raw invitation email.

    Only the first text/plain part directly inside a top-level
    multipart/alternative part is searched.

    Returns:
        The eid token, still base64 encoded.

    Raises:
        NoMatchFoundError: No such part, or no eid link in it
    """
    message = email.message_from_bytes(raw_email, policy=policy.default)

    for part in message.iter_parts():
        if part.get_content_type() != "multipart/alternative":
            continue

        for subpart in part.iter_parts():
            if subpart.get_content_type() != "text/plain":
                continue

            try:
                body = subpart.get_content()
            except (LookupError, ValueError) as e:
                raise NoMatchFoundError("unable to get email body") from e

            match = EID_RE.search(body)
            if match is None:
                raise NoMatchFoundError("no matches for event ID")

            eid = match.group(1)
            if not eid:
                raise NoMatchFoundError("event ID not found")

            logger.debug(f"Found eid '{eid}' in invitation email")
            return eid

    raise NoMatchFoundError("unable to extract event ID from email")


def read_invitation(stream: BinaryIO) -> str:
    """Read a raw email from a binary stream (stdin) and extract its eid."""
    try:
        raw_email = stream.read()
    except OSError as e:
        raise NoMatchFoundError("unable to read standard input") from e

    return extract_identifier(raw_email)
