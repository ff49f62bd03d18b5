"""
Google Calendar RSVP CLI entry point.

Usage:
    google-calendar-rsvp -y EVENT_ID...            # Accept
    google-calendar-rsvp -n EVENT_ID...            # Decline
    google-calendar-rsvp -m EVENT_ID...            # Maybe
    google-calendar-rsvp -y --email < invite.eml   # Accept the event in an invitation email
    google-calendar-rsvp -y -v EVENT_ID            # Accept and print the event
"""

import argparse
import logging
import sys
from typing import BinaryIO, Optional, Sequence, TextIO

from pydantic import ValidationError

from calendar_rsvp import __version__
from calendar_rsvp.dispatcher import EventsGateway, rsvp_all
from calendar_rsvp.errors import RsvpError, format_error_chain
from calendar_rsvp.invitation import read_invitation
from calendar_rsvp.models import ResponseStatus
from calendar_rsvp.settings import Settings


# sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_SOFTWARE = 70


class UsageError(Exception):
    pass


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad arguments with EX_USAGE."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"error: {message}\n")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="google-calendar-rsvp",
        description="RSVP to Google Calendar events",
        allow_abbrev=False,
    )

    parser.add_argument(
        "-y", "--yes",
        action="store_const",
        dest="response",
        const=ResponseStatus.ACCEPTED,
        help='rsvp with "yes"'
    )
    parser.add_argument(
        "-n", "--no",
        action="store_const",
        dest="response",
        const=ResponseStatus.DECLINED,
        help='rsvp with "no"'
    )
    parser.add_argument(
        "-m", "--maybe",
        action="store_const",
        dest="response",
        const=ResponseStatus.TENTATIVE,
        help='rsvp with "maybe"'
    )
    parser.add_argument(
        "--email",
        action="store_true",
        help="read a Google Calendar invitation email from stdin"
    )
    parser.add_argument(
        "--allow-anonymous",
        action="store_true",
        dest="allow_anonymous",
        help="respond even when you are not found among the attendees"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="print the event after responding"
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=__version__,
        help="show the program version"
    )
    parser.add_argument(
        "event_ids",
        nargs="*",
        metavar="event_id",
        help="event ID or base64 eid"
    )

    return parser


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(
    argv: Optional[Sequence[str]] = None,
    settings: Optional[Settings] = None,
    events: Optional[EventsGateway] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """
    Run the CLI and return the exit status.

    settings, events, stdin and stdout default to the real ones.
    """
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    if args.response is None:
        print("error: missing required action argument: --yes | --no | --maybe", file=sys.stderr)
        return EX_USAGE

    try:
        if settings is None:
            settings = Settings()
    except ValidationError as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return EX_SOFTWARE

    configure_logging(settings)

    event_ids = list(args.event_ids)

    try:
        if args.email:
            event_ids.append(read_invitation(stdin or sys.stdin.buffer))

        if not event_ids:
            raise UsageError("missing event ID argument")

        if events is None:
            from calendar_rsvp.api.events import EventsClient
            events = EventsClient.from_settings(settings)
    except UsageError as e:
        print(f"error: {e}", file=sys.stderr)
        return EX_USAGE
    except RsvpError as e:
        print(format_error_chain(e), file=sys.stderr)
        return EX_SOFTWARE

    results = rsvp_all(
        events,
        event_ids,
        args.response,
        verbose=args.verbose,
        out=stdout or sys.stdout,
        allow_anonymous=args.allow_anonymous or settings.allow_anonymous_patch,
    )

    failed = [result for result in results if not result.ok]
    for result in failed:
        print(format_error_chain(result.error), file=sys.stderr)

    return EX_SOFTWARE if failed else EX_OK


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
