"""
Tests for RSVP dispatch over one or more identifiers.
"""

import base64
import io
from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import RefreshError, TransportError

from calendar_rsvp.api.events import EventsClient
from calendar_rsvp.dispatcher import rsvp, rsvp_all
from calendar_rsvp.errors import AttendeeNotFoundError, AuthError, DecodeError, RemoteApiError
from calendar_rsvp.models import ResponseStatus

from conftest import FakeEvents, make_event
from test_client import FakeRequest


INSTANCE_ID = "1g4j1h67ndq7kddrb2bptp2cua_20210521T120000Z"


class TestRsvp:

    def test_patches_self(self, fake_events):
        event = rsvp(fake_events, INSTANCE_ID, ResponseStatus.ACCEPTED)

        assert fake_events.gets == [INSTANCE_ID]
        assert fake_events.patches == [(
            INSTANCE_ID,
            {"attendees": [{"email": "rory.mercury@example.com", "responseStatus": "accepted"}]},
        )]
        assert event["attendees"][1]["responseStatus"] == "accepted"

    def test_eid_uses_email_hint(self):
        events = FakeEvents({
            "abc123def": make_event("abc123def", attendees=[
                {"email": "rory@example.com", "responseStatus": "needsAction"},
                {"email": "delegate@example.com", "self": True, "responseStatus": "needsAction"},
            ]),
        })
        token = base64.b64encode(b"abc123def rory@example.com").decode("ascii")

        rsvp(events, token, ResponseStatus.TENTATIVE)

        assert events.patches == [(
            "abc123def",
            {"attendees": [{"email": "rory@example.com", "responseStatus": "tentative"}]},
        )]

    def test_not_an_attendee_does_not_patch(self):
        events = FakeEvents({"evt_solo": make_event("evt_solo", attendees=[])})

        with pytest.raises(AttendeeNotFoundError):
            rsvp(events, "evt_solo", ResponseStatus.ACCEPTED)

        assert events.patches == []

    def test_allow_anonymous_patches_without_email(self):
        events = FakeEvents({"evt_solo": make_event("evt_solo", attendees=[])})

        rsvp(events, "evt_solo", ResponseStatus.DECLINED, allow_anonymous=True)

        assert events.patches == [("evt_solo", {"attendees": [{"responseStatus": "declined"}]})]

    def test_event_without_attendees_key(self):
        events = FakeEvents({"evt_bare": {"id": "evt_bare", "summary": "Focus time"}})

        with pytest.raises(AttendeeNotFoundError):
            rsvp(events, "evt_bare", ResponseStatus.ACCEPTED)

    def test_repeated_rsvp_sends_same_patch(self, fake_events):
        rsvp(fake_events, "evt_two", ResponseStatus.DECLINED)
        rsvp(fake_events, "evt_two", ResponseStatus.DECLINED)

        assert fake_events.patches[0] == fake_events.patches[1]


class TestRsvpAll:

    def test_processes_in_order(self, fake_events):
        results = rsvp_all(fake_events, [INSTANCE_ID, "evt_two"], ResponseStatus.ACCEPTED)

        assert [r.token for r in results] == [INSTANCE_ID, "evt_two"]
        assert all(r.ok for r in results)
        assert [p[0] for p in fake_events.patches] == [INSTANCE_ID, "evt_two"]

    def test_failure_does_not_stop_later_tokens(self, fake_events):
        bad_eid = base64.b64encode(b"\xff\xfe\xfd").decode("ascii")

        results = rsvp_all(
            fake_events,
            ["evt_missing", bad_eid, "evt_two"],
            ResponseStatus.DECLINED,
        )

        assert isinstance(results[0].error, RemoteApiError)
        assert results[0].error.status == 404
        assert isinstance(results[1].error, DecodeError)
        assert results[2].ok
        assert fake_events.patches == [(
            "evt_two",
            {"attendees": [{"email": "rory.mercury@example.com", "responseStatus": "declined"}]},
        )]

    def test_verbose_prints_updated_event(self, fake_events):
        out = io.StringIO()

        rsvp_all(fake_events, ["evt_two"], ResponseStatus.TENTATIVE, verbose=True, out=out)

        assert out.getvalue() == (
            "Team sync\n"
            "\n"
            "Who\n"
            "       Yes   organizer@example.com\n"
            "       Maybe Rory Mercury\n"
        )

    def test_quiet_prints_nothing(self, fake_events):
        out = io.StringIO()

        rsvp_all(fake_events, ["evt_two"], ResponseStatus.ACCEPTED, out=out)

        assert out.getvalue() == ""

    def test_format_failure_is_attributed(self):
        events = FakeEvents({
            "evt_bad_time": make_event("evt_bad_time", start={"dateTime": "not a time"}),
        })

        results = rsvp_all(events, ["evt_bad_time"], ResponseStatus.ACCEPTED,
                           verbose=True, out=io.StringIO())

        assert not results[0].ok
        assert "start" in str(results[0].error)
        assert len(events.patches) == 1

    def test_auth_failures_do_not_stop_later_tokens(self):
        outcomes = {
            "evt_one": RefreshError("invalid_grant: Token has been expired or revoked."),
            "evt_two": TransportError("connection reset"),
            "evt_three": make_event("evt_three"),
        }
        service = MagicMock()
        service.events().get.side_effect = (
            lambda calendarId, eventId: FakeRequest(outcomes[eventId])
        )
        service.events().patch.side_effect = (
            lambda calendarId, eventId, body: FakeRequest(outcomes[eventId])
        )

        with patch("calendar_rsvp.api.client.time.sleep"):
            results = rsvp_all(
                EventsClient(service, max_retries=1),
                ["evt_one", "evt_two", "evt_three"],
                ResponseStatus.ACCEPTED,
            )

        assert [r.token for r in results] == ["evt_one", "evt_two", "evt_three"]
        assert isinstance(results[0].error, AuthError)
        assert isinstance(results[1].error, RemoteApiError)
        assert results[2].ok
