"""
Shared fixtures: a fake Calendar events gateway and event builders.
"""

import copy

import pytest

from calendar_rsvp.errors import RemoteApiError
from calendar_rsvp.settings import Settings


class FakeEvents:
    """In-memory stand-in for EventsClient."""

    def __init__(self, events=None):
        self.events = events or {}
        self.gets = []
        self.patches = []

    def get_event(self, event_id):
        self.gets.append(event_id)
        if event_id not in self.events:
            raise RemoteApiError(f"unable to get event '{event_id}'", status=404)
        return copy.deepcopy(self.events[event_id])

    def patch_event(self, event_id, body):
        self.patches.append((event_id, copy.deepcopy(body)))
        event = copy.deepcopy(self.events[event_id])
        for patched in body["attendees"]:
            for attendee in event.get("attendees", []):
                if "email" in patched and attendee.get("email") == patched["email"]:
                    attendee["responseStatus"] = patched["responseStatus"]
        return event


def make_event(event_id, attendees=None, **fields):
    event = {
        "id": event_id,
        "summary": "Team sync",
        "attendees": attendees if attendees is not None else [
            {"email": "organizer@example.com", "responseStatus": "accepted", "organizer": True},
            {"email": "rory.mercury@example.com", "displayName": "Rory Mercury",
             "self": True, "responseStatus": "needsAction"},
        ],
    }
    event.update(fields)
    return event


@pytest.fixture
def fake_events():
    return FakeEvents({
        "1g4j1h67ndq7kddrb2bptp2cua_20210521T120000Z": make_event(
            "1g4j1h67ndq7kddrb2bptp2cua_20210521T120000Z"
        ),
        "evt_two": make_event("evt_two"),
    })


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path)
