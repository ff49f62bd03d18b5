"""
Google Calendar Events API wrapper.

Handles:
- Get event by ID
- Patch event
"""

from googleapiclient.discovery import Resource

from calendar_rsvp.api.client import execute_with_retry, get_service
from calendar_rsvp.settings import Settings


class EventsClient:
    """Events of one calendar, fetched and patched through the Calendar API."""

    def __init__(self, service: Resource, calendar_id: str = "primary", max_retries: int = 3):
        self.service = service
        self.calendar_id = calendar_id
        self.max_retries = max_retries

    @classmethod
    def from_settings(cls, settings: Settings) -> "EventsClient":
        return cls(
            get_service(settings),
            calendar_id=settings.calendar_id,
            max_retries=settings.max_retries,
        )

    def get_event(self, event_id: str) -> dict:
        """
        Get event by ID.

        Returns full event resource.
        """
        request = self.service.events().get(
            calendarId=self.calendar_id,
            eventId=event_id,
        )
        return execute_with_retry(
            request,
            f"unable to get event '{event_id}'",
            max_retries=self.max_retries,
        )

    def patch_event(self, event_id: str, body: dict) -> dict:
        """
        Patch event with a partial resource.

        Returns the updated event resource.
        """
        request = self.service.events().patch(
            calendarId=self.calendar_id,
            eventId=event_id,
            body=body,
        )
        return execute_with_retry(
            request,
            f"unable to update event '{event_id}'",
            max_retries=self.max_retries,
        )
