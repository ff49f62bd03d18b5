"""
Google Calendar API adapter: credentials, service, events.
"""

from calendar_rsvp.api.client import get_credentials, get_service, execute_with_retry
from calendar_rsvp.api.events import EventsClient

__all__ = ["get_credentials", "get_service", "execute_with_retry", "EventsClient"]
