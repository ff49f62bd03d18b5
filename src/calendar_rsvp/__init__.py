"""
Google Calendar RSVP from the command line.

Accept, decline, or tentatively accept invitations by event ID,
base64 eid, or a pasted invitation email.
"""

__version__ = "0.4.0"
