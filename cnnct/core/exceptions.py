"""Exceptions raised outside the pure status reducer.

The reducer itself never raises for bad data. These errors come from the
persistence boundary and the dashboard controller that sits on top of it.
"""


class CnnctError(Exception):
    """Base exception for CNNCT errors."""


class PersistenceError(CnnctError):
    """Raised when the persistence gateway cannot read or write an event.

    Callers should treat this as retryable.
    """


class EventNotFoundError(PersistenceError):
    """Raised when an event id is unknown to the gateway."""

    def __init__(self, event_id: str):
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id


class ParticipantNotFoundError(CnnctError):
    """Raised when an identity only loosely resembles a participant.

    The match is neither confident enough to update the existing entry nor
    distant enough to safely add a new one, so the action is refused and
    the user is asked to retry with the exact address.
    """

    def __init__(self, identity: str, candidate: str | None = None):
        message = f"Participant not found: {identity}"
        if candidate:
            message += f" (did you mean {candidate}?)"
        super().__init__(message)
        self.identity = identity
        self.candidate = candidate


class SessionError(CnnctError):
    """Raised when the session context cannot be loaded or saved."""


class AvailabilityNotFoundError(PersistenceError):
    """Raised when a user has no availability window for a day."""

    def __init__(self, user_id: str, day_of_week: int):
        super().__init__(f"No availability for user {user_id} on day {day_of_week}")
        self.user_id = user_id
        self.day_of_week = day_of_week
