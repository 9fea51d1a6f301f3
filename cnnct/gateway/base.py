"""Persistence gateway interface.

The dashboard never talks to storage directly. It awaits a gateway that
lists a user's events and persists status changes keyed by event id (and
participant identity for single responses). Implementations raise
``PersistenceError`` for any storage failure so the dashboard can roll
back its optimistic state.
"""

from abc import ABC, abstractmethod

from cnnct.models.event import Event
from cnnct.models.status import ParticipantStatus


class EventGateway(ABC):
    """Read/write access to stored events."""

    @abstractmethod
    async def list_events(self, owner_id: str) -> list[Event]:
        """Return every event created by ``owner_id``, newest first."""

    @abstractmethod
    async def get_event(self, event_id: str) -> Event:
        """Return one event. Raises EventNotFoundError if unknown."""

    @abstractmethod
    async def set_event_status(self, event_id: str, status: ParticipantStatus) -> Event:
        """Persist a whole-event accept or reject and return the stored event."""

    @abstractmethod
    async def set_participant_status(
        self, event_id: str, identity: str, status: ParticipantStatus
    ) -> Event:
        """Persist one participant's response and return the stored event."""
