"""Dashboard controller: optimistic status changes over a persistence gateway.

The dashboard keeps an in-memory cache of the signed-in user's events and
the bucket board built from it. User actions are applied locally first so
the tabs update at once, then persisted through the gateway:

1. Snapshot the cached event and bump its version.
2. ``apply`` the command locally and re-place the event on the board.
3. Await the gateway write.
4. On success, adopt the stored event unless a newer local change has
   superseded this one (the response is then stale and dropped).
5. On any failure, restore the snapshot unless superseded, and re-raise so
   the caller can show a retryable error.

Everything except step 3 is synchronous; the reducer never awaits.
"""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Awaitable, Callable

from cnnct.core.exceptions import EventNotFoundError, ParticipantNotFoundError
from cnnct.gateway.base import EventGateway
from cnnct.models import (
    AcceptEvent,
    Bucket,
    Command,
    Event,
    ParticipantStatus,
    RejectEvent,
    SessionContext,
    SetParticipant,
)
from cnnct.status.buckets import BucketBoard
from cnnct.status.matching import resolve_identity
from cnnct.status.transitions import apply

logger = logging.getLogger(__name__)


@dataclass
class CachedEvent:
    """An event as currently shown, with its local version counter."""
    event: Event
    version: int = 0


class Dashboard:
    """Events of one signed-in user, grouped into tabs."""

    def __init__(
        self,
        gateway: EventGateway,
        session: SessionContext,
        clock: Callable[[], datetime] | None = None,
    ):
        self.gateway = gateway
        self.session = session
        self.clock = clock or (lambda: datetime.now(UTC))
        self.board = BucketBoard(session.timezone)
        self._cache: dict[str, CachedEvent] = {}

    async def refresh(self) -> BucketBoard:
        """Reload every event from the gateway and rebuild the board."""
        events = await self.gateway.list_events(self.session.user_id)
        now = self.clock()

        self.board = BucketBoard(self.session.timezone)
        previous = self._cache
        self._cache = {}
        for event in events:
            version = previous[event.id].version + 1 if event.id in previous else 0
            self._cache[event.id] = CachedEvent(event=event, version=version)
            self.board.place(event, now)

        logger.debug(f"Dashboard refreshed with {len(events)} events: {self.board.counts()}")
        return self.board

    def event(self, event_id: str) -> Event:
        """Return the cached event. Raises EventNotFoundError if not loaded."""
        cached = self._cache.get(event_id)
        if cached is None:
            raise EventNotFoundError(event_id)
        return cached.event

    def version(self, event_id: str) -> int:
        cached = self._cache.get(event_id)
        return cached.version if cached else -1

    def tab(self, bucket: Bucket) -> list[Event]:
        return self.board.events(bucket)

    async def accept_event(self, event_id: str) -> Event:
        return await self._dispatch(
            event_id,
            AcceptEvent(),
            lambda: self.gateway.set_event_status(event_id, ParticipantStatus.ACCEPTED),
        )

    async def reject_event(self, event_id: str) -> Event:
        return await self._dispatch(
            event_id,
            RejectEvent(),
            lambda: self.gateway.set_event_status(event_id, ParticipantStatus.REJECTED),
        )

    async def set_participant(
        self, event_id: str, identity: str, status: ParticipantStatus
    ) -> Event:
        """
        Record one participant's response.

        An identity that only loosely resembles an existing participant is
        refused with ParticipantNotFoundError instead of being merged into
        it or added as a new person.
        """
        command = SetParticipant(identity=identity, status=status)
        match = resolve_identity(self.event(event_id).participants, command.identity)
        if match.ambiguous:
            logger.warning(
                f"Event {event_id}: {identity!r} is too close to "
                f"{match.candidate!r} (ratio {match.ratio:.2f}) to add, too far to merge"
            )
            raise ParticipantNotFoundError(identity, match.candidate)

        return await self._dispatch(
            event_id,
            command,
            lambda: self.gateway.set_participant_status(event_id, command.identity, status),
        )

    async def _dispatch(
        self,
        event_id: str,
        command: Command,
        persist: Callable[[], Awaitable[Event]],
    ) -> Event:
        cached = self._cache.get(event_id)
        if cached is None:
            raise EventNotFoundError(event_id)

        snapshot = cached.event
        version = cached.version + 1
        self._show(apply(snapshot, command), version)

        try:
            stored = await persist()
        except Exception as e:
            if self.version(event_id) == version:
                logger.info(f"Event {event_id}: persisting failed ({e!r}), rolling back")
                self._show(snapshot, version + 1)
            else:
                logger.info(f"Event {event_id}: persisting failed after a newer change, keeping it")
            raise

        if self.version(event_id) != version:
            logger.debug(f"Event {event_id}: dropping stale response for version {version}")
            current = self._cache.get(event_id)
            return current.event if current else stored

        self._show(stored, version)
        return stored

    def _show(self, event: Event, version: int) -> None:
        self._cache[event.id] = CachedEvent(event=event, version=version)
        self.board.place(event, self.clock())
