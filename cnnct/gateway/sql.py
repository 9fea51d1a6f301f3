"""SQLite-backed persistence gateway.

Stores events as ``EventRecord`` rows with their ``ParticipantRecord``
children, and weekly availability as ``AvailabilityRecord`` rows. Event
status changes are computed with the same ``apply`` reducer the
dashboard uses optimistically, so the stored result and the optimistic
result agree. Concurrent writers are not coordinated: the last write
wins.
"""
import logging
from datetime import UTC, datetime
from typing import Iterable

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from cnnct.core.database import engine as default_engine
from cnnct.core.exceptions import AvailabilityNotFoundError, EventNotFoundError, PersistenceError
from cnnct.gateway.base import EventGateway
from cnnct.models import (
    AcceptEvent,
    Availability,
    AvailabilityRecord,
    Command,
    Event,
    EventRecord,
    MeetingDetails,
    Participant,
    ParticipantRecord,
    ParticipantStatus,
    RejectEvent,
    SetParticipant,
)
from cnnct.status.matching import matches
from cnnct.status.transitions import apply

logger = logging.getLogger(__name__)


def record_to_event(record: EventRecord) -> Event:
    """Convert a stored row into the immutable Event value."""
    return Event(
        id=record.id,
        title=record.title,
        overall_status=record.status,
        scheduled_at=MeetingDetails(
            date=record.date,
            time=record.time,
            duration=record.duration,
            meeting_type=record.meeting_type,
            host_name=record.host_name,
            event_topic=record.event_topic,
            team_number=record.team_number,
        ),
        participants=tuple(
            Participant(
                identity=p.email,
                status=p.status,
                user_id=p.user_id,
                name=p.name,
            )
            for p in record.participants
        ),
        owner_id=record.owner_id,
        link=record.link,
        description=record.description,
        background_color=record.background_color,
        created_at=record.created_at,
    )


def record_to_availability(record: AvailabilityRecord) -> Availability:
    return Availability(
        id=record.id,
        user_id=record.user_id,
        day_of_week=record.day_of_week,
        start_time=record.start_time,
        end_time=record.end_time,
        is_available=record.is_available,
        timezone=record.timezone,
    )


def _write_participants(record: EventRecord, participants: Iterable[Participant]) -> None:
    """Replace the participant rows of ``record`` with ``participants``."""
    record.participants = [
        ParticipantRecord(
            event_id=record.id,
            position=position,
            email=p.identity,
            status=p.status,
            user_id=p.user_id,
            name=p.name,
        )
        for position, p in enumerate(participants)
    ]


def dedupe_invitees(emails: Iterable[str]) -> list[str]:
    """Drop blank and duplicate invitee emails, keeping the first spelling."""
    unique: list[str] = []
    for email in emails:
        email = email.strip()
        if not email:
            continue
        if any(matches(email, seen) for seen in unique):
            logger.warning(f"Ignoring duplicate invitee {email!r}")
            continue
        unique.append(email)
    return unique


class SqlEventGateway(EventGateway):
    """Persistence gateway over a SQLModel engine."""

    def __init__(self, engine: Engine | None = None):
        self.engine = engine or default_engine

    async def create_event(
        self,
        owner_id: str,
        title: str,
        emails: Iterable[str],
        details: MeetingDetails | None = None,
        link: str = "",
        description: str = "",
        background_color: str | None = None,
    ) -> Event:
        """
        Create an event with one Pending participant per invited email.

        Duplicate invitees (by identity matching) are collapsed.
        """
        details = details or MeetingDetails()
        record = EventRecord(
            owner_id=owner_id,
            title=title.strip(),
            link=link.strip(),
            description=description,
            date=details.date,
            time=details.time,
            duration=details.duration,
            meeting_type=details.meeting_type,
            host_name=details.host_name,
            event_topic=details.event_topic,
            team_number=details.team_number,
        )
        if background_color:
            record.background_color = background_color
        _write_participants(
            record, (Participant(identity=e) for e in dedupe_invitees(emails))
        )

        try:
            with Session(self.engine) as session:
                session.add(record)
                session.commit()
                session.refresh(record)
                event = record_to_event(record)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create event: {e}") from e

        logger.info(f"Created event {event.id} with {len(event.participants)} participants")
        return event

    async def save_event(self, event: Event) -> Event:
        """
        Insert or overwrite an event as given, participants included.

        Used to import events converted from raw documents.
        """
        details = event.scheduled_at
        try:
            with Session(self.engine) as session:
                record = session.get(EventRecord, event.id) or EventRecord(
                    id=event.id, owner_id=event.owner_id or "", title=event.title
                )
                record.owner_id = event.owner_id or record.owner_id
                record.title = event.title
                record.link = event.link
                record.description = event.description
                record.background_color = event.background_color
                record.status = event.overall_status
                record.date = details.date
                record.time = details.time
                record.duration = details.duration
                record.meeting_type = details.meeting_type
                record.host_name = details.host_name
                record.event_topic = details.event_topic
                record.team_number = details.team_number
                record.created_at = event.created_at
                record.updated_at = datetime.now(UTC)
                _write_participants(record, event.participants)

                session.add(record)
                session.commit()
                session.refresh(record)
                return record_to_event(record)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save event {event.id}: {e}") from e

    async def list_events(self, owner_id: str) -> list[Event]:
        statement = (
            select(EventRecord)
            .where(EventRecord.owner_id == owner_id)
            .order_by(EventRecord.created_at.desc())
        )
        try:
            with Session(self.engine) as session:
                return [record_to_event(r) for r in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list events for {owner_id}: {e}") from e

    async def get_event(self, event_id: str) -> Event:
        try:
            with Session(self.engine) as session:
                record = session.get(EventRecord, event_id)
                if not record:
                    raise EventNotFoundError(event_id)
                return record_to_event(record)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read event {event_id}: {e}") from e

    async def set_event_status(self, event_id: str, status: ParticipantStatus) -> Event:
        if status == ParticipantStatus.ACCEPTED:
            return self._apply(event_id, AcceptEvent())
        if status == ParticipantStatus.REJECTED:
            return self._apply(event_id, RejectEvent())
        raise ValueError("An event can only be accepted or rejected")

    async def set_participant_status(
        self, event_id: str, identity: str, status: ParticipantStatus
    ) -> Event:
        return self._apply(event_id, SetParticipant(identity=identity, status=status))

    async def delete_event(self, event_id: str, owner_id: str) -> None:
        """Delete an event created by ``owner_id`` together with its participants."""
        try:
            with Session(self.engine) as session:
                record = session.get(EventRecord, event_id)
                if not record or record.owner_id != owner_id:
                    raise EventNotFoundError(event_id)
                session.delete(record)
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete event {event_id}: {e}") from e
        logger.info(f"Deleted event {event_id}")

    async def set_availability(self, availability: Availability) -> Availability:
        """
        Save a weekly availability window.

        A user has one window per day of the week; saving another window
        for the same day updates the existing one in place.
        """
        statement = select(AvailabilityRecord).where(
            AvailabilityRecord.user_id == availability.user_id,
            AvailabilityRecord.day_of_week == availability.day_of_week,
        )
        try:
            with Session(self.engine) as session:
                record = session.exec(statement).first()
                if record is None:
                    record = AvailabilityRecord(
                        user_id=availability.user_id,
                        day_of_week=availability.day_of_week,
                        start_time=availability.start_time,
                        end_time=availability.end_time,
                    )
                    logger.info(
                        f"Adding availability for user {availability.user_id} "
                        f"on day {availability.day_of_week}"
                    )
                record.start_time = availability.start_time
                record.end_time = availability.end_time
                record.is_available = availability.is_available
                record.timezone = availability.timezone
                record.updated_at = datetime.now(UTC)

                session.add(record)
                session.commit()
                session.refresh(record)
                return record_to_availability(record)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save availability for {availability.user_id}: {e}"
            ) from e

    async def list_availability(self, user_id: str) -> list[Availability]:
        """Return the windows of ``user_id``, Sunday first."""
        statement = (
            select(AvailabilityRecord)
            .where(AvailabilityRecord.user_id == user_id)
            .order_by(AvailabilityRecord.day_of_week)
        )
        try:
            with Session(self.engine) as session:
                return [record_to_availability(r) for r in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list availability for {user_id}: {e}") from e

    async def delete_availability(self, user_id: str, day_of_week: int) -> None:
        statement = select(AvailabilityRecord).where(
            AvailabilityRecord.user_id == user_id,
            AvailabilityRecord.day_of_week == day_of_week,
        )
        try:
            with Session(self.engine) as session:
                record = session.exec(statement).first()
                if not record:
                    raise AvailabilityNotFoundError(user_id, day_of_week)
                session.delete(record)
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete availability for {user_id}: {e}") from e

    def _apply(self, event_id: str, command: Command) -> Event:
        """Load, reduce, and write back one event in a single session."""
        try:
            with Session(self.engine) as session:
                record = session.get(EventRecord, event_id)
                if not record:
                    raise EventNotFoundError(event_id)

                updated = apply(record_to_event(record), command)
                record.status = updated.overall_status
                record.updated_at = datetime.now(UTC)
                _write_participants(record, updated.participants)

                session.add(record)
                session.commit()
                session.refresh(record)
                return record_to_event(record)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update event {event_id}: {e}") from e
