"""Stored form of an event.

This module defines the EventRecord table used by the SQL persistence
gateway. Meeting details are kept as typed columns rather than as JSON
inside the description, so the reducer never parses strings within
strings. Records are converted to and from the immutable ``Event`` value
at the gateway boundary.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlmodel import Field, Relationship, SQLModel

from cnnct.models.status import ParticipantStatus

if TYPE_CHECKING:
    from cnnct.models.participant_record import ParticipantRecord


class EventRecord(SQLModel, table=True):
    """A persisted meeting.

    Attributes:
        id: Unique identifier (hex UUID string).
        owner_id: User who created the event; listings are scoped to it.
        title: Event title.
        link: Shareable meeting link.
        description: Plain description text.
        background_color: Card color.
        status: Overall event status.
        date: Free-text meeting date.
        time: Free-text start time.
        duration: Free-text duration.
        meeting_type: Kind of meeting.
        host_name: Name shown as host.
        event_topic: Topic, if different from the title.
        team_number: Team label.
        created_at: When the event was created.
        updated_at: When the status was last written.
        participants: Invitees of this event.
    """
    __tablename__ = "event"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    owner_id: str = Field(index=True)
    title: str
    link: str = ""
    description: str = ""
    background_color: str = "#4A4A4A"
    status: ParticipantStatus = Field(default=ParticipantStatus.PENDING)

    # Meeting details as entered, unparsed
    date: str = ""
    time: str = ""
    duration: str = ""
    meeting_type: str = ""
    host_name: str = ""
    event_topic: str | None = None
    team_number: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    participants: list["ParticipantRecord"] = Relationship(
        back_populates="event",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "ParticipantRecord.position",
        },
    )
