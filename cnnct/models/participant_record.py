"""Stored form of a participant."""

from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

from cnnct.models.status import ParticipantStatus

if TYPE_CHECKING:
    from cnnct.models.event_record import EventRecord


class ParticipantRecord(SQLModel, table=True):
    """One invitee of a persisted event.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Foreign key to the parent EventRecord.
        position: Order in which the participant was added, so the list
            reads back in the order it was written.
        email: Identity as typed by the organizer.
        status: Response status.
        user_id: Linked registered user, if any.
        name: Display name, if known.
        event: Reference to the parent EventRecord.
    """
    __tablename__ = "participant"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: str = Field(foreign_key="event.id", index=True)
    position: int = Field(default=0)
    email: str
    status: ParticipantStatus = Field(default=ParticipantStatus.PENDING)
    user_id: str | None = None
    name: str | None = None

    # Relationship
    event: Optional["EventRecord"] = Relationship(back_populates="participants")
