"""Event model for meetings created through shareable event links.

This module defines the Event value which represents a meeting with its
invited participants, the free-text scheduling details entered by the
organizer, and the overall response status. Events are the central entity
classified into dashboard buckets and updated by the status reducer.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from cnnct.models.participant import Participant
from cnnct.models.status import ParticipantStatus


class MeetingDetails(BaseModel):
    """Scheduling details typed in by the organizer.

    All fields are free text exactly as entered. Parsing into real
    datetimes happens lazily in ``cnnct.status.dates`` because the input
    is unreliable: empty strings, "10:30", "2:00 pm", "2025-03-14",
    "14/03/2025" and similar all occur.

    Attributes:
        date: Meeting date.
        time: Start time.
        duration: Length of the meeting, e.g. "1h", "30 min" or "90".
        meeting_type: Kind of meeting, e.g. "One-on-One".
        host_name: Name shown as the host.
        event_topic: Topic, used as a title fallback.
        team_number: Team label shown on pending invitations.
    """
    model_config = ConfigDict(frozen=True)

    date: str = ""
    time: str = ""
    duration: str = ""
    meeting_type: str = ""
    host_name: str = ""
    event_topic: str | None = None
    team_number: str | None = None


class Event(BaseModel):
    """A meeting with invited participants.

    Events are immutable. Every status change goes through
    ``cnnct.status.transitions.apply`` which returns a new Event.

    Attributes:
        id: Unique identifier.
        title: Event title.
        overall_status: Whole-event status, distinct from any single
            participant's status. Rejected only when every participant
            rejected or the whole event was rejected.
        scheduled_at: Free-text date, time and duration of the meeting.
        participants: Invitees and their responses. Identities are unique
            after normalization.
        owner_id: User who created the event.
        link: Shareable meeting link.
        description: Plain description text.
        background_color: Card color chosen by the organizer.
        created_at: When the event was created.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    overall_status: ParticipantStatus = ParticipantStatus.PENDING
    scheduled_at: MeetingDetails = Field(default_factory=MeetingDetails)
    participants: tuple[Participant, ...] = ()
    owner_id: str | None = None
    link: str = ""
    description: str = ""
    background_color: str = "#4A4A4A"
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def display_title(self) -> str:
        """Title shown on dashboard cards."""
        return self.title or self.scheduled_at.event_topic or "Meeting"

    def participants_with(self, status: ParticipantStatus) -> tuple[Participant, ...]:
        """Return the participants that currently have ``status``."""
        return tuple(p for p in self.participants if p.status == status)
