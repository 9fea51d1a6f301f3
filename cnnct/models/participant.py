"""Participant model for tracking event invitees.

This module defines the Participant value which represents one person
invited to an event together with their response. Participants are
created with the event (one per invited email) or synthesized by the
status reducer when a response arrives for an address that is not yet on
the list.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cnnct.models.status import ParticipantStatus


class Participant(BaseModel):
    """A person invited to an event.

    Participants are immutable values. The status reducer produces new
    copies with ``model_copy(update=...)`` instead of changing them in
    place, so snapshots held by a dashboard stay valid.

    Attributes:
        identity: Email address as typed by the organizer, stripped of
            surrounding whitespace. Matching against it is fuzzy, see
            ``cnnct.status.matching``.
        status: Response status. One of "Pending", "Accepted" or
            "Rejected".
        user_id: Reference to a registered user, if the invitee has an
            account.
        name: Human-readable name, if known.
    """
    model_config = ConfigDict(frozen=True)

    identity: str = Field(min_length=1)
    status: ParticipantStatus = ParticipantStatus.PENDING
    user_id: str | None = None
    name: str | None = None

    @field_validator("identity")
    @classmethod
    def strip_identity(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("identity must not be blank")
        return value

    def with_status(self, status: ParticipantStatus) -> "Participant":
        """Return a copy of this participant with a new status."""
        if status == self.status:
            return self
        return self.model_copy(update={"status": status})
