"""Status-change commands understood by the reducer.

Commands mirror the two update payloads the dashboard sends:

    {"status": "Accepted"}                         whole-event accept
    {"status": "Rejected"}                         whole-event reject
    {"participantUpdate": {"email": "a@b.com",
                           "status": "Accepted"}}  one participant
"""

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cnnct.models.status import ParticipantStatus


class AcceptEvent(BaseModel):
    """Accept the whole event on behalf of every participant."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["accept_event"] = "accept_event"


class RejectEvent(BaseModel):
    """Reject the whole event on behalf of every participant."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["reject_event"] = "reject_event"


class SetParticipant(BaseModel):
    """Record one participant's response.

    Only Accepted and Rejected are valid responses; a participant cannot
    be moved back to Pending.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_participant"] = "set_participant"
    identity: str = Field(min_length=1)
    status: ParticipantStatus

    @field_validator("identity")
    @classmethod
    def strip_identity(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("identity must not be blank")
        return value

    @field_validator("status")
    @classmethod
    def status_is_response(cls, value: ParticipantStatus) -> ParticipantStatus:
        if value == ParticipantStatus.PENDING:
            raise ValueError("a participant response must be Accepted or Rejected")
        return value


Command = Union[AcceptEvent, RejectEvent, SetParticipant]


def command_from_payload(payload: dict[str, Any]) -> Command:
    """
    Build a command from a dashboard update payload.

    Accepts ``{"status": ...}`` for whole-event changes and
    ``{"participantUpdate": {"email": ..., "status": ...}}`` for a single
    participant. The shortened "Accept"/"Reject" spellings used by the
    participant checkboxes are accepted too.

    Raises:
        ValueError: If the payload matches neither shape.
    """
    update = payload.get("participantUpdate")
    if update:
        identity = update.get("email") or update.get("identity") or ""
        return SetParticipant(identity=identity, status=_coerce_status(update.get("status")))

    status = _coerce_status(payload.get("status"))
    if status == ParticipantStatus.ACCEPTED:
        return AcceptEvent()
    if status == ParticipantStatus.REJECTED:
        return RejectEvent()
    raise ValueError(f"Unsupported status update: {payload!r}")


def _coerce_status(value: Any) -> ParticipantStatus:
    aliases = {"accept": "Accepted", "reject": "Rejected"}
    if isinstance(value, str):
        value = aliases.get(value.strip().lower(), value.strip().capitalize())
    try:
        return ParticipantStatus(value)
    except ValueError as e:
        raise ValueError(f"Unknown status: {value!r}") from e
