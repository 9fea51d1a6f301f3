"""Apply status-change commands to events.

``apply`` is the single place where participant and event statuses
change. It is pure: it never performs I/O and never mutates the event it
is given, which lets the dashboard keep the previous snapshot around for
rollback while an optimistic update is being persisted.
"""
import logging

from cnnct.models.commands import AcceptEvent, Command, RejectEvent, SetParticipant
from cnnct.models.event import Event
from cnnct.models.participant import Participant
from cnnct.models.status import ParticipantStatus
from cnnct.status.matching import resolve_identity

logger = logging.getLogger(__name__)


def apply(event: Event, command: Command) -> Event:
    """
    Return a new event with ``command`` applied.

    - AcceptEvent: the event and every participant become Accepted.
    - RejectEvent: the event and every participant become Rejected.
    - SetParticipant: the matching participant gets the new status, or a
      new participant is appended if nobody matches. Accepting makes the
      event Accepted; rejecting makes it Rejected once every participant
      has rejected.

    Applying the same command twice gives the same event as applying it
    once.
    """
    if isinstance(command, AcceptEvent):
        return _set_all(event, ParticipantStatus.ACCEPTED)
    if isinstance(command, RejectEvent):
        return _set_all(event, ParticipantStatus.REJECTED)
    if isinstance(command, SetParticipant):
        return _set_participant(event, command)
    raise TypeError(f"Unsupported command: {command!r}")


def _set_all(event: Event, status: ParticipantStatus) -> Event:
    participants = tuple(p.with_status(status) for p in event.participants)
    return event.model_copy(
        update={"overall_status": status, "participants": participants}
    )


def _set_participant(event: Event, command: SetParticipant) -> Event:
    participants = list(event.participants)
    match = resolve_identity(participants, command.identity)

    if match.found:
        participants[match.index] = participants[match.index].with_status(command.status)
    else:
        logger.info(
            f"Event {event.id}: adding participant {command.identity!r} "
            f"with status {command.status.value}"
        )
        participants.append(Participant(identity=command.identity, status=command.status))

    overall = event.overall_status
    if command.status == ParticipantStatus.ACCEPTED:
        overall = ParticipantStatus.ACCEPTED
    elif all(p.status == ParticipantStatus.REJECTED for p in participants):
        overall = ParticipantStatus.REJECTED

    return event.model_copy(
        update={"overall_status": overall, "participants": tuple(participants)}
    )
