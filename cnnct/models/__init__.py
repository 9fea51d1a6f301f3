from cnnct.models.availability import Availability
from cnnct.models.availability_record import AvailabilityRecord
from cnnct.models.commands import AcceptEvent, Command, RejectEvent, SetParticipant
from cnnct.models.event import Event, MeetingDetails
from cnnct.models.event_record import EventRecord
from cnnct.models.participant import Participant
from cnnct.models.participant_record import ParticipantRecord
from cnnct.models.session import SessionContext
from cnnct.models.status import Bucket, ParticipantStatus

__all__ = [
    "AcceptEvent",
    "Availability",
    "AvailabilityRecord",
    "Bucket",
    "Command",
    "Event",
    "EventRecord",
    "MeetingDetails",
    "Participant",
    "ParticipantRecord",
    "ParticipantStatus",
    "RejectEvent",
    "SessionContext",
    "SetParticipant",
]
