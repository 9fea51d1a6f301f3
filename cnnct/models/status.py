"""Status and bucket enumerations shared by events and participants."""

from enum import Enum


class ParticipantStatus(str, Enum):
    """Response status of a participant, also used for an event overall."""

    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class Bucket(str, Enum):
    """Dashboard tab an event is shown under. Derived, never stored."""

    UPCOMING = "Upcoming"
    PENDING = "Pending"
    CANCELED = "Canceled"
    PAST = "Past"
