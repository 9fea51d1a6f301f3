"""Assign classified events to dashboard buckets.

An event can belong to several buckets at once (a Pending event with one
accepted participant is listed both under Pending and Upcoming). The
board keeps at most one entry per event id in each bucket: placing an
event again replaces whatever was there for that id.

The Upcoming bucket shows a derived view of the event with only the
accepted participants. The stored event is never trimmed; Pending, Past
and Canceled keep showing the full record.
"""

from datetime import datetime
from typing import Iterable

from cnnct.models.event import Event
from cnnct.models.status import Bucket, ParticipantStatus
from cnnct.status.classify import classify
from cnnct.status.dates import parse_scheduled_at

BUCKET_ORDER = (Bucket.UPCOMING, Bucket.PENDING, Bucket.CANCELED, Bucket.PAST)


def upcoming_view(event: Event) -> Event:
    """Copy of ``event`` listing only the participants who accepted."""
    return event.model_copy(
        update={"participants": event.participants_with(ParticipantStatus.ACCEPTED)}
    )


class BucketBoard:
    """Events grouped by dashboard bucket, one entry per event per bucket."""

    def __init__(self, tz_name: str | None = None):
        self.tz_name = tz_name
        self._entries: dict[Bucket, dict[str, Event]] = {b: {} for b in BUCKET_ORDER}

    def place(self, event: Event, now: datetime) -> set[Bucket]:
        """
        Classify ``event`` and put it in its buckets.

        Any entries previously placed for the same event id are removed
        first, so reclassification replaces rather than duplicates.
        Returns the buckets the event now belongs to.
        """
        self.remove(event.id)
        buckets = classify(event, now, self.tz_name)
        for bucket in buckets:
            view = upcoming_view(event) if bucket == Bucket.UPCOMING else event
            self._entries[bucket][event.id] = view
        return buckets

    def remove(self, event_id: str) -> None:
        for entries in self._entries.values():
            entries.pop(event_id, None)

    def buckets_of(self, event_id: str) -> set[Bucket]:
        return {b for b, entries in self._entries.items() if event_id in entries}

    def get(self, bucket: Bucket, event_id: str) -> Event | None:
        return self._entries[bucket].get(event_id)

    def events(self, bucket: Bucket) -> list[Event]:
        """Events in ``bucket``, soonest first; unparseable dates last."""
        return sorted(self._entries[bucket].values(), key=self._sort_key)

    def counts(self) -> dict[Bucket, int]:
        return {b: len(self._entries[b]) for b in BUCKET_ORDER}

    def participant_count(self, bucket: Bucket, event_id: str) -> int:
        """
        Number of people shown on an event card.

        Upcoming counts accepted participants (the view already holds only
        those), Canceled counts rejected ones, other tabs count everyone.
        """
        event = self.get(bucket, event_id)
        if event is None:
            return 0
        if bucket == Bucket.CANCELED:
            return len(event.participants_with(ParticipantStatus.REJECTED))
        return len(event.participants)

    def _sort_key(self, event: Event):
        scheduled = parse_scheduled_at(event.scheduled_at, self.tz_name)
        if scheduled is None:
            return (1, 0.0, event.display_title)
        return (0, scheduled.timestamp(), event.display_title)


def assign_buckets(
    events: Iterable[Event], now: datetime, tz_name: str | None = None
) -> BucketBoard:
    """Build a board from a list of events as fetched from the gateway."""
    board = BucketBoard(tz_name)
    for event in events:
        board.place(event, now)
    return board
