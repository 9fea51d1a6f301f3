"""Classify events into dashboard buckets."""
import logging
from datetime import datetime

from cnnct.models.event import Event
from cnnct.models.status import Bucket, ParticipantStatus
from cnnct.status.dates import ensure_aware, parse_scheduled_at

logger = logging.getLogger(__name__)


def classify(event: Event, now: datetime, tz_name: str | None = None) -> set[Bucket]:
    """
    Compute the buckets an event belongs to at time ``now``.

    Rules are evaluated independently, so an event can sit in several
    buckets at once:

    - Pending: the overall status is Pending.
    - Past: the meeting starts at or before ``now``.
    - Upcoming: someone accepted and the meeting is still ahead.
    - Canceled: the overall status is Rejected.

    If no rule applies the event falls back to Pending. An unparseable
    meeting date disables the time-based rules and is logged as a data
    quality warning; it never raises.
    """
    now = ensure_aware(now, tz_name)
    scheduled = parse_scheduled_at(event.scheduled_at, tz_name)
    if scheduled is None:
        logger.warning(
            f"Event {event.id}: cannot parse meeting date "
            f"{event.scheduled_at.date!r} / time {event.scheduled_at.time!r}"
        )

    buckets: set[Bucket] = set()

    if event.overall_status == ParticipantStatus.PENDING:
        buckets.add(Bucket.PENDING)

    if scheduled is not None:
        if scheduled <= now:
            buckets.add(Bucket.PAST)
        elif event.participants_with(ParticipantStatus.ACCEPTED):
            buckets.add(Bucket.UPCOMING)

    if event.overall_status == ParticipantStatus.REJECTED:
        buckets.add(Bucket.CANCELED)

    if not buckets:
        buckets.add(Bucket.PENDING)

    return buckets
