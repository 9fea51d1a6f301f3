"""Convert raw event documents into typed events and back.

Event documents produced by older clients are inconsistent:

    - Meeting details live either in ``meetingDetails`` or as a JSON
      string inside ``description``.
    - Participants are listed under ``participants`` with an ``email`` or
      a populated ``user.email``, or only as the bare ``emails`` list.
    - The overall status is ``status``; the id is ``_id`` or ``id``.

All of that is resolved here, once, so the reducer only ever sees the
typed ``Event`` value.
"""
import json
import logging
from datetime import datetime
from typing import Any

from dateutil import parser as date_parser

from cnnct.models.event import Event, MeetingDetails
from cnnct.models.participant import Participant
from cnnct.models.status import ParticipantStatus
from cnnct.status.matching import matches

logger = logging.getLogger(__name__)

DETAIL_FIELDS = {
    "date": "date",
    "time": "time",
    "duration": "duration",
    "meetingType": "meeting_type",
    "hostName": "host_name",
    "eventTopic": "event_topic",
    "teamNumber": "team_number",
}


def parse_status(value: Any) -> ParticipantStatus:
    """Read a status string leniently; unknown values become Pending."""
    if isinstance(value, str):
        try:
            return ParticipantStatus(value.strip().capitalize())
        except ValueError:
            pass
    return ParticipantStatus.PENDING


def parse_meeting_details(doc: dict[str, Any]) -> tuple[MeetingDetails, str]:
    """
    Extract meeting details and the plain description from a document.

    Returns ``(details, description)``. When the description holds the
    details as JSON, the plain description is the ``description`` key of
    that JSON, if any.
    """
    raw = doc.get("meetingDetails") or doc.get("scheduledAt")
    description = doc.get("description") or ""

    if not raw and description.strip().startswith("{"):
        try:
            raw = json.loads(description)
        except json.JSONDecodeError:
            logger.warning(
                f"Event {doc.get('_id') or doc.get('id')}: description looks like "
                "JSON but cannot be decoded, keeping it as text"
            )
            raw = None
        else:
            if isinstance(raw, dict):
                description = str(raw.get("description") or "")

    if not isinstance(raw, dict):
        return MeetingDetails(event_topic=doc.get("title")), description

    values = {}
    for key, field in DETAIL_FIELDS.items():
        value = raw.get(key)
        if value is not None:
            values[field] = str(value)
    return MeetingDetails(**values), description


def parse_participants(doc: dict[str, Any]) -> tuple[Participant, ...]:
    """
    Build the participant list from ``participants`` or ``emails``.

    Entries without any usable identity are skipped. Entries that match an
    earlier one are merged into it, keeping the first identity and the
    most decided status.
    """
    entries = doc.get("participants")
    if not entries:
        entries = [{"email": email} for email in doc.get("emails") or []]

    participants: list[Participant] = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {"email": entry}
        user = entry.get("user") if isinstance(entry.get("user"), dict) else {}
        identity = (
            entry.get("email") or entry.get("identity") or user.get("email") or ""
        ).strip()
        if not identity:
            logger.warning(f"Skipping participant without an email: {entry!r}")
            continue

        participant = Participant(
            identity=identity,
            status=parse_status(entry.get("status")),
            user_id=user.get("_id") or user.get("id") or _as_id(entry.get("user")),
            name=entry.get("name") or user.get("name"),
        )
        duplicate = next(
            (i for i, p in enumerate(participants) if matches(p.identity, identity)),
            None,
        )
        if duplicate is None:
            participants.append(participant)
            continue

        logger.warning(f"Merging duplicate participant {identity!r}")
        if participants[duplicate].status == ParticipantStatus.PENDING:
            participants[duplicate] = participants[duplicate].with_status(participant.status)

    return tuple(participants)


def _as_id(value: Any) -> str | None:
    if value is None or isinstance(value, dict):
        return None
    return str(value)


def _parse_created(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date_parser.isoparse(value)
        except ValueError:
            return None
    return None


def event_from_document(doc: dict[str, Any]) -> Event:
    """
    Turn a raw event document into a typed Event.

    Raises:
        ValueError: If the document has no id.
    """
    event_id = doc.get("_id") or doc.get("id")
    if not event_id:
        raise ValueError("Event document has no id")
    details, description = parse_meeting_details(doc)
    values: dict[str, Any] = {
        "id": str(event_id),
        "title": doc.get("title") or "",
        "overall_status": parse_status(doc.get("status") or doc.get("overallStatus")),
        "scheduled_at": details,
        "participants": parse_participants(doc),
        "owner_id": _as_id(doc.get("createdBy") or doc.get("user")),
        "link": doc.get("link") or "",
        "description": description,
    }
    if doc.get("backgroundColor"):
        values["background_color"] = doc["backgroundColor"]
    created = _parse_created(doc.get("createdAt"))
    if created is not None:
        values["created_at"] = created
    return Event(**values)


def event_to_document(event: Event) -> dict[str, Any]:
    """Render an event as the JSON record exchanged with the dashboard."""
    return {
        "id": event.id,
        "title": event.title,
        "overallStatus": event.overall_status.value,
        "scheduledAt": {
            "date": event.scheduled_at.date,
            "time": event.scheduled_at.time,
            "duration": event.scheduled_at.duration,
        },
        "participants": [
            {"identity": p.identity, "status": p.status.value}
            for p in event.participants
        ],
    }
