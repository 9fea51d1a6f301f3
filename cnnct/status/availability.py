"""Check meetings against weekly availability windows."""
from datetime import date, datetime, timedelta
from typing import Iterable

from cnnct.models.availability import Availability
from cnnct.models.event import Event
from cnnct.status.dates import get_timezone, parse_scheduled_at, scheduled_end

SLOT_MINUTES = 30


def weekday_number(day: date) -> int:
    """Day of the week numbered 0 (Sunday) to 6 (Saturday)."""
    return (day.weekday() + 1) % 7


def time_slots(
    availability: Availability, day: date, step_minutes: int = SLOT_MINUTES
) -> list[datetime]:
    """
    Start times of the bookable slots on ``day``.

    Slots start every ``step_minutes`` from the window start while before
    the window end, in the window's timezone. Returns an empty list when
    ``day`` is another weekday or the day is marked unavailable.
    """
    if not availability.is_available or weekday_number(day) != availability.day_of_week:
        return []

    tz = get_timezone(availability.timezone)
    current = datetime.combine(day, availability.start, tzinfo=tz)
    end = datetime.combine(day, availability.end, tzinfo=tz)
    slots = []
    while current < end:
        slots.append(current)
        current += timedelta(minutes=step_minutes)
    return slots


def fits_availability(
    event: Event, availabilities: Iterable[Availability], tz_name: str | None = None
) -> bool | None:
    """
    Check whether a meeting lies inside one of the given windows.

    The meeting runs from its scheduled start to ``scheduled_end`` and is
    compared in each window's own timezone. A meeting crossing midnight
    there never fits. Returns None when the meeting date cannot be parsed.
    """
    start = parse_scheduled_at(event.scheduled_at, tz_name)
    end = scheduled_end(event.scheduled_at, tz_name)
    if start is None or end is None:
        return None

    for availability in availabilities:
        tz = get_timezone(availability.timezone)
        local_start, local_end = start.astimezone(tz), end.astimezone(tz)
        if local_start.date() != local_end.date():
            continue
        if weekday_number(local_start.date()) != availability.day_of_week:
            continue
        if availability.is_time_slot_available(local_start.time(), local_end.time()):
            return True
    return False
