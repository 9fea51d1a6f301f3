"""Parse and format the free-text meeting date, time and duration."""
import logging
import re
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

from cnnct.core.config import settings
from cnnct.models.event import MeetingDetails

logger = logging.getLogger(__name__)

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# "1h", "1 hour", "1h 30m", "90 min", "45 minutes", "1.5 hours"
DURATION_PATTERN = re.compile(
    r"^\s*(?:(?P<hours>\d+(?:\.\d+)?)\s*h(?:ours?|rs?)?)?"
    r"\s*(?:(?P<minutes>\d+)\s*m(?:in(?:ute)?s?)?)?\s*$",
    re.IGNORECASE,
)

# "10" is an hour, "1030" is 10:30
BARE_TIME_PATTERN = re.compile(r"^(?P<hour>\d{1,2}?)(?P<minute>\d{2})?$")

DEFAULT_RANGE_HOURS = 2


def get_timezone(name: str | None = None) -> ZoneInfo:
    """Return the named timezone, falling back to the configured default."""
    name = name or settings.default_timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, using UTC")
        return ZoneInfo("UTC")


def ensure_aware(dt: datetime, tz_name: str | None = None) -> datetime:
    """Attach the default timezone to a naive datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=get_timezone(tz_name))
    return dt


def parse_time(value: str) -> time | None:
    """
    Parse a start time such as "10:30", "2:00 pm", "14:00", "10" or "1030".

    Bare digits are an hour ("10") or hours and minutes ("1030"); dateutil
    would read them as a day or a year. Returns None if the value is blank
    or not a time of day.
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    match = BARE_TIME_PATTERN.match(value)
    if match:
        hour = int(match.group("hour"))
        minute = int(match.group("minute") or 0)
        if hour > 23 or minute > 59:
            return None
        return time(hour, minute)

    try:
        parsed = date_parser.parse(value, default=datetime(2000, 1, 1))
    except (ValueError, OverflowError):
        return None
    return parsed.time()


def parse_duration(value: str) -> timedelta | None:
    """
    Parse a meeting length.

    Bare numbers are minutes. Returns None for blank or unrecognized text.
    """
    if not value or not value.strip():
        return None
    value = value.strip()
    if value.isdigit():
        return timedelta(minutes=int(value))

    match = DURATION_PATTERN.match(value)
    if not match or not (match.group("hours") or match.group("minutes")):
        return None
    hours = float(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    return timedelta(hours=hours, minutes=minutes)


def parse_scheduled_at(
    details: MeetingDetails, tz_name: str | None = None
) -> datetime | None:
    """
    Combine the free-text date and time into an aware datetime.

    A missing time means midnight. A date string that already carries a
    time (ISO timestamps) is used as is. Returns None when the date is
    blank or cannot be parsed; callers decide how to degrade.
    """
    if not details.date or not details.date.strip():
        return None

    try:
        day = date_parser.parse(details.date.strip())
    except (ValueError, OverflowError):
        return None

    start = parse_time(details.time)
    if start is not None:
        day = day.replace(
            hour=start.hour, minute=start.minute, second=0, microsecond=0
        )
    return ensure_aware(day, tz_name)


def scheduled_end(details: MeetingDetails, tz_name: str | None = None) -> datetime | None:
    """Start plus duration, or plus the default duration if unparseable."""
    start = parse_scheduled_at(details, tz_name)
    if start is None:
        return None
    duration = parse_duration(details.duration)
    if duration is None:
        duration = timedelta(minutes=settings.default_duration_minutes)
    return start + duration


def _format_clock(value: time) -> str:
    period = "pm" if value.hour >= 12 else "am"
    hour12 = value.hour % 12 or 12
    return f"{hour12}:{value.minute:02d} {period}"


def format_time_range(start: str, duration: str = "") -> str:
    """
    Format a start time as a range, e.g. "10:30 am - 12:30 pm".

    The end uses the parsed duration, or two hours when there is none.
    Unparseable input is returned unchanged.
    """
    parsed = parse_time(start)
    if parsed is None:
        return start
    length = parse_duration(duration) or timedelta(hours=DEFAULT_RANGE_HOURS)
    end = (datetime.combine(datetime(2000, 1, 1), parsed) + length).time()
    return f"{_format_clock(parsed)} - {_format_clock(end)}"


def format_date(value: str) -> str:
    """Format a date as "Monday, 5 May". Unparseable input is returned unchanged."""
    if not value or not value.strip():
        return value
    try:
        day = date_parser.parse(value.strip())
    except (ValueError, OverflowError):
        return value
    return f"{DAYS[day.weekday()]}, {day.day} {MONTHS[day.month - 1]}"
