"""Weekly availability of a user.

Each user keeps at most one availability window per day of the week. Days
are numbered 0 (Sunday) to 6 (Saturday) and window bounds are "HH:mm"
strings in the window's own timezone.
"""

from datetime import time

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cnnct.core.config import settings

HH_MM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _as_time(value: time | str) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


class Availability(BaseModel):
    """A user's availability window on one day of the week.

    Attributes:
        user_id: Owner of the window.
        day_of_week: 0 (Sunday) to 6 (Saturday).
        start_time: Start of the window, "HH:mm".
        end_time: End of the window, "HH:mm", after the start.
        is_available: False marks the whole day as unavailable.
        timezone: IANA timezone the window is expressed in.
        id: Storage id, set once the window has been saved.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    day_of_week: int = Field(ge=0, le=6)
    start_time: str = Field(pattern=HH_MM_PATTERN)
    end_time: str = Field(pattern=HH_MM_PATTERN)
    is_available: bool = True
    timezone: str = settings.default_timezone
    id: str | None = None

    @model_validator(mode="after")
    def window_is_ordered(self) -> "Availability":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def start(self) -> time:
        return _as_time(self.start_time)

    @property
    def end(self) -> time:
        return _as_time(self.end_time)

    def is_time_slot_available(self, start: time | str, end: time | str) -> bool:
        """
        Check whether the slot from ``start`` to ``end`` lies inside the window.

        Bounds are inclusive. A day marked unavailable has no free slot.

        Raises:
            ValueError: If a bound given as a string is not a time of day.
        """
        if not self.is_available:
            return False
        return self.start <= _as_time(start) and _as_time(end) <= self.end
