"""Stored form of a weekly availability window."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class AvailabilityRecord(SQLModel, table=True):
    """One availability window, unique per user and day of the week.

    Attributes:
        id: Unique identifier (hex UUID string).
        user_id: Owner of the window.
        day_of_week: 0 (Sunday) to 6 (Saturday).
        start_time: Window start, "HH:mm".
        end_time: Window end, "HH:mm".
        is_available: False marks the day as unavailable.
        timezone: IANA timezone of the window.
        created_at: When the window was first saved.
        updated_at: When the window was last changed.
    """
    __tablename__ = "availability"
    __table_args__ = (UniqueConstraint("user_id", "day_of_week"),)

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool = True
    timezone: str = "UTC"

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
