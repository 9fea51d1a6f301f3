"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest
from sqlmodel.pool import StaticPool

from cnnct.core.database import create_db_and_tables, make_engine
from cnnct.gateway.sql import SqlEventGateway
from cnnct.models import Event, MeetingDetails, Participant, ParticipantStatus, SessionContext

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)


def make_event(
    event_id: str = "evt-1",
    status: ParticipantStatus = ParticipantStatus.PENDING,
    date: str = "2026-06-01",
    time: str = "10:00",
    participants: dict[str, ParticipantStatus] | None = None,
    title: str = "Team Sync",
) -> Event:
    """Build an event with the given participants and schedule."""
    return Event(
        id=event_id,
        title=title,
        overall_status=status,
        scheduled_at=MeetingDetails(date=date, time=time, duration="1h"),
        participants=tuple(
            Participant(identity=identity, status=p_status)
            for identity, p_status in (participants or {}).items()
        ),
        owner_id="user-1",
    )


@pytest.fixture(name="now")
def now_fixture() -> datetime:
    """A fixed point in time all scheduling tests are measured against."""
    return NOW


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = make_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="gateway")
def gateway_fixture(engine) -> SqlEventGateway:
    """SQL gateway over the in-memory database."""
    return SqlEventGateway(engine)


@pytest.fixture(name="session_context")
def session_context_fixture() -> SessionContext:
    """Signed-in user owning the test events."""
    return SessionContext(user_id="user-1", email="owner@example.com", token="t0k3n")


@pytest.fixture(name="pending_event")
def pending_event_fixture() -> Event:
    """A future event nobody has answered yet."""
    return make_event(
        participants={
            "alice@example.com": ParticipantStatus.PENDING,
            "bob@example.com": ParticipantStatus.PENDING,
        }
    )
