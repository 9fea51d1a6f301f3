"""Tests for the SQL persistence gateway."""

import pytest
from sqlmodel import Session, SQLModel, select

from cnnct.core.exceptions import EventNotFoundError, PersistenceError
from cnnct.gateway.documents import event_from_document
from cnnct.models import MeetingDetails, ParticipantRecord, ParticipantStatus


async def create_sample(gateway, owner_id="user-1", emails=("alice@example.com", "bob@example.com")):
    return await gateway.create_event(
        owner_id=owner_id,
        title="  Design review ",
        emails=emails,
        details=MeetingDetails(date="2026-06-01", time="10:00", duration="1h"),
        link="https://meet.example.com/abc",
    )


class TestCreateEvent:
    @pytest.mark.asyncio
    async def test_creates_pending_participants(self, gateway):
        """Test creating an event with pending invitees."""
        event = await create_sample(gateway)

        assert event.title == "Design review"
        assert event.overall_status == ParticipantStatus.PENDING
        assert [p.identity for p in event.participants] == ["alice@example.com", "bob@example.com"]
        assert all(p.status == ParticipantStatus.PENDING for p in event.participants)
        assert event.scheduled_at.time == "10:00"

    @pytest.mark.asyncio
    async def test_collapses_duplicate_invitees(self, gateway):
        """Test that duplicate and blank invitees are dropped."""
        event = await create_sample(
            gateway, emails=["j.doe@x.com", "JDoe@x.com ", "", "ann@x.com"]
        )

        assert [p.identity for p in event.participants] == ["j.doe@x.com", "ann@x.com"]


class TestReadEvents:
    @pytest.mark.asyncio
    async def test_list_is_scoped_to_owner(self, gateway):
        """Test that listing is scoped to the owner."""
        mine = await create_sample(gateway, owner_id="user-1")
        other = await create_sample(gateway, owner_id="user-2")

        listed = await gateway.list_events("user-1")

        assert [e.id for e in listed] == [mine.id]
        assert other.id not in [e.id for e in listed]

    @pytest.mark.asyncio
    async def test_get_event(self, gateway):
        """Test fetching an event by id."""
        created = await create_sample(gateway)
        fetched = await gateway.get_event(created.id)

        assert fetched.id == created.id
        assert fetched.participants == created.participants

    @pytest.mark.asyncio
    async def test_get_missing_event(self, gateway):
        """Test fetching an unknown event."""
        with pytest.raises(EventNotFoundError):
            await gateway.get_event("missing")


class TestStatusChanges:
    @pytest.mark.asyncio
    async def test_accept_event(self, gateway):
        """Test accepting a stored event."""
        created = await create_sample(gateway)

        stored = await gateway.set_event_status(created.id, ParticipantStatus.ACCEPTED)

        assert stored.overall_status == ParticipantStatus.ACCEPTED
        assert all(p.status == ParticipantStatus.ACCEPTED for p in stored.participants)
        assert (await gateway.get_event(created.id)) == stored

    @pytest.mark.asyncio
    async def test_pending_is_not_an_event_response(self, gateway):
        """Test that Pending is not a whole-event response."""
        created = await create_sample(gateway)

        with pytest.raises(ValueError):
            await gateway.set_event_status(created.id, ParticipantStatus.PENDING)

    @pytest.mark.asyncio
    async def test_participant_response_is_matched(self, gateway):
        """Test that a response is matched to the existing participant."""
        created = await create_sample(gateway)

        stored = await gateway.set_participant_status(
            created.id, "Alice@Example.com", ParticipantStatus.ACCEPTED
        )

        assert [(p.identity, p.status) for p in stored.participants] == [
            ("alice@example.com", ParticipantStatus.ACCEPTED),
            ("bob@example.com", ParticipantStatus.PENDING),
        ]
        assert stored.overall_status == ParticipantStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_unknown_participant_is_added(self, gateway, engine):
        """Test that an unknown identity is stored as a new participant."""
        created = await create_sample(gateway, emails=["alice@example.com"])

        await gateway.set_participant_status(created.id, "alice@example.com", ParticipantStatus.REJECTED)
        stored = await gateway.set_participant_status(
            created.id, "zed@other.org", ParticipantStatus.REJECTED
        )

        assert len(stored.participants) == 2
        assert stored.overall_status == ParticipantStatus.REJECTED
        with Session(engine) as session:
            rows = session.exec(select(ParticipantRecord)).all()
            assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_missing_event(self, gateway):
        """Test responding to an unknown event."""
        with pytest.raises(EventNotFoundError):
            await gateway.set_participant_status("missing", "a@x.com", ParticipantStatus.ACCEPTED)


class TestSaveAndDelete:
    @pytest.mark.asyncio
    async def test_save_imported_document(self, gateway):
        """Test saving an event converted from a document."""
        event = event_from_document(
            {
                "_id": "legacy-1",
                "title": "Imported",
                "createdBy": "user-1",
                "status": "Accepted",
                "meetingDetails": {"date": "2026-06-01", "time": "10:00"},
                "participants": [{"email": "a@x.com", "status": "Accepted"}],
            }
        )

        await gateway.save_event(event)
        stored = await gateway.get_event("legacy-1")

        assert stored.overall_status == ParticipantStatus.ACCEPTED
        assert stored.owner_id == "user-1"
        assert [p.identity for p in stored.participants] == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_save_overwrites(self, gateway):
        """Test that saving overwrites the stored event."""
        created = await create_sample(gateway)
        changed = created.model_copy(update={"title": "Renamed", "participants": ()})

        stored = await gateway.save_event(changed)

        assert stored.title == "Renamed"
        assert stored.participants == ()

    @pytest.mark.asyncio
    async def test_delete_event(self, gateway, engine):
        """Test that deleting removes the participants too."""
        created = await create_sample(gateway)

        await gateway.delete_event(created.id, "user-1")

        with pytest.raises(EventNotFoundError):
            await gateway.get_event(created.id)
        with Session(engine) as session:
            assert session.exec(select(ParticipantRecord)).all() == []

    @pytest.mark.asyncio
    async def test_delete_requires_owner(self, gateway):
        """Test that only the owner can delete an event."""
        created = await create_sample(gateway)

        with pytest.raises(EventNotFoundError):
            await gateway.delete_event(created.id, "user-2")


class TestStorageFailure:
    @pytest.mark.asyncio
    async def test_database_errors_are_wrapped(self, gateway, engine):
        """Test that database errors become PersistenceError."""
        SQLModel.metadata.drop_all(engine)

        with pytest.raises(PersistenceError):
            await gateway.list_events("user-1")
