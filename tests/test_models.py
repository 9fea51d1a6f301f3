"""Tests for value models, commands and the session context."""

import pytest
from pydantic import ValidationError

from cnnct.core.exceptions import SessionError
from cnnct.models import (
    AcceptEvent,
    Event,
    Participant,
    ParticipantStatus,
    RejectEvent,
    SessionContext,
    SetParticipant,
)
from cnnct.models.commands import command_from_payload

from conftest import make_event


class TestParticipantModel:
    """Tests for the Participant value."""

    def test_defaults_to_pending(self):
        """Test that participants start as Pending."""
        participant = Participant(identity="a@x.com")
        assert participant.status == ParticipantStatus.PENDING
        assert participant.user_id is None

    def test_identity_is_stripped(self):
        """Test that identities are stripped."""
        assert Participant(identity="  a@x.com ").identity == "a@x.com"

    def test_blank_identity_rejected(self):
        """Test that a blank identity is rejected."""
        with pytest.raises(ValidationError):
            Participant(identity="   ")

    def test_is_immutable(self):
        """Test that participants are immutable."""
        participant = Participant(identity="a@x.com")
        with pytest.raises(ValidationError):
            participant.status = ParticipantStatus.ACCEPTED

    def test_with_status_returns_copy(self):
        """Test that with_status returns a new participant."""
        participant = Participant(identity="a@x.com")
        accepted = participant.with_status(ParticipantStatus.ACCEPTED)

        assert accepted.status == ParticipantStatus.ACCEPTED
        assert participant.status == ParticipantStatus.PENDING


class TestEventModel:
    """Tests for the Event value."""

    def test_defaults(self):
        """Test event defaults."""
        event = Event(id="e1")
        assert event.overall_status == ParticipantStatus.PENDING
        assert event.participants == ()
        assert event.scheduled_at.date == ""

    def test_display_title_falls_back_to_topic(self):
        """Test the title fallback to the event topic."""
        event = Event(id="e1", scheduled_at={"event_topic": "Quarterly review"})
        assert event.display_title == "Quarterly review"
        assert Event(id="e2").display_title == "Meeting"

    def test_participants_with(self):
        """Test filtering participants by status."""
        event = make_event(
            participants={
                "a@x.com": ParticipantStatus.ACCEPTED,
                "b@x.com": ParticipantStatus.REJECTED,
                "c@x.com": ParticipantStatus.ACCEPTED,
            }
        )
        accepted = event.participants_with(ParticipantStatus.ACCEPTED)
        assert [p.identity for p in accepted] == ["a@x.com", "c@x.com"]


class TestCommandFromPayload:
    """Tests for turning dashboard payloads into commands."""

    def test_whole_event_accept(self):
        """Test a whole-event accept payload."""
        assert command_from_payload({"status": "Accepted"}) == AcceptEvent()

    def test_whole_event_reject(self):
        """Test a whole-event reject payload."""
        assert command_from_payload({"status": "Rejected"}) == RejectEvent()

    def test_participant_update(self):
        """Test a participant update payload."""
        command = command_from_payload(
            {"participantUpdate": {"email": "a@x.com", "status": "Rejected"}}
        )
        assert command == SetParticipant(identity="a@x.com", status=ParticipantStatus.REJECTED)

    def test_checkbox_spelling(self):
        """Test the short Accept/Reject spellings."""
        command = command_from_payload(
            {"participantUpdate": {"email": "a@x.com", "status": "Accept"}}
        )
        assert command.status == ParticipantStatus.ACCEPTED

    def test_pending_event_status_rejected(self):
        """Test that Pending is not a whole-event update."""
        with pytest.raises(ValueError):
            command_from_payload({"status": "Pending"})

    def test_unknown_payload_rejected(self):
        """Test a payload of neither shape."""
        with pytest.raises(ValueError):
            command_from_payload({})

    def test_unknown_status_rejected(self):
        """Test an unknown status value."""
        with pytest.raises(ValueError):
            command_from_payload({"participantUpdate": {"email": "a@x.com", "status": "Maybe"}})


class TestSessionContext:
    """Tests for the explicit session lifecycle."""

    def test_save_and_load(self, tmp_path, session_context):
        """Test saving and loading a session."""
        path = tmp_path / "session" / "session.json"
        session_context.save(path)

        loaded = SessionContext.load(path)
        assert loaded == session_context
        assert loaded.is_authenticated

    def test_load_missing_returns_none(self, tmp_path):
        """Test loading when nothing was saved."""
        assert SessionContext.load(tmp_path / "missing.json") is None

    def test_load_corrupt_raises(self, tmp_path):
        """Test that a corrupt session file raises SessionError."""
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SessionError):
            SessionContext.load(path)

    def test_clear(self, tmp_path, session_context):
        """Test signing out."""
        path = session_context.save(tmp_path / "session.json")
        SessionContext.clear(path)

        assert not path.exists()
        SessionContext.clear(path)  # clearing twice is fine

    def test_anonymous_session(self):
        """Test a session without a token."""
        assert not SessionContext(user_id="u1").is_authenticated
