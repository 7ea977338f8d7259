"""Unit tests for memory_runtime.state.observe module."""

import pytest

from memory_runtime.errors import SessionNotFound
from memory_runtime.state.observe import observe
from memory_runtime.types.types import GlossaryEntry, SessionState

RESPONSE = (
    "Sounds good.\n"
    "Decision: Use JWT\n"
    "Constraint: No new deps\n"
    "Open: Rotate keys?\n"
    "Glossary: JWT - JSON Web Token\n"
)


class TestObserve:
    """Tests for observe function."""

    def test_missing_session_writes_nothing(self, store):
        with pytest.raises(SessionNotFound):
            observe(store, "ghost", RESPONSE)
        assert store.get_session("ghost") is None

    def test_extracts_and_persists(self, session):
        new_state = observe(session.store, session.session_id, RESPONSE)
        assert [d.text for d in new_state.decisions] == ["Use JWT"]
        assert new_state.constraints == ["No new deps"]
        assert [t.question for t in new_state.open_threads] == ["Rotate keys?"]
        assert new_state.glossary == [GlossaryEntry(term="JWT", definition="JSON Web Token")]
        assert session.get_state() == new_state

    def test_appends_assistant_response_event(self, session):
        observe(session.store, session.session_id, RESPONSE, clock=lambda: "T0")
        events = session.store.list_recent_events(session.session_id, ["assistant_response"])
        assert len(events) == 1
        assert events[0].payload == {"text": RESPONSE, "timestamp": "T0"}

    def test_event_appended_without_markers(self, session):
        new_state = observe(session.store, session.session_id, "No markers here.")
        assert new_state == SessionState()
        events = session.store.list_recent_events(session.session_id)
        assert [e.type for e in events] == ["assistant_response"]

    def test_repeat_observation(self, session):
        observe(session.store, session.session_id, RESPONSE)
        state = observe(session.store, session.session_id, RESPONSE)
        assert state.constraints == ["No new deps"]
        assert len(state.glossary) == 1
        assert [d.text for d in state.decisions] == ["Use JWT", "Use JWT"]
        assert len(state.open_threads) == 2
        assert state.decisions[0].id != state.decisions[1].id
        assert len(session.store.list_recent_events(session.session_id)) == 2

    def test_glossary_redefinition(self, session):
        observe(session.store, session.session_id, "Glossary: JWT - old meaning")
        state = observe(session.store, session.session_id, "Glossary: jwt - JSON Web Token")
        assert state.glossary == [GlossaryEntry(term="JWT", definition="JSON Web Token")]

    def test_keeps_working_set(self, session):
        session.set_working_set(["src/auth"])
        state = observe(session.store, session.session_id, "Decision: keep going")
        assert state.working_set.paths == ["src/auth"]

    def test_injected_identity_and_clock(self, session):
        state = observe(
            session.store,
            session.session_id,
            "Decision: pin versions",
            id_factory=lambda: "fixed-id",
            clock=lambda: "2024-01-01T00:00:00+00:00",
        )
        assert state.decisions[0].id == "fixed-id"
        assert state.decisions[0].created_at == "2024-01-01T00:00:00+00:00"
