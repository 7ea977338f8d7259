"""Unit tests for memory_runtime.runtime.session module."""

from unittest.mock import patch

from memory_runtime.ingest import git_diff
from memory_runtime.runtime.session import Session
from memory_runtime.types.types import SessionState, WorkingSet


class TestSession:
    """Tests for the Session facade."""

    def test_creates_session_once(self, store):
        Session(store, "s1")
        created = store.get_session("s1")
        assert SessionState.from_json(created.state_json) == SessionState()
        store.upsert_session("s1", SessionState(constraints=["kept"]).to_json())
        Session(store, "s1")
        assert SessionState.from_json(store.get_session("s1").state_json).constraints == ["kept"]

    def test_set_and_clear_working_set(self, session):
        state = session.set_working_set(["src/auth", "tests"])
        assert state.working_set == WorkingSet(paths=["src/auth", "tests"])
        assert session.get_state().working_set == WorkingSet(paths=["src/auth", "tests"])
        assert session.set_working_set(None).working_set is None
        assert "workingSet" not in session.get_state().to_dict()

    def test_turn_cycle(self, session):
        session.ingest({"type": "user_message", "payload": {"text": "How do we auth?"}})
        session.ingest_snippet("src/auth.py", 1, 3, text="def login(): ...")
        result = session.compile("How do we auth?", 2000)
        assert len(result.debug.included_artifacts) == 1
        state = session.observe("Decision: Use JWT\nConstraint: No new deps")
        assert [d.text for d in state.decisions] == ["Use JWT"]
        types = [e.type for e in session.store.list_recent_events(session.session_id)]
        assert types == ["assistant_response", "snippet", "user_message"]

    def test_compile_prefix_precedence(self, store):
        session = Session(store, "s1", stable_prefix="SESSION")
        assert session.compile("hi", 500).messages[0]["content"].startswith("SESSION\n")
        turn = session.compile("hi", 500, stable_prefix="TURN")
        assert turn.messages[0]["content"].startswith("TURN\n")

    def test_ingest_git_diff_delegates(self, session):
        completed = git_diff.subprocess.CompletedProcess(
            args=["git"], returncode=0, stdout="+change\n", stderr=""
        )
        with patch.object(git_diff.subprocess, "run", return_value=completed):
            artifact_id = session.ingest_git_diff("/repo")
        assert session.store.list_recent_artifacts(session.session_id)[0].artifact_id == artifact_id
