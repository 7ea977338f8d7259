"""Unit tests for memory_runtime.ingest.snippet module."""

import pytest

from memory_runtime.ingest.ingest import content_hash
from memory_runtime.ingest.snippet import ingest_snippet, read_line_range


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "module.py"
    path.write_text("line1\nline2\nline3\nline4\n", encoding="utf-8")
    return path


class TestReadLineRange:
    """Tests for read_line_range function."""

    def test_inclusive_one_based(self, source_file):
        assert read_line_range(str(source_file), 2, 3) == "line2\nline3"

    def test_range_past_end(self, source_file):
        assert read_line_range(str(source_file), 4, 10) == "line4\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_line_range(str(tmp_path / "missing.py"), 1, 2)


class TestIngestSnippet:
    """Tests for ingest_snippet function."""

    def test_reads_file_when_no_text(self, session, source_file):
        artifact_id = ingest_snippet(session.store, session.session_id, str(source_file), 1, 2)
        (artifact,) = session.store.list_recent_artifacts(session.session_id)
        assert artifact.artifact_id == artifact_id
        assert artifact.kind == "snippet"
        assert artifact.content == "line1\nline2"
        assert artifact.source == str(source_file)
        assert artifact.meta["startLine"] == 1
        assert artifact.meta["endLine"] == 2
        assert "timestamp" in artifact.meta

    def test_explicit_text(self, session):
        ingest_snippet(session.store, session.session_id, "src/x.py", 10, 12, text="x = 1", pinned=True)
        artifact = session.store.list_recent_artifacts(session.session_id)[0]
        assert artifact.content == "x = 1"
        assert artifact.version_hash == content_hash("x = 1")
        assert artifact.pinned is True
        assert artifact.path == "src/x.py"

    def test_logs_snippet_event(self, session):
        artifact_id = ingest_snippet(session.store, session.session_id, "src/x.py", 1, 1, text="y")
        (event,) = session.store.list_recent_events(session.session_id)
        assert event.type == "snippet"
        assert event.payload == {
            "artifactId": artifact_id,
            "path": "src/x.py",
            "startLine": 1,
            "endLine": 1,
            "versionHash": content_hash("y"),
        }
