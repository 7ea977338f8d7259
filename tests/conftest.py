"""Shared pytest configuration and fixtures."""

import itertools

import pytest

from memory_runtime.runtime.session import Session
from memory_runtime.storage.sqlite_store import create_sqlite_store
from memory_runtime.types.types import Artifact, EvidenceItem


def long_content(tokens: int) -> str:
    """Generate content that estimates to exactly `tokens` tokens.

    estimate_tokens uses ceil(len(text) / 4), so N*4 chars == N tokens.
    """
    return "x" * (tokens * 4)


_artifact_counter = itertools.count()


def make_artifact(
    content: str = "print('hello')",
    kind: str = "snippet",
    source: str = "src/app.py",
    pinned: bool = False,
    meta: dict | None = None,
    created_at: str | None = None,
    artifact_id: str | None = None,
) -> Artifact:
    """Build an Artifact without a store."""
    n = next(_artifact_counter)
    return Artifact(
        artifact_id=artifact_id or f"artifact-{n:04d}",
        session_id="test-session",
        kind=kind,
        source=source,
        version_hash=f"hash{n:04d}",
        content=content,
        meta=meta,
        pinned=pinned,
        created_at=created_at or f"2024-01-01T00:00:{n % 60:02d}.{n:06d}+00:00",
    )


def make_item(priority: int = 50, rationale: str = "Code snippet", **artifact_kwargs) -> EvidenceItem:
    """Build an EvidenceItem around a fresh Artifact."""
    return EvidenceItem(
        artifact=make_artifact(**artifact_kwargs), priority=priority, rationale=rationale
    )


@pytest.fixture
def store(tmp_path):
    """A file-backed SQLite store in a temp directory."""
    sqlite_store = create_sqlite_store(str(tmp_path / "runtime.sqlite"))
    yield sqlite_store
    sqlite_store.close()


@pytest.fixture
def memory_store():
    """An in-memory SQLite store."""
    sqlite_store = create_sqlite_store(":memory:")
    yield sqlite_store
    sqlite_store.close()


@pytest.fixture
def session(store):
    """A fresh session bound to the temp store."""
    return Session(store, "test-session")


@pytest.fixture
def artifact_factory():
    """Factory for store-less Artifacts."""
    return make_artifact


@pytest.fixture
def item_factory():
    """Factory for EvidenceItems."""
    return make_item


@pytest.fixture
def content_of():
    """Factory for content estimating to an exact token count."""
    return long_content
