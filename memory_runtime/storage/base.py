"""Base class for session/event/artifact stores."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from ..types.types import Artifact, StoredEvent, StoredSession


class Store(ABC):
    """Append-only event log plus keyed artifact table, scoped per session.

    Every operation is fail-fast: implementations raise ``StoreFailure`` rather
    than returning partial results. Callers never retry.
    """

    def init(self) -> None:
        """Create the backing schema. No-op by default."""

    @abstractmethod
    def get_session(self, session_id: str) -> StoredSession | None:
        """Return the session row, or None if the session was never created."""

    @abstractmethod
    def upsert_session(self, session_id: str, state_json: str) -> None:
        """Create the session or overwrite its state snapshot."""

    @abstractmethod
    def append_event(self, session_id: str, type: str, payload: dict[str, Any]) -> int:
        """Append one event and return its sequence number."""

    @abstractmethod
    def list_recent_events(
        self, session_id: str, types: Sequence[str] | None = None, limit: int = 100
    ) -> list[StoredEvent]:
        """List events newest-first, optionally filtered by type."""

    @abstractmethod
    def put_artifact(
        self,
        session_id: str,
        kind: str,
        source: str,
        version_hash: str,
        content: str,
        meta: dict[str, Any] | None = None,
        pinned: bool = False,
    ) -> str:
        """Store a new artifact and return its id."""

    @abstractmethod
    def list_recent_artifacts(
        self, session_id: str, kinds: Sequence[str] | None = None, limit: int = 50
    ) -> list[Artifact]:
        """List artifacts newest-first, optionally filtered by kind."""

    def close(self) -> None:
        """Release resources. No-op by default."""

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
