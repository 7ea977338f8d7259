"""SQLite implementation of the store contract."""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..errors import StoreFailure
from ..types.types import ARTIFACT_KINDS, EVENT_TYPES, Artifact, StoredEvent, StoredSession
from .base import Store

logger = logging.getLogger(__name__)


def _kind_list(values: Sequence[str]) -> str:
    return ",".join(f"'{value}'" for value in values)


SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS sessions (
    session_id TEXT PRIMARY KEY,
    state_json TEXT NOT NULL DEFAULT '{{}}',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_sessions_updated ON sessions(updated_at);

CREATE TABLE IF NOT EXISTS events (
    event_id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT NOT NULL,
    type TEXT NOT NULL CHECK(type IN ({_kind_list(EVENT_TYPES)})),
    payload_json TEXT NOT NULL DEFAULT '{{}}',
    created_at TEXT NOT NULL,
    FOREIGN KEY (session_id) REFERENCES sessions(session_id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_events_session_type ON events(session_id, type);

CREATE TABLE IF NOT EXISTS artifacts (
    artifact_id TEXT PRIMARY KEY,
    session_id TEXT NOT NULL,
    kind TEXT NOT NULL CHECK(kind IN ({_kind_list(ARTIFACT_KINDS)})),
    source TEXT NOT NULL,
    version_hash TEXT NOT NULL,
    content TEXT NOT NULL,
    meta_json TEXT,
    pinned INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    FOREIGN KEY (session_id) REFERENCES sessions(session_id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_artifacts_session_kind ON artifacts(session_id, kind);
CREATE INDEX IF NOT EXISTS idx_artifacts_pinned ON artifacts(session_id, pinned);
"""


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_text(value: dict[str, Any] | None) -> str:
    return json.dumps(value or {}, ensure_ascii=True, default=str)


def prepare_db_path(db_path: str) -> str:
    """Create parent directories for file-backed SQLite paths."""
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return db_path


class SqliteStore(Store):
    """Store backed by a single SQLite connection.

    Artifacts are ordered by insertion (``rowid``), so "newest first" never
    depends on clock resolution.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        try:
            self._conn = sqlite3.connect(prepare_db_path(db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        except (sqlite3.Error, OSError) as err:
            raise StoreFailure("open", reason=f"{db_path}: {err}") from err

    @contextmanager
    def _operation(self, operation: str, session_id: str | None = None) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as err:
            logger.error("Store operation %s failed for session %s: %s", operation, session_id, err)
            raise StoreFailure(operation, session_id, str(err)) from err

    def init(self) -> None:
        with self._operation("init"):
            self._conn.executescript(SCHEMA_SQL)

    def get_session(self, session_id: str) -> StoredSession | None:
        with self._operation("get_session", session_id):
            row = self._conn.execute(
                "SELECT * FROM sessions WHERE session_id = ?", (session_id,)
            ).fetchone()
        if row is None:
            return None
        return StoredSession(**dict(row))

    def upsert_session(self, session_id: str, state_json: str) -> None:
        now = _utc_now_iso()
        with self._operation("upsert_session", session_id), self._conn:
            self._conn.execute(
                """
                INSERT INTO sessions (session_id, state_json, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(session_id) DO UPDATE SET
                    state_json = excluded.state_json,
                    updated_at = excluded.updated_at
                """,
                (session_id, state_json, now, now),
            )

    def append_event(self, session_id: str, type: str, payload: dict[str, Any]) -> int:
        with self._operation("append_event", session_id), self._conn:
            cursor = self._conn.execute(
                """
                INSERT INTO events (session_id, type, payload_json, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (session_id, type, _json_text(payload), _utc_now_iso()),
            )
        return int(cursor.lastrowid)

    def list_recent_events(
        self, session_id: str, types: Sequence[str] | None = None, limit: int = 100
    ) -> list[StoredEvent]:
        sql = ["SELECT * FROM events WHERE session_id = ?"]
        args: list[Any] = [session_id]
        if types:
            sql.append(f"AND type IN ({','.join('?' for _ in types)})")
            args.extend(types)
        sql.append("ORDER BY event_id DESC LIMIT ?")
        args.append(limit)
        with self._operation("list_recent_events", session_id):
            rows = self._conn.execute(" ".join(sql), tuple(args)).fetchall()
        return [
            StoredEvent(
                event_id=row["event_id"],
                session_id=row["session_id"],
                type=row["type"],
                payload=json.loads(row["payload_json"] or "{}"),
                created_at=row["created_at"],
            )
            for row in rows
        ]

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
        artifact_id = str(uuid.uuid4())
        meta_json = _json_text(meta) if meta else None
        with self._operation("put_artifact", session_id), self._conn:
            self._conn.execute(
                """
                INSERT INTO artifacts (
                    artifact_id, session_id, kind, source, version_hash, content,
                    meta_json, pinned, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    artifact_id,
                    session_id,
                    kind,
                    source,
                    version_hash,
                    content,
                    meta_json,
                    1 if pinned else 0,
                    _utc_now_iso(),
                ),
            )
        logger.debug("Stored %s artifact %s for session %s", kind, artifact_id, session_id)
        return artifact_id

    def list_recent_artifacts(
        self, session_id: str, kinds: Sequence[str] | None = None, limit: int = 50
    ) -> list[Artifact]:
        sql = ["SELECT * FROM artifacts WHERE session_id = ?"]
        args: list[Any] = [session_id]
        if kinds:
            sql.append(f"AND kind IN ({','.join('?' for _ in kinds)})")
            args.extend(kinds)
        sql.append("ORDER BY rowid DESC LIMIT ?")
        args.append(limit)
        with self._operation("list_recent_artifacts", session_id):
            rows = self._conn.execute(" ".join(sql), tuple(args)).fetchall()
        return [
            Artifact(
                artifact_id=row["artifact_id"],
                session_id=row["session_id"],
                kind=row["kind"],
                source=row["source"],
                version_hash=row["version_hash"],
                content=row["content"],
                meta=json.loads(row["meta_json"]) if row["meta_json"] else None,
                pinned=bool(row["pinned"]),
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def close(self) -> None:
        with self._operation("close"):
            self._conn.close()


def create_sqlite_store(db_path: str) -> SqliteStore:
    """Open a SQLite store and make sure its schema exists."""
    store = SqliteStore(db_path)
    store.init()
    return store
