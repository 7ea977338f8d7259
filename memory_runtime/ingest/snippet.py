"""Code snippet ingestion helper."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from ..storage.base import Store
from .ingest import content_hash

logger = logging.getLogger(__name__)


def read_line_range(path: str, start_line: int, end_line: int) -> str:
    """Return lines ``start_line``..``end_line`` (1-based, inclusive) of a file."""
    lines = Path(path).read_text(encoding="utf-8").split("\n")
    return "\n".join(lines[max(start_line - 1, 0) : end_line])


def ingest_snippet(
    store: Store,
    session_id: str,
    path: str,
    start_line: int,
    end_line: int,
    text: str | None = None,
    pinned: bool = False,
) -> str:
    """Store a code snippet as a ``snippet`` artifact and log a ``snippet`` event.

    Content is ``text`` when given, otherwise read from ``path``.

    Returns:
        The new artifact id
    """
    content = text if text else read_line_range(path, start_line, end_line)
    version_hash = content_hash(content)

    artifact_id = store.put_artifact(
        session_id,
        "snippet",
        path,
        version_hash,
        content,
        {
            "path": path,
            "startLine": start_line,
            "endLine": end_line,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        pinned,
    )
    store.append_event(
        session_id,
        "snippet",
        {
            "artifactId": artifact_id,
            "path": path,
            "startLine": start_line,
            "endLine": end_line,
            "versionHash": version_hash,
        },
    )
    logger.info("Ingested snippet %s (%s:%d-%d)", artifact_id, path, start_line, end_line)
    return artifact_id
