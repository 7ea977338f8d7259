"""Generic event ingestion.

Ingestion is two composed steps: ``record_event`` always appends to the event
log, and ``record_artifact`` additionally stores an artifact for
artifact-bearing event types whose payload has content.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from ..errors import InvalidEventType
from ..storage.base import Store
from ..types.types import ARTIFACT_KINDS, EVENT_TYPES, Event

logger = logging.getLogger(__name__)

# Payload keys lifted into artifact columns instead of meta.
_ARTIFACT_FIELDS = ("content", "versionHash", "pinned")


def content_hash(content: str) -> str:
    """Short content fingerprint: first 16 hex chars of sha256."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]


def validate_event(event: Event) -> None:
    """Raise InvalidEventType unless ``event.type`` is in the closed set."""
    if event.type not in EVENT_TYPES:
        raise InvalidEventType(event.type)


def record_event(store: Store, session_id: str, event: Event) -> int:
    """Append ``event`` to the session's log and return its sequence number.

    Raises:
        InvalidEventType: Before any write, if the type is unknown
    """
    validate_event(event)
    return store.append_event(session_id, event.type, event.payload)


def record_artifact(store: Store, session_id: str, event: Event) -> str | None:
    """Store an artifact for ``event`` if it carries one.

    Only artifact kinds with non-empty ``payload["content"]`` produce an
    artifact. Returns the artifact id, or None.

    Raises:
        InvalidEventType: Before any write, if the type is unknown
    """
    validate_event(event)
    payload: dict[str, Any] = event.payload
    content = payload.get("content")
    if event.type not in ARTIFACT_KINDS or not content:
        return None

    source = payload.get("source") or payload.get("path") or "unknown"
    version_hash = payload.get("versionHash") or content_hash(content)
    meta = {key: value for key, value in payload.items() if key not in _ARTIFACT_FIELDS}

    artifact_id = store.put_artifact(
        session_id,
        event.type,
        str(source),
        version_hash,
        content,
        meta or None,
        payload.get("pinned") is True,
    )
    logger.info("Ingested %s artifact %s from %s", event.type, artifact_id, source)
    return artifact_id


def ingest_event(store: Store, session_id: str, event: Event | dict[str, Any]) -> str | None:
    """Validate, record the event, then record its artifact if any.

    Returns:
        The new artifact id, or None when the event carries no artifact
    """
    if isinstance(event, dict):
        event = Event.model_validate(event)
    validate_event(event)
    record_event(store, session_id, event)
    return record_artifact(store, session_id, event)
