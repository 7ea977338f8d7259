"""Observe assistant responses and fold them into session state."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..compile.compiler import load_state
from ..storage.base import Store
from ..types.types import SessionState
from .extract import extract_structured_updates, new_id, utc_now_iso
from .merge import apply_updates

logger = logging.getLogger(__name__)


def observe(
    store: Store,
    session_id: str,
    assistant_text: str,
    id_factory: Callable[[], str] = new_id,
    clock: Callable[[], str] = utc_now_iso,
) -> SessionState:
    """Record an assistant response and merge its markers into the session state.

    The response is always appended as an ``assistant_response`` event, even
    when it carries no markers. The persisted state is overwritten with the
    merged result (last write wins).

    Args:
        store: Session store
        session_id: Session identifier
        assistant_text: Raw model output
        id_factory: Identity source for new decisions and open threads
        clock: Timestamp source (ISO-8601 strings)

    Returns:
        The merged SessionState

    Raises:
        SessionNotFound: If the session was never created (checked before any write)
    """
    current = load_state(store, session_id)

    store.append_event(
        session_id,
        "assistant_response",
        {"text": assistant_text, "timestamp": clock()},
    )

    updates = extract_structured_updates(assistant_text, id_factory=id_factory, clock=clock)
    if updates.is_empty():
        logger.debug("No state markers in assistant response for session %s", session_id)

    new_state = apply_updates(current, updates)
    store.upsert_session(session_id, new_state.to_json())

    logger.info(
        "Observed session %s: +%d decisions, +%d constraints, +%d open threads, %d glossary",
        session_id,
        len(updates.decisions),
        len(new_state.constraints) - len(current.constraints),
        len(updates.open_threads),
        len(updates.glossary),
    )
    return new_state
