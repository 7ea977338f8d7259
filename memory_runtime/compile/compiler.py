"""Compilation orchestration: select, budget, format."""

from __future__ import annotations

import logging

from ..errors import SessionNotFound
from ..storage.base import Store
from ..types.types import CompileDebug, CompileOptions, CompileResult, SessionState
from .budget import apply_budget
from .format import format_messages
from .select_evidence import select_evidence
from .types import CompileConfig, NormalizedCompileConfig, normalize_compile_config

logger = logging.getLogger(__name__)


def load_state(store: Store, session_id: str) -> SessionState:
    """Load a session's state, raising SessionNotFound when absent."""
    session = store.get_session(session_id)
    if session is None:
        raise SessionNotFound(session_id)
    return SessionState.from_json(session.state_json)


def compile_context(
    store: Store,
    session_id: str,
    options: CompileOptions,
    stable_prefix: str | None = None,
    config: CompileConfig | NormalizedCompileConfig | None = None,
) -> CompileResult:
    """Compile a bounded message sequence for one turn.

    Read-only with respect to the store. ``options.stable_prefix`` takes
    precedence over ``stable_prefix``.

    Raises:
        SessionNotFound: If the session was never created
    """
    state = load_state(store, session_id)
    prefix = options.stable_prefix or stable_prefix
    cfg = normalize_compile_config(config)

    candidates = select_evidence(store, session_id, options.user_message, state, cfg)
    budget = apply_budget(candidates, state, options.budget_tokens, prefix, cfg)
    messages = format_messages(
        state=state,
        evidence=budget.included,
        user_message=options.user_message,
        policy_prefix=prefix,
    )

    logger.info(
        "Compiled session %s: %d included, %d dropped, %d/%d tokens",
        session_id,
        len(budget.included),
        len(budget.dropped),
        budget.token_estimate,
        options.budget_tokens,
    )

    return CompileResult(
        messages=messages,
        debug=CompileDebug(
            included_artifacts=[item.artifact.artifact_id for item in budget.included],
            dropped_artifacts=[item.artifact.artifact_id for item in budget.dropped],
            token_estimate=budget.token_estimate,
            rationale=budget.rationale,
        ),
    )
