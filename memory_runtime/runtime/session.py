"""Session facade over the store, compiler and observer."""

from __future__ import annotations

import logging
from typing import Any

from ..compile.compiler import compile_context
from ..compile.types import CompileConfig, NormalizedCompileConfig
from ..ingest.git_diff import ingest_git_diff
from ..ingest.ingest import ingest_event
from ..ingest.snippet import ingest_snippet
from ..state.observe import observe
from ..storage.base import Store
from ..types.types import CompileOptions, CompileResult, Event, SessionState, WorkingSet

logger = logging.getLogger(__name__)


class Session:
    """One conversation's memory, bound to a store.

    Creating a Session creates the session in the store if it does not exist
    yet (idempotent). Callers serialize turns per session id.
    """

    def __init__(
        self,
        store: Store,
        session_id: str,
        stable_prefix: str | None = None,
        compile_config: CompileConfig | NormalizedCompileConfig | None = None,
    ):
        self.store = store
        self.session_id = session_id
        self.stable_prefix = stable_prefix
        self.compile_config = compile_config
        self._ensure_session()

    def _ensure_session(self) -> None:
        if self.store.get_session(self.session_id) is None:
            self.store.upsert_session(self.session_id, SessionState().to_json())
            logger.info("Created session %s", self.session_id)

    def get_state(self) -> SessionState:
        session = self.store.get_session(self.session_id)
        if session is None:
            return SessionState()
        return SessionState.from_json(session.state_json)

    def set_working_set(self, paths: list[str] | None) -> SessionState:
        """Replace the working-set hint; None clears it."""
        state = self.get_state()
        working_set = WorkingSet(paths=list(paths)) if paths is not None else None
        new_state = state.model_copy(update={"working_set": working_set})
        self.store.upsert_session(self.session_id, new_state.to_json())
        return new_state

    def ingest(self, event: Event | dict[str, Any]) -> str | None:
        """Record an event; returns the artifact id if one was stored."""
        return ingest_event(self.store, self.session_id, event)

    def compile(
        self,
        user_message: str,
        budget_tokens: int,
        stable_prefix: str | None = None,
    ) -> CompileResult:
        options = CompileOptions(
            user_message=user_message,
            budget_tokens=budget_tokens,
            stable_prefix=stable_prefix,
        )
        return compile_context(
            self.store,
            self.session_id,
            options,
            stable_prefix=self.stable_prefix,
            config=self.compile_config,
        )

    def observe(self, assistant_text: str) -> SessionState:
        return observe(self.store, self.session_id, assistant_text)

    def ingest_git_diff(self, repo_path: str) -> str | None:
        return ingest_git_diff(self.store, self.session_id, repo_path)

    def ingest_snippet(
        self,
        path: str,
        start_line: int,
        end_line: int,
        text: str | None = None,
        pinned: bool = False,
    ) -> str:
        return ingest_snippet(
            self.store,
            self.session_id,
            path,
            start_line,
            end_line,
            text=text,
            pinned=pinned,
        )
