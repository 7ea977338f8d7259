"""Runtime factory."""

from __future__ import annotations

import logging

from ..storage.base import Store
from ..storage.sqlite_store import create_sqlite_store
from .config import RuntimeConfig, configure_file_logging
from .session import Session

logger = logging.getLogger(__name__)


class Runtime:
    """Owns a store and hands out Sessions bound to it.

    Usage::

        from memory_runtime import create_runtime

        with create_runtime() as runtime:
            session = runtime.session("demo")
            session.ingest({"type": "snippet", "payload": {"path": "a.py", "content": "x = 1"}})
            result = session.compile("What is x?", budget_tokens=2000)
            session.observe("Decision: keep x")
    """

    def __init__(self, store: Store, config: RuntimeConfig | None = None):
        self.store = store
        self.config = config or RuntimeConfig()

    def session(self, session_id: str) -> Session:
        return Session(
            self.store,
            session_id,
            stable_prefix=self.config.stable_prefix,
            compile_config=self.config.compile_config,
        )

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> Runtime:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_runtime(config: RuntimeConfig | None = None, store: Store | None = None) -> Runtime:
    """Create a Runtime backed by SQLite at ``config.storage_path``.

    Args:
        config: Runtime settings; defaults to ``RuntimeConfig.from_env()``
        store: Optional pre-built store, used instead of opening SQLite
    """
    config = config or RuntimeConfig.from_env()
    if config.log_file:
        configure_file_logging(config.log_file)
    if store is None:
        store = create_sqlite_store(config.storage_path)
    logger.info("Runtime ready (storage: %s)", config.storage_path)
    return Runtime(store, config)
