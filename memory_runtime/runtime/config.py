"""Runtime configuration from arguments, environment and .env files."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..compile.types import CompileConfig

DEFAULT_STORAGE_PATH = "./.memory-runtime/runtime.sqlite"
DEFAULT_BUDGET_TOKENS = 4000
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class RuntimeConfig(BaseModel):
    """Settings for a Runtime.

    Fields left unset by ``from_env`` fall back to the ``MEMORY_RUNTIME_*``
    environment variables, then to the defaults.
    """

    storage_path: str = DEFAULT_STORAGE_PATH
    stable_prefix: str | None = None
    budget_tokens: int = Field(default=DEFAULT_BUDGET_TOKENS, ge=0)
    log_file: str | None = None
    llm_client: str = "stub"
    compile_config: CompileConfig = Field(default_factory=CompileConfig)

    @classmethod
    def from_env(cls, **overrides) -> RuntimeConfig:
        """Build a config from ``MEMORY_RUNTIME_*`` variables; explicit overrides win."""
        load_dotenv()
        values = {
            "storage_path": os.getenv("MEMORY_RUNTIME_STORAGE_PATH", DEFAULT_STORAGE_PATH),
            "stable_prefix": os.getenv("MEMORY_RUNTIME_STABLE_PREFIX") or None,
            "budget_tokens": int(
                os.getenv("MEMORY_RUNTIME_BUDGET_TOKENS", str(DEFAULT_BUDGET_TOKENS))
            ),
            "log_file": os.getenv("MEMORY_RUNTIME_LOG_FILE") or None,
            "llm_client": os.getenv("MEMORY_RUNTIME_LLM_CLIENT", "stub"),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def configure_file_logging(log_file: str, level: int = logging.INFO) -> None:
    """Redirect all package logs to a file instead of stdout/stderr."""
    handler = logging.FileHandler(log_file, mode="a")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
