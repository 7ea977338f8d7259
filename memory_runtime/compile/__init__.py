"""Compile module - evidence selection, budget allocation and message formatting."""

from .budget import apply_budget, truncate_content
from .compiler import compile_context, load_state
from .format import format_messages
from .select_evidence import select_evidence
from .tokens import estimate_message_tokens, estimate_messages_tokens, estimate_tokens
from .types import (
    TRUNCATION_MARKER,
    BudgetResult,
    CompileConfig,
    NormalizedCompileConfig,
    normalize_compile_config,
)

__all__ = [
    "TRUNCATION_MARKER",
    "BudgetResult",
    "CompileConfig",
    "NormalizedCompileConfig",
    "apply_budget",
    "compile_context",
    "estimate_message_tokens",
    "estimate_messages_tokens",
    "estimate_tokens",
    "format_messages",
    "load_state",
    "normalize_compile_config",
    "select_evidence",
    "truncate_content",
]
