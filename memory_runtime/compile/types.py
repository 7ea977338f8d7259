"""Tuning knobs for evidence selection and budget allocation.

The module-level constants are the defaults. ``CompileConfig`` is the
user-facing override (every field optional); ``normalize_compile_config``
resolves it into a ``NormalizedCompileConfig`` with concrete values.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..types.types import EvidenceItem

# -- Selection ----------------------------------------------------------------

DIFF_LOOKBACK = 5
SNIPPET_LOOKBACK = 20
PINNED_LOOKBACK = 100
OTHER_LOOKBACK = 10

DIFF_PRIORITY = 100
PINNED_PRIORITY = 95
WORKING_SET_PRIORITY = 80
KEYWORD_PRIORITY = 70
SNIPPET_PRIORITY = 50
OTHER_PRIORITY = 40

# Path segments this short ("src", "a", "") are too generic to match on.
MIN_KEYWORD_SEGMENT_LENGTH = 3

# -- Budget -------------------------------------------------------------------

USER_MESSAGE_RESERVE = 100
MESSAGE_OVERHEAD = 50
HIGH_PRIORITY_THRESHOLD = 80
MIN_TRUNCATION_TOKENS = 100
MIN_PINNED_ALLOWANCE = 25

TRUNCATION_MARKER = "\n... [truncated]"


class CompileConfig(BaseModel):
    """User-facing compiler configuration."""

    diff_lookback: int | None = None
    snippet_lookback: int | None = None
    pinned_lookback: int | None = None
    other_lookback: int | None = None
    diff_priority: int | None = None
    pinned_priority: int | None = None
    working_set_priority: int | None = None
    keyword_priority: int | None = None
    snippet_priority: int | None = None
    other_priority: int | None = None
    user_message_reserve: int | None = None
    message_overhead: int | None = None
    high_priority_threshold: int | None = None
    min_truncation_tokens: int | None = None
    min_pinned_allowance: int | None = None


class NormalizedCompileConfig(BaseModel):
    """Internal - all fields resolved to concrete values."""

    diff_lookback: int = DIFF_LOOKBACK
    snippet_lookback: int = SNIPPET_LOOKBACK
    pinned_lookback: int = PINNED_LOOKBACK
    other_lookback: int = OTHER_LOOKBACK
    diff_priority: int = DIFF_PRIORITY
    pinned_priority: int = PINNED_PRIORITY
    working_set_priority: int = WORKING_SET_PRIORITY
    keyword_priority: int = KEYWORD_PRIORITY
    snippet_priority: int = SNIPPET_PRIORITY
    other_priority: int = OTHER_PRIORITY
    user_message_reserve: int = USER_MESSAGE_RESERVE
    message_overhead: int = MESSAGE_OVERHEAD
    high_priority_threshold: int = HIGH_PRIORITY_THRESHOLD
    min_truncation_tokens: int = MIN_TRUNCATION_TOKENS
    min_pinned_allowance: int = Field(default=MIN_PINNED_ALLOWANCE, ge=1)


def normalize_compile_config(
    config: CompileConfig | NormalizedCompileConfig | None,
) -> NormalizedCompileConfig:
    """Fill unset fields of a user config with the module defaults."""
    if isinstance(config, NormalizedCompileConfig):
        return config
    if config is None:
        return NormalizedCompileConfig()
    return NormalizedCompileConfig(**config.model_dump(exclude_none=True))


class BudgetResult(BaseModel):
    """Result from apply_budget."""

    included: list[EvidenceItem]
    dropped: list[EvidenceItem]
    token_estimate: int
    rationale: str
