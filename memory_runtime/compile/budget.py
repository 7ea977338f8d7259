"""Token budget enforcement.

``apply_budget`` decides, for every ranked candidate, whether it is included
whole, included truncated, or dropped. The reported ``token_estimate`` is
``budget_tokens - remaining`` with ``remaining`` kept in ``[0, budget_tokens]``,
so it can never exceed the budget.

Pinned candidates are truncated, never dropped. Unpinned candidates above the
high-priority threshold may be truncated into the last bit of room; every
other candidate that does not fit is dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..types.types import EvidenceItem, SessionState
from .tokens import estimate_tokens
from .types import (
    TRUNCATION_MARKER,
    BudgetResult,
    CompileConfig,
    NormalizedCompileConfig,
    normalize_compile_config,
)

logger = logging.getLogger(__name__)


def fixed_overhead_tokens(
    state: SessionState,
    policy_prefix: str | None,
    config: NormalizedCompileConfig,
    estimate: Callable[[str], int] = estimate_tokens,
) -> int:
    """Tokens spent before any evidence: prefix, state snapshot, reserves."""
    prefix_tokens = estimate(policy_prefix) if policy_prefix else 0
    state_tokens = estimate(state.to_json())
    return prefix_tokens + state_tokens + config.user_message_reserve + config.message_overhead


def truncate_content(
    content: str,
    allowance_tokens: int,
    estimate: Callable[[str], int] = estimate_tokens,
) -> str:
    """Return the longest prefix of ``content`` that, with the marker, fits the allowance.

    Binary search over the prefix length; only determinism and monotonicity of
    ``estimate`` are assumed. Returns the bare marker when nothing fits.
    """
    lo, hi = 0, len(content)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if estimate(content[:mid] + TRUNCATION_MARKER) <= allowance_tokens:
            lo = mid
        else:
            hi = mid - 1
    return content[:lo] + TRUNCATION_MARKER


def _truncated(item: EvidenceItem, content: str, note: str) -> EvidenceItem:
    return item.model_copy(
        update={
            "artifact": item.artifact.model_copy(update={"content": content}),
            "rationale": f"{item.rationale} ({note})",
        }
    )


def apply_budget(
    candidates: list[EvidenceItem],
    state: SessionState,
    budget_tokens: int,
    policy_prefix: str | None = None,
    config: CompileConfig | NormalizedCompileConfig | None = None,
    estimate: Callable[[str], int] = estimate_tokens,
) -> BudgetResult:
    """Fit ranked candidates into ``budget_tokens``.

    Args:
        candidates: Selector output, already in priority-then-recency order
        state: Session state; its JSON snapshot counts against the budget
        budget_tokens: Hard ceiling in estimated tokens (>= 0)
        policy_prefix: Optional policy text that also counts against the budget
        config: Optional threshold overrides
        estimate: Token estimator (deterministic and monotone)

    Returns:
        BudgetResult with included and dropped items, token estimate and rationale
    """
    if budget_tokens < 0:
        raise ValueError(f"budget_tokens must be >= 0, got {budget_tokens}")

    cfg = normalize_compile_config(config)
    overhead = fixed_overhead_tokens(state, policy_prefix, cfg, estimate)
    remaining = max(0, budget_tokens - overhead)

    included: list[EvidenceItem] = []
    dropped: list[EvidenceItem] = []

    pinned = [item for item in candidates if item.artifact.pinned]
    unpinned = [item for item in candidates if not item.artifact.pinned]

    for item in pinned:
        artifact_tokens = estimate(item.artifact.content)
        if artifact_tokens <= remaining:
            included.append(item)
            remaining -= artifact_tokens
            continue
        allowance = max(remaining, cfg.min_pinned_allowance)
        content = truncate_content(item.artifact.content, allowance, estimate)
        included.append(_truncated(item, content, "pinned, truncated to fit budget"))
        logger.debug(
            "Truncated pinned artifact %s to %d tokens",
            item.artifact.artifact_id,
            allowance,
        )
        remaining = 0

    for item in unpinned:
        artifact_tokens = estimate(item.artifact.content)
        if artifact_tokens <= remaining:
            included.append(item)
            remaining -= artifact_tokens
        elif (
            item.priority >= cfg.high_priority_threshold
            and remaining > cfg.min_truncation_tokens
        ):
            content = truncate_content(item.artifact.content, remaining, estimate)
            included.append(_truncated(item, content, "truncated to fit budget"))
            logger.debug(
                "Truncated artifact %s to %d tokens", item.artifact.artifact_id, remaining
            )
            remaining = 0
        else:
            dropped.append(item)

    token_estimate = budget_tokens - remaining
    rationale = (
        f"Included {len(included)} artifacts ({token_estimate} tokens), "
        f"dropped {len(dropped)} to fit {budget_tokens} token budget"
    )
    logger.debug(rationale)

    return BudgetResult(
        included=included,
        dropped=dropped,
        token_estimate=token_estimate,
        rationale=rationale,
    )
