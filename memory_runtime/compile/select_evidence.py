"""Deterministic, rule-based evidence selection.

Candidates are gathered in fixed tiers and then sorted by priority
(descending) and creation time (descending). The sort is stable, so artifacts
created in the same instant keep the store's newest-first order.
"""

from __future__ import annotations

import logging

from ..storage.base import Store
from ..types.types import Artifact, EvidenceItem, SessionState
from .types import (
    MIN_KEYWORD_SEGMENT_LENGTH,
    CompileConfig,
    NormalizedCompileConfig,
    normalize_compile_config,
)

logger = logging.getLogger(__name__)

PINNED_RATIONALE = "Pinned artifact - never drop"


def _keyword_match(path: str, user_message_lower: str) -> bool:
    """True when a path segment longer than 2 chars occurs in the user message."""
    for part in path.lower().split("/"):
        if len(part) >= MIN_KEYWORD_SEGMENT_LENGTH and part in user_message_lower:
            return True
    return False


def score_snippet(
    artifact: Artifact,
    working_set_paths: list[str],
    user_message_lower: str,
    config: NormalizedCompileConfig,
) -> tuple[int, str]:
    """Return (priority, rationale) for one snippet artifact."""
    if artifact.pinned:
        return config.pinned_priority, PINNED_RATIONALE

    priority = config.snippet_priority
    reasons = []
    path = artifact.path

    if any(ws_path and ws_path in path for ws_path in working_set_paths):
        priority = max(priority, config.working_set_priority)
        reasons.append("Snippet in working set")

    if _keyword_match(path, user_message_lower):
        priority = max(priority, config.keyword_priority)
        reasons.append("Snippet matches user message keywords")

    if not reasons:
        return priority, "Code snippet"
    return priority, "; ".join(reasons)


def select_evidence(
    store: Store,
    session_id: str,
    user_message: str,
    state: SessionState,
    config: CompileConfig | NormalizedCompileConfig | None = None,
) -> list[EvidenceItem]:
    """Rank the session's artifacts into an ordered candidate list.

    Tiers, in order:
    1. recent repo diffs (highest fixed priority)
    2. recent snippets, boosted by working set, user message keywords and pinning
    3. pinned snippets outside the recent snippet window
    4. recent doc chunks and tool outputs (low fixed priority)
    5. pinned diffs, doc chunks and tool outputs outside their windows

    An artifact is assigned by the first tier that sees it.
    """
    cfg = normalize_compile_config(config)
    evidence: list[EvidenceItem] = []
    seen: set[str] = set()

    def add(artifact: Artifact, priority: int, rationale: str) -> None:
        if artifact.artifact_id in seen:
            return
        seen.add(artifact.artifact_id)
        evidence.append(EvidenceItem(artifact=artifact, priority=priority, rationale=rationale))

    # 1. Recent repo diffs
    for artifact in store.list_recent_artifacts(session_id, ["repo_diff"], cfg.diff_lookback):
        add(artifact, cfg.diff_priority, "Recent repository changes")

    # 2. Recent snippets
    working_set_paths = state.working_set.paths if state.working_set else []
    user_message_lower = user_message.lower()
    for artifact in store.list_recent_artifacts(session_id, ["snippet"], cfg.snippet_lookback):
        priority, rationale = score_snippet(artifact, working_set_paths, user_message_lower, cfg)
        add(artifact, priority, rationale)

    # 3. Pinned snippets the recency window missed
    for artifact in store.list_recent_artifacts(session_id, ["snippet"], cfg.pinned_lookback):
        if artifact.pinned:
            add(artifact, cfg.pinned_priority, PINNED_RATIONALE)

    # 4. Everything else
    for artifact in store.list_recent_artifacts(
        session_id, ["doc_chunk", "tool_output"], cfg.other_lookback
    ):
        add(artifact, cfg.other_priority, f"{artifact.kind} artifact")

    # 5. Pinned non-snippets the recency windows missed
    for artifact in store.list_recent_artifacts(
        session_id, ["repo_diff", "doc_chunk", "tool_output"], cfg.pinned_lookback
    ):
        if artifact.pinned:
            priority = cfg.diff_priority if artifact.kind == "repo_diff" else cfg.other_priority
            add(artifact, priority, f"Pinned {artifact.kind} outside recent window")

    evidence.sort(key=lambda item: item.artifact.created_at, reverse=True)
    evidence.sort(key=lambda item: item.priority, reverse=True)

    logger.debug("Selected %d evidence candidates for session %s", len(evidence), session_id)
    return evidence
