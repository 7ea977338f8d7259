"""Message formatting for model input."""

from __future__ import annotations

import json

from ..types.types import EvidenceItem, SessionState


def format_evidence_block(item: EvidenceItem) -> list[str]:
    """Render one evidence item as markdown lines."""
    artifact = item.artifact
    return [
        f"## {artifact.kind}: {artifact.path}",
        f"Priority: {item.priority} - {item.rationale}\n",
        "```",
        artifact.content,
        "```\n",
    ]


def format_messages(
    state: SessionState,
    evidence: list[EvidenceItem],
    user_message: str,
    policy_prefix: str | None = None,
) -> list[dict[str, str]]:
    """Build the [system, user] message pair.

    The system message holds, in order, the policy prefix, the session state
    as JSON, and the evidence blocks in the order given. Nothing is re-sorted
    or filtered here.
    """
    system_parts: list[str] = []

    if policy_prefix:
        system_parts.append(policy_prefix)

    system_parts.append("# Session State\n")
    system_parts.append("```json")
    system_parts.append(json.dumps(state.to_dict(), indent=2, ensure_ascii=False))
    system_parts.append("```")

    if evidence:
        system_parts.append("\n# Evidence\n")
        for item in evidence:
            system_parts.extend(format_evidence_block(item))

    return [
        {"role": "system", "content": "\n".join(system_parts)},
        {"role": "user", "content": user_message},
    ]
