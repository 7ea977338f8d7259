"""Pure merge functions for session state.

None of these mutate their arguments; each returns a new list or state.
"""

from __future__ import annotations

from ..types.types import Decision, GlossaryEntry, OpenThread, SessionState
from .extract import ExtractedUpdates


def merge_constraints(existing: list[str], new: list[str]) -> list[str]:
    """Append constraints not already present (exact text match)."""
    merged = list(existing)
    seen = set(existing)
    for constraint in new:
        if constraint not in seen:
            seen.add(constraint)
            merged.append(constraint)
    return merged


def append_decisions(existing: list[Decision], new: list[Decision]) -> list[Decision]:
    """Decisions have their own identity, so they always append."""
    return [*existing, *new]


def append_open_threads(existing: list[OpenThread], new: list[OpenThread]) -> list[OpenThread]:
    """Open threads have their own identity, so they always append."""
    return [*existing, *new]


def merge_glossary(
    existing: list[GlossaryEntry], new: list[GlossaryEntry]
) -> list[GlossaryEntry]:
    """Merge entries keyed by case-insensitive term; last definition wins.

    An existing term keeps its spelling and position.
    """
    merged = [entry.model_copy() for entry in existing]
    index = {entry.term.lower(): i for i, entry in enumerate(merged)}
    for entry in new:
        key = entry.term.lower()
        if key in index:
            position = index[key]
            merged[position] = merged[position].model_copy(update={"definition": entry.definition})
        else:
            index[key] = len(merged)
            merged.append(entry.model_copy())
    return merged


def apply_updates(state: SessionState, updates: ExtractedUpdates) -> SessionState:
    """Return a new state with ``updates`` merged in."""
    return state.model_copy(
        update={
            "constraints": merge_constraints(state.constraints, updates.constraints),
            "decisions": append_decisions(state.decisions, updates.decisions),
            "open_threads": append_open_threads(state.open_threads, updates.open_threads),
            "glossary": merge_glossary(state.glossary, updates.glossary),
        }
    )
