"""Conservative, line-based extraction of state updates from assistant text."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..types.types import Decision, GlossaryEntry, OpenThread

DECISION_MARKER = "Decision:"
CONSTRAINT_MARKER = "Constraint:"
OPEN_MARKER = "Open:"
GLOSSARY_MARKER = "Glossary:"
GLOSSARY_SEPARATOR = " - "


class ExtractedUpdates(BaseModel):
    """Items found in one assistant response, in order of appearance."""

    constraints: list[str] = Field(default_factory=list)
    decisions: list[Decision] = Field(default_factory=list)
    open_threads: list[OpenThread] = Field(default_factory=list)
    glossary: list[GlossaryEntry] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.constraints or self.decisions or self.open_threads or self.glossary)


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _marker_body(line: str, marker: str) -> str | None:
    if not line.startswith(marker):
        return None
    return line[len(marker) :].strip()


def parse_glossary_entry(body: str) -> GlossaryEntry | None:
    """Parse ``term - definition``; None when either side is missing."""
    index = body.find(GLOSSARY_SEPARATOR)
    if index <= 0:
        return None
    term = body[:index].strip()
    definition = body[index + len(GLOSSARY_SEPARATOR) :].strip()
    if not term or not definition:
        return None
    return GlossaryEntry(term=term, definition=definition)


def extract_structured_updates(
    text: str,
    id_factory: Callable[[], str] = new_id,
    clock: Callable[[], str] = utc_now_iso,
) -> ExtractedUpdates:
    """Extract Decision/Constraint/Open/Glossary lines from ``text``.

    A line counts only if, once trimmed, it starts with the exact marker.
    Bodies never span lines. Identities and timestamps for new decisions and
    open threads come from ``id_factory`` and ``clock``.
    """
    updates = ExtractedUpdates()

    for raw_line in text.split("\n"):
        line = raw_line.strip()

        body = _marker_body(line, DECISION_MARKER)
        if body:
            updates.decisions.append(Decision(id=id_factory(), text=body, created_at=clock()))
            continue

        body = _marker_body(line, CONSTRAINT_MARKER)
        if body:
            updates.constraints.append(body)
            continue

        body = _marker_body(line, OPEN_MARKER)
        if body:
            updates.open_threads.append(
                OpenThread(id=id_factory(), question=body, created_at=clock())
            )
            continue

        body = _marker_body(line, GLOSSARY_MARKER)
        if body:
            entry = parse_glossary_entry(body)
            if entry is not None:
                updates.glossary.append(entry)

    return updates
