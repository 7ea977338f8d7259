"""State module - distill assistant output into persisted session state."""

from .extract import ExtractedUpdates, extract_structured_updates, parse_glossary_entry
from .merge import (
    append_decisions,
    append_open_threads,
    apply_updates,
    merge_constraints,
    merge_glossary,
)
from .observe import observe

__all__ = [
    "ExtractedUpdates",
    "append_decisions",
    "append_open_threads",
    "apply_updates",
    "extract_structured_updates",
    "merge_constraints",
    "merge_glossary",
    "observe",
    "parse_glossary_entry",
]
