"""Ingest module - record events and the artifacts they carry."""

from .git_diff import collect_git_diff, ingest_git_diff
from .ingest import content_hash, ingest_event, record_artifact, record_event, validate_event
from .snippet import ingest_snippet, read_line_range

__all__ = [
    "collect_git_diff",
    "content_hash",
    "ingest_event",
    "ingest_git_diff",
    "ingest_snippet",
    "read_line_range",
    "record_artifact",
    "record_event",
    "validate_event",
]
