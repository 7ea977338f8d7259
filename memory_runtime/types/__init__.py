from .types import (
    ARTIFACT_KINDS,
    EVENT_TYPES,
    Artifact,
    ArtifactKind,
    CompileDebug,
    CompileOptions,
    CompileResult,
    Decision,
    Event,
    EventType,
    EvidenceItem,
    GlossaryEntry,
    OpenThread,
    SessionState,
    StoredEvent,
    StoredSession,
    WorkingSet,
)

__all__ = [
    "ARTIFACT_KINDS",
    "EVENT_TYPES",
    "Artifact",
    "ArtifactKind",
    "CompileDebug",
    "CompileOptions",
    "CompileResult",
    "Decision",
    "Event",
    "EventType",
    "EvidenceItem",
    "GlossaryEntry",
    "OpenThread",
    "SessionState",
    "StoredEvent",
    "StoredSession",
    "WorkingSet",
]
