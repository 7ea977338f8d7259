__version__ = "0.1.0"

from .compile import (
    BudgetResult,
    CompileConfig,
    apply_budget,
    compile_context,
    estimate_message_tokens,
    estimate_messages_tokens,
    estimate_tokens,
    format_messages,
    select_evidence,
)
from .errors import InvalidEventType, MemoryRuntimeError, SessionNotFound, StoreFailure
from .ingest import ingest_event, ingest_git_diff, ingest_snippet, record_artifact, record_event
from .llm import ModelClient, ModelResponse, StubModelClient, get_model_client
from .runtime import Runtime, RuntimeConfig, Session, create_runtime
from .state import extract_structured_updates, observe
from .storage import SqliteStore, Store, create_sqlite_store
from .types import (
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
    WorkingSet,
)

__all__ = [
    "Artifact",
    "ArtifactKind",
    "BudgetResult",
    "CompileConfig",
    "CompileDebug",
    "CompileOptions",
    "CompileResult",
    "Decision",
    "Event",
    "EventType",
    "EvidenceItem",
    "GlossaryEntry",
    "InvalidEventType",
    "MemoryRuntimeError",
    "ModelClient",
    "ModelResponse",
    "OpenThread",
    "Runtime",
    "RuntimeConfig",
    "Session",
    "SessionNotFound",
    "SessionState",
    "SqliteStore",
    "Store",
    "StoreFailure",
    "StubModelClient",
    "WorkingSet",
    "apply_budget",
    "compile_context",
    "create_runtime",
    "create_sqlite_store",
    "estimate_message_tokens",
    "estimate_messages_tokens",
    "estimate_tokens",
    "extract_structured_updates",
    "format_messages",
    "get_model_client",
    "ingest_event",
    "ingest_git_diff",
    "ingest_snippet",
    "observe",
    "record_artifact",
    "record_event",
    "select_evidence",
]
