"""Type definitions for sessions, events, artifacts and compiled context."""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

EventType = Literal[
    "user_message",
    "repo_diff",
    "snippet",
    "doc_chunk",
    "tool_output",
    "assistant_response",
]

ArtifactKind = Literal["repo_diff", "snippet", "doc_chunk", "tool_output"]

EVENT_TYPES: tuple[str, ...] = get_args(EventType)
ARTIFACT_KINDS: tuple[str, ...] = get_args(ArtifactKind)


class _CamelModel(BaseModel):
    """Base for models persisted with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)


class Decision(_CamelModel):
    """A decision recorded from assistant output."""

    id: str
    text: str
    evidence_refs: list[str] = Field(default_factory=list, alias="evidenceRefs")
    created_at: str = Field(alias="createdAt")


class OpenThread(_CamelModel):
    """An unresolved question recorded from assistant output."""

    id: str
    question: str
    created_at: str = Field(alias="createdAt")


class GlossaryEntry(BaseModel):
    """A term and its definition."""

    term: str
    definition: str


class WorkingSet(BaseModel):
    """Paths the conversation is currently focused on."""

    paths: list[str] = Field(default_factory=list)


class SessionState(_CamelModel):
    """Distilled per-session state.

    The JSON shape (``constraints``, ``decisions``, ``openThreads``, ``glossary``,
    ``workingSet``) is a persisted contract, see ``to_json``/``from_json``.
    """

    constraints: list[str] = Field(default_factory=list)
    decisions: list[Decision] = Field(default_factory=list)
    open_threads: list[OpenThread] = Field(default_factory=list, alias="openThreads")
    glossary: list[GlossaryEntry] = Field(default_factory=list)
    working_set: WorkingSet | None = Field(default=None, alias="workingSet")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, state_json: str) -> SessionState:
        return cls.model_validate_json(state_json or "{}")


class StoredSession(BaseModel):
    """A session row as returned by the store."""

    session_id: str
    state_json: str
    created_at: str
    updated_at: str


class StoredEvent(BaseModel):
    """An event row as returned by the store."""

    event_id: int
    session_id: str
    type: EventType
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str


class Artifact(BaseModel):
    """An immutable evidence unit attached to a session."""

    model_config = ConfigDict(frozen=True)

    artifact_id: str
    session_id: str
    kind: ArtifactKind
    source: str
    version_hash: str
    content: str
    meta: dict[str, Any] | None = None
    pinned: bool = False
    created_at: str

    @property
    def path(self) -> str:
        """Display path: ``meta["path"]`` when present, otherwise ``source``."""
        if self.meta and self.meta.get("path"):
            return str(self.meta["path"])
        return self.source


class Event(BaseModel):
    """An event submitted for ingestion.

    ``type`` is validated by the ingest pipeline, not here, so an invalid type
    surfaces as ``InvalidEventType`` rather than a pydantic error.
    """

    type: str
    payload: dict[str, Any] = Field(default_factory=dict)


class EvidenceItem(BaseModel):
    """A ranked, justified candidate for inclusion in compiled context."""

    artifact: Artifact
    priority: int
    rationale: str


class CompileOptions(_CamelModel):
    """Per-turn compile input."""

    user_message: str = Field(alias="userMessage")
    budget_tokens: int = Field(alias="budgetTokens", ge=0)
    stable_prefix: str | None = Field(default=None, alias="stablePrefix")


class CompileDebug(_CamelModel):
    """Debug trace of one compile call."""

    included_artifacts: list[str] = Field(default_factory=list, alias="includedArtifacts")
    dropped_artifacts: list[str] = Field(default_factory=list, alias="droppedArtifacts")
    token_estimate: int = Field(alias="tokenEstimate")
    rationale: str


class CompileResult(BaseModel):
    """Compiled messages plus debug trace."""

    messages: list[dict[str, str]]
    debug: CompileDebug
