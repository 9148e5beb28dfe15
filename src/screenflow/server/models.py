"""API Models - Pydantic models for FastAPI endpoints.

Defines request and response schemas for the screenflow REST API.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from screenflow.engine.results import DispatchResult, HostSignal
from screenflow.engine.session import SessionSnapshot, ToolCallResult


class DocumentRequest(BaseModel):
    """A raw screen document (module mapping or bare screen list)."""

    document: dict[str, Any] | list[Any] = Field(description="Module document data")


class ValidationResponse(BaseModel):
    """Result of validating a document."""

    valid: bool
    module_id: str | None = None
    screens: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class RewriteResponse(BaseModel):
    """Document with placeholder deeplinks rewritten."""

    document: dict[str, Any]


class CreateSessionRequest(BaseModel):
    """Request model for starting a session."""

    document: dict[str, Any] | list[Any] | None = Field(
        default=None, description="Inline document; the server's document is used when omitted"
    )
    screen_id: str | None = Field(default=None, description="Screen to start on")
    module_state: dict[str, Any] = Field(default_factory=dict, description="Initial module state")


class TriggerRequest(BaseModel):
    """Request model for triggering an event."""

    source: Literal["ui", "voice"] = "ui"


class ToolCallRequest(BaseModel):
    """Request model for a voice-layer tool call."""

    name: str = Field(min_length=1, description="Tool name, e.g. trigger_event")
    arguments: dict[str, Any] = Field(default_factory=dict)


class StateUpdateRequest(BaseModel):
    """Request model for renderer-driven state updates."""

    scope: Literal["screen", "module"] = "screen"
    updates: dict[str, Any]


class DiagnosticModel(BaseModel):
    code: str
    message: str
    action_index: int | None = None


class SignalModel(BaseModel):
    kind: str
    name: str | None = None
    flow_completed: bool = False
    parameters: dict[str, Any] = Field(default_factory=dict)
    event_id: str | None = None

    @classmethod
    def from_signal(cls, signal: HostSignal) -> "SignalModel":
        return cls(
            kind=signal.kind,
            name=signal.name,
            flow_completed=signal.flow_completed,
            parameters=signal.parameters,
            event_id=signal.event_id,
        )


class DispatchResponse(BaseModel):
    """Response model for a dispatched event."""

    event_id: str
    source: str
    screen_id: str | None
    found: bool
    queued: bool
    executed: list[str]
    skipped: list[str]
    diagnostics: list[DiagnosticModel]
    signals: list[SignalModel]
    current_screen: str | None = None

    @classmethod
    def from_result(
        cls, result: DispatchResult, current_screen: str | None = None
    ) -> "DispatchResponse":
        return cls(
            event_id=result.event_id,
            source=result.source,
            screen_id=result.screen_id,
            found=result.found,
            queued=result.queued,
            executed=list(result.executed),
            skipped=list(result.skipped),
            diagnostics=[
                DiagnosticModel(code=d.code, message=d.message, action_index=d.action_index)
                for d in result.diagnostics
            ],
            signals=[SignalModel.from_signal(s) for s in result.signals],
            current_screen=current_screen,
        )


class ToolCallResponse(BaseModel):
    """Response model for a tool call."""

    success: bool
    message: str
    next_event_id: str | None = None
    delay: float | None = None
    dispatch: DispatchResponse | None = None

    @classmethod
    def from_result(
        cls, result: ToolCallResult, current_screen: str | None = None
    ) -> "ToolCallResponse":
        return cls(
            success=result.success,
            message=result.message,
            next_event_id=result.next_event_id,
            delay=result.delay,
            dispatch=(
                DispatchResponse.from_result(result.dispatch, current_screen)
                if result.dispatch is not None
                else None
            ),
        )


class SessionResponse(BaseModel):
    """Snapshot of a session for renderers."""

    session_id: str
    screen_id: str | None
    screen: dict[str, Any] | None
    screen_state: dict[str, Any]
    module_state: dict[str, Any]
    navigation_stack: list[str]
    completed: bool
    signals: list[SignalModel] = Field(default_factory=list)

    @classmethod
    def from_snapshot(
        cls, snapshot: SessionSnapshot, signals: list[HostSignal] | None = None
    ) -> "SessionResponse":
        return cls(
            session_id=snapshot.session_id,
            screen_id=snapshot.screen_id,
            screen=(
                snapshot.screen.model_dump(by_alias=True, mode="json") if snapshot.screen else None
            ),
            screen_state=snapshot.screen_state,
            module_state=snapshot.module_state,
            navigation_stack=snapshot.navigation_stack,
            completed=snapshot.completed,
            signals=[SignalModel.from_signal(s) for s in signals or []],
        )


class DeleteResponse(BaseModel):
    success: bool
    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "degraded"]
    version: str
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())
    document_loaded: bool = False
    sessions: int = 0


class VersionResponse(BaseModel):
    """Response model for version endpoint."""

    version: str = Field(description="Full version string")
    major: int = Field(description="Major version number")
    minor: int = Field(description="Minor version number")
    patch: str = Field(description="Patch version (may include suffix)")
