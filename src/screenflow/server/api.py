"""screenflow FastAPI Application.

Hosts screen sessions over HTTP: a renderer or voice agent creates a
session from a document, then triggers events and tool calls against it.
Endpoints are synchronous; the engine itself never blocks on I/O.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import APIRouter, FastAPI, Request

from screenflow import __version__
from screenflow.config.settings import ServerSettings
from screenflow.core.errors import DocumentError, ScreenflowError
from screenflow.document.loader import DocumentLoader
from screenflow.document.models import ModuleDocument
from screenflow.document.validators import DocumentValidator
from screenflow.engine.registry import ServiceRegistry
from screenflow.engine.session import ScreenSession
from screenflow.navigation.deeplinks import rewrite_placeholder_deeplinks
from screenflow.server.dependencies import DocumentDep, ServicesDep, SessionDep, SessionsDep
from screenflow.server.errors import create_error_response, global_exception_handler
from screenflow.server.models import (
    CreateSessionRequest,
    DeleteResponse,
    DispatchResponse,
    DocumentRequest,
    HealthResponse,
    RewriteResponse,
    SessionResponse,
    StateUpdateRequest,
    ToolCallRequest,
    ToolCallResponse,
    TriggerRequest,
    ValidationResponse,
    VersionResponse,
)
from screenflow.server.sessions import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - load the default document on startup."""
    if getattr(app.state, "document", None) is not None:
        yield
        return

    settings = ServerSettings.from_env()
    if not settings.document_path:
        logger.warning(
            "SCREENFLOW_DOCUMENT_PATH not set. Sessions must provide their own document."
        )
        yield
        return

    logger.info(f"Loading document from {settings.document_path}")
    try:
        app.state.document = DocumentLoader.load(settings.document_path)
    except DocumentError as e:
        logger.error(f"Failed to load document: {e}")
    yield
    logger.info("Shutting down, dropping live sessions")


def _snapshot(session: ScreenSession) -> SessionResponse:
    return SessionResponse.from_snapshot(session.snapshot(), session.signals)


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Liveness probe."""
    document = getattr(request.app.state, "document", None)
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now().isoformat(),
        document_loaded=document is not None,
        sessions=len(request.app.state.sessions),
    )


@router.get("/version", response_model=VersionResponse)
def get_version() -> VersionResponse:
    """Get detailed version information."""
    parts = __version__.split(".")
    major = int(parts[0]) if len(parts) > 0 and parts[0].isdigit() else 0
    minor = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else 0
    patch = parts[2] if len(parts) > 2 else "0"

    return VersionResponse(version=__version__, major=major, minor=minor, patch=patch)


@router.post("/documents/validate", response_model=ValidationResponse)
def validate_document(request: DocumentRequest) -> ValidationResponse:
    """Validate a document without starting a session."""
    try:
        document = DocumentLoader.load_data(request.document)
    except DocumentError as e:
        return ValidationResponse(valid=False, errors=[str(e)])

    return ValidationResponse(
        valid=True,
        module_id=document.id,
        screens=[screen.id for screen in document.screens],
        warnings=DocumentValidator(document).validate(),
    )


@router.post("/documents/rewrite-deeplinks", response_model=RewriteResponse)
def rewrite_deeplinks(request: DocumentRequest) -> RewriteResponse:
    """Replace next-screen/prev-screen placeholders with neighbouring screen ids."""
    try:
        document = DocumentLoader.load_data(request.document)
    except DocumentError as e:
        raise create_error_response(e, endpoint="/documents/rewrite-deeplinks") from e

    document.screens = rewrite_placeholder_deeplinks(document.screens)
    return RewriteResponse(
        document=document.model_dump(by_alias=True, exclude_unset=True, mode="json")
    )


@router.post("/sessions", response_model=SessionResponse, status_code=201)
def create_session(
    request: CreateSessionRequest,
    sessions: SessionsDep,
    services: ServicesDep,
    default_document: DocumentDep,
) -> SessionResponse:
    """Start a session on an inline document or the server's document."""
    try:
        document: ModuleDocument | None = (
            DocumentLoader.load_data(request.document)
            if request.document is not None
            else default_document
        )
        if document is None:
            raise DocumentError("No document given and none loaded by the server")

        session = ScreenSession(document, services=services, module_state=request.module_state)
        session.activate(request.screen_id)
    except ScreenflowError as e:
        raise create_error_response(e, endpoint="/sessions") from e

    sessions.add(session)
    return _snapshot(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session_state(session: SessionDep) -> SessionResponse:
    """Current screen, state and navigation stack of a session."""
    return _snapshot(session)


@router.delete("/sessions/{session_id}", response_model=DeleteResponse)
def delete_session(session_id: str, sessions: SessionsDep) -> DeleteResponse:
    """End a session."""
    if sessions.remove(session_id):
        return DeleteResponse(success=True, message=f"Session {session_id} deleted")
    return DeleteResponse(success=False, message=f"Session {session_id} not found")


@router.post("/sessions/{session_id}/events/{event_id}", response_model=DispatchResponse)
def trigger_event(
    event_id: str, session: SessionDep, request: TriggerRequest | None = None
) -> DispatchResponse:
    """Trigger an event on the session's active screen."""
    source = request.source if request is not None else "ui"
    result = session.trigger_event(event_id, source=source)
    return DispatchResponse.from_result(result, session.stack.current)


@router.post("/sessions/{session_id}/tool-calls", response_model=ToolCallResponse)
def handle_tool_call(request: ToolCallRequest, session: SessionDep) -> ToolCallResponse:
    """Entry point for voice-agent tool calls (trigger_event, record_input)."""
    result = session.handle_tool_call(request.name, request.arguments)
    return ToolCallResponse.from_result(result, session.stack.current)


@router.post("/sessions/{session_id}/state", response_model=SessionResponse)
def update_state(request: StateUpdateRequest, session: SessionDep) -> SessionResponse:
    """Merge renderer input into screen or module state."""
    session.update_state(request.scope, request.updates)
    return _snapshot(session)


@router.post("/sessions/{session_id}/back", response_model=SessionResponse)
def go_back(session: SessionDep) -> SessionResponse:
    """Return to the previous screen."""
    session.go_back()
    return _snapshot(session)


def create_app(
    document: ModuleDocument | None = None,
    services: ServiceRegistry | None = None,
    max_sessions: int = 1000,
) -> FastAPI:
    """Factory function.

    Args:
        document: Default document for sessions created without one. When
            omitted it is loaded from SCREENFLOW_DOCUMENT_PATH at startup.
        services: Service handlers shared by every session.
        max_sessions: Live sessions kept before the oldest is evicted.
    """
    application = FastAPI(
        title="screenflow",
        description="Screen interaction engine for voice-plus-screen flows",
        version=__version__,
        lifespan=lifespan,
    )
    application.state.document = document
    application.state.services = services if services is not None else ServiceRegistry()
    application.state.sessions = SessionManager(max_sessions=max_sessions)

    application.add_exception_handler(Exception, global_exception_handler)
    application.include_router(router)
    return application


app = create_app()
