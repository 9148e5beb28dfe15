"""FastAPI dependencies for server endpoints.

Uses dependency injection instead of global state for better
testability.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from screenflow.document.models import ModuleDocument
from screenflow.engine.registry import ServiceRegistry
from screenflow.engine.session import ScreenSession
from screenflow.server.sessions import SessionManager


def get_sessions(request: Request) -> SessionManager:
    """Dependency to get the session manager."""
    return request.app.state.sessions


def get_services(request: Request) -> ServiceRegistry:
    """Dependency to get the service registry shared by new sessions."""
    return request.app.state.services


def get_document(request: Request) -> ModuleDocument | None:
    """Dependency to get the server's default document, if one is loaded."""
    return getattr(request.app.state, "document", None)


def get_session(
    session_id: str, sessions: Annotated[SessionManager, Depends(get_sessions)]
) -> ScreenSession:
    """Dependency to look up a live session.

    Raises:
        HTTPException: 404 if the session does not exist
    """
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": "Session not found",
                "message": "The session expired or never existed. Please start a new session.",
            },
        )
    return session


# Type aliases for cleaner endpoint signatures
SessionsDep = Annotated[SessionManager, Depends(get_sessions)]
ServicesDep = Annotated[ServiceRegistry, Depends(get_services)]
DocumentDep = Annotated[ModuleDocument | None, Depends(get_document)]
SessionDep = Annotated[ScreenSession, Depends(get_session)]
