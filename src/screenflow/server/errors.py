"""Server error handling - sanitizes errors for client responses.

Prevents exposure of sensitive information like file paths, stack traces,
and document internals to HTTP clients.
"""

import logging
import uuid

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from screenflow.core.errors import (
    ActionError,
    DocumentError,
    NavigationError,
    RuleError,
    SessionError,
)

logger = logging.getLogger(__name__)


# Error messages safe to expose to clients
SAFE_ERROR_MESSAGES = {
    "DocumentError": "Invalid screen document.",
    "RuleError": "Invalid condition rule.",
    "NavigationError": "Navigation target could not be resolved.",
    "ActionError": "Action execution failed.",
    "ServiceNotFoundError": "Action execution failed.",
    "SessionError": "Session error. Please start a new session.",
}

DEFAULT_ERROR_MESSAGE = "An internal error occurred. Please try again later."

SUPPORT_MESSAGE = "If this problem persists, contact support with the reference code."


def create_error_reference() -> str:
    """Generate unique error reference for client/server correlation."""
    return f"ERR-{uuid.uuid4().hex[:8].upper()}"


def get_safe_error_message(exception: Exception) -> str:
    """Get client-safe error message for exception type."""
    exception_type = type(exception).__name__
    return SAFE_ERROR_MESSAGES.get(exception_type, DEFAULT_ERROR_MESSAGE)


def get_http_status_for_exception(exception: Exception) -> int:
    """Map exception types to appropriate HTTP status codes."""
    # Client errors (4xx)
    if isinstance(exception, (DocumentError, RuleError)):
        return 422
    if isinstance(exception, (SessionError, NavigationError)):
        return 409

    # Server errors (5xx)
    if isinstance(exception, ActionError):
        return 500

    return 500


def log_error_with_context(
    error_ref: str,
    exception: Exception,
    session_id: str | None = None,
    endpoint: str | None = None,
) -> None:
    """Log full error details server-side for debugging."""
    logger.error(
        f"[{error_ref}] Error in {endpoint or 'unknown'} "
        f"for session {session_id or 'unknown'}: {type(exception).__name__}: {exception}",
        exc_info=True,
        extra={
            "error_reference": error_ref,
            "session_id": session_id,
            "endpoint": endpoint,
            "exception_type": type(exception).__name__,
        },
    )


def create_error_response(
    exception: Exception,
    session_id: str | None = None,
    endpoint: str | None = None,
) -> HTTPException:
    """Create sanitized HTTPException for client response."""
    error_ref = create_error_reference()

    # Log full details server-side
    log_error_with_context(error_ref, exception, session_id, endpoint)

    status_code = get_http_status_for_exception(exception)
    safe_message = get_safe_error_message(exception)

    return HTTPException(
        status_code=status_code,
        detail={
            "error": safe_message,
            "reference": error_ref,
            "message": SUPPORT_MESSAGE,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for uncaught exceptions."""
    error_ref = create_error_reference()
    session_id = request.path_params.get("session_id")

    log_error_with_context(error_ref, exc, session_id, request.url.path)

    return JSONResponse(
        status_code=500,
        content={
            "error": DEFAULT_ERROR_MESSAGE,
            "reference": error_ref,
            "message": SUPPORT_MESSAGE,
        },
    )
