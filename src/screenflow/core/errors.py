"""Core engine errors."""

from typing import Any


class ScreenflowError(Exception):
    """Base class for all screenflow errors.

    Keyword arguments are kept as context and rendered into the message,
    e.g. ``ScreenflowError("Lookup failed", screen="welcome")``.
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class DocumentError(ScreenflowError):
    """Raised when a screen document is malformed and cannot be loaded."""


class RuleError(ScreenflowError):
    """Raised when a rule expression is malformed or cannot be evaluated."""


class NavigationError(ScreenflowError):
    """Raised when a navigation target cannot be resolved."""


class ActionError(ScreenflowError):
    """Raised when action execution fails."""


class ServiceNotFoundError(ActionError):
    """Raised when no handler is wired for a service call."""


class SessionError(ScreenflowError):
    """Raised when session operations are used out of order."""
