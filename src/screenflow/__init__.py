"""screenflow - Screen interaction engine for voice-plus-screen flows.

Interprets declarative screen documents: resolves state references,
evaluates JSON Logic conditions, executes event actions and keeps
navigation history for a renderer and a voice agent.

Quick start:
    from screenflow import DocumentLoader, ScreenSession

    document = DocumentLoader.load("examples/onboarding/module.yaml")
    session = ScreenSession(document)
    session.activate()

    result = session.trigger_event("continue_event")
"""

from screenflow.__version__ import __version__
from screenflow.config.settings import EngineSettings
from screenflow.core.errors import (
    ActionError,
    DocumentError,
    NavigationError,
    RuleError,
    ScreenflowError,
    ServiceNotFoundError,
    SessionError,
)
from screenflow.core.types import StateScope
from screenflow.document.loader import DocumentLoader
from screenflow.document.models import ModuleDocument, Screen
from screenflow.engine.bridge import BufferedToolBridge, ObserverToolBridge, ToolBridge, ToolCall
from screenflow.engine.registry import ServiceRegistry
from screenflow.engine.results import DispatchResult, HostSignal
from screenflow.engine.session import ScreenSession, SessionSnapshot, ToolCallResult
from screenflow.navigation.deeplinks import resolve_deeplink, rewrite_placeholder_deeplinks

__author__ = "screenflow contributors"

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Sessions
    "ScreenSession",
    "SessionSnapshot",
    "ToolCallResult",
    "DispatchResult",
    "HostSignal",
    # Documents
    "DocumentLoader",
    "ModuleDocument",
    "Screen",
    "EngineSettings",
    "StateScope",
    # Host collaborators
    "ToolBridge",
    "ObserverToolBridge",
    "BufferedToolBridge",
    "ToolCall",
    "ServiceRegistry",
    # Deeplinks
    "resolve_deeplink",
    "rewrite_placeholder_deeplinks",
    # Errors
    "ScreenflowError",
    "DocumentError",
    "RuleError",
    "NavigationError",
    "ActionError",
    "ServiceNotFoundError",
    "SessionError",
]
