"""Screen interaction engine: dispatch, execution and sessions."""

from screenflow.engine.bridge import (
    BufferedToolBridge,
    GestureCallback,
    ObserverToolBridge,
    ToolBridge,
    ToolCall,
)
from screenflow.engine.dispatcher import DispatchState, EventDispatcher, find_event
from screenflow.engine.executor import ActionExecutor
from screenflow.engine.registry import ServiceRegistry
from screenflow.engine.results import Diagnostic, DispatchResult, HostSignal
from screenflow.engine.session import ScreenSession, SessionSnapshot, ToolCallResult

__all__ = [
    "ActionExecutor",
    "BufferedToolBridge",
    "Diagnostic",
    "DispatchResult",
    "DispatchState",
    "EventDispatcher",
    "GestureCallback",
    "HostSignal",
    "ObserverToolBridge",
    "ScreenSession",
    "ServiceRegistry",
    "SessionSnapshot",
    "ToolBridge",
    "ToolCall",
    "ToolCallResult",
    "find_event",
]
