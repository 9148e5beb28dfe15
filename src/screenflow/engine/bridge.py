"""ToolBridge interface for tool-call delivery to the voice layer.

This module defines the abstract interface and in-process implementations
the engine uses to publish ``toolCall`` actions. The bridge is owned by
the host and injected into each session.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation published by the engine."""

    tool: str
    params: dict[str, Any] = field(default_factory=dict)
    event_id: str | None = None


ToolCallListener = Callable[[ToolCall], None]

# Direct, synchronous handler for gesture-sensitive tools
GestureCallback = Callable[[ToolCall], None]


class ToolBridge(ABC):
    """Interface for publishing tool calls to the voice/tool layer (DIP)."""

    @abstractmethod
    def publish(self, call: ToolCall) -> None:
        """Publish a tool call to interested parties."""
        ...


class ObserverToolBridge(ToolBridge):
    """Synchronous in-process publish/subscribe bridge.

    Listener errors are logged and do not reach the publisher.
    """

    def __init__(self) -> None:
        self._listeners: list[ToolCallListener] = []

    def subscribe(self, listener: ToolCallListener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, call: ToolCall) -> None:
        """Deliver a tool call to every listener, in subscription order."""
        logger.debug(f"Publishing tool call '{call.tool}' to {len(self._listeners)} listeners")
        for listener in list(self._listeners):
            try:
                listener(call)
            except Exception:
                logger.exception(f"Tool call listener failed for '{call.tool}'")

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


class BufferedToolBridge(ObserverToolBridge):
    """Keeps every published call, for tests and batch delivery."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[ToolCall] = []

    def publish(self, call: ToolCall) -> None:
        """Buffer the call, then notify listeners."""
        self.calls.append(call)
        super().publish(call)

    def clear(self) -> None:
        """Clear the call buffer."""
        self.calls.clear()
