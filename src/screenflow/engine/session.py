"""Screen sessions: the host-facing entry point of the engine.

A session owns one StateStore and one NavigationStack for one activation
of a module document. Renderers read ``snapshot()`` and call
``trigger_event``; the voice layer calls ``handle_tool_call`` and observes
the injected ToolBridge.
"""

import copy
import time
import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from screenflow.config.settings import EngineSettings
from screenflow.core.conditions import ConditionEvaluator
from screenflow.core.events import DIAG_UNKNOWN_TOOL_CALL
from screenflow.core.state import StateStore
from screenflow.core.templates import TemplateInterpolator
from screenflow.core.types import StateScope
from screenflow.document.models import EventConditions, ModuleDocument, Screen
from screenflow.engine.bridge import GestureCallback, ObserverToolBridge, ToolBridge
from screenflow.engine.dispatcher import EventDispatcher
from screenflow.engine.executor import ActionExecutor
from screenflow.engine.registry import ServiceRegistry
from screenflow.engine.results import DispatchResult, HostSignal, TriggerSource
from screenflow.navigation.navigator import Navigator
from screenflow.navigation.stack import NavigationStack
from screenflow.observability.logging import ContextLogger

# Tool names understood by handle_tool_call
TRIGGER_EVENT_TOOL = "trigger_event"
RECORD_INPUT_TOOL = "record_input"

# Seconds before a record_input follow-up event, when not given
DEFAULT_FOLLOW_UP_DELAY = 2.0

SignalListener = Callable[[HostSignal], None]


@dataclass
class SessionSnapshot:
    """Everything a renderer needs to draw the current screen."""

    session_id: str
    screen_id: str | None
    screen: Screen | None
    screen_state: dict[str, Any]
    module_state: dict[str, Any]
    navigation_stack: list[str]
    completed: bool = False


@dataclass
class ToolCallResult:
    """Outcome of a voice-layer tool call, returned to the agent."""

    success: bool
    message: str
    dispatch: DispatchResult | None = None
    next_event_id: str | None = None
    delay: float | None = None

    def to_output(self) -> dict[str, Any]:
        """Function-call output payload for the voice agent."""
        return {"success": self.success, "message": self.message}


def parse_delay(raw: Any, default: float) -> float:
    """Parse a delay in seconds from a number or numeric string."""
    if isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw)
        except ValueError:
            return default
    else:
        return default
    return value if value >= 0 else default


class ScreenSession:
    """One running instance of a module document.

    Args:
        document: Validated module document.
        bridge: Tool bridge owned by the host; an ObserverToolBridge is
            created when omitted.
        services: Service handlers for ``serviceCall`` actions.
        gesture_callback: Direct callback for gesture-sensitive tools.
        on_signal: Called for each host signal as it is produced.
        module_state: Initial module state, merged over the document's.
        settings: Engine settings; defaults to the document's.
        session_id: Identifier used in logs.
    """

    def __init__(
        self,
        document: ModuleDocument,
        *,
        bridge: ToolBridge | None = None,
        services: ServiceRegistry | None = None,
        gesture_callback: GestureCallback | None = None,
        on_signal: SignalListener | None = None,
        module_state: Mapping[str, Any] | None = None,
        settings: EngineSettings | None = None,
        session_id: str | None = None,
    ):
        self.document = document
        self.settings = settings or document.settings
        self.session_id = session_id or uuid.uuid4().hex
        self.bridge = bridge if bridge is not None else ObserverToolBridge()
        self.services = services if services is not None else ServiceRegistry()
        self.on_signal = on_signal

        initial_module = {**document.state, **dict(module_state or {})}
        self.store = StateStore(module_state=initial_module)
        self.stack = NavigationStack()
        self.navigator = Navigator(document, self.store, self.stack)
        self.conditions = ConditionEvaluator(self.store)
        self.interpolator = TemplateInterpolator(self.store)
        self.executor = ActionExecutor(
            store=self.store,
            navigator=self.navigator,
            conditions=self.conditions,
            interpolator=self.interpolator,
            bridge=self.bridge,
            services=self.services,
            settings=self.settings,
            gesture_callback=gesture_callback,
        )
        self.dispatcher = EventDispatcher(
            navigator=self.navigator,
            conditions=self.conditions,
            executor=self.executor,
            settings=self.settings,
            on_result=self._record_result,
        )

        self.history: list[DispatchResult] = []
        self.signals: list[HostSignal] = []
        self.completed = False
        self.log = ContextLogger(__name__).with_context(session_id=self.session_id)

    def activate(self, screen_id: str | None = None) -> Screen:
        """Activate a screen (default: the document's start screen).

        Raises:
            SessionError: If the screen does not exist.
        """
        screen = self.navigator.activate(screen_id)
        self.log.info(f"Session activated on '{screen.id}'")
        return screen

    @property
    def current_screen(self) -> Screen | None:
        return self.navigator.current_screen

    @property
    def screen_state(self) -> dict[str, Any]:
        return self.store.screen

    @property
    def module_state(self) -> dict[str, Any]:
        return self.store.module

    @property
    def navigation_stack(self) -> list[str]:
        return self.stack.history

    def snapshot(self) -> SessionSnapshot:
        """Deep-copied view of the session for renderers."""
        screen = self.current_screen
        return SessionSnapshot(
            session_id=self.session_id,
            screen_id=screen.id if screen else None,
            screen=screen.model_copy(deep=True) if screen else None,
            screen_state=self.store.snapshot(StateScope.screen),
            module_state=self.store.snapshot(StateScope.module),
            navigation_stack=self.stack.history,
            completed=self.completed,
        )

    def trigger_event(self, event_id: str, source: TriggerSource = "ui") -> DispatchResult:
        """Trigger an event on the active screen. Never raises."""
        return self.dispatcher.trigger(event_id, source)

    def go_back(self) -> str | None:
        """Navigate to the previous screen, re-seeding its screen state.

        Called while an event is dispatching (from a bridge listener, or
        from another thread), the move waits until that dispatch ends.

        Returns:
            The active screen id once this call returns.
        """
        self.dispatcher.submit(self.navigator.go_back)
        return self.stack.current

    def handle_tool_call(self, name: str, arguments: Mapping[str, Any] | None) -> ToolCallResult:
        """Entry point for tool calls made by the voice agent.

        ``trigger_event`` dispatches ``eventId``. ``record_input`` writes
        the recorded answer into screen state (and module state under
        ``storeKey``) and reports any follow-up ``nextEventId`` with its
        delay for the host to schedule.
        """
        args = dict(arguments or {})

        if name == TRIGGER_EVENT_TOOL:
            return self._tool_trigger_event(args)
        if name == RECORD_INPUT_TOOL:
            return self._tool_record_input(args)

        self.log.warning(f"{DIAG_UNKNOWN_TOOL_CALL}: '{name}'")
        return ToolCallResult(success=False, message=f"Unknown tool: {name}")

    def _tool_trigger_event(self, args: dict[str, Any]) -> ToolCallResult:
        event_id = args.get("eventId")
        if not isinstance(event_id, str) or not event_id:
            return ToolCallResult(success=False, message="trigger_event requires 'eventId'")

        result = self.trigger_event(event_id, source="voice")
        if result.queued:
            return ToolCallResult(True, f'Event "{event_id}" queued', dispatch=result)
        if not result.found:
            return ToolCallResult(False, f'Event "{event_id}" not found', dispatch=result)
        return ToolCallResult(True, f'Event "{event_id}" triggered successfully', dispatch=result)

    def _tool_record_input(self, args: dict[str, Any]) -> ToolCallResult:
        title = args.get("title")
        if not title:
            return ToolCallResult(success=False, message="record_input requires 'title'")

        summary = args.get("summary") or ""
        recorded = {
            "recordedInputTitle": title,
            "recordedInputSummary": summary,
            "recordedInputDescription": args.get("description") or "",
            "recordedInputTimestamp": int(time.time() * 1000),
        }
        store_key = args.get("storeKey")

        def record() -> None:
            self.store.merge(StateScope.screen, recorded)
            if store_key and summary:
                self.store.merge(StateScope.module, {store_key: summary})

        self.dispatcher.submit(record)

        next_event_id = args.get("nextEventId") or None
        delay = (
            parse_delay(args.get("delay"), DEFAULT_FOLLOW_UP_DELAY) if next_event_id else None
        )
        return ToolCallResult(
            success=True,
            message=f"Input recorded successfully: {title}",
            next_event_id=next_event_id,
            delay=delay,
        )

    def interpolate(self, template: str) -> str:
        """Substitute ``{$moduleData.x}`` / ``{$screenData.x}`` tokens."""
        return self.interpolator.interpolate(template)

    def evaluate_conditions(self, conditions: Sequence[EventConditions] | None) -> bool:
        """Evaluate a condition list (e.g. element visibility)."""
        return self.conditions.evaluate(conditions)

    def update_state(self, scope: StateScope | str, updates: Mapping[str, Any]) -> None:
        """Shallow-merge renderer input (e.g. a selected option) into state.

        Serialized with event dispatch like ``go_back``.

        Raises:
            ValueError: If ``scope`` is not a state scope.
        """
        scope = StateScope(scope)
        pending = copy.deepcopy(dict(updates))
        self.dispatcher.submit(lambda: self.store.merge(scope, pending))

    def _record_result(self, result: DispatchResult) -> None:
        self.history.append(result)
        for signal in result.signals:
            self.signals.append(signal)
            if signal.kind == "closeModule":
                self.completed = True
            if self.on_signal is not None:
                try:
                    self.on_signal(signal)
                except Exception:
                    self.log.exception(f"Signal listener failed for {signal.kind}")
