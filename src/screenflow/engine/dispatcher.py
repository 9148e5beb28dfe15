"""Event dispatch: lookup, gating and trigger serialization."""

import logging
import threading
from collections import deque
from collections.abc import Callable
from enum import Enum
from functools import partial
from typing import Literal, TypeVar

from screenflow.config.settings import EngineSettings
from screenflow.core.conditions import ConditionEvaluator
from screenflow.core.events import (
    DIAG_EVENT_CONDITIONS_FAILED,
    DIAG_EVENT_NOT_FOUND,
    DIAG_NO_ACTIVE_SCREEN,
    DIAG_TRIGGER_DROPPED,
    DIAG_TRIGGER_QUEUED,
)
from screenflow.document.models import Screen, ScreenEvent
from screenflow.engine.executor import ActionExecutor
from screenflow.engine.results import Diagnostic, DispatchResult, TriggerSource
from screenflow.navigation.navigator import Navigator

logger = logging.getLogger(__name__)

EventScope = Literal["screen", "element"]
ResultListener = Callable[[DispatchResult], None]
Operation = Callable[[], object]

T = TypeVar("T")


class DispatchState(str, Enum):
    """Dispatcher state."""

    idle = "idle"
    dispatching = "dispatching"


def find_event(screen: Screen, event_id: str) -> tuple[ScreenEvent, EventScope] | None:
    """Look up an event on a screen.

    Screen-level events are searched first, then element events in
    section order and element order. The first match wins, so a
    screen-level event shadows an element event with the same id.
    """
    for event in screen.events:
        if event.id == event_id:
            return event, "screen"
    for event in screen.element_events():
        if event.id == event_id:
            return event, "element"
    return None


class EventDispatcher:
    """Runs triggers one at a time against the active screen.

    UI events and voice tool calls may arrive at any moment, including
    from a bridge listener while a dispatch is running. Only one dispatch
    is ever in flight: a trigger arriving meanwhile is queued (and later
    run by the dispatching thread) or dropped, per ``trigger_policy``.
    Other state changes (back navigation, renderer input) go through
    ``submit`` and share the same queue. The lock guards only the
    in-flight flag and the queue; state and navigation are mutated by
    the single dispatching thread.
    """

    def __init__(
        self,
        navigator: Navigator,
        conditions: ConditionEvaluator,
        executor: ActionExecutor,
        settings: EngineSettings,
        on_result: ResultListener | None = None,
    ):
        self.navigator = navigator
        self.conditions = conditions
        self.executor = executor
        self.settings = settings
        self.on_result = on_result

        self._lock = threading.Lock()
        self._state = DispatchState.idle
        self._pending: deque[Operation] = deque()

    @property
    def state(self) -> DispatchState:
        return self._state

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def trigger(self, event_id: str, source: TriggerSource = "ui") -> DispatchResult:
        """Trigger an event by id. Never raises for engine-level failures.

        Returns:
            The result of this trigger. A queued trigger returns a result
            with ``queued=True``; its real outcome is delivered to
            ``on_result`` once it runs.
        """
        with self._lock:
            if self._state is DispatchState.dispatching:
                return self._defer(event_id, source)
            self._state = DispatchState.dispatching

        return self._run_exclusive(partial(self._dispatch, event_id, source))

    def submit(self, operation: Operation) -> bool:
        """Run a state-changing operation serialized with dispatches.

        Submitted operations are never dropped: while a dispatch is in
        flight they wait in the trigger queue, whatever the policy.

        Returns:
            True if the operation ran before returning, False if it was
            queued behind the in-flight dispatch.
        """
        with self._lock:
            if self._state is DispatchState.dispatching:
                self._pending.append(operation)
                logger.debug("State change queued behind in-flight dispatch")
                return False
            self._state = DispatchState.dispatching

        self._run_exclusive(operation)
        return True

    def _run_exclusive(self, operation: Callable[[], T]) -> T:
        # Caller has set the dispatching state
        try:
            outcome = operation()
            self._drain()
        except BaseException:
            with self._lock:
                self._pending.clear()
                self._state = DispatchState.idle
            raise
        return outcome

    def _defer(self, event_id: str, source: TriggerSource) -> DispatchResult:
        # Called with the lock held
        result = DispatchResult(event_id=event_id, source=source)
        if (
            self.settings.trigger_policy == "drop"
            or len(self._pending) >= self.settings.max_queued_triggers
        ):
            result.diagnose(
                DIAG_TRIGGER_DROPPED, f"Trigger '{event_id}' dropped: dispatch in flight"
            )
            return result

        self._pending.append(partial(self._dispatch, event_id, source))
        result.queued = True
        result.diagnostics.append(
            Diagnostic(
                code=DIAG_TRIGGER_QUEUED,
                message=f"Trigger '{event_id}' queued at position {len(self._pending)}",
                event_id=event_id,
            )
        )
        logger.debug(f"Trigger '{event_id}' queued behind in-flight dispatch")
        return result

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._state = DispatchState.idle
                    return
                operation = self._pending.popleft()
            try:
                operation()
            except Exception:
                # Submitter has already returned
                logger.exception("Queued state change failed")

    def _dispatch(self, event_id: str, source: TriggerSource) -> DispatchResult:
        screen = self.navigator.current_screen
        result = DispatchResult(
            event_id=event_id,
            source=source,
            screen_id=screen.id if screen else None,
        )

        try:
            self._run(screen, result)
        except Exception:
            # Last line of defence: the executor already isolates actions
            logger.exception(f"Unexpected error dispatching '{event_id}'")

        if self.on_result is not None:
            try:
                self.on_result(result)
            except Exception:
                logger.exception("Dispatch result listener failed")
        return result

    def _run(self, screen: Screen | None, result: DispatchResult) -> None:
        if screen is None:
            result.diagnose(DIAG_NO_ACTIVE_SCREEN, "No active screen; trigger ignored")
            return

        found = find_event(screen, result.event_id)
        if found is None:
            result.diagnose(
                DIAG_EVENT_NOT_FOUND,
                f"Event '{result.event_id}' not found on screen '{screen.id}'",
            )
            return

        event, scope = found
        result.found = True
        result.scope = scope

        if not self.conditions.evaluate(event.conditions):
            result.diagnose(
                DIAG_EVENT_CONDITIONS_FAILED,
                f"Event '{event.id}' conditions not met; no actions run",
            )
            return

        if not event.actions:
            logger.debug(f"Event '{event.id}' has no actions")
            return

        logger.info(f"Executing {len(event.actions)} actions for event '{event.id}' ({scope})")
        self.executor.execute(event.actions, result)
