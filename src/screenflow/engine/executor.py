"""Action execution for screen events.

Actions run in document order. Each action's own conditions gate only
that action, and a failing action never stops the ones after it. There
is no rollback.
"""

import copy
import logging
from collections.abc import Sequence
from typing import Any

from screenflow.config.settings import EngineSettings
from screenflow.core.conditions import ConditionEvaluator
from screenflow.core.events import (
    DIAG_ACTION_FAILED,
    DIAG_GESTURE_FALLBACK,
    DIAG_NAVIGATION_UNRESOLVED,
    DIAG_SERVICE_FAILED,
    DIAG_SERVICE_UNWIRED,
    DIAG_UNKNOWN_ACTION,
)
from screenflow.core.state import StateStore, get_nested_value
from screenflow.core.templates import TemplateInterpolator
from screenflow.core.types import StateScope, is_undefined
from screenflow.document.models import (
    CloseModuleAction,
    CustomAction,
    EventAction,
    NavigationAction,
    ServiceCallAction,
    StateUpdateAction,
    ToolCallAction,
)
from screenflow.engine.bridge import GestureCallback, ToolBridge, ToolCall
from screenflow.engine.registry import ServiceRegistry
from screenflow.engine.results import DispatchResult, HostSignal
from screenflow.navigation.deeplinks import NEXT_SCREEN, PREV_SCREEN, resolve_deeplink
from screenflow.navigation.navigator import Navigator

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Executes action lists against the session's state and navigation."""

    def __init__(
        self,
        store: StateStore,
        navigator: Navigator,
        conditions: ConditionEvaluator,
        interpolator: TemplateInterpolator,
        bridge: ToolBridge,
        services: ServiceRegistry,
        settings: EngineSettings,
        gesture_callback: GestureCallback | None = None,
    ):
        self.store = store
        self.navigator = navigator
        self.conditions = conditions
        self.interpolator = interpolator
        self.bridge = bridge
        self.services = services
        self.settings = settings
        self.gesture_callback = gesture_callback

    def execute(self, actions: Sequence[EventAction], result: DispatchResult) -> None:
        """Run an action list, recording outcomes on the result."""
        for index, action in enumerate(actions):
            label = f"{index}:{action.type}"

            if not self.conditions.evaluate(action.conditions):
                logger.debug(f"[{result.event_id}] Action {label} skipped: conditions not met")
                result.skipped.append(label)
                continue

            try:
                self._execute_one(action, index, result)
            except Exception as e:
                result.diagnose(
                    DIAG_ACTION_FAILED, f"Action {label} failed: {e}", action_index=index
                )
                continue
            result.executed.append(label)

    def _execute_one(self, action: EventAction, index: int, result: DispatchResult) -> None:
        match action:
            case NavigationAction():
                self._navigate(action, index, result)
            case StateUpdateAction():
                self._update_state(action)
            case ToolCallAction():
                self._call_tool(action, index, result)
            case ServiceCallAction():
                self._call_service(action, index, result)
            case CloseModuleAction():
                self._signal(
                    result,
                    HostSignal(
                        kind="closeModule",
                        flow_completed=action.flow_completed,
                        parameters=self.interpolator.interpolate_value(action.parameters),
                        event_id=result.event_id,
                    ),
                )
            case CustomAction():
                self._signal(
                    result,
                    HostSignal(
                        kind="custom",
                        name=action.name,
                        parameters=self.interpolator.interpolate_value(action.parameters),
                        event_id=result.event_id,
                    ),
                )
            case _:
                result.diagnose(
                    DIAG_UNKNOWN_ACTION,
                    f"Unhandled action type '{getattr(action, 'type', type(action).__name__)}'",
                    action_index=index,
                )

    def _navigate(self, action: NavigationAction, index: int, result: DispatchResult) -> None:
        target = resolve_deeplink(action.deeplink)

        if target in (NEXT_SCREEN, PREV_SCREEN):
            result.diagnose(
                DIAG_NAVIGATION_UNRESOLVED,
                f"Placeholder deeplink '{action.deeplink}' was never rewritten",
                action_index=index,
            )
            return

        screen = self.navigator.navigate_to(target) if target else None
        if screen is None:
            result.diagnose(
                DIAG_NAVIGATION_UNRESOLVED,
                f"Screen not found for deeplink '{action.deeplink}'",
                action_index=index,
            )
            return

        logger.info(f"[{result.event_id}] Navigated to screen '{screen.id}'")

    def _update_state(self, action: StateUpdateAction) -> None:
        # Merged as written; templates stay live for the renderer
        self.store.merge(action.scope, action.updates)

    def _call_tool(self, action: ToolCallAction, index: int, result: DispatchResult) -> None:
        call = ToolCall(
            tool=action.tool, params=copy.deepcopy(action.params), event_id=result.event_id
        )

        if action.tool in self.settings.gesture_tools:
            # Must stay on the caller's stack: some platforms only grant
            # capabilities inside the originating user gesture.
            if self.gesture_callback is not None:
                logger.debug(f"Invoking gesture callback directly for '{action.tool}'")
                self.gesture_callback(call)
                return
            result.diagnose(
                DIAG_GESTURE_FALLBACK,
                f"No gesture callback for '{action.tool}'; publishing through the bridge",
                action_index=index,
            )
            self.bridge.publish(call)
            return

        self.bridge.publish(call)
        self._apply_builtin_tool(call)

    def _apply_builtin_tool(self, call: ToolCall) -> None:
        """Inline side effects of built-in tools, run with or without listeners."""
        builtins = self.settings.builtin_tools

        if call.tool == builtins.store_answer:
            question_id = call.params.get("questionId")
            answer = call.params.get("answer")
            if question_id and answer:
                key = f"{self.settings.answer_key_prefix}{question_id}"
                self.store.merge(StateScope.module, {key: answer})
                logger.info(f"Stored answer {key}")
        elif call.tool == builtins.complete:
            self.store.merge(StateScope.module, {self.settings.completion_flag: True})
            logger.info("Module marked complete")

    def _call_service(self, action: ServiceCallAction, index: int, result: DispatchResult) -> None:
        parameters = self.interpolator.interpolate_value(action.parameters)
        name = f"{action.service_name}.{action.function_name}"

        if self.services.get(action.service_name, action.function_name) is None:
            result.diagnose(
                DIAG_SERVICE_UNWIRED,
                f"Service call '{name}' has no wired handler",
                action_index=index,
            )
            self._signal(
                result,
                HostSignal(
                    kind="serviceCall",
                    name=name,
                    parameters=parameters,
                    event_id=result.event_id,
                ),
            )
            return

        try:
            response = self.services.call(action.service_name, action.function_name, parameters)
        except Exception as e:
            result.diagnose(
                DIAG_SERVICE_FAILED, f"Service call '{name}' failed: {e}", action_index=index
            )
            self.execute(action.on_error, result)
            return

        if action.response_mapping is not None:
            self._map_response(action, response)
        self.execute(action.on_success, result)

    def _map_response(self, action: ServiceCallAction, response: Any) -> None:
        mapping = action.response_mapping
        assert mapping is not None

        value = response
        if mapping.transformation:
            if not isinstance(response, dict):
                raise TypeError("Response transformation needs a mapping response")
            value = get_nested_value(response, mapping.transformation)
            if is_undefined(value):
                raise KeyError(f"Response has no '{mapping.transformation}'")

        self.store.merge(mapping.scope, {mapping.state_key: value})

    def _signal(self, result: DispatchResult, signal: HostSignal) -> None:
        logger.info(f"[{result.event_id}] Host signal: {signal.kind} {signal.name or ''}".rstrip())
        result.signals.append(signal)
