"""Scoped state storage for screen sessions."""

import copy
import logging
from collections.abc import Mapping
from typing import Any

from screenflow.core.types import UNDEFINED, JSONValue, StateMap, StateScope

logger = logging.getLogger(__name__)


def get_nested_value(data: Mapping[str, Any], path: str) -> JSONValue:
    """Traverse a dotted path through nested mappings.

    Returns UNDEFINED when the path is empty, a segment is missing, or a
    non-mapping value is traversed.

    Examples:
        >>> get_nested_value({"user": {"name": "Ana"}}, "user.name")
        'Ana'
        >>> get_nested_value({"user": "Ana"}, "user.name")
        UNDEFINED
    """
    if not path:
        return UNDEFINED

    value: Any = data
    for key in path.split("."):
        if isinstance(value, Mapping) and key in value:
            value = value[key]
        else:
            return UNDEFINED
    return value


class StateStore:
    """Two independent state scopes: screen and module.

    Screen scope is re-seeded on every navigation. Module scope lives for
    the whole session and is never cleared implicitly. Writes are visible
    to the next read immediately; there are no transactions.
    """

    def __init__(
        self,
        screen_state: Mapping[str, JSONValue] | None = None,
        module_state: Mapping[str, JSONValue] | None = None,
    ) -> None:
        self._scopes: dict[StateScope, StateMap] = {
            StateScope.screen: copy.deepcopy(dict(screen_state or {})),
            StateScope.module: copy.deepcopy(dict(module_state or {})),
        }

    @property
    def screen(self) -> StateMap:
        """Live screen-scope mapping."""
        return self._scopes[StateScope.screen]

    @property
    def module(self) -> StateMap:
        """Live module-scope mapping."""
        return self._scopes[StateScope.module]

    def get(self, scope: StateScope | str, path: str) -> JSONValue:
        """Resolve a dotted path in a scope, or UNDEFINED."""
        return get_nested_value(self._scopes[StateScope(scope)], path)

    def merge(self, scope: StateScope | str, updates: Mapping[str, JSONValue]) -> None:
        """Shallow-merge updates into a scope.

        Only top-level keys are overwritten; nested mappings are replaced,
        never merged recursively.
        """
        target = self._scopes[StateScope(scope)]
        for key, value in updates.items():
            target[key] = copy.deepcopy(value)
        logger.debug(f"Merged {sorted(updates)} into {StateScope(scope).value} state")

    def reset(self, scope: StateScope | str, initial: Mapping[str, JSONValue] | None) -> None:
        """Replace a scope with a copy of its initial snapshot."""
        self._scopes[StateScope(scope)] = copy.deepcopy(dict(initial or {}))

    def snapshot(self, scope: StateScope | str) -> StateMap:
        """Return a deep copy of a scope, safe to hand to renderers."""
        return copy.deepcopy(self._scopes[StateScope(scope)])
