"""Core type definitions shared across the engine."""

from enum import Enum
from typing import Any, Final

# JSON-shaped values held in state scopes.
JSONValue = Any
StateMap = dict[str, JSONValue]

MODULE_DATA_PREFIX: Final = "$moduleData."
SCREEN_DATA_PREFIX: Final = "$screenData."


class StateScope(str, Enum):
    """Where state updates are stored."""

    screen = "screen"
    module = "module"


class _Undefined:
    """Sentinel for a path that does not resolve to a value.

    Distinct from ``None``, which is a legitimate JSON ``null``.
    """

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "_Undefined":
        return self


UNDEFINED: Final = _Undefined()


def is_undefined(value: Any) -> bool:
    """Check whether a resolved value is the UNDEFINED sentinel."""
    return value is UNDEFINED


def scope_for_reference(reference: Any) -> tuple[StateScope, str] | None:
    """Split a ``$moduleData.x`` / ``$screenData.x`` reference into scope and path.

    Returns None for anything that is not a state reference (including
    non-string literals).
    """
    if not isinstance(reference, str):
        return None
    if reference.startswith(MODULE_DATA_PREFIX):
        return StateScope.module, reference[len(MODULE_DATA_PREFIX) :]
    if reference.startswith(SCREEN_DATA_PREFIX):
        return StateScope.screen, reference[len(SCREEN_DATA_PREFIX) :]
    return None
