"""Template interpolation of state references in free text.

Supported tokens:
- ``{$moduleData.<path>}`` and ``{{$moduleData.<path>}}``
- ``{$screenData.<path>}`` and ``{{$screenData.<path>}}``

Unresolved references are left as written.
"""

import json
import math
import re
from collections.abc import Mapping
from typing import Any

from screenflow.core.state import StateStore
from screenflow.core.types import StateScope, is_undefined

_TOKEN_PATTERNS = (
    (StateScope.module, re.compile(r"\{\{?\$moduleData\.([^}]+)\}\}?")),
    (StateScope.screen, re.compile(r"\{\{?\$screenData\.([^}]+)\}\}?")),
)


def stringify(value: Any) -> str:
    """Render a state value for display text."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


class TemplateInterpolator:
    """Substitutes state references in strings."""

    def __init__(self, store: StateStore) -> None:
        self.store = store

    def interpolate(self, template: str) -> str:
        """Replace every resolvable token in a string.

        Examples:
            "Hi {$moduleData.user.name}" -> "Hi Ana"
            "Hi {$moduleData.unknown}"   -> "Hi {$moduleData.unknown}"
        """
        result = template
        for scope, pattern in _TOKEN_PATTERNS:
            result = pattern.sub(lambda match, s=scope: self._substitute(s, match), result)
        return result

    def _substitute(self, scope: StateScope, match: re.Match[str]) -> str:
        value = self.store.get(scope, match.group(1).strip())
        if is_undefined(value):
            return match.group(0)
        return stringify(value)

    def interpolate_value(self, value: Any) -> Any:
        """Interpolate every string leaf of a nested value."""
        if isinstance(value, str):
            return self.interpolate(value)
        if isinstance(value, list):
            return [self.interpolate_value(item) for item in value]
        if isinstance(value, Mapping):
            return {key: self.interpolate_value(item) for key, item in value.items()}
        return value
