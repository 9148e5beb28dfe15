"""Core engine primitives: state, conditions, rules and templates."""

from screenflow.core.conditions import ConditionEvaluator
from screenflow.core.errors import (
    ActionError,
    DocumentError,
    NavigationError,
    RuleError,
    ScreenflowError,
    ServiceNotFoundError,
    SessionError,
)
from screenflow.core.logic import apply_rule, validate_rule
from screenflow.core.state import StateStore, get_nested_value
from screenflow.core.templates import TemplateInterpolator
from screenflow.core.types import UNDEFINED, StateScope

__all__ = [
    "ActionError",
    "ConditionEvaluator",
    "DocumentError",
    "NavigationError",
    "RuleError",
    "ScreenflowError",
    "ServiceNotFoundError",
    "SessionError",
    "StateScope",
    "StateStore",
    "TemplateInterpolator",
    "UNDEFINED",
    "apply_rule",
    "get_nested_value",
    "validate_rule",
]
