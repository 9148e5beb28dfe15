"""Condition evaluation for events and actions.

A condition list is a conjunction: each entry binds named variables
(literals or ``$moduleData.<path>`` / ``$screenData.<path>`` references)
and evaluates a JSON Logic rule against those bindings.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from screenflow.core.logic import apply_rule, is_truthy
from screenflow.core.state import StateStore
from screenflow.core.types import is_undefined, scope_for_reference

if TYPE_CHECKING:
    from screenflow.document.models import EventConditions

logger = logging.getLogger(__name__)


class ConditionEvaluator:
    """Evaluates condition lists against a StateStore.

    Evaluation fails closed: any error while resolving variables or
    applying a rule makes the whole list false. Nothing is raised to the
    caller.
    """

    def __init__(self, store: StateStore) -> None:
        self.store = store

    def resolve_variables(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        """Resolve a variable map into concrete bindings.

        Missing references become None, which JSON Logic treats as absent.
        """
        resolved: dict[str, Any] = {}
        for name, declared in variables.items():
            reference = scope_for_reference(declared)
            if reference is None:
                resolved[name] = declared
                continue
            scope, path = reference
            value = self.store.get(scope, path)
            resolved[name] = None if is_undefined(value) else value
        return resolved

    def evaluate_one(self, condition: "EventConditions") -> bool:
        """Evaluate a single condition entry. May raise."""
        bindings = self.resolve_variables(condition.state)
        return is_truthy(apply_rule(condition.rules, bindings))

    def evaluate(self, conditions: Sequence["EventConditions"] | None) -> bool:
        """Evaluate a condition list as a short-circuit AND.

        Args:
            conditions: Condition entries; empty or None means "always".

        Returns:
            True if every entry holds, False at the first that does not
            or on any evaluation error.
        """
        if not conditions:
            return True

        for index, condition in enumerate(conditions):
            try:
                if not self.evaluate_one(condition):
                    logger.debug(f"Condition {index} not met; skipping remaining conditions")
                    return False
            except Exception as e:
                logger.error(f"Error evaluating condition {index}: {e}")
                return False
        return True
