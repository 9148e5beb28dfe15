"""Unit tests for ConditionEvaluator."""

from unittest.mock import patch

import pytest

from screenflow.core.conditions import ConditionEvaluator
from screenflow.document.models import EventConditions


def make_conditions(*entries: tuple) -> list[EventConditions]:
    return [EventConditions(rules=rules, state=state) for rules, state in entries]


@pytest.fixture
def evaluator(store) -> ConditionEvaluator:
    return ConditionEvaluator(store)


def test_empty_list_is_true(evaluator):
    """Test no conditions means the event or action always runs"""
    assert evaluator.evaluate([]) is True
    assert evaluator.evaluate(None) is True


def test_resolve_variables_mixes_literals_and_references(evaluator):
    """Test variable bindings resolve references and keep literals"""
    # Act
    bindings = evaluator.resolve_variables(
        {
            "name": "$moduleData.user.name",
            "choice": "$screenData.selected",
            "limit": 5,
            "label": "plain",
            "missing": "$moduleData.nope",
        }
    )

    # Assert
    assert bindings == {
        "name": "Ana",
        "choice": "a",
        "limit": 5,
        "label": "plain",
        "missing": None,
    }


def test_single_condition_true(evaluator):
    """Test a rule over resolved references"""
    conditions = make_conditions(
        ({"==": [{"var": "name"}, "Ana"]}, {"name": "$moduleData.user.name"})
    )
    assert evaluator.evaluate(conditions) is True


def test_all_conditions_must_hold(evaluator):
    """Test the list is a conjunction"""
    conditions = make_conditions(
        ({"var": "flag"}, {"flag": "$moduleData.flag"}),
        ({">": [{"var": "count"}, 5]}, {"count": "$screenData.count"}),
    )
    assert evaluator.evaluate(conditions) is False


def test_missing_reference_is_falsy(evaluator):
    """Test an unresolved reference behaves like an absent variable"""
    conditions = make_conditions(({"!!": [{"var": "x"}]}, {"x": "$screenData.unknown"}))
    assert evaluator.evaluate(conditions) is False


def test_short_circuits_after_first_false(evaluator):
    """Test later conditions are never evaluated once one is false"""
    # Arrange
    conditions = make_conditions(
        ({"==": [1, 2]}, {}),
        ({"==": [1, 1]}, {}),
        ({"==": [1, 1]}, {}),
    )

    # Act
    with patch.object(
        ConditionEvaluator, "evaluate_one", autospec=True, side_effect=[False, True, True]
    ) as spy:
        result = evaluator.evaluate(conditions)

    # Assert
    assert result is False
    assert spy.call_count == 1


def test_evaluation_error_fails_closed(evaluator):
    """Test a rule that raises makes the whole list false"""
    conditions = make_conditions(({"/": [1, {"var": "zero"}]}, {"zero": 0}))
    assert evaluator.evaluate(conditions) is False


def test_reads_live_state(evaluator, store):
    """Test evaluation sees writes made just before"""
    conditions = make_conditions(({"==": [{"var": "s"}, "b"]}, {"s": "$screenData.selected"}))
    assert evaluator.evaluate(conditions) is False

    store.merge("screen", {"selected": "b"})

    assert evaluator.evaluate(conditions) is True
