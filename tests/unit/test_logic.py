"""Unit tests for the JSON Logic rule evaluator."""

import pytest

from screenflow.core.errors import RuleError
from screenflow.core.logic import (
    MAX_RULE_DEPTH,
    SUPPORTED_OPERATORS,
    apply_rule,
    is_truthy,
    validate_rule,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, False),
        ("", False),
        ([], False),
        (None, False),
        ("0", True),
        ([0], True),
        ({}, True),
        (float("nan"), False),
    ],
)
def test_is_truthy(value, expected):
    """Test JSON Logic truthiness rules"""
    assert is_truthy(value) is expected


def test_literals_pass_through():
    """Test non-operation values evaluate to themselves"""
    assert apply_rule(True) is True
    assert apply_rule("text") == "text"
    assert apply_rule([1, {"var": "a"}], {"a": 2}) == [1, 2]


class TestDataAccess:
    """Tests for var, missing and missing_some."""

    def test_var_dotted_path(self):
        assert apply_rule({"var": "user.name"}, {"user": {"name": "Ana"}}) == "Ana"

    def test_var_default(self):
        assert apply_rule({"var": ["missing", "fallback"]}, {}) == "fallback"

    def test_var_array_index(self):
        assert apply_rule({"var": "items.1"}, {"items": ["a", "b"]}) == "b"

    def test_var_empty_returns_data(self):
        assert apply_rule({"var": ""}, {"a": 1}) == {"a": 1}

    def test_missing(self):
        assert apply_rule({"missing": ["a", "b"]}, {"a": 1}) == ["b"]

    def test_missing_some(self):
        rule = {"missing_some": [1, ["a", "b", "c"]]}
        assert apply_rule(rule, {"a": 1}) == []
        assert apply_rule(rule, {}) == ["a", "b", "c"]


class TestComparison:
    """Tests for equality and ordering operators."""

    @pytest.mark.parametrize(
        "rule,expected",
        [
            ({"==": [1, "1"]}, True),
            ({"==": [0, False]}, True),
            ({"==": [None, None]}, True),
            ({"==": [None, 0]}, False),
            ({"!=": ["a", "b"]}, True),
            ({"===": [1, "1"]}, False),
            ({"===": [1, True]}, False),
            ({"!==": [1, 1.0]}, False),
        ],
    )
    def test_equality(self, rule, expected):
        assert apply_rule(rule) is expected

    def test_ordering(self):
        assert apply_rule({">": [{"var": "age"}, 18]}, {"age": 30}) is True
        assert apply_rule({"<=": ["2", 10]}) is True
        assert apply_rule({"<": ["apple", "banana"]}) is True

    def test_between(self):
        """Test 3-argument < and <= check a range"""
        assert apply_rule({"<": [1, {"var": "x"}, 10]}, {"x": 5}) is True
        assert apply_rule({"<": [1, {"var": "x"}, 10]}, {"x": 10}) is False
        assert apply_rule({"<=": [1, {"var": "x"}, 10]}, {"x": 10}) is True

    def test_ordering_treats_missing_value_as_zero(self):
        """Test a missing var orders like 0, as null does in JSON Logic"""
        assert apply_rule({"<": [{"var": "count"}, 3]}, {}) is True
        assert apply_rule({"<=": [{"var": "count"}, 0]}, {}) is True
        assert apply_rule({">": [{"var": "count"}, 0]}, {}) is False
        assert apply_rule({">=": [{"var": "count"}, 0]}, {"count": None}) is True
        assert apply_rule({"<": [-1, {"var": "count"}, 1]}, {}) is True


class TestLogical:
    """Tests for and/or/if/negation."""

    def test_and_returns_first_falsy(self):
        assert apply_rule({"and": [True, 0, "never"]}) == 0

    def test_or_returns_first_truthy(self):
        assert apply_rule({"or": [False, "", "yes"]}) == "yes"

    def test_and_short_circuits(self):
        """Test and stops before evaluating a failing operand"""
        rule = {"and": [False, {"/": [1, 0]}]}
        assert apply_rule(rule) is False

    def test_if_chain(self):
        rule = {
            "if": [{"<": [{"var": "t"}, 0]}, "freezing", {"<": [{"var": "t"}, 20]}, "mild", "hot"]
        }
        assert apply_rule(rule, {"t": -5}) == "freezing"
        assert apply_rule(rule, {"t": 10}) == "mild"
        assert apply_rule(rule, {"t": 30}) == "hot"

    def test_negation(self):
        assert apply_rule({"!": [[]]}) is True
        assert apply_rule({"!!": ["0"]}) is True
        assert apply_rule({"!": True}) is False


class TestArithmeticAndStrings:
    """Tests for arithmetic, string and array operators."""

    def test_arithmetic(self):
        assert apply_rule({"+": [1, "2", 3]}) == 6
        assert apply_rule({"-": [10, 4]}) == 6
        assert apply_rule({"-": [3]}) == -3
        assert apply_rule({"*": [2, 3]}) == 6
        assert apply_rule({"/": [9, 3]}) == 3
        assert apply_rule({"%": [7, 3]}) == 1
        assert apply_rule({"max": [1, 5, 3]}) == 5
        assert apply_rule({"min": [4, 2]}) == 2

    def test_division_by_zero_raises(self):
        with pytest.raises(RuleError):
            apply_rule({"/": [1, 0]})

    def test_in(self):
        assert apply_rule({"in": ["b", ["a", "b"]]}) is True
        assert apply_rule({"in": ["spring", "springfield"]}) is True
        assert apply_rule({"in": ["x", None]}) is False

    def test_cat_and_substr(self):
        assert apply_rule({"cat": ["I love ", 3.0, " ", True]}) == "I love 3 true"
        assert apply_rule({"substr": ["jsonlogic", 4]}) == "logic"
        assert apply_rule({"substr": ["jsonlogic", -5, 3]}) == "log"

    def test_merge(self):
        assert apply_rule({"merge": [[1], 2, [3, 4]]}) == [1, 2, 3, 4]


class TestArrayIteration:
    """Tests for map/filter/reduce/all/none/some."""

    def test_map_and_filter(self):
        data = {"items": [1, 2, 3]}
        assert apply_rule({"map": [{"var": "items"}, {"*": [{"var": ""}, 2]}]}, data) == [2, 4, 6]
        assert apply_rule({"filter": [{"var": "items"}, {">": [{"var": ""}, 1]}]}, data) == [2, 3]

    def test_reduce(self):
        rule = {
            "reduce": [
                {"var": "items"},
                {"+": [{"var": "current"}, {"var": "accumulator"}]},
                0,
            ]
        }
        assert apply_rule(rule, {"items": [1, 2, 3]}) == 6

    def test_all_none_some(self):
        data = {"answers": [{"ok": True}, {"ok": False}]}
        assert apply_rule({"all": [{"var": "answers"}, {"var": "ok"}]}, data) is False
        assert apply_rule({"some": [{"var": "answers"}, {"var": "ok"}]}, data) is True
        assert apply_rule({"none": [{"var": "answers"}, {"var": "ok"}]}, data) is False

    def test_all_on_empty_is_false(self):
        assert apply_rule({"all": [[], {"var": ""}]}) is False


class TestErrors:
    """Tests for malformed rules."""

    def test_unknown_operator(self):
        with pytest.raises(RuleError, match="Unknown operator"):
            apply_rule({"regex": ["a", "b"]})

    def test_wrong_arity(self):
        with pytest.raises(RuleError):
            apply_rule({"==": [1]})

    def test_non_numeric_arithmetic(self):
        with pytest.raises(RuleError):
            apply_rule({"+": ["a", 1]})

    def test_excessive_nesting(self):
        rule: dict = {"var": "x"}
        for _ in range(MAX_RULE_DEPTH + 2):
            rule = {"!": [rule]}
        with pytest.raises(RuleError, match="too deep"):
            apply_rule(rule, {})


class TestValidateRule:
    """Tests for load-time rule validation."""

    def test_accepts_supported_operators(self):
        validate_rule({"and": [{"==": [{"var": "a"}, 1]}, {"in": ["x", {"var": "list"}]}]})

    def test_rejects_nested_unknown_operator(self):
        with pytest.raises(RuleError):
            validate_rule({"and": [True, {"matches": ["a", "b"]}]})

    def test_does_not_evaluate(self):
        """Test validation passes rules that would fail at runtime"""
        validate_rule({"/": [1, 0]})

    def test_operator_set(self):
        assert {"var", "==", "and", "if", "some"} <= SUPPORTED_OPERATORS
