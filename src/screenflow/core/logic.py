"""JSON Logic evaluation for event conditions.

Rules are JSON trees where a single-key mapping is an operation
(``{"==": [{"var": "flag"}, true]}``) and anything else is a literal.

Supports:
- Data access: var, missing, missing_some
- Control: if / ?:, and, or, !, !!
- Comparison: ==, !=, ===, !==, >, >=, <, <= (3-arg "between" for < and <=)
- Arithmetic: +, -, *, /, %, max, min
- Strings and arrays: in, cat, substr, merge
- Array iteration: map, filter, reduce, all, none, some
"""

import json
import math
import operator
from collections.abc import Callable, Mapping
from typing import Any

from screenflow.core.errors import RuleError

# Nested rules deeper than this are treated as circular input.
MAX_RULE_DEPTH = 64

_ORDERING = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}


def is_truthy(value: Any) -> bool:
    """JSON Logic truthiness.

    Empty arrays are falsy, "0" is truthy, and mappings are always truthy.
    """
    if isinstance(value, Mapping):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _to_number(val: Any) -> float | int | None:
    """Try to convert value to number."""
    if isinstance(val, (int, float)):
        return val
    if isinstance(val, str):
        text = val.strip()
        if not text:
            return 0
        try:
            return float(text) if any(c in text for c in ".eE") else int(text)
        except ValueError:
            return None
    return None


def _to_text(val: Any) -> str:
    """Stringify a value the way JSON Logic's cat does."""
    if val is None:
        return "null"
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    if isinstance(val, (list, dict)):
        return json.dumps(val, separators=(",", ":"))
    return str(val)


def _loose_equals(left: Any, right: Any) -> bool:
    """Equality with numeric coercion between numbers, booleans and strings."""
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if isinstance(left, (int, float, str)) and isinstance(right, (int, float, str)):
        left_num = _to_number(left)
        right_num = _to_number(right)
        if left_num is None or right_num is None:
            return False
        return left_num == right_num
    return bool(left == right)


def _strict_equals(left: Any, right: Any) -> bool:
    """Equality without coercion; booleans never equal numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


def _compare(op_str: str, values: list[Any]) -> bool:
    """Ordering comparison, chained for the 3-argument between form."""
    op_func = _ORDERING[op_str]
    if len(values) < 2:
        raise RuleError(f"Operator '{op_str}' needs at least two arguments")

    for left, right in zip(values, values[1:]):
        # null orders as 0, so a missing var compares like zero
        left = 0 if left is None else left
        right = 0 if right is None else right
        if isinstance(left, str) and isinstance(right, str):
            if not op_func(left, right):
                return False
            continue
        left_num = _to_number(left)
        right_num = _to_number(right)
        if left_num is None or right_num is None:
            return False
        if not op_func(left_num, right_num):
            return False
    return True


def _numbers(op_str: str, values: list[Any]) -> list[float | int]:
    numbers = []
    for value in values:
        number = _to_number(value)
        if number is None:
            raise RuleError(f"Operator '{op_str}' expects numbers", value=value)
        numbers.append(number)
    return numbers


def _get_var(data: Any, path: Any, default: Any = None) -> Any:
    """Resolve a var path (dotted string or index) in data."""
    if path is None or path == "" or path == []:
        return data

    current = data
    for key in str(path).split("."):
        if isinstance(current, Mapping) and key in current:
            current = current[key]
        elif isinstance(current, list):
            try:
                current = current[int(key)]
            except (ValueError, IndexError):
                return default
        else:
            return default
    return current


def _substr(text: Any, start: Any, length: Any = None) -> str:
    source = _to_text(text)
    begin = int(_to_number(start) or 0)
    if begin < 0:
        begin = max(len(source) + begin, 0)
    if length is None:
        return source[begin:]
    count = int(_to_number(length) or 0)
    if count < 0:
        end = max(len(source) + count, begin)
        return source[begin:end]
    return source[begin : begin + count]


def _merge(values: list[Any]) -> list[Any]:
    merged: list[Any] = []
    for value in values:
        if isinstance(value, list):
            merged.extend(value)
        else:
            merged.append(value)
    return merged


def _missing(data: Any, keys: list[Any]) -> list[Any]:
    if len(keys) == 1 and isinstance(keys[0], list):
        keys = keys[0]
    return [key for key in keys if _get_var(data, key) in (None, "")]


def _missing_some(data: Any, need: Any, keys: list[Any]) -> list[Any]:
    missing = _missing(data, [keys])
    if len(keys) - len(missing) >= int(_to_number(need) or 0):
        return []
    return missing


def _arithmetic(op_str: str, values: list[Any]) -> Any:
    numbers = _numbers(op_str, values)
    if op_str == "+":
        return sum(numbers)
    if op_str == "*":
        if not numbers:
            raise RuleError("Operator '*' needs at least one argument")
        return math.prod(numbers)
    if op_str == "-":
        if len(numbers) == 1:
            return -numbers[0]
        if len(numbers) != 2:
            raise RuleError("Operator '-' takes one or two arguments")
        return numbers[0] - numbers[1]
    if len(numbers) != 2:
        raise RuleError(f"Operator '{op_str}' takes two arguments")
    if numbers[1] == 0:
        raise RuleError(f"Division by zero in '{op_str}'")
    if op_str == "/":
        return numbers[0] / numbers[1]
    return math.fmod(numbers[0], numbers[1])


# Operators evaluated with their arguments already resolved.
_EAGER: dict[str, Callable[[list[Any]], Any]] = {
    "==": lambda a: _loose_equals(a[0], a[1]),
    "!=": lambda a: not _loose_equals(a[0], a[1]),
    "===": lambda a: _strict_equals(a[0], a[1]),
    "!==": lambda a: not _strict_equals(a[0], a[1]),
    "!": lambda a: not is_truthy(a[0]),
    "!!": lambda a: is_truthy(a[0]),
    ">": lambda a: _compare(">", a),
    ">=": lambda a: _compare(">=", a),
    "<": lambda a: _compare("<", a),
    "<=": lambda a: _compare("<=", a),
    "max": lambda a: max(_numbers("max", a)) if a else None,
    "min": lambda a: min(_numbers("min", a)) if a else None,
    "+": lambda a: _arithmetic("+", a),
    "-": lambda a: _arithmetic("-", a),
    "*": lambda a: _arithmetic("*", a),
    "/": lambda a: _arithmetic("/", a),
    "%": lambda a: _arithmetic("%", a),
    "in": lambda a: a[0] in a[1] if isinstance(a[1], (str, list)) else False,
    "cat": lambda a: "".join(_to_text(v) for v in a),
    "substr": lambda a: _substr(*a[:3]),
    "merge": _merge,
}

# Operators that control evaluation of their own arguments.
_LAZY = frozenset({"var", "missing", "missing_some", "if", "?:", "and", "or",
                   "map", "filter", "reduce", "all", "none", "some"})

SUPPORTED_OPERATORS = frozenset(_EAGER) | _LAZY

# Operators whose second argument is a rule applied per array item.
_ITERATORS = frozenset({"map", "filter", "reduce", "all", "none", "some"})


def _is_operation(rule: Any) -> bool:
    return isinstance(rule, Mapping) and len(rule) == 1


def _arguments(raw: Any) -> list[Any]:
    return list(raw) if isinstance(raw, list) else [raw]


def apply_rule(rule: Any, data: Any = None) -> Any:
    """Evaluate a JSON Logic rule against data.

    Args:
        rule: Rule tree (operations are single-key mappings)
        data: Variable bindings, usually a dict

    Returns:
        The rule's value (not necessarily a bool).

    Raises:
        RuleError: For unknown operators, malformed arguments, or rules
            nested deeper than MAX_RULE_DEPTH.

    Examples:
        >>> apply_rule({"==": [{"var": "flag"}, True]}, {"flag": True})
        True
        >>> apply_rule({"var": "missing"}, {})
    """
    try:
        return _apply(rule, data, 0)
    except RuleError:
        raise
    except (TypeError, ValueError, IndexError, KeyError, OverflowError) as e:
        raise RuleError(f"Rule evaluation failed: {e}") from e


def _apply(rule: Any, data: Any, depth: int) -> Any:
    if depth > MAX_RULE_DEPTH:
        raise RuleError("Rule nesting too deep", max_depth=MAX_RULE_DEPTH)

    if isinstance(rule, list):
        return [_apply(item, data, depth + 1) for item in rule]
    if not _is_operation(rule):
        return rule

    op_str, raw_args = next(iter(rule.items()))
    args = _arguments(raw_args)

    if op_str in _LAZY:
        return _apply_lazy(op_str, args, data, depth)

    handler = _EAGER.get(op_str)
    if handler is None:
        raise RuleError(f"Unknown operator: {op_str}")

    values = [_apply(arg, data, depth + 1) for arg in args]
    if op_str in ("==", "!=", "===", "!==") and len(values) != 2:
        raise RuleError(f"Operator '{op_str}' takes two arguments")
    if op_str in ("!", "!!") and not values:
        raise RuleError(f"Operator '{op_str}' takes one argument")
    if op_str == "in" and len(values) != 2:
        raise RuleError("Operator 'in' takes two arguments")
    return handler(values)


def _apply_lazy(op_str: str, args: list[Any], data: Any, depth: int) -> Any:
    def ev(arg: Any, scope: Any = data) -> Any:
        return _apply(arg, scope, depth + 1)

    if op_str == "var":
        path = ev(args[0]) if args else None
        default = ev(args[1]) if len(args) > 1 else None
        return _get_var(data, path, default)

    if op_str == "missing":
        return _missing(data, [ev(arg) for arg in args])

    if op_str == "missing_some":
        if len(args) != 2:
            raise RuleError("Operator 'missing_some' takes two arguments")
        return _missing_some(data, ev(args[0]), ev(args[1]))

    if op_str in ("if", "?:"):
        # [cond1, value1, cond2, value2, ..., else]
        for i in range(0, len(args) - 1, 2):
            if is_truthy(ev(args[i])):
                return ev(args[i + 1])
        if len(args) % 2 == 1:
            return ev(args[-1])
        return None

    if op_str == "and":
        value: Any = None
        for arg in args:
            value = ev(arg)
            if not is_truthy(value):
                return value
        return value

    if op_str == "or":
        value = None
        for arg in args:
            value = ev(arg)
            if is_truthy(value):
                return value
        return value

    # Array iteration: the first argument yields the items, the second is
    # applied to each item with the item as data.
    items = ev(args[0]) if args else []
    if not isinstance(items, list):
        items = []
    logic = args[1] if len(args) > 1 else None

    if op_str == "map":
        return [ev(logic, item) for item in items]
    if op_str == "filter":
        return [item for item in items if is_truthy(ev(logic, item))]
    if op_str == "reduce":
        accumulator = ev(args[2]) if len(args) > 2 else None
        for item in items:
            accumulator = ev(logic, {"current": item, "accumulator": accumulator})
        return accumulator
    if op_str == "all":
        return bool(items) and all(is_truthy(ev(logic, item)) for item in items)
    if op_str == "none":
        return not any(is_truthy(ev(logic, item)) for item in items)
    return any(is_truthy(ev(logic, item)) for item in items)


def validate_rule(rule: Any, _depth: int = 0) -> None:
    """Check a rule tree for unknown operators without evaluating it.

    Raises:
        RuleError: On an unknown operator or excessive nesting.
    """
    if _depth > MAX_RULE_DEPTH:
        raise RuleError("Rule nesting too deep", max_depth=MAX_RULE_DEPTH)

    if isinstance(rule, list):
        for item in rule:
            validate_rule(item, _depth + 1)
        return
    if not _is_operation(rule):
        return

    op_str, raw_args = next(iter(rule.items()))
    if op_str not in SUPPORTED_OPERATORS:
        raise RuleError(f"Unknown operator: {op_str}")
    for arg in _arguments(raw_args):
        validate_rule(arg, _depth + 1)
