"""
Condition evaluation for automation and bonus rules.

A condition config maps a context field to ``{"operator": ..., "value": ...}``.
All conditions must hold; an empty config always holds.
"""

from collections.abc import Callable
from typing import Any

from loguru import logger


def _greater_than(actual: Any, expected: Any) -> bool:
    try:
        return actual > expected
    except TypeError:
        return False


def _less_than(actual: Any, expected: Any) -> bool:
    try:
        return actual < expected
    except TypeError:
        return False


def _contains(actual: Any, expected: Any) -> bool:
    return str(expected) in str(actual)


def _in(actual: Any, expected: Any) -> bool:
    if not isinstance(expected, list | tuple | set):
        return False
    return actual in expected


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "equals": lambda actual, expected: actual == expected,
    "not_equals": lambda actual, expected: actual != expected,
    "greater_than": _greater_than,
    "less_than": _less_than,
    "contains": _contains,
    "in": _in,
}


def evaluate_condition(field: str, condition: Any, context: dict[str, Any]) -> bool:
    """
    Evaluate a single field condition.

    Unknown or missing operators never match.
    """
    if not isinstance(condition, dict):
        logger.warning(
            "Malformed condition",
            extra={"field": field, "condition": repr(condition)},
        )
        return False

    operator = condition.get("operator")
    check = OPERATORS.get(operator)
    if check is None:
        logger.warning(
            f"Unknown condition operator: {operator}",
            extra={"field": field},
        )
        return False

    return check(context.get(field), condition.get("value"))


def evaluate_conditions(
    condition_config: dict[str, Any] | None, context: dict[str, Any] | None
) -> bool:
    """
    Check that every condition holds for the context.

    Args:
        condition_config: ``{field: {"operator": op, "value": v}}``
        context: Event data

    Returns:
        True if all conditions hold (or there are none)
    """
    if not condition_config:
        return True

    context = context or {}
    return all(
        evaluate_condition(field, condition, context)
        for field, condition in condition_config.items()
    )
