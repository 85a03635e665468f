"""
Template substitution for automation actions.

Placeholders look like ``{{key}}``; keys missing from the context are
left untouched.
"""

from typing import Any


def replace_variables(template: str | None, context: dict[str, Any]) -> str:
    """Replace ``{{key}}`` with ``str(context[key])`` for every context key."""
    if template is None:
        return ""

    result = template
    for key, value in context.items():
        result = result.replace("{{" + str(key) + "}}", str(value))
    return result


def _substitute(value: Any, context: dict[str, Any]) -> Any:
    if isinstance(value, str):
        return replace_variables(value, context)
    if isinstance(value, dict):
        return replace_variables_in_object(value, context)
    if isinstance(value, list):
        return [_substitute(item, context) for item in value]
    return value


def replace_variables_in_object(
    obj: dict[str, Any], context: dict[str, Any]
) -> dict[str, Any]:
    """
    Substitute placeholders in every string leaf of nested dicts and lists.

    Other values are copied as is.
    """
    return {key: _substitute(value, context) for key, value in obj.items()}
