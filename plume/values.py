"""Runtime value helpers for Plume.

Plume values are represented directly by Python objects: `float` for
numbers, `str` for text, `bool`, `None` for nil, and the callable classes
from `plume.callables`. This module holds the rules that give those
objects their Plume meaning: truthiness, equality and printing.
"""

from __future__ import annotations

from typing import Any

from .callables import NativeFunction, UserFunction


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    """nil and false are falsey; every other value, including 0 and "", is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Equality without coercion: values of different types are never equal."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if type(a) is not type(b):
        return False
    return a == b


def type_name(value: Any) -> str:
    """Return the Plume type name of a runtime value."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, (NativeFunction, UserFunction)):
        return 'function'
    return type(value).__name__


def stringify(value: Any) -> str:
    """Convert a Plume value to the text `print` emits."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = repr(value)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    return str(value)
