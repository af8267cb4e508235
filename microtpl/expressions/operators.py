"""
Операторы сравнения для блоков if.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Dict

from ..errors import ExpressionError

COMPARISON_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    '==': operator.eq,
    '!=': operator.ne,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
    'is': operator.is_,
}


def is_comparison_operator(text: str) -> bool:
    return text in COMPARISON_OPERATORS


def compare(op: str, lhs: Any, rhs: Any) -> bool:
    """
    Применяет оператор сравнения к уже разрешённым значениям.

    Raises:
        ExpressionError: Неизвестный оператор или несравнимые операнды
    """
    func = COMPARISON_OPERATORS.get(op)
    if func is None:
        raise ExpressionError("Unknown comparison operator", op)
    try:
        return bool(func(lhs, rhs))
    except TypeError as e:
        raise ExpressionError(f"Cannot compare {lhs!r} {op} {rhs!r} ({e})") from e


__all__ = ["COMPARISON_OPERATORS", "is_comparison_operator", "compare"]
