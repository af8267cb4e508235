"""
Литеральные выражения для аргументов шаблонов.

Узкая грамматика литералов (числа, строки, списки, True/False/None),
классификация «литерал или имя» и таблица операторов сравнения.
"""

from __future__ import annotations

from .lexer import ExpressionLexer, split_arguments
from .model import Comparison, Operand, OperandKind
from .operators import COMPARISON_OPERATORS, compare, is_comparison_operator
from .parser import LiteralParser, classify, parse_literal, thaw

__all__ = [
    "ExpressionLexer",
    "split_arguments",
    "Comparison",
    "Operand",
    "OperandKind",
    "COMPARISON_OPERATORS",
    "compare",
    "is_comparison_operator",
    "LiteralParser",
    "classify",
    "parse_literal",
    "thaw",
]
