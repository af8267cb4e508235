"""
Модели данных для выражений.

Операнд: заранее классифицированный аргумент блока или переменной:
либо литерал, либо имя, которое будет разрешено в контексте при рендеринге.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class OperandKind(Enum):
    """Типы операндов."""
    LITERAL = "literal"
    NAME = "name"


@dataclass(frozen=True)
class Operand:
    """
    Классифицированное выражение.

    Для литералов ``value`` хранит неизменяемое значение (списки хранятся
    как кортежи), для имён исходный текст имени.
    """
    kind: OperandKind
    value: Any
    text: str

    @property
    def is_literal(self) -> bool:
        return self.kind is OperandKind.LITERAL

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Comparison:
    """
    Условие блока if: ``lhs`` или ``lhs op rhs``.

    При отсутствии оператора условие проверяет истинность ``lhs``.
    """
    lhs: Operand
    operator: str = ""
    rhs: Optional[Operand] = None

    @property
    def is_unary(self) -> bool:
        return not self.operator

    def __str__(self) -> str:
        if self.is_unary:
            return str(self.lhs)
        return f"{self.lhs} {self.operator} {self.rhs}"


__all__ = ["OperandKind", "Operand", "Comparison"]
