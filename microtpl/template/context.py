"""
Контекст рендеринга и разрешение имён.

Контекстом служит любое отображение имя -> значение. Зарезервированы два имени:
- ``it``: текущий элемент цикла each;
- ``..``: ссылка на объемлющий контекст.

Имя вида ``a.b.c`` разрешается спуском по сегментам. Префикс ``..``
переносит поиск в родительский контекст (каждый префикс поднимает на уровень выше).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Dict

from ..errors import ContextError
from ..expressions.model import Operand
from ..expressions.parser import thaw

ITEM_NAME = "it"
PARENT_KEY = ".."
PARENT_PREFIX = ".."


def child_context(item: Any, parent: Mapping) -> Dict[str, Any]:
    """Создаёт контекст для одной итерации each."""
    return {ITEM_NAME: item, PARENT_KEY: parent}


def resolve_name(name: str, context: Mapping) -> Any:
    """
    Разрешает имя в контексте.

    Raises:
        ContextError: Если любой сегмент (или родитель) не найден;
            в ошибке указывается полное исходное выражение
    """
    current: Any = context
    rest = name

    while rest.startswith(PARENT_PREFIX):
        if not isinstance(current, Mapping) or PARENT_KEY not in current:
            raise ContextError(name, "no parent context")
        current = current[PARENT_KEY]
        rest = rest[len(PARENT_PREFIX):]

    for segment in rest.split("."):
        current = _lookup(current, segment, name)

    return current


def _lookup(value: Any, segment: str, expression: str) -> Any:
    """Спускается на один сегмент: ключ, индекс последовательности или атрибут."""
    if isinstance(value, Mapping):
        if segment in value:
            return value[segment]
        # YAML-отображения могут иметь целочисленные ключи: {80: http}
        if segment.isdigit() and int(segment) in value:
            return value[int(segment)]
        raise ContextError(expression, f"'{segment}' not found")

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if segment.isdigit():
            try:
                return value[int(segment)]
            except IndexError:
                raise ContextError(expression, f"index {segment} out of range") from None
        raise ContextError(expression, f"'{segment}' is not an index")

    if not segment.startswith("_"):
        try:
            return getattr(value, segment)
        except AttributeError:
            pass

    raise ContextError(expression, f"'{segment}' not found")


def evaluate_operand(operand: Operand, context: Mapping) -> Any:
    """
    Вычисляет значение операнда.

    Литеральные списки хранятся в дереве как кортежи; наружу отдаются
    свежие списки, чтобы вызываемый код не мог изменить дерево.
    """
    if operand.is_literal:
        return thaw(operand.value)
    return resolve_name(operand.value, context)


__all__ = [
    "ITEM_NAME",
    "PARENT_KEY",
    "PARENT_PREFIX",
    "child_context",
    "resolve_name",
    "evaluate_operand",
]
