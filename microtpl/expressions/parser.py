"""
Парсер литералов с рекурсивным спуском.

Разбирает узкую литеральную грамматику без выполнения какого-либо кода.
Всё, что не является литералом, трактуется как имя из контекста.

Грамматика:
literal → NUMBER | STRING | "True" | "False" | "None" | list
list    → "[" ( literal ( "," literal )* ","? )? "]"
"""

from __future__ import annotations

import re
from typing import Any, List, Tuple

from .lexer import ExpressionLexer, Token
from .model import Operand, OperandKind
from ..errors import ExpressionError

# Имя: опциональные маркеры родителя "..", затем сегменты через точку
NAME_PATTERN = re.compile(r'^(?:\.\.)*[A-Za-z_]\w*(?:\.\w+)*$')

_KEYWORD_VALUES = {'True': True, 'False': False, 'None': None}

_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', '0': '\0'}


class LiteralParser:
    """
    Парсер литералов с рекурсивным спуском.

    Возвращает неизменяемое значение: списки собираются в кортежи,
    чтобы скомпилированное дерево нельзя было изменить через литерал.
    """

    def __init__(self):
        self.lexer = ExpressionLexer()
        self._tokens: List[Token] = []
        self._position = 0
        self._text = ""

    def parse(self, text: str) -> Any:
        """
        Парсит строку в значение литерала.

        Raises:
            ExpressionError: Если строка не является литералом
        """
        self._text = text
        self._tokens = self.lexer.tokenize(text)
        self._position = 0

        if self._is_at_end():
            raise ExpressionError("Empty expression", text)

        value = self._parse_literal()

        if not self._is_at_end():
            current = self._current_token()
            raise ExpressionError(
                f"Unexpected token '{current.value}' at position {current.position}", text
            )

        return value

    def _parse_literal(self) -> Any:
        current = self._current_token()

        if current.type == 'NUMBER':
            self._advance()
            return _to_number(current.value)

        if current.type == 'STRING':
            self._advance()
            return _unquote(current.value)

        if current.type == 'KEYWORD':
            self._advance()
            return _KEYWORD_VALUES[current.value]

        if self._match_symbol('['):
            return self._parse_list()

        if current.type == 'EOF':
            raise ExpressionError("Unexpected end of expression", self._text)
        raise ExpressionError(
            f"Unexpected token '{current.value}' at position {current.position}", self._text
        )

    def _parse_list(self) -> Tuple[Any, ...]:
        """Парсит список после открывающей скобки."""
        items: List[Any] = []

        while not self._match_symbol(']'):
            items.append(self._parse_literal())
            if self._match_symbol(']'):
                break
            if not self._match_symbol(','):
                raise ExpressionError(
                    f"Expected ',' or ']' at position {self._current_token().position}",
                    self._text,
                )

        return tuple(items)

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        if self._position >= len(self._tokens):
            return Token(type='EOF', value='', position=len(self._text))
        return self._tokens[self._position]

    def _is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        current = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return current

    def _match_symbol(self, symbol: str) -> bool:
        current = self._current_token()
        if current.type == 'SYMBOL' and current.value == symbol:
            self._advance()
            return True
        return False


def _to_number(text: str) -> Any:
    if any(ch in text for ch in '.eE'):
        return float(text)
    return int(text)


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r'\\(.)', lambda m: _ESCAPES.get(m.group(1), m.group(1)), body, flags=re.DOTALL)


def parse_literal(text: str) -> Any:
    """Удобная функция для разбора одного литерала."""
    return LiteralParser().parse(text)


def thaw(value: Any) -> Any:
    """Превращает кортежи литеральных списков обратно в списки (рекурсивно)."""
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


def classify(text: str) -> Operand:
    """
    Классифицирует выражение: сначала как литерал, затем как имя.

    Raises:
        ExpressionError: Если выражение не литерал и не допустимое имя
    """
    try:
        return Operand(kind=OperandKind.LITERAL, value=parse_literal(text), text=text)
    except ExpressionError:
        if NAME_PATTERN.match(text):
            return Operand(kind=OperandKind.NAME, value=text, text=text)
        raise ExpressionError("Not a literal or a name", text)


__all__ = ["LiteralParser", "NAME_PATTERN", "parse_literal", "thaw", "classify"]
