"""
Лексер для разбора литеральных выражений.

Выполняет токенизацию аргумента блока или переменной, разбивая его на
значимые элементы:
- Числа (целые и с плавающей точкой)
- Строки в одинарных или двойных кавычках
- Ключевые слова (True, False, None)
- Символы (квадратные скобки, запятые)
- Пробелы (игнорируются)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from ..errors import ExpressionError


@dataclass
class Token:
    """
    Токен литерального выражения.

    Attributes:
        type: Тип токена (NUMBER, STRING, KEYWORD, IDENTIFIER, SYMBOL, EOF)
        value: Значение токена
        position: Позиция в исходной строке
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class ExpressionLexer:
    """
    Лексер для разбиения литерального выражения на токены.

    Поддерживаемые токены:
    - NUMBER: 42, -1, 3.14, 1e3
    - STRING: 'text', "text" (с экранированием через обратный слеш)
    - KEYWORD: True, False, None
    - IDENTIFIER: всё остальное, похожее на имя
    - SYMBOL: [, ], ,
    - EOF: конец строки
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        (r'\s+', 'WHITESPACE', True),

        (r"'(?:[^'\\]|\\.)*'", 'STRING', False),
        (r'"(?:[^"\\]|\\.)*"', 'STRING', False),

        # Числа проверяем до символов, чтобы забрать знак
        (r'[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?', 'NUMBER', False),

        (r'\[', 'SYMBOL', False),
        (r'\]', 'SYMBOL', False),
        (r',', 'SYMBOL', False),

        (r'[A-Za-z_]\w*', 'IDENTIFIER', False),

        # Неизвестный символ (ошибка)
        (r'.', 'UNKNOWN', False),
    ]

    KEYWORDS = {'True', 'False', 'None'}

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern, re.DOTALL), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Args:
            text: Строка выражения для разбора

        Returns:
            Список токенов, включая EOF в конце

        Raises:
            ExpressionError: При обнаружении неизвестного символа
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue

                value = match.group(0)
                if not ignore:
                    if token_type == 'UNKNOWN':
                        raise ExpressionError(
                            f"Unexpected character '{value}' at position {position}", text
                        )

                    final_type = token_type
                    if token_type == 'IDENTIFIER' and value in self.KEYWORDS:
                        final_type = 'KEYWORD'

                    tokens.append(Token(type=final_type, value=value, position=position))

                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))

        return tokens


_OPENING_BRACKETS = {'[': ']', '(': ')', '{': '}'}
_CLOSING_BRACKETS = set(_OPENING_BRACKETS.values())


def split_arguments(text: str) -> List[str]:
    """
    Делит содержимое блока на аргументы по пробелам.

    Пробелы внутри строк в кавычках и внутри скобок не разделяют аргументы,
    поэтому ``'a b'`` и ``[1, 2]`` остаются одним аргументом.

    Raises:
        ExpressionError: При незакрытой кавычке или непарной скобке
    """
    args: List[str] = []
    current: List[str] = []
    quote = ''
    depth = 0
    escaped = False

    for char in text:
        if quote:
            current.append(char)
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == quote:
                quote = ''
            continue

        if char in ('"', "'"):
            quote = char
        elif char in _OPENING_BRACKETS:
            depth += 1
        elif char in _CLOSING_BRACKETS:
            depth -= 1
            if depth < 0:
                raise ExpressionError("Unbalanced closing bracket", text)
        elif char.isspace() and depth == 0:
            if current:
                args.append(''.join(current))
                current = []
            continue

        current.append(char)

    if quote:
        raise ExpressionError("Unterminated string literal", text)
    if depth:
        raise ExpressionError("Unclosed bracket", text)

    if current:
        args.append(''.join(current))

    return args
