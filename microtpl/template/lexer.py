"""
Лексический анализатор шаблонов.

Разбивает исходный текст шаблона на последовательность фрагментов:
- обычный текст
- переменные {{ ... }}
- блоки {% ... %} (открывающие и закрывающие {% end %})
- комментарии {# ... #}

Фрагменты покрывают весь текст без пропусков и перекрытий: склейка
их исходного текста (``raw``) в точности восстанавливает шаблон.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from ..errors import TemplateSyntaxError


class FragmentType(enum.Enum):
    """Типы фрагментов шаблона."""
    TEXT = "TEXT"
    VARIABLE = "VARIABLE"            # {{ name }}
    OPEN_BLOCK = "OPEN_BLOCK"        # {% command ... %}
    CLOSE_BLOCK = "CLOSE_BLOCK"      # {% end %}
    COMMENT = "COMMENT"              # {# ... #}


CLOSE_COMMAND = "end"

# Открывающий разделитель -> (закрывающий разделитель, тип тега)
_DELIMITERS: Dict[str, Tuple[str, FragmentType]] = {
    "{{": ("}}", FragmentType.VARIABLE),
    "{%": ("%}", FragmentType.OPEN_BLOCK),
    "{#": ("#}", FragmentType.COMMENT),
}

_OPEN_TAG = re.compile(r"\{\{|\{%|\{#")


@dataclass(frozen=True)
class Fragment:
    """
    Фрагмент с позиционной информацией для точной диагностики ошибок.
    """
    type: FragmentType
    raw: str             # Исходный текст, включая разделители
    clean: str           # Содержимое тега без разделителей и крайних пробелов
    position: int        # Позиция в исходном тексте
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)

    @property
    def command(self) -> str:
        """Первое слово блока (if, else, each, call, end)."""
        if self.type not in (FragmentType.OPEN_BLOCK, FragmentType.CLOSE_BLOCK):
            return ""
        return self.clean.split(None, 1)[0]

    @property
    def arguments(self) -> str:
        """Текст блока после команды."""
        parts = self.clean.split(None, 1)
        return parts[1] if len(parts) > 1 else ""

    def __repr__(self) -> str:
        return f"Fragment({self.type.name}, {self.raw!r}, {self.line}:{self.column})"


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Объект лексера можно итерировать сколько угодно раз: каждый проход
    лениво сканирует текст заново.
    """

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)

    def __iter__(self) -> Iterator[Fragment]:
        return self._scan()

    def tokenize(self) -> List[Fragment]:
        """Токенизирует весь исходный текст и возвращает список фрагментов."""
        return list(self._scan())

    def _scan(self) -> Iterator[Fragment]:
        position = 0
        line = 1
        column = 1

        while position < self.length:
            match = _OPEN_TAG.search(self.text, position)
            tag_start = match.start() if match else self.length

            # Текст до следующего тега (или до конца)
            if tag_start > position:
                raw = self.text[position:tag_start]
                yield Fragment(FragmentType.TEXT, raw, raw, position, line, column)
                line, column = _advance(raw, line, column)
                position = tag_start

            if match is None:
                break

            fragment = self._read_tag(match.group(0), position, line, column)
            yield fragment
            line, column = _advance(fragment.raw, line, column)
            position += len(fragment.raw)

    def _read_tag(self, opener: str, start: int, line: int, column: int) -> Fragment:
        """Читает тег, начинающийся с ``opener`` в позиции ``start``."""
        closer, tag_type = _DELIMITERS[opener]
        body_start = start + len(opener)
        end = self.text.find(closer, body_start)

        if end == -1:
            snippet = self.text[start:start + 30]
            raise TemplateSyntaxError(f"Unterminated tag {snippet!r}", line, column, start)

        # Комментарии могут содержать теги (закомментированный код шаблона).
        if tag_type is not FragmentType.COMMENT:
            nested = _OPEN_TAG.search(self.text, body_start, end)
            if nested is not None:
                snippet = self.text[start:end + len(closer)]
                raise TemplateSyntaxError(
                    f"Opening delimiter {nested.group(0)!r} inside tag {snippet!r}",
                    line, column, start,
                )

        raw = self.text[start:end + len(closer)]
        clean = self.text[body_start:end].strip()

        if tag_type is FragmentType.COMMENT:
            return Fragment(tag_type, raw, clean, start, line, column)

        if not clean:
            raise TemplateSyntaxError(f"Empty tag {raw!r}", line, column, start)

        if tag_type is FragmentType.OPEN_BLOCK and clean.split(None, 1)[0] == CLOSE_COMMAND:
            tag_type = FragmentType.CLOSE_BLOCK

        return Fragment(tag_type, raw, clean, start, line, column)


def _advance(raw: str, line: int, column: int) -> Tuple[int, int]:
    """Сдвигает номера строки и колонки на длину ``raw``."""
    newlines = raw.count("\n")
    if newlines:
        return line + newlines, len(raw) - raw.rfind("\n")
    return line, column + len(raw)


def iter_fragments(text: str) -> Iterator[Fragment]:
    """Ленивая токенизация шаблона."""
    return iter(TemplateLexer(text))


def tokenize_template(text: str) -> List[Fragment]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список фрагментов

    Raises:
        TemplateSyntaxError: При незакрытом или пустом теге
    """
    return TemplateLexer(text).tokenize()


__all__ = [
    "FragmentType",
    "Fragment",
    "CLOSE_COMMAND",
    "TemplateLexer",
    "iter_fragments",
    "tokenize_template",
]
