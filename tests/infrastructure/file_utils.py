"""
Утилиты для создания файлов и директорий в тестах.
"""

from __future__ import annotations

import textwrap
from pathlib import Path


def write(p: Path, text: str) -> Path:
    """
    Записывает текст в файл, создавая родительские директории при необходимости.

    Args:
        p: Путь к файлу
        text: Содержимое для записи

    Returns:
        Путь к созданному файлу
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def write_template(root: Path, name: str, body: str) -> Path:
    """Создаёт файл шаблона, убирая общий отступ из ``body``."""
    return write(root / name, textwrap.dedent(body).lstrip("\n"))
