"""
Загрузка контекста рендеринга.

Контекст читается из YAML-файла (JSON тоже подходит как подмножество YAML)
и дополняется присваиваниями NAME=VALUE из командной строки.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError, ExpressionError
from .expressions import parse_literal, thaw
from .expressions.parser import NAME_PATTERN

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        raise ConfigError(f"Context file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Failed to parse context file {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_context(path: Path) -> Dict[str, Any]:
    """
    Загружает контекст из файла.

    Args:
        path: Путь к YAML/JSON файлу

    Returns:
        Словарь имя -> значение

    Raises:
        ConfigError: Если файл не найден, не разбирается или не является словарём
    """
    return dict(_read_yaml_map(Path(path)))


def parse_assignments(pairs: Optional[Iterable[str]]) -> Dict[str, Any]:
    """
    Парсит присваивания NAME=VALUE.

    Значение разбирается как литерал (числа, строки в кавычках, списки,
    True/False/None); иначе значение берётся как есть, строкой.
    """
    result: Dict[str, Any] = {}
    if not pairs:
        return result

    for pair in pairs:
        if "=" not in pair:
            raise ConfigError(f"Invalid assignment '{pair}'. Expected 'NAME=VALUE'")
        name, value = pair.split("=", 1)
        name = name.strip()
        if not NAME_PATTERN.match(name) or "." in name:
            raise ConfigError(f"Invalid name in assignment '{pair}'")
        try:
            result[name] = thaw(parse_literal(value))
        except ExpressionError:
            result[name] = value

    return result


def build_context(context_file: Optional[Path], assignments: Optional[Iterable[str]]) -> Dict[str, Any]:
    """Собирает контекст: сначала файл, поверх него присваивания."""
    context: Dict[str, Any] = {}
    if context_file is not None:
        context.update(load_context(context_file))
    context.update(parse_assignments(assignments))
    return context


__all__ = ["load_context", "parse_assignments", "build_context"]
