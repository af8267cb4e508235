"""
Процессор шаблонов.

Публичный API, объединяющий лексер, построитель дерева и рендерер
в удобный интерфейс: компиляция один раз, рендеринг многократно.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from .builder import TreeBuilder
from .lexer import TemplateLexer
from .nodes import TemplateTree
from .renderer import TemplateRenderer

logger = logging.getLogger(__name__)


def compile_template(text: str) -> TemplateTree:
    """
    Компилирует текст шаблона в дерево.

    Raises:
        TemplateSyntaxError: При незакрытом или пустом теге
        StructuralError: При нарушении структуры блоков
        ExpressionError: При недопустимом аргументе
    """
    return TreeBuilder().build(TemplateLexer(text))


def render(tree: TemplateTree, context: Optional[Mapping] = None) -> str:
    """
    Рендерит скомпилированное дерево.

    Raises:
        ContextError: Если имя не найдено в контексте
        ExpressionError: При ошибке вычисления выражения
    """
    return TemplateRenderer(tree).render(context)


def render_text(text: str, context: Optional[Mapping] = None) -> str:
    """Компилирует и сразу рендерит шаблон."""
    return render(compile_template(text), context)


class Template:
    """
    Скомпилированный шаблон.

    Компилируется в конструкторе, поэтому ошибки структуры видны сразу.
    """

    def __init__(self, text: str, name: str = ""):
        self.text = text
        self.name = name
        self.tree = compile_template(text)

    def render(self, context: Optional[Mapping] = None, **names: Any) -> str:
        """
        Рендерит шаблон.

        Имена из ``names`` дополняют (и перекрывают) ``context``.
        """
        if names:
            merged: Dict[str, Any] = dict(context or {})
            merged.update(names)
            context = merged
        return render(self.tree, context)

    def __repr__(self) -> str:
        return f"Template({self.name or '<string>'!r}, nodes={len(self.tree)})"


class TemplateProcessor:
    """
    Процессор шаблонов с кэшем компиляции.

    Одинаковый текст под одним именем компилируется один раз.
    """

    def __init__(self):
        self._template_cache: Dict[Tuple[str, str], TemplateTree] = {}

    def compile(self, template_text: str, template_name: str = "") -> TemplateTree:
        """Компилирует шаблон с кэшированием."""
        cache_key = (template_name, template_text)

        cached = self._template_cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Template cache hit for '{template_name}'")
            return cached

        tree = compile_template(template_text)
        self._template_cache[cache_key] = tree
        logger.debug(f"Parsed template '{template_name}' -> {len(tree)} nodes")
        return tree

    def process_template_text(
        self,
        template_text: str,
        context: Optional[Mapping] = None,
        template_name: str = "",
    ) -> str:
        """
        Обрабатывает шаблон из текста.

        Args:
            template_text: Текст шаблона для обработки
            context: Контекст рендеринга
            template_name: Опциональное имя шаблона для диагностики

        Returns:
            Отрендеренный текст
        """
        tree = self.compile(template_text, template_name)
        return render(tree, context)

    def clear_cache(self) -> None:
        self._template_cache.clear()


__all__ = [
    "compile_template",
    "render",
    "render_text",
    "Template",
    "TemplateProcessor",
]
