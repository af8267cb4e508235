"""
Рендерер скомпилированных шаблонов.

Обходит TemplateTree и собирает результат для заданного контекста.
Рендеринг является чистой функцией дерева и контекста: дерево не изменяется,
поэтому одно дерево можно рендерить многократно и из разных мест сразу.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Callable, Dict, List, Optional

from .context import child_context, evaluate_operand, resolve_name
from .nodes import Node, NodeKind, TemplateTree
from ..errors import ExpressionError
from ..expressions.operators import compare

RenderFunc = Callable[["TemplateRenderer", int, Node, Mapping], str]


class TemplateRenderer:
    """
    Рендерер дерева.

    Обработка каждого типа узла задаётся таблицей ``RENDER_TABLE``.
    """

    def __init__(self, tree: TemplateTree):
        self.tree = tree

    def render(self, context: Optional[Mapping] = None) -> str:
        """
        Рендерит дерево.

        Raises:
            ContextError: Если имя не найдено в контексте
            ExpressionError: При несравнимых операндах, неитерируемом
                источнике each или невызываемой цели call
        """
        return self._render_children(self.tree.root.children, context or {})

    def _render_node(self, index: int, context: Mapping) -> str:
        node = self.tree.node(index)
        return RENDER_TABLE[node.kind](self, index, node, context)

    def _render_children(self, indices, context: Mapping) -> str:
        return "".join(self._render_node(i, context) for i in indices)

    # Обработчики узлов

    def _render_text(self, index: int, node: Node, context: Mapping) -> str:
        return node.text

    def _render_variable(self, index: int, node: Node, context: Mapping) -> str:
        return _to_str(evaluate_operand(node.operand, context))

    def _render_if(self, index: int, node: Node, context: Mapping) -> str:
        then_branch, else_branch = self.tree.branches(index)
        branch = then_branch if self._test(node, context) else else_branch
        return self._render_children(branch, context)

    def _render_each(self, index: int, node: Node, context: Mapping) -> str:
        items = _iterate(evaluate_operand(node.operand, context), node)
        parts: List[str] = []
        for item in items:
            parts.append(self._render_children(node.children, child_context(item, context)))
        return "".join(parts)

    def _render_call(self, index: int, node: Node, context: Mapping) -> str:
        func = resolve_name(node.callee, context)
        if not callable(func):
            raise ExpressionError(f"Not callable in {node.source!r}", node.callee)

        args = [evaluate_operand(arg, context) for arg in node.args]
        kwargs = {name: evaluate_operand(value, context) for name, value in node.kwargs}
        return _to_str(func(*args, **kwargs))

    def _render_nothing(self, index: int, node: Node, context: Mapping) -> str:
        return ""

    def _test(self, node: Node, context: Mapping) -> bool:
        condition = node.condition
        lhs = evaluate_operand(condition.lhs, context)
        if condition.is_unary:
            return bool(lhs)
        rhs = evaluate_operand(condition.rhs, context)
        try:
            return compare(condition.operator, lhs, rhs)
        except ExpressionError as e:
            raise ExpressionError(f"{e} in {node.source!r}") from e


RENDER_TABLE: Dict[NodeKind, RenderFunc] = {
    NodeKind.TEXT: TemplateRenderer._render_text,
    NodeKind.VARIABLE: TemplateRenderer._render_variable,
    NodeKind.IF: TemplateRenderer._render_if,
    NodeKind.EACH: TemplateRenderer._render_each,
    NodeKind.CALL: TemplateRenderer._render_call,
    NodeKind.ELSE: TemplateRenderer._render_nothing,
    NodeKind.ROOT: TemplateRenderer._render_nothing,
}


def _to_str(value: Any) -> str:
    return "" if value is None else str(value)


def _iterate(value: Any, node: Node) -> Iterable:
    """Возвращает элементы для each; отображения дают пары key/value."""
    if isinstance(value, Mapping):
        return [{"key": key, "value": item} for key, item in value.items()]
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise ExpressionError(
            f"Cannot iterate over {type(value).__name__} in {node.source!r}", str(node.operand)
        )
    return value


__all__ = ["TemplateRenderer", "RENDER_TABLE"]
