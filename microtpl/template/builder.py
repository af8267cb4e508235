"""
Построитель дерева шаблона.

Потребляет последовательность фрагментов и строит TemplateTree,
отслеживая стек открытых областей видимости (if, each). Стек хранит
индексы узлов в арене, а не ссылки на узлы.

Поведение каждого типа узла задаётся таблицами: команда блока -> тип узла,
тип узла -> фабрика, тип узла -> хуки входа и выхода из области.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Set, Tuple

from .lexer import Fragment, FragmentType
from .nodes import Node, NodeKind, TemplateTree
from ..errors import ExpressionError, StructuralError
from ..expressions import Comparison, Operand, classify, is_comparison_operator, split_arguments
from ..expressions.parser import NAME_PATTERN

logger = logging.getLogger(__name__)


class CompileState(enum.Enum):
    """Состояния построителя в зависимости от вершины стека."""
    COLLECTING_AT_ROOT = "collecting-at-root"
    COLLECTING_IN_IF_THEN = "collecting-in-if-then"
    COLLECTING_IN_IF_ELSE = "collecting-in-if-else"
    COLLECTING_IN_EACH = "collecting-in-each"


# Команда блока -> тип узла
BLOCK_COMMANDS: Dict[str, NodeKind] = {
    "if": NodeKind.IF,
    "else": NodeKind.ELSE,
    "each": NodeKind.EACH,
    "call": NodeKind.CALL,
}

_KEYWORD_ARGUMENT = re.compile(r"^([A-Za-z_]\w*)=(?!=)(.+)$", re.DOTALL)

NodeFactory = Callable[[Fragment], Node]
ScopeHook = Callable[[int], None]


class TreeBuilder:
    """
    Построитель дерева со стеком областей видимости.

    Используется однократно: ``build()`` проходит все фрагменты
    и возвращает готовое дерево.
    """

    def __init__(self):
        self._nodes: List[Node] = [Node(kind=NodeKind.ROOT)]
        self._children: List[List[int]] = [[]]
        self._stack: List[int] = [TemplateTree.ROOT_INDEX]
        # Открытые блоки if -> собирается ли сейчас else-ветка
        self._in_else: Dict[int, bool] = {}

        self._factories: Dict[NodeKind, NodeFactory] = {
            NodeKind.TEXT: self._make_text,
            NodeKind.VARIABLE: self._make_variable,
            NodeKind.IF: self._make_if,
            NodeKind.ELSE: self._make_else,
            NodeKind.EACH: self._make_each,
            NodeKind.CALL: self._make_call,
        }
        self._enter_hooks: Dict[NodeKind, ScopeHook] = {
            NodeKind.IF: self._enter_if,
        }
        self._exit_hooks: Dict[NodeKind, ScopeHook] = {
            NodeKind.IF: self._exit_if,
        }

    @property
    def state(self) -> CompileState:
        top = self._stack[-1]
        kind = self._nodes[top].kind
        if kind is NodeKind.IF:
            if self._in_else[top]:
                return CompileState.COLLECTING_IN_IF_ELSE
            return CompileState.COLLECTING_IN_IF_THEN
        if kind is NodeKind.EACH:
            return CompileState.COLLECTING_IN_EACH
        return CompileState.COLLECTING_AT_ROOT

    @property
    def depth(self) -> int:
        """Количество открытых областей, не считая корня."""
        return len(self._stack) - 1

    def build(self, fragments: Iterable[Fragment]) -> TemplateTree:
        """
        Строит дерево из фрагментов.

        Raises:
            StructuralError: При нарушении структуры блоков
            ExpressionError: При недопустимом аргументе блока или переменной
        """
        for fragment in fragments:
            self.feed(fragment)
        return self.finish()

    def feed(self, fragment: Fragment) -> None:
        """Обрабатывает один фрагмент."""
        if fragment.type is FragmentType.COMMENT:
            return

        if fragment.type is FragmentType.CLOSE_BLOCK:
            self._close_scope(fragment)
            return

        kind = self._classify(fragment)
        node = self._factories[kind](fragment)
        index = self._append(node)

        if node.creates_scope:
            hook = self._enter_hooks.get(kind)
            if hook is not None:
                hook(index)
            self._stack.append(index)

    def finish(self) -> TemplateTree:
        """Завершает построение и замораживает дерево."""
        if len(self._stack) > 1:
            unterminated = self._nodes[self._stack[-1]]
            raise StructuralError("Unterminated block, expected {% end %}", unterminated.fragment)

        nodes = tuple(
            replace(node, children=tuple(children)) if children else node
            for node, children in zip(self._nodes, self._children)
        )
        return TemplateTree(nodes=nodes)

    # ======= Внутренние методы =======

    def _classify(self, fragment: Fragment) -> NodeKind:
        if fragment.type is FragmentType.TEXT:
            return NodeKind.TEXT
        if fragment.type is FragmentType.VARIABLE:
            return NodeKind.VARIABLE

        kind = BLOCK_COMMANDS.get(fragment.command)
        if kind is None:
            raise StructuralError(f"Unknown block command '{fragment.command}'", fragment)
        return kind

    def _append(self, node: Node) -> int:
        index = len(self._nodes)
        self._nodes.append(node)
        self._children.append([])
        self._children[self._stack[-1]].append(index)
        return index

    def _close_scope(self, fragment: Fragment) -> None:
        if fragment.arguments:
            raise StructuralError("Close tag takes no arguments", fragment)
        if len(self._stack) == 1:
            raise StructuralError("Close tag without matching open tag", fragment)

        index = self._stack[-1]
        hook = self._exit_hooks.get(self._nodes[index].kind)
        if hook is not None:
            hook(index)
        self._stack.pop()

    # Хуки областей видимости

    def _enter_if(self, index: int) -> None:
        self._in_else[index] = False

    def _exit_if(self, index: int) -> None:
        del self._in_else[index]

    # Фабрики узлов

    def _make_text(self, fragment: Fragment) -> Node:
        return Node(kind=NodeKind.TEXT, fragment=fragment, text=fragment.raw)

    def _make_variable(self, fragment: Fragment) -> Node:
        operand = _classify_operand(fragment.clean, fragment)
        return Node(kind=NodeKind.VARIABLE, fragment=fragment, operand=operand)

    def _make_if(self, fragment: Fragment) -> Node:
        args = _split(fragment)

        if len(args) == 1:
            condition = Comparison(lhs=_classify_operand(args[0], fragment))
        elif len(args) == 3:
            lhs, op, rhs = args
            if not is_comparison_operator(op):
                raise StructuralError(f"Unknown comparison operator '{op}'", fragment)
            condition = Comparison(
                lhs=_classify_operand(lhs, fragment),
                operator=op,
                rhs=_classify_operand(rhs, fragment),
            )
        else:
            raise StructuralError("Expected 'if value' or 'if lhs op rhs'", fragment)

        return Node(kind=NodeKind.IF, fragment=fragment, condition=condition)

    def _make_else(self, fragment: Fragment) -> Node:
        if fragment.arguments:
            raise StructuralError("Else takes no arguments", fragment)

        top = self._stack[-1]
        if self._nodes[top].kind is not NodeKind.IF:
            raise StructuralError("Else outside of an if block", fragment)

        if self._in_else[top]:
            logger.warning(
                "Repeated else in %r at %d:%d belongs to the else branch",
                self._nodes[top].source, fragment.line, fragment.column,
            )
        self._in_else[top] = True
        return Node(kind=NodeKind.ELSE, fragment=fragment)

    def _make_each(self, fragment: Fragment) -> Node:
        args = _split(fragment)
        if len(args) != 1:
            raise StructuralError("Expected exactly one collection in each", fragment)
        return Node(kind=NodeKind.EACH, fragment=fragment, operand=_classify_operand(args[0], fragment))

    def _make_call(self, fragment: Fragment) -> Node:
        args = _split(fragment)
        if not args:
            raise StructuralError("Missing callable name in call", fragment)

        callee, params = args[0], args[1:]
        if not NAME_PATTERN.match(callee):
            raise StructuralError(f"Invalid callable name '{callee}'", fragment)

        positional: List[Operand] = []
        keywords: List[Tuple[str, Operand]] = []
        seen: Set[str] = set()

        for param in params:
            match = _KEYWORD_ARGUMENT.match(param)
            if match:
                name, value = match.group(1), match.group(2)
                if name in seen:
                    raise StructuralError(f"Repeated keyword argument '{name}'", fragment)
                seen.add(name)
                keywords.append((name, _classify_operand(value, fragment)))
            elif keywords:
                raise StructuralError("Positional argument follows keyword argument", fragment)
            else:
                positional.append(_classify_operand(param, fragment))

        return Node(
            kind=NodeKind.CALL,
            fragment=fragment,
            callee=callee,
            args=tuple(positional),
            kwargs=tuple(keywords),
        )


def _split(fragment: Fragment) -> List[str]:
    try:
        return split_arguments(fragment.arguments)
    except ExpressionError as e:
        raise ExpressionError(
            f"{e} in {fragment.raw!r} at {fragment.line}:{fragment.column}"
        ) from e


def _classify_operand(text: str, fragment: Fragment) -> Operand:
    try:
        return classify(text)
    except ExpressionError as e:
        raise ExpressionError(
            f"Not a literal or a name in {fragment.raw!r} at {fragment.line}:{fragment.column}",
            text,
        ) from e


def build_tree(fragments: Iterable[Fragment]) -> TemplateTree:
    """Удобная функция для построения дерева из фрагментов."""
    return TreeBuilder().build(fragments)


__all__ = ["CompileState", "BLOCK_COMMANDS", "TreeBuilder", "build_tree"]
