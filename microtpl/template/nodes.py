"""
Узлы скомпилированного шаблона.

Все узлы дерева хранятся в одном неизменяемом массиве (арене) внутри
TemplateTree. Связи родитель-потомок задаются индексами в этом массиве,
корень всегда имеет индекс 0.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .lexer import Fragment
from ..expressions.model import Comparison, Operand


class NodeKind(enum.Enum):
    """Типы узлов шаблона."""
    ROOT = "ROOT"
    TEXT = "TEXT"
    VARIABLE = "VARIABLE"
    IF = "IF"
    EACH = "EACH"
    CALL = "CALL"
    ELSE = "ELSE"


# Узлы, открывающие область видимости и ожидающие {% end %}
SCOPE_KINDS = frozenset({NodeKind.ROOT, NodeKind.IF, NodeKind.EACH})


@dataclass(frozen=True)
class Node:
    """
    Узел шаблона.

    Набор заполненных полей зависит от ``kind``:
    TEXT: ``text``; VARIABLE и EACH: ``operand``; IF: ``condition``;
    CALL: ``callee``, ``args``, ``kwargs``.
    """
    kind: NodeKind
    fragment: Optional[Fragment] = None
    text: str = ""
    operand: Optional[Operand] = None
    condition: Optional[Comparison] = None
    callee: str = ""
    args: Tuple[Operand, ...] = ()
    kwargs: Tuple[Tuple[str, Operand], ...] = ()
    children: Tuple[int, ...] = ()

    @property
    def creates_scope(self) -> bool:
        return self.kind in SCOPE_KINDS

    @property
    def source(self) -> str:
        """Исходный текст узла для диагностики."""
        return self.fragment.raw if self.fragment is not None else ""


# then-ветка и else-ветка блока if (индексы узлов)
Branches = Tuple[Tuple[int, ...], Tuple[int, ...]]


@dataclass(frozen=True)
class TemplateTree:
    """
    Скомпилированный шаблон.

    Дерево неизменяемо после компиляции. Единственное лениво заполняемое
    состояние: кэш разбиения блоков if на ветки; оно не участвует
    в сравнении деревьев.
    """
    nodes: Tuple[Node, ...]
    _branches: Dict[int, Branches] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    ROOT_INDEX = 0

    @property
    def root(self) -> Node:
        return self.nodes[self.ROOT_INDEX]

    def node(self, index: int) -> Node:
        return self.nodes[index]

    def children(self, index: int) -> List[Node]:
        return [self.nodes[i] for i in self.nodes[index].children]

    def branches(self, index: int) -> Branches:
        """
        Возвращает (then, else) для блока if.

        Дети делятся по первому маркеру else; всё, что после него,
        относится к else-ветке. Разбиение вычисляется один раз.
        """
        cached = self._branches.get(index)
        if cached is not None:
            return cached

        children = self.nodes[index].children
        split = len(children)
        for position, child in enumerate(children):
            if self.nodes[child].kind is NodeKind.ELSE:
                split = position
                break

        result = (children[:split], children[split + 1:])
        self._branches[index] = result
        return result

    def __len__(self) -> int:
        return len(self.nodes)


def format_tree(tree: TemplateTree, index: int = TemplateTree.ROOT_INDEX, indent: int = 0) -> str:
    """Форматирует дерево для отладки."""
    node = tree.node(index)
    prefix = "  " * indent

    if node.kind is NodeKind.TEXT:
        preview = node.text[:50] + "..." if len(node.text) > 50 else node.text
        line = f"{prefix}TEXT({preview!r})"
    elif node.kind is NodeKind.VARIABLE:
        line = f"{prefix}VARIABLE({node.operand})"
    elif node.kind is NodeKind.EACH:
        line = f"{prefix}EACH({node.operand})"
    elif node.kind is NodeKind.IF:
        line = f"{prefix}IF({node.condition})"
    elif node.kind is NodeKind.CALL:
        params = [str(a) for a in node.args] + [f"{k}={v}" for k, v in node.kwargs]
        line = f"{prefix}CALL({' '.join([node.callee] + params)})"
    else:
        line = f"{prefix}{node.kind.name}"

    lines = [line]
    for child in node.children:
        lines.append(format_tree(tree, child, indent + 1))
    return "\n".join(lines)


__all__ = [
    "NodeKind",
    "SCOPE_KINDS",
    "Node",
    "Branches",
    "TemplateTree",
    "format_tree",
]
