"""
Шаблонизатор: лексер, построитель дерева и рендерер.
"""

from __future__ import annotations

from .builder import CompileState, TreeBuilder, build_tree
from .lexer import Fragment, FragmentType, TemplateLexer, iter_fragments, tokenize_template
from .nodes import Node, NodeKind, TemplateTree, format_tree
from .processor import Template, TemplateProcessor, compile_template, render, render_text
from .renderer import TemplateRenderer

__all__ = [
    "CompileState",
    "TreeBuilder",
    "build_tree",
    "Fragment",
    "FragmentType",
    "TemplateLexer",
    "iter_fragments",
    "tokenize_template",
    "Node",
    "NodeKind",
    "TemplateTree",
    "format_tree",
    "Template",
    "TemplateProcessor",
    "compile_template",
    "render",
    "render_text",
    "TemplateRenderer",
]
