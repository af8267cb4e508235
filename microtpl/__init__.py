"""
microtpl: минимальный шаблонизатор с переменными {{ }} и блоками {% %}.
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    ContextError,
    ExpressionError,
    MicrotplUserError,
    StructuralError,
    TemplateError,
    TemplateSyntaxError,
)
from .template import Template, TemplateProcessor, TemplateTree, compile_template, render, render_text

__all__ = [
    "ConfigError",
    "ContextError",
    "ExpressionError",
    "MicrotplUserError",
    "StructuralError",
    "TemplateError",
    "TemplateSyntaxError",
    "Template",
    "TemplateProcessor",
    "TemplateTree",
    "compile_template",
    "render",
    "render_text",
]
