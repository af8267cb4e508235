"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from MicrotplUserError.

Programming errors and bugs should NOT inherit from MicrotplUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .template.lexer import Fragment


class MicrotplUserError(Exception):
    """
    Base class for all user-facing errors in microtpl.

    These errors indicate problems that the user can fix:
    broken templates, missing context values, unreadable context files.
    """
    pass


class TemplateError(MicrotplUserError):
    """Base class for errors raised while compiling or rendering a template."""
    pass


class TemplateSyntaxError(TemplateError):
    """Malformed or unterminated delimiter pair."""

    def __init__(self, message: str, line: int, column: int, position: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column
        self.position = position


class StructuralError(TemplateError):
    """Block structure cannot be turned into a tree."""

    def __init__(self, message: str, fragment: Optional[Fragment] = None):
        if fragment is not None:
            message = f"{message}: {fragment.raw!r} at {fragment.line}:{fragment.column}"
        super().__init__(message)
        self.fragment = fragment


class ContextError(TemplateError):
    """A name cannot be resolved against the render context."""

    def __init__(self, expression: str, reason: str = ""):
        message = f"Cannot resolve '{expression}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.expression = expression


class ExpressionError(TemplateError):
    """Expression is neither a literal nor a name, or its operands cannot be used."""

    def __init__(self, message: str, expression: str = ""):
        super().__init__(f"{message}: {expression!r}" if expression else message)
        self.expression = expression


class ConfigError(MicrotplUserError):
    """Context file or command-line assignment cannot be loaded."""
    pass


__all__ = [
    "MicrotplUserError",
    "TemplateError",
    "TemplateSyntaxError",
    "StructuralError",
    "ContextError",
    "ExpressionError",
    "ConfigError",
]
