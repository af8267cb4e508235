"""
Unified test infrastructure for microtpl.

Modules:
- file_utils: Utilities for creating files and directories
- cli_utils: Running the CLI in a subprocess
"""

from .file_utils import write, write_template
from .cli_utils import run_cli

__all__ = [
    "write",
    "write_template",
    "run_cli",
]
