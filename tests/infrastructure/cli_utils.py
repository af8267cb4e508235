"""
Utilities for working with CLI in tests.
"""

import os
import subprocess
import sys
from pathlib import Path


def run_cli(root: Path, *args: str, stdin: str = None) -> subprocess.CompletedProcess:
    """
    Runs microtpl.cli with specified arguments in the given directory.

    Args:
        root: Working directory for command execution
        *args: Command line arguments for microtpl.cli
        stdin: Optional text passed to the process stdin

    Returns:
        CompletedProcess with execution results
    """
    env = os.environ.copy()
    repo_root = str(Path(__file__).resolve().parents[2])
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [repo_root, env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "microtpl.cli", *args],
        cwd=root, env=env, input=stdin, capture_output=True, text=True, encoding="utf-8"
    )
