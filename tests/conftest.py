import textwrap
from pathlib import Path

import pytest

from tests.infrastructure.file_utils import write


@pytest.fixture
def tmpproj(tmp_path: Path):
    """Минимальный проект: шаблон страницы и YAML-контекст к нему."""
    root = tmp_path
    write(
        root / "page.tpl",
        textwrap.dedent("""
        # {{ title }}
        {% each items %}- {{ it.name }}{% if it.done %} (done){% end %}
        {% end %}{# footer #}by {{ author }}
        """).lstrip("\n"),
    )
    write(
        root / "context.yaml",
        textwrap.dedent("""
        title: Tasks
        author: alice
        items:
          - name: write lexer
            done: true
          - name: write renderer
            done: false
        """).strip() + "\n",
    )
    return root


@pytest.fixture
def context():
    return {
        "name": "World",
        "user": {"name": "alice", "roles": ["admin", "dev"]},
        "items": [1, 2, 3],
        "empty": [],
        "nothing": None,
    }
