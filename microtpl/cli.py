from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import build_context
from .errors import MicrotplUserError
from .template import Template, compile_template, format_tree
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="microtpl",
        description="Minimal {{ }} / {% %} template engine",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="отрендерить шаблон")
    sp_render.add_argument("template", help="путь к шаблону или - для чтения из stdin")
    sp_render.add_argument(
        "--context",
        metavar="FILE",
        help="YAML/JSON файл с контекстом",
    )
    sp_render.add_argument(
        "--set",
        dest="assignments",
        action="append",
        metavar="NAME=VALUE",
        help="значение в контексте (можно указать несколько, перекрывает --context)",
    )
    sp_render.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="записать результат в файл вместо stdout",
    )

    sp_check = sub.add_parser("check", help="только скомпилировать шаблон")
    sp_check.add_argument("template", help="путь к шаблону или - для чтения из stdin")
    sp_check.add_argument(
        "--tree",
        action="store_true",
        help="вывести дерево узлов",
    )

    return p


def _read_template(arg: str) -> str:
    """Читает шаблон из файла или stdin (-)."""
    if arg == "-":
        return sys.stdin.read()

    path = Path(arg)
    if not path.is_file():
        raise ValueError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)

    try:
        if ns.cmd == "render":
            text = _read_template(ns.template)
            context = build_context(
                Path(ns.context) if ns.context else None,
                ns.assignments,
            )
            result = Template(text, name=ns.template).render(context)
            if ns.output:
                out = Path(ns.output)
                out.parent.mkdir(parents=True, exist_ok=True)
                out.write_text(result, encoding="utf-8")
            else:
                sys.stdout.write(result)
            return 0

        if ns.cmd == "check":
            tree = compile_template(_read_template(ns.template))
            if ns.tree:
                sys.stdout.write(format_tree(tree) + "\n")
            else:
                sys.stdout.write("ok\n")
            return 0

    except MicrotplUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
