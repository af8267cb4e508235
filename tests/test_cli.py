"""
Tests for the command line interface.
"""

import pytest

from microtpl.cli import main
from tests.infrastructure import run_cli, write, write_template

EXPECTED_PAGE = "# Tasks\n- write lexer (done)\n- write renderer\nby alice\n"


class TestRender:

    def test_render_with_context_file(self, tmpproj, capsys):
        rc = main(["render", str(tmpproj / "page.tpl"), "--context", str(tmpproj / "context.yaml")])
        assert rc == 0
        assert capsys.readouterr().out == EXPECTED_PAGE

    def test_set_overrides_context(self, tmpproj, capsys):
        rc = main([
            "render", str(tmpproj / "page.tpl"),
            "--context", str(tmpproj / "context.yaml"),
            "--set", "author=bob",
            "--set", "title='Done'",
        ])
        assert rc == 0
        out = capsys.readouterr().out
        assert out.startswith("# Done\n")
        assert out.endswith("by bob\n")

    def test_render_to_output_file(self, tmpproj, capsys):
        out_path = tmpproj / "out" / "page.md"
        rc = main([
            "render", str(tmpproj / "page.tpl"),
            "--context", str(tmpproj / "context.yaml"),
            "-o", str(out_path),
        ])
        assert rc == 0
        assert capsys.readouterr().out == ""
        assert out_path.read_text(encoding="utf-8") == EXPECTED_PAGE

    def test_missing_name_is_user_error(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.tpl", "{{ missing }}")
        rc = main(["render", str(tpl)])
        assert rc == 2
        assert "Cannot resolve 'missing'" in capsys.readouterr().err

    def test_missing_template_file(self, tmp_path, capsys):
        rc = main(["render", str(tmp_path / "nope.tpl")])
        assert rc == 2
        assert "Template file not found" in capsys.readouterr().err

    def test_bad_assignment(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.tpl", "x")
        rc = main(["render", str(tpl), "--set", "novalue"])
        assert rc == 2
        assert "Expected 'NAME=VALUE'" in capsys.readouterr().err


class TestCheck:

    def test_check_ok(self, tmpproj, capsys):
        assert main(["check", str(tmpproj / "page.tpl")]) == 0
        assert capsys.readouterr().out == "ok\n"

    def test_check_tree(self, tmp_path, capsys):
        tpl = write_template(tmp_path, "t.tpl", "{% each [1,2] %}{{ it }}{% end %}")
        assert main(["check", str(tpl), "--tree"]) == 0
        assert capsys.readouterr().out == "ROOT\n  EACH([1,2])\n    VARIABLE(it)\n"

    def test_check_reports_structure_error(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.tpl", "{% if x %}open")
        assert main(["check", str(tpl)]) == 2
        assert "Unterminated block" in capsys.readouterr().err

    def test_check_reports_syntax_error_location(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.tpl", "line one\n  {{ oops")
        assert main(["check", str(tpl)]) == 2
        assert "at 2:3" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("microtpl ")


class TestSubprocess:

    def test_render_from_stdin(self, tmp_path):
        cp = run_cli(tmp_path, "render", "-", "--set", "who=world", stdin="hello {{ who }}")
        assert cp.returncode == 0, cp.stderr
        assert cp.stdout == "hello world"

    def test_render_project(self, tmpproj):
        cp = run_cli(tmpproj, "render", "page.tpl", "--context", "context.yaml")
        assert cp.returncode == 0, cp.stderr
        assert cp.stdout == EXPECTED_PAGE

    def test_error_exit_code(self, tmpproj):
        cp = run_cli(tmpproj, "check", "-", stdin="{% end %}")
        assert cp.returncode == 2
        assert "Close tag without matching open tag" in cp.stderr
