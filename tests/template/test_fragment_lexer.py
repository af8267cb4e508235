"""
Тесты для лексера шаблонов.
"""

import pytest

from microtpl.errors import TemplateSyntaxError
from microtpl.template.lexer import (
    FragmentType,
    TemplateLexer,
    iter_fragments,
    tokenize_template,
)


def _types(text):
    return [f.type for f in tokenize_template(text)]


class TestTemplateLexer:

    def test_plain_text(self):
        fragments = tokenize_template("just text")
        assert len(fragments) == 1
        assert fragments[0].type is FragmentType.TEXT
        assert fragments[0].raw == "just text"

    def test_empty_template(self):
        assert tokenize_template("") == []

    def test_all_fragment_types(self):
        text = "a{{ x }}b{% if y %}c{% end %}{# note #}"
        assert _types(text) == [
            FragmentType.TEXT,
            FragmentType.VARIABLE,
            FragmentType.TEXT,
            FragmentType.OPEN_BLOCK,
            FragmentType.TEXT,
            FragmentType.CLOSE_BLOCK,
            FragmentType.COMMENT,
        ]

    def test_clean_text_is_stripped(self):
        fragments = tokenize_template("{{   name  }}{%  each  items %}")
        assert fragments[0].clean == "name"
        assert fragments[1].clean == "each  items"
        assert fragments[1].command == "each"
        assert fragments[1].arguments == "items"

    def test_lossless_split(self):
        """Склейка raw всех фрагментов восстанавливает исходный текст"""
        samples = [
            "",
            "plain",
            "{{a}}",
            "x {{ a.b }} y {% each [1, 2] %}{{it}}{% end %} z",
            "line1\n{% if a == 'b' %}\n  {{ a }}\n{% else %}\n{% end %}\n",
            "{# comment with {{ tags }} #} stray }} and %} closers",
        ]
        for text in samples:
            assert "".join(f.raw for f in tokenize_template(text)) == text

    def test_non_greedy_matching(self):
        fragments = tokenize_template("{{ a }} }}")
        assert fragments[0].clean == "a"
        assert fragments[1].type is FragmentType.TEXT
        assert fragments[1].raw == " }}"

    def test_tags_can_span_lines(self):
        fragments = tokenize_template("{% call f\n  1 %}")
        assert fragments[0].command == "call"
        assert fragments[0].arguments == "f\n  1"

    def test_close_block_detection(self):
        fragments = tokenize_template("{% end %}{% endless %}")
        assert fragments[0].type is FragmentType.CLOSE_BLOCK
        assert fragments[1].type is FragmentType.OPEN_BLOCK

    def test_positions(self):
        fragments = tokenize_template("ab\ncd{{ x }}\n{% end %}")
        variable = fragments[1]
        assert (variable.position, variable.line, variable.column) == (5, 2, 3)
        close = fragments[3]
        assert (close.line, close.column) == (3, 1)

    def test_lazy_and_restartable(self):
        lexer = TemplateLexer("a{{b}}c")
        first = list(lexer)
        second = list(lexer)
        assert first == second
        assert len(first) == 3

        iterator = iter_fragments("a{{ b }}{{ oops")
        assert next(iterator).raw == "a"
        assert next(iterator).clean == "b"
        with pytest.raises(TemplateSyntaxError):
            next(iterator)

    def test_unterminated_variable(self):
        with pytest.raises(TemplateSyntaxError, match="Unterminated tag") as exc:
            tokenize_template("hello\n  {{ name")
        assert exc.value.line == 2
        assert exc.value.column == 3

    def test_unterminated_block(self):
        with pytest.raises(TemplateSyntaxError, match="Unterminated tag"):
            tokenize_template("{% if x }} rest of document")

    def test_opening_delimiter_inside_tag(self):
        """Незакрытый тег не поглощает следующий тег"""
        with pytest.raises(TemplateSyntaxError, match="Opening delimiter") as exc:
            tokenize_template("{{ a {{ b }}")
        assert exc.value.line == 1
        assert exc.value.column == 1

    def test_opening_delimiter_inside_terminated_block(self):
        with pytest.raises(TemplateSyntaxError) as exc:
            tokenize_template("{% if s == '{{' %}y{% end %}")
        assert "Unterminated" not in str(exc.value)
        assert "inside tag \"{% if s == '{{' %}\"" in str(exc.value)

    def test_empty_tags(self):
        with pytest.raises(TemplateSyntaxError, match="Empty tag"):
            tokenize_template("{{  }}")
        with pytest.raises(TemplateSyntaxError, match="Empty tag"):
            tokenize_template("{%%}")

    def test_empty_comment_is_allowed(self):
        fragments = tokenize_template("{##}")
        assert fragments[0].type is FragmentType.COMMENT
