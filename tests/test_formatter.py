"""
Tests for the constructor parameter normalizer.
"""

import pytest

from ctorlint.formatter import (
    ConstructorParameterFormatter, NoOpFormatter, format_node, get_formatter,
    list_available_formatters, register_formatter,
)
from ctorlint_rules.style_constructor_arguments import evaluate, rewrite


CODE = """namespace Geometry
{
    class Point
    {
        public Point(int x, int y, int z) { }
    }
}
"""


class TestConstructorParameterFormatter:

    def setup_method(self):
        self.formatter = ConstructorParameterFormatter()

    def test_unflagged_node_untouched(self, parse_constructors):
        (ctor,) = parse_constructors(CODE)
        assert self.formatter.format(ctor) is ctor

    def test_indent_one_level_past_declaration(self, parse_constructors):
        (ctor,) = parse_constructors(CODE)
        formatted = self.formatter.format(rewrite(ctor))

        assert formatted.needs_formatting is False
        assert formatted.to_source() == (
            "public Point(int x,\n"
            "            int y,\n"
            "            int z) { }"
        )
        assert evaluate(formatted) is None

    def test_indent_size(self, parse_constructors):
        (ctor,) = parse_constructors(CODE)
        formatted = self.formatter.format(rewrite(ctor), indent_size=2)

        assert [p.leading_trivia for p in formatted.parameters] == ["", "\n" + " " * 10, "\n" + " " * 10]

    def test_align_under_first_parameter(self, parse_constructors):
        (ctor,) = parse_constructors(CODE)
        formatted = self.formatter.format(rewrite(ctor), parameter_indent="align")
        lines = formatted.to_source().split("\n")

        column = len(ctor.indent) + lines[0].index("int x")
        assert [len(line) - len(line.lstrip()) for line in lines[1:]] == [column, column]

    def test_align_falls_back_when_first_parameter_wrapped(self, parse_constructors):
        code = CODE.replace("(int x, int y, int z)", "(\n            int x, int y, int z)")
        (ctor,) = parse_constructors(code)
        formatted = self.formatter.format(rewrite(ctor), parameter_indent="align")

        assert formatted.parameters[0].leading_trivia == "\n            "
        assert formatted.parameters[1].leading_trivia == "\n            "

    def test_existing_wraps_reindented(self, parse_constructors):
        code = CODE.replace("int y, int z", "int y,\n  int z")
        (ctor,) = parse_constructors(code)
        formatted = self.formatter.format(rewrite(ctor))

        assert [p.leading_trivia for p in formatted.parameters][1:] == ["\n            ", "\n            "]

    def test_blank_lines_before_parameter_kept(self, parse_constructors):
        code = CODE.replace("int x, int y, int z", "int x,\n\n\n   int y, int z")
        (ctor,) = parse_constructors(code)
        formatted = self.formatter.format(rewrite(ctor))

        assert formatted.to_source() == (
            "public Point(int x,\n"
            "\n"
            "\n"
            "            int y,\n"
            "            int z) { }"
        )

    def test_unknown_style(self, parse_constructors):
        (ctor,) = parse_constructors(CODE)
        with pytest.raises(ValueError):
            self.formatter.format(rewrite(ctor), parameter_indent="hanging")


class TestFormatterRegistry:

    def test_csharp_formatter_registered(self):
        assert isinstance(get_formatter("csharp"), ConstructorParameterFormatter)
        assert list_available_formatters()["csharp"] is True

    def test_unknown_language_returns_node(self, parse_constructors):
        (ctor,) = parse_constructors(CODE)
        flagged = rewrite(ctor)
        assert format_node(flagged, "fortran") is flagged

    def test_register_formatter(self, parse_constructors):
        (ctor,) = parse_constructors(CODE)
        register_formatter("noop", NoOpFormatter())

        flagged = rewrite(ctor)
        assert format_node(flagged, "noop") is flagged
