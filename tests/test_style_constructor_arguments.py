"""
Tests for style.constructor_arguments rule.
"""

import threading

import pytest

from ctorlint.csharp_adapter import CSharpAdapter
from ctorlint.fixer import apply_edits
from ctorlint.types import AnalysisCancelled, RuleContext
from ctorlint_rules.style_constructor_arguments import (
    ConstructorArgumentsRule, FIX_TITLE, MESSAGE, RULE_ID, evaluate, rewrite,
)


def wrap(parameters: str) -> str:
    return "class C\n{\n    public C(" + parameters + ") { }\n}\n"


class TestEvaluate:
    """Evaluator behaviour on constructor views."""

    def test_two_parameters_never_reported(self, parse_constructors):
        """Example 1: two parameters on one line."""
        (ctor,) = parse_constructors(wrap("int a, int b"))
        assert evaluate(ctor) is None

    @pytest.mark.parametrize("parameters", ["", "int a", "int a,\n        int b"])
    def test_short_lists_never_reported(self, parse_constructors, parameters):
        (ctor,) = parse_constructors(wrap(parameters))

        assert len(ctor.parameters) == len([p for p in parameters.split(",") if p.strip()])
        assert evaluate(ctor) is None
        assert evaluate(ctor, min_parameters=0) is None

    def test_three_on_one_line(self, parse_constructors):
        """Example 2: anchored at the second parameter."""
        (ctor,) = parse_constructors(wrap("int a, int b, int c"))
        diagnostic = evaluate(ctor)

        assert diagnostic is not None
        assert diagnostic.rule == RULE_ID
        assert diagnostic.message == MESSAGE
        assert diagnostic.severity == "warn"
        assert diagnostic.parameter_index == 1
        assert diagnostic.parameter_name == "b"
        assert (diagnostic.start_byte, diagnostic.end_byte) == (ctor.parameters[1].start_byte,
                                                                ctor.parameters[1].end_byte)

    def test_each_on_own_line(self, parse_constructors):
        """Example 3."""
        (ctor,) = parse_constructors(wrap("int a,\n        int b,\n        int c"))
        assert evaluate(ctor) is None

    def test_first_collision_only(self, parse_constructors):
        """Example 4: only the first pair is reported."""
        (ctor,) = parse_constructors(wrap("int a, int b,\n        int c, int d"))
        diagnostic = evaluate(ctor)

        assert diagnostic.parameter_name == "b"
        assert diagnostic.parameter_index == 1

    def test_collision_later_in_list(self, parse_constructors):
        (ctor,) = parse_constructors(wrap("int a,\n        int b,\n        int c, int d"))
        assert evaluate(ctor).parameter_name == "d"

    def test_first_parameter_on_header_line_is_fine(self, parse_constructors):
        (ctor,) = parse_constructors(wrap("\n        int a,\n        int b,\n        int c"))
        assert evaluate(ctor) is None

    def test_multiline_parameter_uses_end_line(self, parse_constructors):
        code = wrap("int a,\n        [Attr(\n            1)] int b, int c")
        (ctor,) = parse_constructors(code)
        assert evaluate(ctor).parameter_name == "c"

    def test_min_parameters(self, parse_constructors):
        (ctor,) = parse_constructors(wrap("int a, int b, int c"))

        assert evaluate(ctor, min_parameters=4) is None
        diagnostic = evaluate(ctor, min_parameters=2)
        assert diagnostic.parameter_name == "b"
        assert "1 arguments in line" in diagnostic.message


class TestRewrite:
    """Rewriter properties."""

    CASES = [
        "int a, int b, int c",
        "int a, int b,\n        int c, int d",
        "int a,\n        int b, int c",
        "string name, int level, params object[] args",
        "int a /* first */, int b, int c",
    ]

    @pytest.mark.parametrize("parameters", CASES)
    def test_idempotent(self, parse_constructors, parameters):
        (ctor,) = parse_constructors(wrap(parameters))
        assert evaluate(ctor) is not None
        assert evaluate(rewrite(ctor)) is None

    @pytest.mark.parametrize("parameters", CASES)
    def test_content_and_order_preserved(self, parse_constructors, parameters):
        (ctor,) = parse_constructors(wrap(parameters))
        fixed = rewrite(ctor)

        assert [p.text for p in fixed.parameters] == [p.text for p in ctor.parameters]
        assert fixed.parameter_names == ctor.parameter_names
        assert fixed.separators == ctor.separators
        assert fixed.header == ctor.header
        assert fixed.tail == ctor.tail

    def test_example_two_layout(self, parse_constructors):
        (ctor,) = parse_constructors(wrap("int a, int b, int c"))
        fixed = rewrite(ctor)

        assert fixed.needs_formatting is True
        assert fixed.parameters[0] == ctor.parameters[0]
        assert [p.leading_trivia for p in fixed.parameters] == ["", "\n", "\n"]
        assert fixed.to_source() == "public C(int a,\nint b,\nint c) { }"

    def test_only_colliding_parameters_move(self, parse_constructors):
        (ctor,) = parse_constructors(wrap("int a, int b,\n        int c, int d"))
        fixed = rewrite(ctor)

        assert [p.leading_trivia for p in fixed.parameters] == ["", "\n", "\n        ", "\n"]

    def test_uses_declaration_newline(self, parse_constructors):
        (ctor,) = parse_constructors(wrap("int a, int b, int c").replace("\n", "\r\n"))
        fixed = rewrite(ctor)

        assert [p.leading_trivia for p in fixed.parameters] == ["", "\r\n", "\r\n"]


class TestConstructorArgumentsRule:
    """Test cases for the rule's visit()."""

    def setup_method(self):
        self.rule = ConstructorArgumentsRule()
        self.adapter = CSharpAdapter()

    def _run_rule(self, code: str, config=None, cancel_event=None):
        tree = self.adapter.parse(code)
        if not tree:
            pytest.skip("Tree-sitter parser not available")

        ctx = RuleContext(
            file_path="Test.cs",
            text=code,
            tree=tree,
            adapter=self.adapter,
            config=config or {},
            cancel_event=cancel_event,
        )

        return list(self.rule.visit(ctx))

    def test_meta(self):
        assert self.rule.meta.id == "style.constructor_arguments"
        assert self.rule.meta.category == "style"
        assert self.rule.meta.autofix_safety == "safe"
        assert self.rule.meta.langs == ["csharp"]

    def test_finding_with_autofix(self):
        code = wrap("int x, int y, int z")
        findings = self._run_rule(code)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule == RULE_ID
        assert finding.message == MESSAGE
        assert finding.severity == "warn"
        assert finding.file == "Test.cs"
        assert code.encode()[finding.start_byte:finding.end_byte] == b"int y"
        assert finding.meta == {
            "fix_title": FIX_TITLE,
            "constructor": "C",
            "parameter": "y",
            "parameter_index": 1,
        }

        fixed = apply_edits(code, finding.autofix)
        assert fixed == "class C\n{\n    public C(int x,\n        int y,\n        int z) { }\n}\n"

    def test_no_finding_when_compliant(self):
        code = wrap("int x,\n        int y,\n        int z")
        assert self._run_rule(code) == []

    def test_one_finding_per_constructor(self):
        code = """class C
{
    public C(int a, int b, int c) { }
    public C(int a, int b) { }
    public C(string a, string b, string c, string d) { }
}
"""
        findings = self._run_rule(code)

        assert [f.meta["parameter"] for f in findings] == ["b", "b"]
        assert findings[0].start_byte < findings[1].start_byte

    def test_methods_ignored(self):
        code = "class C\n{\n    public void Run(int a, int b, int c) { }\n}\n"
        assert self._run_rule(code) == []

    def test_parse_errors_skipped(self):
        code = wrap("int a, int b int c")
        assert self._run_rule(code) == []

    def test_min_parameters_config(self):
        code = wrap("int x, int y, int z")

        assert self._run_rule(code, {"min_parameters": 4}) == []
        assert len(self._run_rule(code, {"min_parameters": 3})) == 1

    def test_formatting_options(self):
        code = wrap("int x, int y, int z")

        (finding,) = self._run_rule(code, {"use_tabs": True})
        assert finding.autofix[0].replacement == "public C(int x,\n    \tint y,\n    \tint z) { }"

        (finding,) = self._run_rule(code, {"parameter_indent": "align"})
        assert finding.autofix[0].replacement == "public C(int x,\n             int y,\n             int z) { }"

    def test_crlf_preserved(self):
        code = wrap("int x, int y, int z").replace("\n", "\r\n")
        (finding,) = self._run_rule(code)

        fixed = apply_edits(code, finding.autofix)
        assert fixed.count("\n") == fixed.count("\r\n")
        assert "int x,\r\n        int y,\r\n        int z" in fixed

    def test_newline_override(self):
        code = wrap("int x, int y, int z")
        (finding,) = self._run_rule(code, {"newline": "crlf"})

        assert "int x,\r\n        int y" in finding.autofix[0].replacement

    def test_cancelled(self):
        event = threading.Event()
        event.set()

        with pytest.raises(AnalysisCancelled):
            self._run_rule(wrap("int x, int y, int z"), cancel_event=event)
