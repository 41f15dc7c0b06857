"""
Tests for the ctorlint command line.
"""

import json

import pytest

from ctorlint.cli import format_output, main
from ctorlint.csharp_adapter import CSharpAdapter


BAD = "class A\n{\n    public A(int a, int b, int c) { }\n}\n"
GOOD = "class A\n{\n    public A(int a,\n        int b,\n        int c) { }\n}\n"


@pytest.fixture(autouse=True)
def require_parser():
    if not CSharpAdapter().parse("class C { }"):
        pytest.skip("Tree-sitter parser not available")


class TestMain:

    def test_json_report(self, write_cs, tmp_path, capsys):
        write_cs("A.cs", BAD)

        assert main(["--paths", str(tmp_path), "--validate"]) == 1

        output = json.loads(capsys.readouterr().out)
        assert output["ctorlint.protocol"] == "1"
        assert output["files_scanned"] == 1
        assert output["findings"][0]["rule_id"] == "style.constructor_arguments"

    def test_validate_warns_about_malformed_suppressions(self, write_cs, tmp_path, capsys):
        path = write_cs("A.cs", "// ctorlint: ignore\n" + GOOD)

        assert main(["--paths", str(tmp_path), "--validate"]) == 0

        err = capsys.readouterr().err
        assert f"warning: {path}:1: Suppression comment without [rule] list" in err

    def test_no_suppression_warnings_without_validate(self, write_cs, tmp_path, capsys):
        write_cs("A.cs", "// ctorlint: ignore\n" + GOOD)

        assert main(["--paths", str(tmp_path)]) == 0
        assert "warning:" not in capsys.readouterr().err

    def test_clean_tree(self, write_cs, tmp_path, capsys):
        write_cs("A.cs", GOOD)

        assert main(["--paths", str(tmp_path)]) == 0
        assert json.loads(capsys.readouterr().out)["findings"] == []

    def test_pretty_report(self, write_cs, tmp_path, capsys):
        path = write_cs("A.cs", BAD)

        main(["--paths", str(path), "--format", "pretty"])
        out = capsys.readouterr().out

        assert "Found 1 issues" in out
        assert "warn 3:20:" in out
        assert "(style.constructor_arguments) [fixable]" in out

    def test_fix_in_place(self, write_cs, tmp_path, capsys):
        path = write_cs("A.cs", BAD)

        assert main(["--paths", str(tmp_path), "--fix"]) == 0
        assert path.read_text() == GOOD

    def test_diff_is_dry_run(self, write_cs, tmp_path, capsys):
        path = write_cs("A.cs", BAD)

        assert main(["--paths", str(tmp_path), "--diff"]) == 1

        out = capsys.readouterr().out
        assert out.startswith("--- a/")
        assert "+        int b,\n" in out
        assert path.read_text() == BAD

    def test_rules_filter(self, write_cs, tmp_path, capsys):
        write_cs("A.cs", BAD)

        assert main(["--paths", str(tmp_path), "--rules", "naming.*"]) == 1
        assert "No files found" in capsys.readouterr().err

    def test_explicit_config(self, write_cs, tmp_path, capsys):
        write_cs("src/A.cs", BAD)
        config = tmp_path / "strict.yml"
        config.write_text("rule_configs:\n  style.constructor_arguments:\n    min_parameters: 4\n")

        assert main(["--paths", str(tmp_path / "src"), "--config", str(config)]) == 0

    def test_no_files(self, tmp_path, capsys):
        assert main(["--paths", str(tmp_path)]) == 1
        assert "No files found to analyze" in capsys.readouterr().err


def test_format_output_unknown():
    with pytest.raises(ValueError):
        format_output({}, "xml")
