"""Tests for output formatters."""

import json
from io import StringIO

import pytest
from rich.console import Console

from code_styler.diff import DiffLineKind
from code_styler.findings import FileFinding, LineFinding, MergeRequestFinding, Severity
from code_styler.formatters import FORMATTERS, GithubFormatter, JsonFormatter, RichFormatter


@pytest.fixture
def findings(source):
    return [
        MergeRequestFinding("Branch name is bad", source),
        FileFinding("img/logo.jpg", "Use PNG", source, severity=Severity.WARNING),
        LineFinding("src/app.py", 5, DiffLineKind.ADDED, "Missing docstring\n100% sure", source),
    ]


class TestGithubFormatter:
    def test_annotations(self, findings):
        assert GithubFormatter().format(findings).splitlines() == [
            "::error title=TestChecker::Branch name is bad",
            "::warning file=img/logo.jpg,title=TestChecker::Use PNG",
            "::error file=src/app.py,line=5,title=TestChecker::Missing docstring%0A100%25 sure",
        ]


    def test_property_values_are_escaped(self, source):
        finding = LineFinding("docs/a,b: c.py", 2, DiffLineKind.ADDED, "ratio: 1,5", source)
        assert GithubFormatter().format([finding]) == (
            "::error file=docs/a%2Cb%3A c.py,line=2,title=TestChecker::ratio: 1,5"
        )

class TestJsonFormatter:
    def test_all_scopes_with_ids(self, findings):
        records = json.loads(JsonFormatter().format(findings))

        assert [r["type"] for r in records] == ["merge_request", "file", "line"]
        assert [r["id"] for r in records] == [f.identity for f in findings]
        assert records[2]["finding"]["line"] == 5


class TestRichFormatter:
    def test_table_and_summary(self, findings):
        buffer = StringIO()
        RichFormatter(Console(file=buffer, width=200)).render(findings)

        output = buffer.getvalue()
        assert "src/app.py:5" in output
        assert "2 error(s), 1 warning(s)" in output

    def test_no_findings(self):
        buffer = StringIO()
        RichFormatter(Console(file=buffer, width=200)).render([])
        assert "No issues found" in buffer.getvalue()


def test_registry():
    assert set(FORMATTERS) == {"rich", "json", "github"}
