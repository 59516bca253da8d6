"""Tests for the built-in review rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from impactguard.config import ReviewConfig
from impactguard.diff.hunk_parser import parse_hunks
from impactguard.rules.base import RuleContext
from impactguard.rules.builtin import (
    DebugStatementRule,
    RemovedAwaitRule,
    SharedPayloadRule,
    UnsafeDynamicTypeRule,
    new_line_for_removed,
)
from impactguard.rules.models import Severity
from impactguard.syntax.context import AstContext


class NoAst:
    """AstProvider that never resolves a unit."""

    def resolve_source_unit(self, path):
        return None


def run_rule(rule, diff: str, file: str = "app.ts", root: Path | None = None, config=None):
    hunks = parse_hunks(diff, file=file)
    ast = AstContext(root) if root is not None else NoAst()
    issues = []
    for hunk in hunks:
        unit = ast.resolve_source_unit(hunk.file)
        context = RuleContext(hunk=hunk, unit=unit, ast=ast, config=config or ReviewConfig())
        issues.extend(rule.evaluate(context))
    return issues


class TestDebugStatementRule:
    def test_console_log(self):
        issues = run_rule(DebugStatementRule(), "@@ -1,2 +1,3 @@\n line1\n+console.log('x')\n line2\n")
        assert len(issues) == 1
        issue = issues[0]
        assert issue.severity == Severity.WARN
        assert issue.rule == "no-debug-statement"
        assert issue.confidence == 100
        assert issue.line_start == issue.line_end == 1
        fix = issue.auto_fix
        assert fix.replacement_text == ""
        assert (fix.range.start_line, fix.range.start_char) == (1, 0)
        assert (fix.range.end_line, fix.range.end_char) == (2, 0)

    def test_python_markers(self):
        diff = "@@ -1 +1,4 @@\n x = 1\n+print(x)\n+breakpoint()\n+self.print(x)\n"
        issues = run_rule(DebugStatementRule(), diff, file="app.py")
        assert [i.line_start for i in issues] == [1, 2]

    def test_removed_and_context_lines_ignored(self):
        diff = "@@ -1,2 +1,1 @@\n console.log('ctx')\n-console.log('gone')\n"
        assert run_rule(DebugStatementRule(), diff) == []

    def test_custom_patterns(self):
        config = ReviewConfig(debug_patterns=[r"\bdump\("])
        diff = "@@ -0,0 +1,2 @@\n+dump(x)\n+console.log(x)\n"
        issues = run_rule(DebugStatementRule(), diff, config=config)
        assert [i.line_start for i in issues] == [0]


class TestRemovedAwaitRule:
    def test_dropped_await(self):
        issues = run_rule(RemovedAwaitRule(), "@@ -1 +1 @@\n-await fetchData()\n+fetchData()\n")
        assert len(issues) == 1
        issue = issues[0]
        assert issue.severity == Severity.ERROR
        assert issue.line_start == 0
        assert issue.confidence == 85
        assert issue.auto_fix.replacement_text == "await fetchData()"

    def test_fix_keeps_indentation_and_assignment(self):
        diff = (
            "@@ -4,3 +4,3 @@\n"
            " async function load() {\n"
            "-    const data = await fetchData();\n"
            "+    const data = fetchData();\n"
            " }\n"
        )
        issues = run_rule(RemovedAwaitRule(), diff)
        assert len(issues) == 1
        fix = issues[0].auto_fix
        assert fix.replacement_text == "    const data = await fetchData();"
        assert fix.range.start_line == fix.range.end_line == 4
        assert fix.range.end_char == len("    const data = fetchData();")

    def test_unrelated_change_is_not_flagged(self):
        diff = "@@ -1 +1 @@\n-await fetchData()\n+await fetchOther()\n"
        assert run_rule(RemovedAwaitRule(), diff) == []

    def test_await_kept(self):
        diff = "@@ -1 +1 @@\n-await fetchData()\n+await fetchData(1)\n"
        assert run_rule(RemovedAwaitRule(), diff) == []


class TestUnsafeDynamicTypeRule:
    def test_needs_a_source_unit(self):
        assert run_rule(UnsafeDynamicTypeRule(), "@@ -0,0 +1 @@\n+let a: any = 1;\n") == []

    def test_python_any(self, tmp_path: Path):
        (tmp_path / "svc.py").write_text(
            "from typing import Any\n"
            "\n"
            "\n"
            "def load(data: Any) -> dict:\n"
            "    # Any comment here\n"
            "    note = 'Any'\n"
            "    return dict(data)\n"
        )
        diff = (
            "@@ -1,3 +1,7 @@\n"
            " from typing import Any\n"
            " \n"
            " \n"
            "+def load(data: Any) -> dict:\n"
            "+    # Any comment here\n"
            "+    note = 'Any'\n"
            "+    return dict(data)\n"
        )
        issues = run_rule(UnsafeDynamicTypeRule(), diff, file="svc.py", root=tmp_path)
        assert len(issues) == 1
        assert issues[0].line_start == 3
        assert issues[0].severity == Severity.ERROR
        assert issues[0].confidence == 90

    def test_typescript_any(self, tmp_path: Path):
        pytest.importorskip("tree_sitter_typescript")
        (tmp_path / "parse.ts").write_text(
            "export function parse(input: any): string {\n"
            "  const label = \"x: any\";\n"
            "  return String(input);\n"
            "}\n"
        )
        diff = (
            "@@ -0,0 +1,4 @@\n"
            "+export function parse(input: any): string {\n"
            "+  const label = \"x: any\";\n"
            "+  return String(input);\n"
            "+}\n"
        )
        issues = run_rule(UnsafeDynamicTypeRule(), diff, file="parse.ts", root=tmp_path)
        assert [i.line_start for i in issues] == [0]


class TestSharedPayloadRule:
    def test_added_field_in_response_class(self, tmp_path: Path):
        (tmp_path / "models.py").write_text(
            "class UserResponse:\n"
            "    id: int\n"
            "    name: str\n"
            "    email: str\n"
        )
        diff = (
            "@@ -1,3 +1,4 @@\n"
            " class UserResponse:\n"
            "     id: int\n"
            "     name: str\n"
            "+    email: str\n"
        )
        issues = run_rule(SharedPayloadRule(), diff, file="models.py", root=tmp_path)
        assert len(issues) == 1
        assert issues[0].line_start == 3
        assert issues[0].severity == Severity.WARN
        assert "UserResponse" in issues[0].explanation

    def test_removed_field_remaps_to_new_line(self, tmp_path: Path):
        (tmp_path / "models.py").write_text(
            "class UserResponse:\n"
            "    id: int\n"
            "    name: str\n"
        )
        diff = (
            "@@ -1,4 +1,3 @@\n"
            " class UserResponse:\n"
            "     id: int\n"
            "-    nickname: str\n"
            "     name: str\n"
        )
        issues = run_rule(SharedPayloadRule(), diff, file="models.py", root=tmp_path)
        assert [i.line_start for i in issues] == [2]

    def test_unshared_class_is_ignored(self, tmp_path: Path):
        (tmp_path / "models.py").write_text("class Helper:\n    value: int\n")
        diff = "@@ -1 +1,2 @@\n class Helper:\n+    value: int\n"
        assert run_rule(SharedPayloadRule(), diff, file="models.py", root=tmp_path) == []

    def test_typescript_interface(self, tmp_project: Path):
        pytest.importorskip("tree_sitter_typescript")
        diff = (
            "@@ -1,3 +1,4 @@\n"
            " export interface UserPayload {\n"
            "   id: string;\n"
            "+  name: string;\n"
            " }\n"
        )
        issues = run_rule(SharedPayloadRule(), diff, file="web/api.ts", root=tmp_project)
        assert [i.line_start for i in issues] == [2]
        assert "UserPayload" in issues[0].explanation


class TestNewLineForRemoved:
    def test_preceding_context(self):
        hunk = parse_hunks("@@ -1,3 +1,2 @@\n a\n-b\n c\n")[0]
        assert new_line_for_removed(hunk, hunk.removed[0]) == 1

    def test_following_context(self):
        hunk = parse_hunks("@@ -2,2 +2,1 @@\n-b\n c\n")[0]
        assert new_line_for_removed(hunk, hunk.removed[0]) == 1

    def test_no_context(self):
        hunk = parse_hunks("@@ -2 +1,0 @@\n-b\n")[0]
        assert new_line_for_removed(hunk, hunk.removed[0]) is None
