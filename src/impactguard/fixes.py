"""Apply auto-fix descriptors to files on disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from impactguard.diff.hunk_parser import split_lines
from impactguard.exceptions import FixError
from impactguard.rules.models import ReviewIssue, TextRange

logger = logging.getLogger("impactguard.fixes")


def _offset(lines: list[str], line: int, char: int) -> int:
    """Absolute offset of (line, char) in ``"\\n".join(lines)``; past the end clamps to it."""
    if line >= len(lines):
        return sum(len(text) + 1 for text in lines) - 1
    return sum(len(text) + 1 for text in lines[:line]) + min(char, len(lines[line]))


def apply_edit(text: str, range_: TextRange, replacement: str) -> str:
    """Replace the half-open `range_` of `text` with `replacement`."""
    lines = text.split("\n")
    start = _offset(lines, range_.start_line, range_.start_char)
    end = _offset(lines, range_.end_line, range_.end_char)
    if end < start:
        raise ValueError(f"Range ends before it starts: {range_}")
    return text[:start] + replacement + text[end:]


def apply_fix(root: Path, issue: ReviewIssue) -> bool:
    """Apply a single issue's auto-fix. Returns False when it has none."""
    return apply_fixes(root, [issue]) == 1


def apply_fixes(root: Path, issues: Iterable[ReviewIssue]) -> int:
    """Apply every auto-fix, bottom-up per file, skipping overlapping edits.

    Returns the number of fixes applied.
    """
    by_file: dict[str, list[ReviewIssue]] = {}
    for issue in issues:
        if issue.auto_fix is not None:
            by_file.setdefault(issue.file, []).append(issue)

    applied = 0
    for file, file_issues in by_file.items():
        path = Path(root) / file
        if not path.is_file():
            raise FixError(file, "file does not exist")
        with open(path, encoding="utf-8", newline="") as f:
            text = f.read()
        line_count = len(split_lines(text))

        ordered = sorted(
            file_issues,
            key=lambda i: (i.auto_fix.range.start_line, i.auto_fix.range.start_char),
            reverse=True,
        )
        boundary: tuple[int, int] | None = None
        for issue in ordered:
            fix = issue.auto_fix
            if fix.range.start_line > line_count:
                raise FixError(file, f"line {fix.range.start_line} is out of range")
            end = (fix.range.end_line, fix.range.end_char)
            if boundary is not None and end > boundary:
                logger.info("Skipping overlapping fix '%s' in %s", issue.title, file)
                continue
            try:
                text = apply_edit(text, fix.range, fix.replacement_text)
            except ValueError as e:
                raise FixError(file, str(e)) from e
            boundary = (fix.range.start_line, fix.range.start_char)
            applied += 1

        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)

    return applied
