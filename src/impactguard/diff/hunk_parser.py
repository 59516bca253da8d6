"""Unified diff parser - turn raw diff text into structured hunks.

Line numbers inside a hunk are 0-indexed and derived from running pointers
seeded at ``start - 1``; the hunk header itself keeps the conventional
1-indexed ``old_start``/``new_start``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

_HUNK_HEADER = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


class LineKind(str, Enum):
    """Kinds of lines inside a hunk."""

    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


@dataclass
class DiffLine:
    """A single line of a hunk."""
    kind: LineKind
    text: str
    old_line_number: int | None = None
    new_line_number: int | None = None


@dataclass
class DiffHunk:
    """A single hunk from a unified diff."""
    file: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: list[DiffLine] = field(default_factory=list)

    @property
    def added(self) -> list[DiffLine]:
        return [line for line in self.lines if line.kind == LineKind.ADDED]

    @property
    def removed(self) -> list[DiffLine]:
        return [line for line in self.lines if line.kind == LineKind.REMOVED]

    @property
    def context(self) -> list[DiffLine]:
        return [line for line in self.lines if line.kind == LineKind.CONTEXT]


class _HunkCursor:
    """Running old/new pointers plus the remaining line budget of a hunk."""

    def __init__(self, hunk: DiffHunk) -> None:
        self.hunk = hunk
        self.old_ptr = hunk.old_start - 1
        self.new_ptr = hunk.new_start - 1
        self.old_left = hunk.old_lines
        self.new_left = hunk.new_lines

    @property
    def complete(self) -> bool:
        return self.old_left <= 0 and self.new_left <= 0

    def consume(self, line: str) -> None:
        marker, text = line[:1], line[1:]
        if marker == "+":
            self.hunk.lines.append(
                DiffLine(LineKind.ADDED, text, new_line_number=self.new_ptr)
            )
            self.new_ptr += 1
            self.new_left -= 1
        elif marker == "-":
            self.hunk.lines.append(
                DiffLine(LineKind.REMOVED, text, old_line_number=self.old_ptr)
            )
            self.old_ptr += 1
            self.old_left -= 1
        elif marker == " ":
            self.hunk.lines.append(
                DiffLine(
                    LineKind.CONTEXT,
                    text,
                    old_line_number=self.old_ptr,
                    new_line_number=self.new_ptr,
                )
            )
            self.old_ptr += 1
            self.new_ptr += 1
            self.old_left -= 1
            self.new_left -= 1


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, dropping one trailing ``\\r`` per line.

    ``str.splitlines`` also breaks on form feeds and Unicode separators, which
    git, ``ast`` and tree-sitter treat as ordinary characters.
    """
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_hunks(raw_diff: str, file: str = "") -> list[DiffHunk]:
    """Parse unified diff text into hunks.

    Never raises: malformed input yields an empty or partial list. ``file``
    names the hunks of a diff that carries no ``diff --git`` header.

    A hunk is closed once it has consumed its declared old and new line
    counts. Content lines past that point are dropped until the next header,
    so an under-counted header loses its surplus lines. Lines without a
    ``+``, ``-`` or space marker (including blank lines) are ignored.
    """
    hunks: list[DiffHunk] = []
    current_file = file
    cursor: _HunkCursor | None = None

    for line in split_lines(raw_diff):
        if line.startswith("diff --git"):
            parts = line.split(" b/")
            current_file = parts[-1] if len(parts) > 1 else current_file
            cursor = None
            continue

        if line.startswith("@@"):
            match = _HUNK_HEADER.match(line)
            if match:
                hunk = DiffHunk(
                    file=current_file,
                    old_start=int(match.group(1)),
                    old_lines=int(match.group(2) or "1"),
                    new_start=int(match.group(3)),
                    new_lines=int(match.group(4) or "1"),
                )
                hunks.append(hunk)
                cursor = _HunkCursor(hunk)
            continue

        if cursor is None or cursor.complete:
            # Between hunks: only the new-side file header is meaningful
            if line.startswith("+++ b/"):
                current_file = line[6:]
            continue

        cursor.consume(line)

    return hunks


class HunkParser:
    """Class-style entry point: ``HunkParser.parse(raw_diff)``."""

    @staticmethod
    def parse(raw_diff: str) -> list[DiffHunk]:
        return parse_hunks(raw_diff)
