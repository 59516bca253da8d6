"""Diff retrieval and parsing."""

from impactguard.diff.collector import ChangedFile, DiffSource, FileStatus, collect_changes
from impactguard.diff.hunk_parser import DiffHunk, DiffLine, HunkParser, LineKind, parse_hunks

__all__ = [
    "ChangedFile",
    "DiffHunk",
    "DiffLine",
    "DiffSource",
    "FileStatus",
    "HunkParser",
    "LineKind",
    "collect_changes",
    "parse_hunks",
]
