"""Collect the working-tree change set as structured ChangedFile objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from impactguard.diff.hunk_parser import DiffHunk, parse_hunks, split_lines


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


class DiffSource(Protocol):
    """Anything that can enumerate changed paths and produce their diffs."""

    def get_changed_paths(self) -> list[str]: ...

    def get_raw_diff(self, path: str) -> str: ...


@dataclass
class ChangedFile:
    """Changes to a single file."""
    path: str
    status: FileStatus = FileStatus.MODIFIED
    hunks: list[DiffHunk] = field(default_factory=list)
    old_path: str | None = None  # For renames
    raw_diff: str = field(default="", repr=False)

    @property
    def added_lines(self) -> int:
        return sum(len(h.added) for h in self.hunks)

    @property
    def deleted_lines(self) -> int:
        return sum(len(h.removed) for h in self.hunks)


def detect_status(raw_diff: str) -> tuple[FileStatus, str | None]:
    """Read the file status (and old path for renames) from diff headers."""
    status = FileStatus.MODIFIED
    old_path = None
    for line in split_lines(raw_diff):
        if line.startswith("@@"):
            break
        if line.startswith("new file"):
            status = FileStatus.ADDED
        elif line.startswith("deleted file"):
            status = FileStatus.DELETED
        elif line.startswith("rename from"):
            old_path = line.split("rename from ")[-1]
            status = FileStatus.RENAMED
    return status, old_path


def build_changed_file(path: str, raw_diff: str) -> ChangedFile:
    """Parse one file's diff; a file without hunks is still a changed file."""
    status, old_path = detect_status(raw_diff)
    return ChangedFile(
        path=path,
        status=status,
        hunks=parse_hunks(raw_diff, file=path),
        old_path=old_path,
        raw_diff=raw_diff,
    )


def collect_changes(source: DiffSource) -> list[ChangedFile]:
    """Collect every changed path from `source` and parse its diff."""
    return [
        build_changed_file(path, source.get_raw_diff(path))
        for path in source.get_changed_paths()
    ]
