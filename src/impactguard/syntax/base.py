"""AST capability interface shared by rules and syntax providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Collection, Protocol

from impactguard.diff.hunk_parser import split_lines


class ContainerKind(str, Enum):
    """Structural scopes a changed line can sit inside."""

    CLASS = "class"
    FUNCTION = "function"
    METHOD = "method"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"


ANONYMOUS = "anonymous"


@dataclass
class SourceUnit:
    """A parsed file. ``tree`` is whatever the owning provider produced."""

    path: str
    language: str
    source: str
    tree: Any
    parents: dict = field(default_factory=dict, repr=False)
    lines: list[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.lines = split_lines(self.source)

    def column_of_first_char(self, line: int) -> int:
        text = self.lines[line]
        return len(text) - len(text.lstrip())


class AstProvider(Protocol):
    """Narrow AST lookup capability consumed by the rules.

    Line numbers are 0-indexed; columns are character offsets into the line
    and default to the line's first non-blank character.
    """

    def resolve_source_unit(self, path: str) -> SourceUnit | None: ...

    def node_at(self, unit: SourceUnit, line: int, column: int | None = None) -> Any | None: ...

    def enclosing_container(
        self, unit: SourceUnit, node: Any, kinds: Collection[ContainerKind]
    ) -> Any | None: ...

    def container_name(self, unit: SourceUnit, node: Any) -> str: ...

    def is_dynamic_type(self, unit: SourceUnit, node: Any) -> bool: ...


# Language detection by file extension
EXTENSION_LANGUAGE_MAP: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}


def detect_language(file_path: str) -> str | None:
    """Detect programming language from file extension."""
    ext = Path(file_path).suffix.lower()
    return EXTENSION_LANGUAGE_MAP.get(ext)
