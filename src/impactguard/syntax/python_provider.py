"""Python AST lookups using the built-in ast module. Always available, no extra deps."""

from __future__ import annotations

import ast
import logging
from pathlib import Path
from typing import Collection

from impactguard.syntax.base import ANONYMOUS, ContainerKind, SourceUnit

logger = logging.getLogger("impactguard.syntax")

_TYPE_ALIAS = getattr(ast, "TypeAlias", None)  # Python 3.12+ `type X = ...`


class PythonAstProvider:
    """AstProvider for Python sources."""

    language = "python"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def resolve_source_unit(self, path: str) -> SourceUnit | None:
        full_path = self.root / path
        if not full_path.is_file():
            return None
        try:
            source = full_path.read_text(encoding="utf-8", errors="replace")
            tree = ast.parse(source, filename=path)
        except (OSError, SyntaxError, ValueError) as e:
            logger.debug("No Python AST for %s: %s", path, e)
            return None

        parents = {
            child: parent
            for parent in ast.walk(tree)
            for child in ast.iter_child_nodes(parent)
        }
        return SourceUnit(path=path, language=self.language, source=source, tree=tree, parents=parents)

    def node_at(self, unit: SourceUnit, line: int, column: int | None = None) -> ast.AST | None:
        """Smallest positioned node covering (line, column), or None."""
        if line < 0 or line >= len(unit.lines):
            return None
        if column is None:
            column = unit.column_of_first_char(line)
        # ast offsets are UTF-8 byte offsets with 1-indexed lines
        byte_col = len(unit.lines[line][:column].encode("utf-8"))
        return _find(unit.tree, (line + 1, byte_col))

    def enclosing_container(
        self, unit: SourceUnit, node: ast.AST, kinds: Collection[ContainerKind]
    ) -> ast.AST | None:
        current = unit.parents.get(node)
        while current is not None:
            if _container_kind(unit, current) in kinds:
                return current
            current = unit.parents.get(current)
        return None

    def container_name(self, unit: SourceUnit, node: ast.AST) -> str:
        name = getattr(node, "name", None)
        if isinstance(name, str):
            return name
        if isinstance(name, ast.Name):
            return name.id
        return ANONYMOUS

    def is_dynamic_type(self, unit: SourceUnit, node: ast.AST) -> bool:
        """True for `Any` / `typing.Any`."""
        if isinstance(node, ast.Name):
            return node.id == "Any"
        if isinstance(node, ast.Attribute):
            return node.attr == "Any"
        return False


def _container_kind(unit: SourceUnit, node: ast.AST) -> ContainerKind | None:
    if isinstance(node, ast.ClassDef):
        return ContainerKind.CLASS
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        if isinstance(unit.parents.get(node), ast.ClassDef):
            return ContainerKind.METHOD
        return ContainerKind.FUNCTION
    if _TYPE_ALIAS is not None and isinstance(node, _TYPE_ALIAS):
        return ContainerKind.TYPE_ALIAS
    return None


def _has_span(node: ast.AST) -> bool:
    return getattr(node, "lineno", None) is not None and getattr(node, "end_lineno", None) is not None


def _contains(node: ast.AST, pos: tuple[int, int]) -> bool:
    start = (node.lineno, node.col_offset)
    end = (node.end_lineno, node.end_col_offset)
    return start <= pos < end


def _find(node: ast.AST, pos: tuple[int, int]) -> ast.AST | None:
    """Deepest positioned descendant of `node` containing `pos`."""
    for child in ast.iter_child_nodes(node):
        if _has_span(child):
            if _contains(child, pos):
                return _find(child, pos) or child
        else:
            # arguments, comprehensions, ... carry no position of their own
            found = _find(child, pos)
            if found is not None:
                return found
    return None
