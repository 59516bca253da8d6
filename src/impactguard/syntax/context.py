"""Language dispatch - selects the AST provider for each file."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Collection

from impactguard.syntax.base import AstProvider, ContainerKind, SourceUnit, detect_language
from impactguard.syntax.python_provider import PythonAstProvider
from impactguard.syntax.tree_sitter_provider import TreeSitterAstProvider


class AstContext:
    """AstProvider that routes every call to a per-language provider.

    - Python: stdlib ast
    - TypeScript, TSX, JavaScript: tree-sitter
    """

    def __init__(self, root: str | Path, providers: dict[str, AstProvider] | None = None) -> None:
        if providers is None:
            ts_provider = TreeSitterAstProvider(root)
            providers = {
                "python": PythonAstProvider(root),
                "typescript": ts_provider,
                "tsx": ts_provider,
                "javascript": ts_provider,
            }
        self.providers = providers

    def resolve_source_unit(self, path: str) -> SourceUnit | None:
        provider = self.providers.get(detect_language(path) or "")
        if provider is None:
            return None
        return provider.resolve_source_unit(path)

    def _provider(self, unit: SourceUnit) -> AstProvider:
        return self.providers[unit.language]

    def node_at(self, unit: SourceUnit, line: int, column: int | None = None) -> Any | None:
        return self._provider(unit).node_at(unit, line, column)

    def enclosing_container(
        self, unit: SourceUnit, node: Any, kinds: Collection[ContainerKind]
    ) -> Any | None:
        return self._provider(unit).enclosing_container(unit, node, kinds)

    def container_name(self, unit: SourceUnit, node: Any) -> str:
        return self._provider(unit).container_name(unit, node)

    def is_dynamic_type(self, unit: SourceUnit, node: Any) -> bool:
        return self._provider(unit).is_dynamic_type(unit, node)
