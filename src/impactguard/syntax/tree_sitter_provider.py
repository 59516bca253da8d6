"""Tree-sitter based AST lookups for TypeScript, TSX and JavaScript."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Collection

from impactguard.syntax.base import ANONYMOUS, ContainerKind, SourceUnit, detect_language

logger = logging.getLogger("impactguard.syntax")

# language -> (grammar module, function returning the language pointer)
_TS_LANGUAGE_MODULES = {
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "javascript": ("tree_sitter_javascript", "language"),
}

# Node types that open a named structural scope
_CONTAINER_NODE_TYPES = {
    "interface_declaration": ContainerKind.INTERFACE,
    "type_alias_declaration": ContainerKind.TYPE_ALIAS,
    "class_declaration": ContainerKind.CLASS,
    "abstract_class_declaration": ContainerKind.CLASS,
    "class": ContainerKind.CLASS,
    "function_declaration": ContainerKind.FUNCTION,
    "generator_function_declaration": ContainerKind.FUNCTION,
    "function_expression": ContainerKind.FUNCTION,
    "arrow_function": ContainerKind.FUNCTION,
    "method_definition": ContainerKind.METHOD,
}

_languages: dict[str, Any] = {}


def is_available(language: str | None = None) -> bool:
    """Check if tree-sitter and the required language grammar are available."""
    try:
        import tree_sitter  # noqa: F401
    except ImportError:
        return False

    if language is None:
        return True

    entry = _TS_LANGUAGE_MODULES.get(language)
    if not entry:
        return False

    try:
        __import__(entry[0])
        return True
    except ImportError:
        return False


def _get_language(lang: str):
    """Get a (cached) tree-sitter Language object for the given language."""
    from tree_sitter import Language

    if lang not in _languages:
        entry = _TS_LANGUAGE_MODULES.get(lang)
        if not entry:
            raise ValueError(f"No tree-sitter grammar for language: {lang}")
        module_name, func_name = entry
        module = __import__(module_name)
        _languages[lang] = Language(getattr(module, func_name)())
    return _languages[lang]


class TreeSitterAstProvider:
    """AstProvider for the JS/TS family."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def resolve_source_unit(self, path: str) -> SourceUnit | None:
        language = detect_language(path)
        if language not in _TS_LANGUAGE_MODULES or not is_available(language):
            return None
        full_path = self.root / path
        if not full_path.is_file():
            return None

        from tree_sitter import Parser

        try:
            source = full_path.read_text(encoding="utf-8", errors="replace")
            parser = Parser(_get_language(language))
            tree = parser.parse(source.encode("utf-8"))
        except Exception as e:
            logger.debug("No tree-sitter AST for %s: %s", path, e)
            return None
        return SourceUnit(path=path, language=language, source=source, tree=tree)

    def node_at(self, unit: SourceUnit, line: int, column: int | None = None):
        """Smallest named node covering (line, column), or None."""
        if line < 0 or line >= len(unit.lines):
            return None
        if column is None:
            column = unit.column_of_first_char(line)
        # tree-sitter points use byte columns
        point = (line, len(unit.lines[line][:column].encode("utf-8")))
        return unit.tree.root_node.named_descendant_for_point_range(point, point)

    def enclosing_container(self, unit: SourceUnit, node, kinds: Collection[ContainerKind]):
        current = node.parent
        while current is not None:
            if _CONTAINER_NODE_TYPES.get(current.type) in kinds:
                return current
            current = current.parent
        return None

    def container_name(self, unit: SourceUnit, node) -> str:
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            return name_node.text.decode("utf-8")
        return ANONYMOUS

    def is_dynamic_type(self, unit: SourceUnit, node) -> bool:
        return node.type == "predefined_type" and node.text == b"any"
