"""Build a file-level import graph for the project."""

from __future__ import annotations

import ast
import fnmatch
import logging
import os
import posixpath
import re
from pathlib import Path

import networkx as nx

from impactguard.config import IndexerConfig
from impactguard.syntax.base import detect_language

logger = logging.getLogger("impactguard.graph")

_JS_SPECIFIER = re.compile(
    r"""(?:\bimport\s+(?:[^'";]*?\s+from\s+)?"""
    r"""|\bexport\s+[^'";]*?\s+from\s+"""
    r"""|\brequire\s*\(\s*"""
    r"""|\bimport\s*\(\s*)"""
    r"""['"]([^'"\n]+)['"]"""
)

_JS_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")


class ImportGraphBuilder:
    """Builds a directed graph of which project file imports which.

    Nodes are repo-relative POSIX paths; an edge ``A -> B`` with
    ``kind="imports"`` means A references B.
    """

    def __init__(self) -> None:
        self.graph = nx.DiGraph()
        self._modules: dict[str, str] = {}
        self._files: set[str] = set()

    def build_from_directory(
        self,
        root: str | Path,
        config: IndexerConfig | None = None,
        progress_callback: callable | None = None,
    ) -> nx.DiGraph:
        """Build the import graph for every supported file under `root`."""
        root = Path(root).resolve()
        config = config or IndexerConfig()

        # Reset state so reusing a builder doesn't accumulate stale data
        self.graph = nx.DiGraph()
        self._modules = {}

        files = collect_files(root, config)
        self._files = {rel for rel, _ in files}
        for rel, language in files:
            self.graph.add_node(rel, type="file", language=language)
            if language == "python":
                for name in _module_names(rel):
                    self._modules.setdefault(name, rel)

        total = len(files)
        for i, (rel, language) in enumerate(files):
            if progress_callback:
                progress_callback(rel, i + 1, total)
            try:
                source = (root / rel).read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.debug("Skipping unreadable file %s: %s", rel, e)
                continue
            if language == "python":
                targets = self._python_imports(rel, source)
            else:
                targets = self._js_imports(rel, source)
            for target in targets:
                if target != rel:
                    self.graph.add_edge(rel, target, kind="imports")

        return self.graph

    def _python_imports(self, rel: str, source: str) -> set[str]:
        try:
            tree = ast.parse(source, filename=rel)
        except (SyntaxError, ValueError):
            logger.debug("Cannot parse %s for imports", rel)
            return set()

        package = _package_of(rel)
        targets: set[str] = set()
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    target = self._resolve_module(alias.name)
                    if target:
                        targets.add(target)
            elif isinstance(node, ast.ImportFrom):
                if node.level:
                    parts = package.split(".") if package else []
                    if node.level - 1 > len(parts):
                        continue
                    base_parts = parts[: len(parts) - (node.level - 1)]
                    if node.module:
                        base_parts.append(node.module)
                    base = ".".join(p for p in base_parts if p)
                else:
                    base = node.module or ""
                for alias in node.names:
                    # `from pkg import mod` may name a submodule
                    sub = f"{base}.{alias.name}" if base else alias.name
                    target = self._modules.get(sub) or self._resolve_module(base)
                    if target:
                        targets.add(target)
        return targets

    def _resolve_module(self, dotted: str) -> str | None:
        """Most specific project file for a dotted module name."""
        parts = dotted.split(".") if dotted else []
        while parts:
            target = self._modules.get(".".join(parts))
            if target:
                return target
            parts.pop()
        return None

    def _js_imports(self, rel: str, source: str) -> set[str]:
        targets: set[str] = set()
        base_dir = posixpath.dirname(rel)
        for match in _JS_SPECIFIER.finditer(source):
            spec = match.group(1)
            if not spec.startswith("."):
                continue  # bare package imports are outside the project
            target = self._resolve_js(posixpath.normpath(posixpath.join(base_dir, spec)))
            if target:
                targets.add(target)
        return targets

    def _resolve_js(self, path: str) -> str | None:
        candidates = [path]
        stem, ext = posixpath.splitext(path)
        if ext in (".js", ".jsx", ".mjs", ".cjs"):
            # TypeScript sources are imported with their emitted extension
            candidates += [stem + ".ts", stem + ".tsx"]
        candidates += [path + e for e in _JS_EXTENSIONS]
        candidates += [f"{path}/index{e}" for e in _JS_EXTENSIONS]
        for candidate in candidates:
            if candidate in self._files:
                return candidate
        return None

    def get_stats(self) -> dict:
        """Get graph statistics."""
        return {
            "files": self.graph.number_of_nodes(),
            "imports": self.graph.number_of_edges(),
        }


def _module_names(rel: str) -> list[str]:
    """Dotted module names a Python file can be imported as."""
    stem = rel[: -len(posixpath.splitext(rel)[1])]
    parts = stem.split("/")
    if parts[-1] == "__init__":
        parts = parts[:-1]
    if not parts:
        return []
    names = [".".join(parts)]
    if parts[0] == "src" and len(parts) > 1:
        names.append(".".join(parts[1:]))
    return names


def _package_of(rel: str) -> str:
    """Dotted package containing a Python file, relative to the repo root."""
    parts = rel.split("/")[:-1]
    if parts and parts[0] == "src":
        parts = parts[1:]
    return ".".join(parts)


def collect_files(root: Path, config: IndexerConfig) -> list[tuple[str, str]]:
    """Collect (relative path, language) for indexable files, respecting exclusions."""
    files = []
    max_size = config.max_file_size_kb * 1024

    gitignore_patterns = _read_gitignore(root)
    all_exclude = config.exclude_patterns + gitignore_patterns

    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)

        dirnames[:] = [
            d
            for d in dirnames
            if not _should_exclude(os.path.join(rel_dir, d) if rel_dir != "." else d, all_exclude)
        ]

        for filename in filenames:
            rel_path = (
                os.path.join(rel_dir, filename) if rel_dir != "." else filename
            )
            if _should_exclude(rel_path, all_exclude):
                continue

            lang = detect_language(filename)
            if lang is None:
                continue

            full_path = Path(dirpath) / filename
            try:
                if full_path.stat().st_size > max_size:
                    continue
            except OSError:
                continue

            files.append((Path(rel_path).as_posix(), lang))

    return sorted(files)


def _should_exclude(path: str, patterns: list[str]) -> bool:
    """Check if a path matches any exclusion pattern."""
    path_parts = Path(path).parts
    for pattern in patterns:
        if fnmatch.fnmatch(path, pattern):
            return True
        for part in path_parts:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False


def _read_gitignore(root: Path) -> list[str]:
    """Read .gitignore patterns from the project root."""
    gitignore = root / ".gitignore"
    if not gitignore.exists():
        return []

    patterns = []
    try:
        for line in gitignore.read_text().splitlines():
            line = line.strip()
            if line and not line.startswith("#") and not line.startswith("!"):
                patterns.append(line.rstrip("/"))
    except OSError:
        pass
    return patterns
