"""Reverse dependency walk - which files transitively depend on a file."""

from __future__ import annotations

from typing import Iterable, Protocol

import networkx as nx


class ReferenceIndex(Protocol):
    """Direct-reference lookup over the current project files."""

    def has_file(self, path: str) -> bool: ...

    def get_referencing_files(self, path: str) -> list[str]: ...


class ImportGraphIndex:
    """ReferenceIndex over an import graph (edge A -> B means A imports B)."""

    def __init__(self, graph: nx.DiGraph) -> None:
        self.graph = graph

    def has_file(self, path: str) -> bool:
        return self.graph.has_node(path)

    def get_referencing_files(self, path: str) -> list[str]:
        if not self.graph.has_node(path):
            return []
        return sorted(
            pred for pred in self.graph.predecessors(path)
            if self.graph.edges[pred, path].get("kind") == "imports"
        )


class DependencyGraph:
    """Blast radius queries over a ReferenceIndex.

    The relation is never mutated; each query walks the index as it is.
    """

    def __init__(self, index: ReferenceIndex) -> None:
        self.index = index

    def affected_by(self, file: str) -> set[str]:
        """All files that directly or transitively reference `file`.

        Unknown files yield an empty set. The seed is never part of the
        result, even when a cycle leads back to it.
        """
        if not self.index.has_file(file):
            return set()

        affected: set[str] = set()
        stack = [file]
        while stack:
            current = stack.pop()
            for ref in self.index.get_referencing_files(current):
                if ref == file or ref in affected:
                    continue
                affected.add(ref)
                stack.append(ref)
        return affected

    def affected_by_all(self, files: Iterable[str]) -> set[str]:
        """Union of `affected_by` over several changed files."""
        affected: set[str] = set()
        for file in files:
            affected |= self.affected_by(file)
        return affected
