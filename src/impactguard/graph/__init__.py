"""Project import graph and blast radius queries."""

from impactguard.graph.builder import ImportGraphBuilder
from impactguard.graph.dependency import DependencyGraph, ImportGraphIndex, ReferenceIndex

__all__ = ["DependencyGraph", "ImportGraphBuilder", "ImportGraphIndex", "ReferenceIndex"]
