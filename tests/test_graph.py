"""Tests for the import graph builder and blast radius queries."""

from __future__ import annotations

from pathlib import Path

import networkx as nx

from impactguard.config import IndexerConfig
from impactguard.graph.builder import ImportGraphBuilder, collect_files
from impactguard.graph.dependency import DependencyGraph, ImportGraphIndex


class DictIndex:
    """ReferenceIndex backed by a {file: [files referencing it]} mapping."""

    def __init__(self, refs: dict[str, list[str]]):
        self.refs = refs

    def has_file(self, path: str) -> bool:
        return path in self.refs

    def get_referencing_files(self, path: str) -> list[str]:
        return self.refs.get(path, [])


class TestDependencyGraph:
    def test_transitive_dependents(self):
        index = DictIndex({"c": ["b"], "b": ["a"], "a": []})
        assert DependencyGraph(index).affected_by("c") == {"a", "b"}

    def test_leaf_has_no_dependents(self):
        index = DictIndex({"c": ["b"], "b": ["a"], "a": []})
        assert DependencyGraph(index).affected_by("a") == set()

    def test_unknown_file(self):
        assert DependencyGraph(DictIndex({"a": []})).affected_by("missing") == set()

    def test_cycle_excludes_seed(self):
        index = DictIndex({"a": ["b"], "b": ["c"], "c": ["a"]})
        assert DependencyGraph(index).affected_by("a") == {"b", "c"}

    def test_diamond_visits_each_file_once(self):
        calls: list[str] = []

        class CountingIndex(DictIndex):
            def get_referencing_files(self, path):
                calls.append(path)
                return super().get_referencing_files(path)

        index = CountingIndex({"d": ["b", "c"], "b": ["a"], "c": ["a"], "a": []})
        assert DependencyGraph(index).affected_by("d") == {"a", "b", "c"}
        assert sorted(calls) == ["a", "b", "c", "d"]

    def test_affected_by_all_is_a_union(self):
        index = DictIndex({"x": ["p"], "y": ["q"], "p": [], "q": []})
        assert DependencyGraph(index).affected_by_all(["x", "y", "nope"]) == {"p", "q"}


class TestImportGraphIndex:
    def test_only_import_edges_count(self):
        graph = nx.DiGraph()
        graph.add_edge("a.py", "b.py", kind="imports")
        graph.add_edge("c.py", "b.py", kind="mentions")
        index = ImportGraphIndex(graph)
        assert index.has_file("b.py")
        assert index.get_referencing_files("b.py") == ["a.py"]
        assert index.get_referencing_files("zzz.py") == []


class TestImportGraphBuilder:
    def test_python_imports(self, tmp_project: Path):
        graph = ImportGraphBuilder().build_from_directory(tmp_project)
        assert graph.has_edge("api/routes.py", "auth/session.py")
        assert graph.has_edge("app.py", "api/routes.py")
        assert graph.has_edge("tests/test_session.py", "auth/session.py")
        assert all(data["kind"] == "imports" for _, _, data in graph.edges(data=True))

    def test_typescript_imports(self, tmp_project: Path):
        graph = ImportGraphBuilder().build_from_directory(tmp_project)
        assert graph.has_edge("web/client.ts", "web/api.ts")

    def test_blast_radius_over_project(self, tmp_project: Path):
        graph = ImportGraphBuilder().build_from_directory(tmp_project)
        affected = DependencyGraph(ImportGraphIndex(graph)).affected_by("auth/session.py")
        assert affected == {"api/routes.py", "app.py", "tests/test_session.py"}

    def test_relative_imports(self, tmp_path: Path):
        pkg = tmp_path / "pkg"
        pkg.mkdir()
        (pkg / "__init__.py").write_text("")
        (pkg / "core.py").write_text("VALUE = 1\n")
        (pkg / "feature.py").write_text("from . import core\nfrom .core import VALUE\n")
        (pkg / "sub").mkdir()
        (pkg / "sub" / "deep.py").write_text("from ..core import VALUE\n")

        graph = ImportGraphBuilder().build_from_directory(tmp_path)
        assert graph.has_edge("pkg/feature.py", "pkg/core.py")
        assert graph.has_edge("pkg/sub/deep.py", "pkg/core.py")

    def test_src_layout(self, tmp_path: Path):
        (tmp_path / "src" / "lib").mkdir(parents=True)
        (tmp_path / "src" / "lib" / "__init__.py").write_text("")
        (tmp_path / "src" / "lib" / "util.py").write_text("def f(): pass\n")
        (tmp_path / "main.py").write_text("import lib.util\n")
        graph = ImportGraphBuilder().build_from_directory(tmp_path)
        assert graph.has_edge("main.py", "src/lib/util.py")

    def test_js_extension_mapping_and_index(self, tmp_path: Path):
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "index.ts").write_text("export const a = 1;\n")
        (tmp_path / "util.ts").write_text("export const b = 2;\n")
        (tmp_path / "main.ts").write_text(
            'import { a } from "./lib";\n'
            'import { b } from "./util.js";\n'
            'import React from "react";\n'
            'const c = require("./util");\n'
        )
        graph = ImportGraphBuilder().build_from_directory(tmp_path)
        assert graph.has_edge("main.ts", "lib/index.ts")
        assert graph.has_edge("main.ts", "util.ts")
        assert graph.out_degree("main.ts") == 2

    def test_unparseable_file_is_isolated(self, tmp_path: Path):
        (tmp_path / "broken.py").write_text("def oops(:\n")
        graph = ImportGraphBuilder().build_from_directory(tmp_path)
        assert graph.has_node("broken.py")
        assert graph.degree("broken.py") == 0

    def test_rebuild_resets_state(self, tmp_path: Path):
        (tmp_path / "a.py").write_text("import b\n")
        (tmp_path / "b.py").write_text("")
        builder = ImportGraphBuilder()
        builder.build_from_directory(tmp_path)
        (tmp_path / "a.py").write_text("")
        graph = builder.build_from_directory(tmp_path)
        assert graph.number_of_edges() == 0
        assert builder.get_stats() == {"files": 2, "imports": 0}

    def test_progress_callback(self, tmp_project: Path):
        seen = []
        ImportGraphBuilder().build_from_directory(
            tmp_project, progress_callback=lambda f, i, n: seen.append((f, i, n))
        )
        assert seen
        assert seen[-1][1] == seen[-1][2]


class TestCollectFiles:
    def test_exclusions_and_gitignore(self, tmp_path: Path):
        (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
        (tmp_path / "node_modules" / "pkg" / "index.js").write_text("")
        (tmp_path / "generated").mkdir()
        (tmp_path / "generated" / "out.py").write_text("")
        (tmp_path / ".gitignore").write_text("# build output\ngenerated/\n")
        (tmp_path / "keep.py").write_text("")
        (tmp_path / "types.d.ts").write_text("")
        (tmp_path / "README.md").write_text("")

        files = collect_files(tmp_path, IndexerConfig())
        assert files == [("keep.py", "python")]

    def test_max_file_size(self, tmp_path: Path):
        (tmp_path / "big.py").write_text("x = 1\n" * 400)
        files = collect_files(tmp_path, IndexerConfig(max_file_size_kb=1))
        assert files == []
