"""Full analysis pipeline - review findings plus the risk report.

This wires the collaborators together:
1. Collect the uncommitted change set and parse it into hunks
2. Run the review rules over the hunks
3. Walk the import graph for the blast radius of every changed file
4. Score the change set
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from impactguard.config import ProjectConfig, load_config
from impactguard.diff.collector import ChangedFile, DiffSource, collect_changes
from impactguard.diff.git import GitDiffSource
from impactguard.graph.builder import ImportGraphBuilder
from impactguard.graph.dependency import DependencyGraph, ImportGraphIndex, ReferenceIndex
from impactguard.risk.models import RiskAnalysis
from impactguard.risk.scorer import RiskScorer
from impactguard.rules.engine import RuleEngine
from impactguard.rules.models import ReviewIssue, RuleDiagnostic
from impactguard.syntax.base import AstProvider
from impactguard.syntax.context import AstContext

logger = logging.getLogger("impactguard.analysis")


@dataclass
class AnalysisReport:
    """Everything one analysis pass produced."""
    changed_files: list[ChangedFile] = field(default_factory=list)
    issues: list[ReviewIssue] = field(default_factory=list)
    diagnostics: list[RuleDiagnostic] = field(default_factory=list)
    affected_files: list[str] = field(default_factory=list)
    risk: RiskAnalysis | None = None

    def to_dict(self) -> dict:
        return {
            "changed_files": [
                {
                    "path": cf.path,
                    "status": cf.status.value,
                    "added": cf.added_lines,
                    "deleted": cf.deleted_lines,
                    "hunks": len(cf.hunks),
                }
                for cf in self.changed_files
            ],
            "issues": [issue.model_dump(mode="json") for issue in self.issues],
            "diagnostics": [d.model_dump(mode="json") for d in self.diagnostics],
            "affected_files": list(self.affected_files),
            "risk": self.risk.model_dump(mode="json") if self.risk else None,
        }


def build_reference_index(root: Path, config: ProjectConfig) -> ImportGraphIndex:
    """Index the project's imports from the current working tree."""
    builder = ImportGraphBuilder()
    graph = builder.build_from_directory(root, config.indexer)
    logger.debug("Import graph: %s", builder.get_stats())
    return ImportGraphIndex(graph)


def run_analysis(
    root: Path,
    config: ProjectConfig | None = None,
    source: DiffSource | None = None,
    ast: AstProvider | None = None,
    index: ReferenceIndex | None = None,
) -> AnalysisReport:
    """Run the full analysis for the working tree at `root`.

    Collaborators default to git, the language-dispatching AST context and an
    import graph built from disk; tests and embedders may pass their own.
    """
    root = Path(root).resolve()
    config = config or load_config(root)
    source = source or GitDiffSource(root)
    scorer = RiskScorer.from_config(config.risk, config.review)

    start = time.time()
    changed = collect_changes(source)
    if not changed:
        logger.info("No changes detected.")
        return AnalysisReport(risk=scorer.empty_analysis())

    engine = RuleEngine(ast or AstContext(root), config=config.review)
    review = engine.evaluate([hunk for cf in changed for hunk in cf.hunks])

    paths = [cf.path for cf in changed]
    graph = DependencyGraph(index or build_reference_index(root, config))
    affected = sorted(graph.affected_by_all(paths))

    risk = scorer.analyze(paths, affected, {cf.path: cf.raw_diff for cf in changed})

    logger.info(
        "Analysis completed in %.0fms: %d files, %d issues, risk %s",
        (time.time() - start) * 1000, len(changed), len(review.issues), risk.level.value,
    )
    return AnalysisReport(
        changed_files=changed,
        issues=review.issues,
        diagnostics=review.diagnostics,
        affected_files=affected,
        risk=risk,
    )
