"""Heuristic risk scoring over changed files, affected files and raw diffs.

Structural signals (critical paths, missing tests, blast radius, dependency
impact) add to the score. Content signals (debug output, hardcoded secrets)
only add ranked items.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable, Mapping, Sequence

from impactguard.config import DEFAULT_DEBUG_PATTERNS, DEFAULT_FEATURE_MAP, ReviewConfig, RiskConfig
from impactguard.diff.hunk_parser import parse_hunks
from impactguard.markers import SECRET_PATTERN, cached_patterns, find_marker
from impactguard.risk.models import RiskAnalysis, RiskItem, RiskLevel

CRITICAL_PATH_POINTS = 20
MISSING_TESTS_POINTS = 40
BLAST_RADIUS_POINTS = 30
DEPENDENCY_IMPACT_POINTS = 35

BLAST_RADIUS_THRESHOLD = 5
DEPENDENCY_IMPACT_THRESHOLD = 10

HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 30

DEFAULT_FEATURE_LABEL = "Critical Path"

CONFIG_EXTENSIONS = {".json", ".env", ".yaml", ".yml", ".toml", ".ini", ".cfg"}
BUILD_FILES = {"dockerfile", "makefile"}
TEST_DIRS = {"tests", "test", "__tests__"}


def _parts(path: str) -> tuple[str, ...]:
    return PurePosixPath(path.replace("\\", "/")).parts


def is_test_file(path: str) -> bool:
    """Test modules by name (test_x.py, x_test.go, x.spec.ts, ...) or location."""
    parts = _parts(path)
    if not parts:
        return False
    name = parts[-1].lower()
    stem = name.split(".")[0]
    return (
        ".test." in name
        or ".spec." in name
        or stem.startswith("test_")
        or stem.endswith("_test")
        or name == "conftest.py"
        or any(part.lower() in TEST_DIRS for part in parts[:-1])
    )


def is_config_file(path: str) -> bool:
    parts = _parts(path)
    if not parts:
        return False
    name = parts[-1].lower()
    return (
        PurePosixPath(name).suffix in CONFIG_EXTENSIONS
        or name == ".env"
        or name.startswith(".env.")
        or ".config." in name
        or name in BUILD_FILES
    )


def risk_level(score: int) -> RiskLevel:
    if score >= HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class RiskScorer:
    """Turns a change set into a ranked RiskAnalysis."""

    def __init__(
        self,
        critical_paths: Iterable[str],
        feature_map: Mapping[str, str] | None = None,
        debug_patterns: Iterable[str] | None = None,
        max_risks: int = 10,
    ) -> None:
        self.critical_paths = set(critical_paths)
        self.feature_map = dict(DEFAULT_FEATURE_MAP if feature_map is None else feature_map)
        self.debug_patterns = cached_patterns(tuple(
            DEFAULT_DEBUG_PATTERNS if debug_patterns is None else debug_patterns
        ))
        self.max_risks = max_risks

    @classmethod
    def from_config(cls, risk: RiskConfig, review: ReviewConfig | None = None) -> RiskScorer:
        return cls(
            critical_paths=risk.critical_paths,
            feature_map=risk.feature_map,
            debug_patterns=review.debug_patterns if review else None,
            max_risks=risk.max_risks,
        )

    def analyze(
        self,
        changed_files: Sequence[str],
        affected_files: Iterable[str],
        raw_diff_by_file: Mapping[str, str],
    ) -> RiskAnalysis:
        """Score the change set. No changed files yields `empty_analysis()`."""
        changed = list(dict.fromkeys(changed_files))
        if not changed:
            return self.empty_analysis()

        affected = set(affected_files)
        items: list[RiskItem] = []
        score = 0

        # 1. Critical paths, one item per touched feature
        critical = [f for f in changed if self._is_critical(f)]
        if critical:
            score += CRITICAL_PATH_POINTS * len(critical)
            for feature in dict.fromkeys(self.feature_name(f) for f in critical):
                items.append(RiskItem(
                    priority=100,
                    reason=f"{feature} modified: source of truth for critical system stability.",
                    suggestion=(
                        f"Request a secondary review from "
                        f"@{feature.lower().replace(' ', '-')}-owners."
                    ),
                ))

        # 2. Logic changed without any test change
        logic_files = [f for f in changed if not is_test_file(f) and not is_config_file(f)]
        test_files = [f for f in changed if is_test_file(f)]
        if logic_files and not test_files:
            score += MISSING_TESTS_POINTS
            items.append(RiskItem(
                priority=80,
                reason="Tests not updated: modified logic lacks automated safety nets.",
                suggestion="Add unit or integration tests for the modified logic.",
            ))

        # 3. Many files in one change
        if len(changed) > BLAST_RADIUS_THRESHOLD:
            score += BLAST_RADIUS_POINTS
            items.append(RiskItem(
                priority=70,
                reason=f"Large blast radius ({len(changed)} files): side effects across unrelated modules.",
                suggestion="Consider breaking this change down into smaller, atomic changes.",
            ))

        # 4. Many transitive dependents
        if len(affected) > DEPENDENCY_IMPACT_THRESHOLD:
            score += DEPENDENCY_IMPACT_POINTS
            items.append(RiskItem(
                priority=60,
                reason=f"High dependency impact ({len(affected)} modules): broad ripple effect across the codebase.",
                suggestion="Run the full regression suite on the affected modules.",
            ))

        # 5. Content checks on added lines
        for file, diff in raw_diff_by_file.items():
            items.extend(self._content_risks(file, diff))

        ranked = sorted(items, key=lambda item: -item.priority)[: self.max_risks]
        return RiskAnalysis(score=score, level=risk_level(score), risks=ranked)

    def empty_analysis(self) -> RiskAnalysis:
        """Neutral analysis for when no files are changed."""
        return RiskAnalysis(
            score=0,
            level=RiskLevel.LOW,
            risks=[RiskItem(
                priority=0,
                reason="No changes detected. Ready to analyze.",
                suggestion="Modify some files to see the impact.",
            )],
        )

    def feature_name(self, path: str) -> str:
        for part in _parts(path):
            if part in self.feature_map:
                return self.feature_map[part]
        return DEFAULT_FEATURE_LABEL

    def _is_critical(self, path: str) -> bool:
        return any(part in self.critical_paths for part in _parts(path)[:-1])

    def _content_risks(self, file: str, diff: str) -> list[RiskItem]:
        name = PurePosixPath(file.replace("\\", "/")).name
        items = []
        secret_found = False
        for hunk in parse_hunks(diff, file=file):
            for line in hunk.added:
                if find_marker(line.text, self.debug_patterns):
                    items.append(RiskItem(
                        priority=40,
                        reason=f"Debug statement found in {name}: leftover debug output clutters production logs.",
                        suggestion="Remove the debug statement before committing.",
                        file=file,
                        line=line.new_line_number,
                        can_fix=True,
                        fix_command="impactguard fix",
                    ))
                if not secret_found and SECRET_PATTERN.search(line.text):
                    secret_found = True
                    items.append(RiskItem(
                        priority=95,
                        reason=f"Potential secret leaked in {name}: hardcoded credentials detected.",
                        suggestion="Move the secret to an environment variable or a secret manager.",
                        file=file,
                        line=line.new_line_number,
                        can_fix=False,
                    ))
        return items
