"""Review engine - run every enabled rule over every hunk."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from impactguard.config import ReviewConfig
from impactguard.diff.hunk_parser import DiffHunk
from impactguard.rules.base import Rule, RuleContext
from impactguard.rules.models import ReviewIssue, RuleDiagnostic
from impactguard.rules.registry import default_rules
from impactguard.syntax.base import AstProvider, SourceUnit

logger = logging.getLogger("impactguard.rules")


@dataclass
class ReviewResult:
    """Issues plus the soft failures that were isolated while producing them."""
    issues: list[ReviewIssue] = field(default_factory=list)
    diagnostics: list[RuleDiagnostic] = field(default_factory=list)


class RuleEngine:
    """Evaluates an ordered rule list against diff hunks.

    Output order is rule-list order, then hunk order. A rule that raises is
    isolated to the hunk it failed on and reported as a diagnostic.
    """

    def __init__(
        self,
        ast: AstProvider,
        rules: Sequence[Rule] | None = None,
        config: ReviewConfig | None = None,
    ) -> None:
        self.ast = ast
        self.rules = list(rules) if rules is not None else default_rules()
        self.config = config or ReviewConfig()

    def enabled_rules(self, config: ReviewConfig | None = None) -> list[Rule]:
        config = config or self.config
        return [rule for rule in self.rules if config.is_enabled(rule.name)]

    def evaluate(
        self, hunks: Sequence[DiffHunk], config: ReviewConfig | None = None
    ) -> ReviewResult:
        """Run the enabled rules; `config` overrides the engine's for this call only."""
        config = config or self.config
        result = ReviewResult()
        units: dict[str, SourceUnit | None] = {}

        for rule in self.enabled_rules(config):
            for hunk in hunks:
                if hunk.file not in units:
                    units[hunk.file] = self._resolve(hunk.file, result)
                context = RuleContext(hunk=hunk, unit=units[hunk.file], ast=self.ast, config=config)
                try:
                    result.issues.extend(rule.evaluate(context))
                except Exception as e:
                    logger.warning("Rule %s failed on %s: %s", rule.name, hunk.file, e)
                    result.diagnostics.append(
                        RuleDiagnostic(rule=rule.name, file=hunk.file, message=str(e) or type(e).__name__)
                    )

        logger.debug(
            "Evaluated %d hunks: %d issues, %d diagnostics",
            len(hunks), len(result.issues), len(result.diagnostics),
        )
        return result

    def evaluate_hunks(
        self, hunks: Sequence[DiffHunk], config: ReviewConfig | None = None
    ) -> list[ReviewIssue]:
        """Issues only; see `evaluate` for the diagnostics channel."""
        return self.evaluate(hunks, config).issues

    def _resolve(self, path: str, result: ReviewResult) -> SourceUnit | None:
        try:
            return self.ast.resolve_source_unit(path)
        except Exception as e:
            logger.warning("Cannot resolve source unit for %s: %s", path, e)
            result.diagnostics.append(RuleDiagnostic(rule="", file=path, message=str(e)))
            return None
