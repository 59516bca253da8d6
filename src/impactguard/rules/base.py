"""Rule interface for the review engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from impactguard.config import ReviewConfig
from impactguard.diff.hunk_parser import DiffHunk, DiffLine
from impactguard.rules.models import AutoFix, ReviewIssue, Severity
from impactguard.syntax.base import AstProvider, SourceUnit


@dataclass
class RuleContext:
    """Everything a rule may look at for one hunk.

    ``unit`` is None when the file could not be resolved or parsed; rules
    must then fall back to text heuristics or report nothing.
    """

    hunk: DiffHunk
    unit: SourceUnit | None
    ast: AstProvider
    config: ReviewConfig


class Rule(ABC):
    """Base class for review rules."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def evaluate(self, context: RuleContext) -> list[ReviewIssue]:
        """Return the issues this rule finds in ``context.hunk``."""

    def issue(
        self,
        context: RuleContext,
        line: DiffLine | int,
        *,
        severity: Severity,
        title: str,
        explanation: str,
        suggestion: str,
        confidence: int,
        auto_fix: AutoFix | None = None,
    ) -> ReviewIssue:
        """Build an issue for a single new-side line."""
        line_number = line if isinstance(line, int) else line.new_line_number
        return ReviewIssue(
            severity=severity,
            title=title,
            explanation=explanation,
            suggestion=suggestion,
            file=context.hunk.file,
            line_start=line_number,
            line_end=line_number,
            confidence=confidence,
            rule=self.name,
            auto_fix=auto_fix,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
