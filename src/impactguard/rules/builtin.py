"""Built-in review rules.

Each rule looks at one hunk at a time. Rules that need syntax information
return nothing when the file has no resolved source unit.
"""

from __future__ import annotations

import re

from impactguard.diff.hunk_parser import DiffHunk, DiffLine, LineKind
from impactguard.markers import cached_patterns, find_marker
from impactguard.rules.base import Rule, RuleContext
from impactguard.rules.models import AutoFix, ReviewIssue, Severity, TextRange
from impactguard.rules.registry import register_rule
from impactguard.syntax.base import ContainerKind

# Textual pre-filter per language; the AST must confirm the `marker` group
DYNAMIC_TYPE_MARKERS = {
    "python": re.compile(r"\b(?P<marker>Any)\b"),
    "typescript": re.compile(r":\s*(?P<marker>any)\b"),
    "tsx": re.compile(r":\s*(?P<marker>any)\b"),
}

PAYLOAD_CONTAINERS = (ContainerKind.INTERFACE, ContainerKind.TYPE_ALIAS, ContainerKind.CLASS)


@register_rule
class DebugStatementRule(Rule):
    name = "no-debug-statement"
    description = "Debug output added to the code"

    def evaluate(self, context: RuleContext) -> list[ReviewIssue]:
        patterns = cached_patterns(tuple(context.config.debug_patterns))
        issues = []
        for line in context.hunk.added:
            if find_marker(line.text, patterns) is None:
                continue
            n = line.new_line_number
            issues.append(self.issue(
                context, line,
                severity=Severity.WARN,
                title="Debug Statement Detected",
                explanation="Debug output should not be committed to production.",
                suggestion="Remove the debug statement.",
                confidence=100,
                auto_fix=AutoFix(
                    replacement_text="",
                    range=TextRange(start_line=n, start_char=0, end_line=n + 1, end_char=0),
                ),
            ))
        return issues


@register_rule
class UnsafeDynamicTypeRule(Rule):
    name = "no-any-type"
    description = "Added annotations that erase static typing"

    def evaluate(self, context: RuleContext) -> list[ReviewIssue]:
        unit = context.unit
        if unit is None:
            return []
        marker = DYNAMIC_TYPE_MARKERS.get(unit.language)
        if marker is None:
            return []

        issues = []
        for line in context.hunk.added:
            for match in marker.finditer(line.text):
                # A textual hit inside a comment or string is not a type
                node = context.ast.node_at(unit, line.new_line_number, match.start("marker"))
                if node is None or not context.ast.is_dynamic_type(unit, node):
                    continue
                issues.append(self.issue(
                    context, line,
                    severity=Severity.ERROR,
                    title='Unsafe "any" Type',
                    explanation=f'Using "{match.group("marker")}" circumvents static type checking.',
                    suggestion="Use a more specific type.",
                    confidence=90,
                ))
                break
        return issues


@register_rule
class RemovedAwaitRule(Rule):
    name = "no-removed-await"
    description = "Await dropped from an otherwise unchanged call"

    def evaluate(self, context: RuleContext) -> list[ReviewIssue]:
        marker = context.config.await_marker
        added = context.hunk.added
        issues = []
        for removed in context.hunk.removed:
            stripped = removed.text.strip()
            at = stripped.find(marker)
            if at < 0:
                continue
            base = (stripped[:at] + stripped[at + len(marker):]).strip()
            if not base:
                continue
            matched = next((a for a in added if a.text.strip() == base), None)
            if matched is None:
                continue

            n = matched.new_line_number
            start = matched.text.find(base)
            restored = base[:at] + marker + base[at:]
            issues.append(self.issue(
                context, matched,
                severity=Severity.ERROR,
                title="Potential Race Condition",
                explanation=(
                    f'Removing "{marker.strip()}" from an asynchronous call can lead to race '
                    "conditions or unexpected behavior if the result is needed."
                ),
                suggestion=f'Ensure the call does not need to be awaited or restore the "{marker.strip()}".',
                confidence=85,
                auto_fix=AutoFix(
                    replacement_text=matched.text[:start] + restored + matched.text[start + len(base):],
                    range=TextRange(start_line=n, start_char=0, end_line=n, end_char=len(matched.text)),
                ),
            ))
        return issues


@register_rule
class SharedPayloadRule(Rule):
    name = "payload-guard"
    description = "Changes inside externally shared types"

    def evaluate(self, context: RuleContext) -> list[ReviewIssue]:
        unit = context.unit
        if unit is None:
            return []
        pattern = re.compile(context.config.payload_name_pattern, re.IGNORECASE)

        issues = []
        for line in context.hunk.lines:
            if line.kind == LineKind.ADDED:
                target = line.new_line_number
            elif line.kind == LineKind.REMOVED:
                target = new_line_for_removed(context.hunk, line)
                if target is None:
                    continue
            else:
                continue

            node = context.ast.node_at(unit, target)
            if node is None:
                continue
            container = context.ast.enclosing_container(unit, node, PAYLOAD_CONTAINERS)
            if container is None:
                continue
            name = context.ast.container_name(unit, container)
            if not pattern.search(name):
                continue
            issues.append(self.issue(
                context, target,
                severity=Severity.WARN,
                title="Shared Payload Changed",
                explanation=f"Modification to {name} might break downstream consumers or mobile clients.",
                suggestion="Verify that this change is backward compatible.",
                confidence=70,
            ))
        return issues


def new_line_for_removed(hunk: DiffHunk, removed: DiffLine) -> int | None:
    """Map a removed line to the new-side line now occupying its position.

    Anchors on the nearest context line (preceding first, then following)
    and offsets by the old-side distance. Returns None when the hunk has no
    context line to anchor on.
    """
    index = next(i for i, line in enumerate(hunk.lines) if line is removed)
    for line in reversed(hunk.lines[:index]):
        if line.kind == LineKind.CONTEXT:
            return line.new_line_number + (removed.old_line_number - line.old_line_number)
    for line in hunk.lines[index + 1:]:
        if line.kind == LineKind.CONTEXT:
            offset = line.old_line_number - removed.old_line_number - 1
            return max(0, line.new_line_number - offset)
    return None
