"""Markdown renderer for analysis reports.

Generates GitHub-flavored markdown with:
  - Risk score badge
  - Ranked risks
  - Review findings table
  - Affected file tree
"""

from __future__ import annotations

from impactguard.analysis import AnalysisReport
from impactguard.risk.models import RiskLevel

MAX_AFFECTED_LISTED = 50


def render_report(report: AnalysisReport) -> str:
    """Render a full analysis report as a markdown document."""
    sections: list[str] = []

    sections.append("## ImpactGuard Analysis")
    sections.append("")

    if not report.changed_files:
        sections.append("> No uncommitted changes detected.")
        sections.append("")
        sections.append(_footer())
        return "\n".join(sections)

    risk = report.risk
    emoji, label = _risk_badge(risk.level if risk else RiskLevel.LOW)
    score = risk.score if risk else 0
    sections.append(f"| {emoji} Risk | Files Changed | Files Affected | Issues |")
    sections.append("|:---:|:---:|:---:|:---:|")
    sections.append(
        f"| **{label}** ({score}) | "
        f"{len(report.changed_files)} | "
        f"{len(report.affected_files)} | "
        f"{len(report.issues)} |"
    )
    sections.append("")

    sections.append("### Changed Files")
    sections.append("")
    sections.append("| File | Status | + | - |")
    sections.append("|:-----|:------:|--:|--:|")
    for cf in report.changed_files:
        sections.append(
            f"| `{cf.path}` | {cf.status.value} | {cf.added_lines} | {cf.deleted_lines} |"
        )
    sections.append("")

    if risk and risk.risks:
        sections.append("### Risks")
        sections.append("")
        for item in risk.risks:
            location = ""
            if item.file:
                location = f" (`{item.file}`" + (f":{item.line}" if item.line else "") + ")"
            sections.append(f"- **[{item.priority}]** {item.reason}{location}")
            sections.append(f"  - {item.suggestion}")
        sections.append("")

    if report.issues:
        sections.append("### Review Findings")
        sections.append("")
        sections.append("| Severity | Rule | Location | Finding | Fix |")
        sections.append("|:--------:|:-----|:---------|:--------|:---:|")
        for issue in report.issues:
            sections.append(
                f"| {issue.severity.value} | `{issue.rule}` | "
                f"`{issue.file}:{issue.line_start}` | "
                f"{issue.title}: {issue.explanation} | "
                f"{'yes' if issue.auto_fix else ''} |"
            )
        sections.append("")

    if report.affected_files:
        sections.append("<details>")
        sections.append(
            f"<summary>{len(report.affected_files)} files depend on this change</summary>"
        )
        sections.append("")
        sections.append("```")
        sections.extend(_render_file_tree(report.affected_files[:MAX_AFFECTED_LISTED]))
        if len(report.affected_files) > MAX_AFFECTED_LISTED:
            sections.append(f"... and {len(report.affected_files) - MAX_AFFECTED_LISTED} more")
        sections.append("```")
        sections.append("")
        sections.append("</details>")
        sections.append("")

    if report.diagnostics:
        sections.append("### Diagnostics")
        sections.append("")
        for diag in report.diagnostics:
            prefix = f"`{diag.rule}` " if diag.rule else ""
            sections.append(f"- {prefix}on `{diag.file}`: {diag.message}")
        sections.append("")

    sections.append(_footer())
    return "\n".join(sections)


def _risk_badge(level: RiskLevel) -> tuple[str, str]:
    """Return (emoji, label) for a risk level."""
    if level == RiskLevel.HIGH:
        return ("\U0001f534", "HIGH")
    if level == RiskLevel.MEDIUM:
        return ("\U0001f7e0", "MEDIUM")
    return ("\U0001f7e2", "LOW")


def _render_file_tree(files: list[str]) -> list[str]:
    """Render a list of file paths as an ASCII tree."""
    if not files:
        return []

    tree: dict = {}
    for fp in sorted(files):
        node = tree
        for part in fp.split("/"):
            node = node.setdefault(part, {})

    lines: list[str] = []
    _render_tree_recursive(tree, "", lines, is_root=True)
    return lines


def _render_tree_recursive(
    node: dict, prefix: str, lines: list[str], is_root: bool = False
) -> None:
    items = list(node.items())
    for i, (name, children) in enumerate(items):
        is_last = i == len(items) - 1
        if is_root:
            connector = ""
            next_prefix = ""
        else:
            connector = "└── " if is_last else "├── "
            next_prefix = prefix + ("    " if is_last else "│   ")

        if children:
            lines.append(f"{prefix}{connector}{name}/")
            _render_tree_recursive(children, next_prefix, lines)
        else:
            lines.append(f"{prefix}{connector}{name}")


def _footer() -> str:
    return "---\n*Generated by ImpactGuard: pre-commit review and risk analysis*"
