"""Rich-powered console output for ImpactGuard."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from impactguard import __version__
from impactguard.diff.collector import ChangedFile
from impactguard.risk.models import RiskAnalysis, RiskLevel
from impactguard.rules.base import Rule
from impactguard.rules.models import ReviewIssue, RuleDiagnostic, Severity

LEVEL_COLORS = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
}

SEVERITY_STYLES = {
    Severity.INFO: "blue",
    Severity.WARN: "yellow",
    Severity.ERROR: "bold red",
}


class Console:
    """Terminal output for ImpactGuard using Rich."""

    def __init__(self, console: RichConsole | None = None) -> None:
        self.console = console or RichConsole()

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]ImpactGuard[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Review and risk analysis for uncommitted changes[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_changes(self, changed: Sequence[ChangedFile]) -> None:
        table = Table(title="Changed Files", border_style="cyan")
        table.add_column("File", style="cyan")
        table.add_column("Status")
        table.add_column("+", justify="right", style="green")
        table.add_column("-", justify="right", style="red")
        for cf in changed:
            table.add_row(escape(cf.path), cf.status.value, str(cf.added_lines), str(cf.deleted_lines))
        self.console.print(table)

    def show_risk(self, analysis: RiskAnalysis) -> None:
        """Display the score panel followed by the ranked risks."""
        color = LEVEL_COLORS[analysis.level]
        self.console.print(
            Panel(
                f"[bold]Score:[/bold] [{color}]{analysis.score}[/{color}]\n"
                f"[bold]Level:[/bold] [{color}]{analysis.level.value}[/{color}]",
                title="[bold]Risk Analysis[/bold]",
                border_style=color,
            )
        )
        for item in analysis.risks:
            location = ""
            if item.file:
                location = f" [dim]{escape(item.file)}" + (f":{item.line}" if item.line else "") + "[/dim]"
            fixable = " [green](fixable)[/green]" if item.can_fix else ""
            self.console.print(f"  [bold]{item.priority:>3}[/bold] {escape(item.reason)}{location}{fixable}")
            self.console.print(f"      [dim]{escape(item.suggestion)}[/dim]")

    def show_issues(self, issues: Sequence[ReviewIssue]) -> None:
        if not issues:
            self.success("No review findings.")
            return
        table = Table(title="Review Findings", border_style="cyan")
        table.add_column("Severity")
        table.add_column("Rule", style="bold", no_wrap=True)
        table.add_column("Location", style="cyan", no_wrap=True)
        table.add_column("Finding")
        table.add_column("Fix", justify="center")
        for issue in issues:
            style = SEVERITY_STYLES[issue.severity]
            table.add_row(
                f"[{style}]{issue.severity.value}[/{style}]",
                issue.rule,
                escape(f"{issue.file}:{issue.line_start}"),
                f"{escape(issue.title)}\n[dim]{escape(issue.suggestion)}[/dim]",
                "✓" if issue.auto_fix else "",
            )
        self.console.print(table)

    def show_diagnostics(self, diagnostics: Sequence[RuleDiagnostic]) -> None:
        for diag in diagnostics:
            who = f"{diag.rule} " if diag.rule else ""
            self.warning(escape(f"{who}skipped {diag.file}: {diag.message}"))

    def show_affected(self, root_label: str, files: Sequence[str]) -> None:
        """Display dependent files as a tree grouped by directory."""
        tree = Tree(f"[bold cyan]{escape(root_label)}[/bold cyan]")
        dirs: dict[str, Tree] = {}
        for path in sorted(files):
            parent, _, name = path.rpartition("/")
            if parent:
                if parent not in dirs:
                    dirs[parent] = tree.add(f"[bold]{escape(parent)}/[/bold]")
                dirs[parent].add(f"[cyan]{escape(name)}[/cyan]")
            else:
                tree.add(f"[cyan]{escape(name)}[/cyan]")
        self.console.print(tree)

    def show_rules(self, rules: Sequence[Rule], enabled: set[str]) -> None:
        table = Table(title="Review Rules", border_style="cyan")
        table.add_column("Rule", style="bold", no_wrap=True)
        table.add_column("Enabled", justify="center")
        table.add_column("Description")
        for rule in rules:
            mark = "[green]yes[/green]" if rule.name in enabled else "[red]no[/red]"
            table.add_row(rule.name, mark, rule.description)
        self.console.print(table)

    def confirm(self, message: str) -> bool:
        """Ask for user confirmation."""
        response = self.console.input(f"\n{message} \\[y/N] ")
        return response.lower().strip() in ("y", "yes")
