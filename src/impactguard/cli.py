"""Command-line interface for ImpactGuard."""

from __future__ import annotations

import functools
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console as RichConsole
from rich.logging import RichHandler

from impactguard import __version__
from impactguard.analysis import AnalysisReport, build_reference_index, run_analysis
from impactguard.config import (
    ProjectConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from impactguard.diff.collector import collect_changes
from impactguard.diff.git import GitDiffSource
from impactguard.exceptions import ImpactGuardError
from impactguard.fixes import apply_fixes
from impactguard.graph.dependency import DependencyGraph
from impactguard.report.renderer import render_report
from impactguard.rules.engine import ReviewResult, RuleEngine
from impactguard.rules.registry import default_rules
from impactguard.syntax.context import AstContext
from impactguard.ui.console import Console

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=RichConsole(stderr=True), show_path=False)],
        force=True,
    )


def _get_project_root(path: str | None = None) -> Path:
    """Resolve the project root: explicit path, nearest .impactguard, or cwd."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root
    return find_project_root() or Path.cwd()


def _git_root(path: str | None) -> Path:
    root = _get_project_root(path)
    GitDiffSource(root).ensure_repository()
    return root


def _handle_errors(func):
    """Report ImpactGuardError as a console error with exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ImpactGuardError as e:
            console.error(str(e))
            sys.exit(1)

    return wrapper


def _review(root: Path, config: ProjectConfig) -> ReviewResult:
    changed = collect_changes(GitDiffSource(root))
    engine = RuleEngine(AstContext(root), config=config.review)
    return engine.evaluate([hunk for cf in changed for hunk in cf.hunks])


@click.group()
@click.version_option(version=__version__, prog_name="impactguard")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """ImpactGuard - review and risk analysis for uncommitted changes."""
    _setup_logging(verbose)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@_handle_errors
def init(path: str | None):
    """Initialize ImpactGuard for a repository with a default configuration."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    console.banner()
    console.info(f"Initializing ImpactGuard for: {root}")

    config = load_config(root)
    config.name = root.name
    config.root_path = str(root)
    save_config(root, config)
    console.success("Configuration saved to .impactguard/config.json")

    try:
        GitDiffSource(root).ensure_repository()
    except ImpactGuardError:
        console.warning("Not a git repository yet; analysis needs one.")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "markdown", "json"]),
    default="text",
    help="Output format.",
)
@click.option("--output", "-o", default=None, help="Write the markdown/json report to a file.")
@_handle_errors
def analyze(path: str | None, output_format: str, output: str | None):
    """Review the uncommitted changes and score their risk."""
    if output and output_format == "text":
        raise click.UsageError("--output needs --format markdown or json")

    root = _git_root(path)
    config = load_config(root)

    if output_format == "text":
        with console.console.status("Analyzing changes..."):
            report = run_analysis(root, config)
        _show_report(report)
        return

    report = run_analysis(root, config)
    if output_format == "json":
        rendered = json.dumps(report.to_dict(), indent=2)
    else:
        rendered = render_report(report)

    if output:
        Path(output).write_text(rendered + "\n", encoding="utf-8")
        console.success(f"Report written to {output}")
    else:
        click.echo(rendered)


def _show_report(report: AnalysisReport) -> None:
    if not report.changed_files:
        console.info("No uncommitted changes detected.")
        if report.risk:
            console.show_risk(report.risk)
        return

    console.show_changes(report.changed_files)
    console.show_issues(report.issues)
    console.show_diagnostics(report.diagnostics)
    if report.risk:
        console.show_risk(report.risk)
    if report.affected_files:
        console.show_affected(f"{len(report.affected_files)} dependent file(s)", report.affected_files)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--disable", "-d", multiple=True, help="Disable a rule for this run (repeatable).")
@_handle_errors
def review(path: str | None, disable: tuple[str, ...]):
    """Run the review rules over the uncommitted changes."""
    root = _git_root(path)
    config = load_config(root)

    known = {rule.name for rule in default_rules()}
    config = config.model_copy(deep=True)
    for name in disable:
        if name not in known:
            console.warning(f"Unknown rule: {name}")
        config.review.rules[name] = False

    result = _review(root, config)
    console.show_issues(result.issues)
    console.show_diagnostics(result.diagnostics)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@_handle_errors
def risk(path: str | None):
    """Score the risk of the uncommitted changes."""
    root = _git_root(path)
    report = run_analysis(root, load_config(root))
    console.show_risk(report.risk)


@main.command()
@click.argument("file")
@click.option("--path", "-p", default=None, help="Path to the project root.")
@_handle_errors
def affected(file: str, path: str | None):
    """List every file that transitively imports FILE."""
    root = _get_project_root(path)
    config = load_config(root)

    target = Path(file)
    if target.is_absolute():
        try:
            target = target.resolve().relative_to(root)
        except ValueError:
            console.error(f"{file} is outside the project root {root}")
            sys.exit(1)
    rel = target.as_posix()

    index = build_reference_index(root, config)
    if not index.has_file(rel):
        console.warning(f"'{rel}' is not part of the import index")
        return

    dependents = sorted(DependencyGraph(index).affected_by(rel))
    if not dependents:
        console.info(f"No files depend on '{rel}'")
        return
    console.show_affected(rel, dependents)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--yes", "-y", is_flag=True, help="Apply fixes without asking.")
@_handle_errors
def fix(path: str | None, yes: bool):
    """Apply the available auto-fixes to the working tree."""
    root = _git_root(path)
    result = _review(root, load_config(root))
    fixable = [issue for issue in result.issues if issue.auto_fix is not None]

    if not fixable:
        console.info("Nothing to fix.")
        return

    console.show_issues(fixable)
    if not yes and not console.confirm(f"Apply {len(fixable)} fix(es)?"):
        console.info("No changes made.")
        return

    applied = apply_fixes(root, fixable)
    console.success(f"Applied {applied} fix(es)")
    if applied < len(fixable):
        console.warning(f"Skipped {len(fixable) - applied} overlapping fix(es); run again to apply them.")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@_handle_errors
def rules(path: str | None):
    """List the review rules and whether they are enabled."""
    root = _get_project_root(path)
    config = load_config(root)
    available = default_rules()
    enabled = {rule.name for rule in available if config.review.is_enabled(rule.name)}
    console.show_rules(available, enabled)


@main.command("config")
@click.argument("action", type=click.Choice(["show", "get", "set"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
@_handle_errors
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage ImpactGuard configuration."""
    root = _get_project_root(path)
    config = load_config(root)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: impactguard config get <key>")
            sys.exit(1)
        data = config.model_dump()
        for part in key.split("."):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}", markup=False)
    elif action == "set":
        if not key or value is None:
            console.error("Usage: impactguard config set <key> <value>")
            sys.exit(1)
        # Try to parse as JSON for non-string values
        try:
            parsed_value = json.loads(value)
        except json.JSONDecodeError:
            parsed_value = value

        try:
            config = set_config_value(config, key, parsed_value)
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        save_config(root, config)
        console.success(f"Set {key} = {parsed_value}")


if __name__ == "__main__":
    main()
