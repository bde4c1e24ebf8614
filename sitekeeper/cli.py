"""CLI interface for sitekeeper."""

import json
import logging
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from sitekeeper.cancellation import CancellationToken
from sitekeeper.errors import ArtifactWriteError, RunCancelled, SitekeeperError
from sitekeeper.models.model_report import FreshnessResult, PipelineResult
from sitekeeper.models.model_size import SizeClass, SizeReport
from sitekeeper.models.model_validation import Severity, ValidationFinding
from sitekeeper.pipeline import (
    run_build,
    run_check,
    run_freshness,
    run_schema,
    run_sitemaps,
    run_split,
    run_validate,
)

app = typer.Typer(
    name="sitekeeper",
    help="sitekeeper - Maintain a static documentation site: sizes, sitemaps, validation, freshness",
)

console = Console()

CANCELLED_EXIT_CODE = 130

ROOT_OPTION = typer.Option(Path("."), "--root", "-r", help="Site root directory")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


def _configure_logging(verbose: bool, level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _start(verbose: bool) -> CancellationToken:
    """Configure logging and route interrupts to a fresh cancellation token."""
    _configure_logging(verbose)
    token = CancellationToken()
    token.install_signal_handlers()
    return token


def _severity_color(severity: Severity) -> str:
    """Get color for severity display."""
    if severity == Severity.PASS:
        return "green"
    elif severity == Severity.WARN:
        return "yellow"
    else:
        return "red"


def _size_color(classification: SizeClass) -> str:
    if classification == SizeClass.OK:
        return "green"
    elif classification == SizeClass.WARN:
        return "yellow"
    else:
        return "red"


def _truncate(text: str, max_len: int = 70) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _print_size_reports(reports: list[SizeReport]) -> None:
    flagged = [r for r in reports if r.classification != SizeClass.OK]
    console.print(
        f"Checked {len(reports)} files: "
        f"[yellow]{sum(1 for r in flagged if r.classification == SizeClass.WARN)} warnings[/yellow], "
        f"[red]{sum(1 for r in flagged if r.classification == SizeClass.ERROR)} errors[/red]"
    )
    if not flagged:
        return

    table = Table(title="Files Over Line Budget")
    table.add_column("File", style="cyan")
    table.add_column("Lines", justify="right")
    table.add_column("Level", justify="center")
    table.add_column("Suggested Split Points")

    for report in flagged:
        color = _size_color(report.classification)
        suggestions = ", ".join(str(s.line) for s in report.suggestions) or "-"
        table.add_row(
            report.path,
            str(report.lines),
            f"[{color}]{report.classification.value}[/{color}]",
            suggestions,
        )
    console.print(table)


def _print_findings(findings: list[ValidationFinding]) -> None:
    passed = sum(1 for f in findings if f.severity == Severity.PASS)
    warnings = sum(1 for f in findings if f.severity == Severity.WARN)
    failed = sum(1 for f in findings if f.severity == Severity.FAIL)
    console.print(
        f"Findings: [green]{passed} passed[/green], "
        f"[yellow]{warnings} warnings[/yellow], [red]{failed} failed[/red]"
    )

    problems = [f for f in findings if f.severity != Severity.PASS]
    if not problems:
        return

    table = Table(title="Validation Problems")
    table.add_column("Page", style="cyan")
    table.add_column("Rule")
    table.add_column("Severity", justify="center")
    table.add_column("Message")

    # Failures first
    problems.sort(key=lambda f: (f.severity != Severity.FAIL, f.subject, f.rule_id))
    for finding in problems:
        color = _severity_color(finding.severity)
        table.add_row(
            finding.subject,
            finding.rule_id,
            f"[{color}]{finding.severity.value}[/{color}]",
            _truncate(finding.message),
        )
    console.print(table)


def _print_freshness(result: FreshnessResult) -> None:
    console.print(
        f"Freshness update for [bold]{result.run_date.isoformat()}[/bold] "
        f"(rotation {result.rotation_index}): {result.change_count} changes"
    )
    if not result.changes:
        return

    table = Table(title="Freshness Changes")
    table.add_column("Target", style="cyan")
    table.add_column("Region")
    table.add_column("Description")
    for change in result.changes:
        table.add_row(_truncate(change.target, 50), change.region, _truncate(change.description))
    console.print(table)


def _print_freshness_run(result: PipelineResult) -> None:
    if result.freshness is not None:
        _print_freshness(result.freshness)
    if result.report is not None:
        console.print()
        _print_build(result)


def _print_build(result: PipelineResult) -> None:
    _print_size_reports(result.size_reports)
    if result.discovery is not None:
        console.print(f"Discovery artifacts written: {', '.join(result.discovery.written)}")
    _print_findings(result.findings)

    if result.report is not None:
        summary = result.report.summary
        console.print(
            f"\n[bold]Grade {summary.grade}[/bold] "
            f"(score {summary.score:.1%}, {summary.total} checks)"
        )
        for recommendation in result.report.recommendations:
            console.print(f"  - {recommendation}")


def _finish(result: PipelineResult) -> None:
    """Exit with status 1 when the run found size errors or failing checks."""
    if result.exit_code:
        console.print("\n[red]Run finished with errors.[/red]")
        raise typer.Exit(result.exit_code)
    console.print("\n[bold green]Run complete![/bold green]")


def _write_failed(error: ArtifactWriteError, show: Callable[[PipelineResult], None]) -> NoReturn:
    """Show what the run produced, list the unwritten files and exit with status 1."""
    if isinstance(error.result, PipelineResult):
        show(error.result)
    console.print(f"\n[red]Error:[/red] Failed to write {len(error.failures)} file(s):")
    for path, reason in error.failures.items():
        console.print(f"  [red]{path}[/red]: {reason}")
    raise typer.Exit(1)


@app.command()
def build(
    path: Path = typer.Argument(None, help="Restrict size check and validation to one file"),
    root: Path = ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Run size check, sitemap generation, validation and reporting."""
    token = _start(verbose)
    console.print(f"\n[bold]Building {root}...[/bold]\n")

    try:
        result = run_build(root, only=path, token=token)
    except RunCancelled as e:
        console.print(f"[yellow]Cancelled:[/yellow] {e}")
        raise typer.Exit(CANCELLED_EXIT_CODE)
    except ArtifactWriteError as e:
        _write_failed(e, _print_build)
    except (SitekeeperError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _print_build(result)
    _finish(result)


@app.command()
def check(
    path: Path = typer.Argument(None, help="Check a single file"),
    root: Path = ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Check line budgets of markup, style and script files."""
    _start(verbose)

    try:
        result = run_check(root, only=path)
    except ArtifactWriteError as e:
        _write_failed(e, lambda r: _print_size_reports(r.size_reports))
    except (SitekeeperError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _print_size_reports(result.size_reports)
    _finish(result)


@app.command()
def validate(
    path: Path = typer.Argument(None, help="Validate a single page"),
    root: Path = ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Validate pages and write validation-report.json."""
    token = _start(verbose)

    try:
        result = run_validate(root, only=path, token=token)
    except RunCancelled as e:
        console.print(f"[yellow]Cancelled:[/yellow] {e}")
        raise typer.Exit(CANCELLED_EXIT_CODE)
    except ArtifactWriteError as e:
        _write_failed(e, lambda r: _print_findings(r.findings))
    except (SitekeeperError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _print_findings(result.findings)
    _finish(result)


@app.command()
def sitemaps(
    root: Path = ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Regenerate robots.txt and the sitemaps."""
    token = _start(verbose)

    try:
        discovery = run_sitemaps(root, token=token)
    except RunCancelled as e:
        console.print(f"[yellow]Cancelled:[/yellow] {e}")
        raise typer.Exit(CANCELLED_EXIT_CODE)
    except SitekeeperError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Sitemap Entries")
    table.add_column("URL", style="cyan")
    table.add_column("Last Modified")
    table.add_column("Change Freq")
    table.add_column("Priority", justify="right", style="magenta")
    for entry in discovery.entries:
        table.add_row(entry.loc, entry.lastmod, entry.changefreq, f"{entry.priority:.1f}")
    console.print(table)

    console.print(f"\n[bold green]Wrote:[/bold green] {', '.join(discovery.written)}")


@app.command()
def freshness(
    run_date: str = typer.Option(None, "--date", help="Date to refresh for (YYYY-MM-DD, default today)"),
    then_build: bool = typer.Option(False, "--build", help="Run the complete build afterwards"),
    root: Path = ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Refresh date-bound content: banners, insights, dates, cache version, robots."""
    token = _start(verbose)

    day = None
    if run_date:
        try:
            day = date.fromisoformat(run_date)
        except ValueError:
            console.print(f"[red]Error:[/red] Invalid date '{run_date}'. Use YYYY-MM-DD")
            raise typer.Exit(1)

    try:
        result = run_freshness(root, day=day, build=then_build, token=token)
    except RunCancelled as e:
        console.print(f"[yellow]Cancelled:[/yellow] {e}")
        raise typer.Exit(CANCELLED_EXIT_CODE)
    except ArtifactWriteError as e:
        _write_failed(e, _print_freshness_run)
    except SitekeeperError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _print_freshness_run(result)
    _finish(result)


@app.command()
def split(
    path: Path = typer.Argument(..., help="File to split"),
    apply: bool = typer.Option(False, "--apply", help="Write the parts (a timestamped backup is kept)"),
    root: Path = ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Suggest split points for an oversized file, or apply them."""
    _configure_logging(verbose, logging.WARNING)

    try:
        report, result = run_split(root, path, apply=apply)
    except (SitekeeperError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    color = _size_color(report.classification)
    console.print(
        f"{report.path}: {report.lines} lines "
        f"([{color}]{report.classification.value}[/{color}])"
    )

    if report.suggestions:
        table = Table(title="Suggested Split Points")
        table.add_column("Line", justify="right", style="magenta")
        table.add_column("Anchor")
        table.add_column("Description")
        for suggestion in report.suggestions:
            table.add_row(str(suggestion.line), suggestion.tag.value, suggestion.description)
        console.print(table)
    else:
        console.print("[green]No split needed.[/green]")

    if result is not None:
        console.print(f"\nBackup: {result.backup}")
        for part in result.parts:
            console.print(f"  wrote {part}")


@app.command()
def schema(
    path: Path = typer.Argument(..., help="Page to build structured data for"),
    root: Path = ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print the recommended JSON-LD records for a page."""
    _configure_logging(verbose, logging.WARNING)

    try:
        records = run_schema(root, path)
    except (SitekeeperError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print_json(json.dumps(records, ensure_ascii=False))


if __name__ == "__main__":
    app()
