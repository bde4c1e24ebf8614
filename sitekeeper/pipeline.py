"""Pipeline orchestration for the maintenance commands.

The build pipeline runs four steps in a fixed order:
1. Size check (line budgets of markup, style and script files)
2. Discovery artifacts (robots.txt and sitemaps)
3. Page validation
4. Report aggregation (JSON and HTML reports)

The freshness pipeline rewrites date-bound regions of the site and can be
followed by a build.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any

from sitekeeper.cancellation import CancellationToken
from sitekeeper.config import load_site_config
from sitekeeper.discovery.generator import DiscoveryArtifactGenerator
from sitekeeper.discovery.structured_data import build_structured_records
from sitekeeper.errors import ArtifactWriteError
from sitekeeper.freshness.updater import FreshnessUpdater
from sitekeeper.inventory.classification import page_path_for
from sitekeeper.inventory.page_inventory import build_inventory
from sitekeeper.models.common import _utc_now, day_timestamp
from sitekeeper.models.model_config import SiteConfig
from sitekeeper.models.model_page import Inventory, Page
from sitekeeper.models.model_report import FreshnessResult, PipelineResult
from sitekeeper.models.model_size import SizeClass, SizeReport, SplitResult
from sitekeeper.models.model_sitemap import DiscoveryResult
from sitekeeper.models.model_validation import ValidationFinding
from sitekeeper.reporting.aggregator import ReportAggregator
from sitekeeper.sizing.file_splitter import split_file
from sitekeeper.sizing.size_governor import SizeGovernor, measure_file
from sitekeeper.storage.file_manager import FileManager
from sitekeeper.validators.page_document import PageDocument
from sitekeeper.validators.registry import ValidatorRegistry

logger = logging.getLogger(__name__)


def _now_timestamp() -> str:
    return _utc_now().replace(microsecond=0).isoformat()


def resolve_in_site(site_root: Path, target: Path) -> Path:
    """Resolve a user-supplied file path to a path relative to the site root.

    Relative paths are tried against the site root first, then against the
    working directory.

    Args:
        site_root: Site root directory.
        target: File path given on the command line.

    Returns:
        Path relative to the site root.

    Raises:
        ValueError: If the file does not exist or lies outside the site root.
    """
    root = site_root.resolve()
    candidates = [target] if target.is_absolute() else [site_root / target, Path.cwd() / target]

    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            return candidate.resolve().relative_to(root)
        except ValueError:
            raise ValueError(f"{target} is outside the site root {site_root}") from None

    raise ValueError(f"File not found: {target}")


def _page_for(inventory: Inventory, relative: Path) -> Page:
    page = inventory.find(page_path_for(relative.as_posix()))
    if page is None:
        raise ValueError(f"{relative} is not an HTML page of the site")
    return page


def run_check(site_root: Path, only: Path | None = None) -> PipelineResult:
    """Run the size governor and write its reports.

    Args:
        site_root: Site root directory.
        only: Optional file to restrict the check to.

    Returns:
        PipelineResult carrying the size reports.
    """
    relative = resolve_in_site(site_root, only) if only is not None else None
    try:
        reports = SizeGovernor(site_root).run(relative)
    except ArtifactWriteError as e:
        raise ArtifactWriteError(e.failures, PipelineResult(size_reports=e.result)) from e
    return PipelineResult(size_reports=reports)


def run_sitemaps(
    site_root: Path,
    config: SiteConfig | None = None,
    today: date | None = None,
    generated_at: str | None = None,
    token: CancellationToken | None = None,
) -> DiscoveryResult:
    """Regenerate robots.txt and the sitemaps from a fresh inventory."""
    config = config or load_site_config(site_root)
    today = today or date.today()
    inventory = build_inventory(site_root)
    generator = DiscoveryArtifactGenerator(site_root, config)
    return generator.generate(inventory, today, generated_at or _now_timestamp(), token)


def run_validate(
    site_root: Path,
    only: Path | None = None,
    token: CancellationToken | None = None,
) -> PipelineResult:
    """Validate every page, or one page, and write validation-report.json.

    Args:
        site_root: Site root directory.
        only: Optional HTML file to restrict validation to.
        token: Optional cancellation token.

    Returns:
        PipelineResult carrying the findings.

    Raises:
        ArtifactWriteError: If the report could not be written. The findings
            are attached as the error's result.
    """
    inventory = build_inventory(site_root)
    pages = [_page_for(inventory, resolve_in_site(site_root, only))] if only is not None else None

    findings = ValidatorRegistry().validate_inventory(inventory, pages, token)
    result = PipelineResult(findings=findings)
    try:
        ReportAggregator(site_root).write_validation_report(findings)
    except ArtifactWriteError as e:
        raise ArtifactWriteError(e.failures, result) from e
    return result


def run_build(
    site_root: Path,
    only: Path | None = None,
    config: SiteConfig | None = None,
    today: date | None = None,
    generated_at: str | None = None,
    freshness: FreshnessResult | None = None,
    token: CancellationToken | None = None,
) -> PipelineResult:
    """Run the complete build: size check, discovery, validation, report.

    Discovery always covers the whole site. The size check and validation
    honor ``only``.

    Args:
        site_root: Site root directory.
        only: Optional file to restrict the size check and validation to.
        config: Site configuration (loaded from the root if None).
        today: Run date (defaults to today).
        generated_at: Robots header timestamp (defaults to now).
        freshness: Result of a preceding freshness pass, for the change count.
        token: Optional cancellation token.

    Returns:
        PipelineResult with every component's output and the run report.

    Raises:
        ArtifactWriteError: If any artifact or report could not be written,
            raised after every other step has run. The PipelineResult is
            attached as the error's result.
        RunCancelled: If cancellation was requested.
    """
    token = token or CancellationToken()
    config = config or load_site_config(site_root)
    today = today or date.today()
    storage = FileManager(site_root)
    relative = resolve_in_site(site_root, only) if only is not None else None
    failures: dict[str, str] = {}
    logger.info(f"Starting build for {site_root}")

    # Step 1: Size check
    logger.info("Step 1/4: Checking file sizes...")
    token.raise_if_cancelled("size check")
    governor = SizeGovernor(site_root, storage)
    size_reports = governor.scan(relative)
    failures.update(governor.write_reports(size_reports))
    errors = sum(1 for r in size_reports if r.classification == SizeClass.ERROR)
    if errors:
        logger.warning(f"{errors} file(s) exceed the line budget")

    # Step 2: Discovery artifacts
    logger.info("Step 2/4: Generating robots.txt and sitemaps...")
    inventory = build_inventory(site_root)
    try:
        discovery = DiscoveryArtifactGenerator(site_root, config).generate(
            inventory, today, generated_at or _now_timestamp(), token
        )
    except ArtifactWriteError as e:
        failures.update(e.failures)
        discovery = e.result
    logger.info(f"Wrote {len(discovery.written)} discovery artifacts")

    # Step 3: Validation
    logger.info("Step 3/4: Validating pages...")
    pages = None
    if relative is not None:
        pages = [_page_for(inventory, relative)] if relative.suffix == ".html" else []
    validation = ValidatorRegistry().validate_inventory(inventory, pages, token)
    findings: list[ValidationFinding] = [*validation, *discovery.findings]

    # Step 4: Reports
    logger.info("Step 4/4: Writing reports...")
    token.raise_if_cancelled("report aggregation")
    aggregator = ReportAggregator(site_root, storage)
    report = aggregator.build_report(findings, size_reports, freshness)
    try:
        aggregator.write_validation_report(findings)
    except ArtifactWriteError as e:
        failures.update(e.failures)
    try:
        aggregator.write(report)
    except ArtifactWriteError as e:
        failures.update(e.failures)

    result = PipelineResult(
        size_reports=size_reports,
        findings=findings,
        discovery=discovery,
        freshness=freshness,
        report=report,
    )
    if failures:
        logger.error(f"Build finished with {len(failures)} unwritten artifact(s)")
        raise ArtifactWriteError(failures, result)

    logger.info(f"Build complete: grade {report.summary.grade} ({report.summary.score:.1%})")
    return result


def run_freshness(
    site_root: Path,
    day: date | None = None,
    build: bool = False,
    config: SiteConfig | None = None,
    token: CancellationToken | None = None,
) -> PipelineResult:
    """Run the daily freshness pass, optionally followed by a build.

    The build reuses the day's timestamp for the robots header so that a
    second run on the same date leaves every file unchanged.

    Args:
        site_root: Site root directory.
        day: Calendar date to refresh for (defaults to today).
        build: Run the complete build afterwards.
        config: Site configuration (loaded from the root if None).
        token: Optional cancellation token.

    Returns:
        PipelineResult with the freshness result and, after a build, the
        build outputs.

    Raises:
        ArtifactWriteError: If any file could not be written, raised after the
            build (when requested) has run. The PipelineResult is attached.
        RunCancelled: If cancellation was requested.
    """
    token = token or CancellationToken()
    config = config or load_site_config(site_root)
    day = day or date.today()

    inventory = build_inventory(site_root)
    failures: dict[str, str] = {}
    try:
        freshness = FreshnessUpdater(site_root, config).run(inventory, day, token)
    except ArtifactWriteError as e:
        failures.update(e.failures)
        freshness = e.result
    logger.info(f"Freshness pass recorded {freshness.change_count} change(s)")

    if not build:
        result = PipelineResult(freshness=freshness)
    else:
        try:
            result = run_build(
                site_root,
                config=config,
                today=day,
                generated_at=day_timestamp(day),
                freshness=freshness,
                token=token,
            )
        except ArtifactWriteError as e:
            failures.update(e.failures)
            result = e.result

    if failures:
        raise ArtifactWriteError(failures, result)
    return result


def run_split(site_root: Path, target: Path, apply: bool = False) -> tuple[SizeReport, SplitResult | None]:
    """Measure a file and, with ``apply``, split it at the suggested points.

    Args:
        site_root: Site root directory.
        target: File to split.
        apply: Write the backup and part files; otherwise only suggest.

    Returns:
        Tuple of (size report, split result or None when not applied).

    Raises:
        ValueError: If the file is missing, not a source file, or within budget
            when ``apply`` is set.
    """
    relative = resolve_in_site(site_root, target)
    report = measure_file(site_root, relative)
    if report is None:
        raise ValueError(f"{relative} is not a measurable markup, style or script file")
    if not apply:
        return report, None
    return report, split_file(site_root, report)


def run_schema(site_root: Path, target: Path, config: SiteConfig | None = None) -> list[dict[str, Any]]:
    """Build the structured-data records recommended for one page.

    Title and description are taken from the page's own markup.
    """
    config = config or load_site_config(site_root)
    inventory = build_inventory(site_root)
    page = _page_for(inventory, resolve_in_site(site_root, target))

    document = PageDocument.load(page, site_root)
    soup = document.soup
    title = soup.title.get_text(strip=True) if soup.title else ""
    description = ""
    for meta in document.meta_by_name("description"):
        description = (meta.get("content") or "").strip()
        if description:
            break

    return build_structured_records(page, config, title=title, description=description)
