"""Line budgets for markup, style and script sources.

Counts lines per file, classifies against fixed thresholds, attaches split
suggestions to files over the error threshold, and writes the size reports.
"""

import logging
from pathlib import Path

from sitekeeper.consts import SIZE_ERROR_LINES, SIZE_WARN_LINES, SOURCE_SUFFIXES
from sitekeeper.errors import ArtifactWriteError
from sitekeeper.inventory.page_inventory import ExclusionPolicy, walk_site
from sitekeeper.models.model_size import (
    FileKind,
    SizeAlert,
    SizeClass,
    SizeReport,
    SizeSummary,
)
from sitekeeper.models.model_storage import SizeAlertCounts, SizeAlertsFile, SizeReportFile
from sitekeeper.sizing.split_points import suggest_splits
from sitekeeper.storage.file_manager import FileManager

logger = logging.getLogger(__name__)

SIZE_REPORT_KEY = "file-size-report"
SIZE_ALERTS_KEY = "size-alerts"


def count_lines(text: str) -> int:
    """Newline count plus one, so an empty file has one line."""
    return text.count("\n") + 1


def classify_lines(lines: int) -> SizeClass:
    """Classify a line count against the warn and error thresholds."""
    if lines >= SIZE_ERROR_LINES:
        return SizeClass.ERROR
    if lines >= SIZE_WARN_LINES:
        return SizeClass.WARN
    return SizeClass.OK


def file_kind_for(path: Path) -> FileKind | None:
    kind = SOURCE_SUFFIXES.get(path.suffix.lower())
    return FileKind(kind) if kind else None


def measure_file(site_root: Path, relative_file: Path) -> SizeReport | None:
    """Build the size report of one source file.

    Args:
        site_root: Site root directory.
        relative_file: File path relative to the root.

    Returns:
        SizeReport, or None if the file is not a source file or cannot be read.
    """
    kind = file_kind_for(relative_file)
    if kind is None:
        return None

    file_path = site_root / relative_file
    try:
        raw = file_path.read_bytes()
        text = raw.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping unreadable source file {file_path}: {e}")
        return None

    lines = count_lines(text)
    classification = classify_lines(lines)
    report = SizeReport(
        path=relative_file.as_posix(),
        kind=kind,
        lines=lines,
        size_bytes=len(raw),
        classification=classification,
        excess=max(0, lines - SIZE_ERROR_LINES),
    )
    if classification == SizeClass.ERROR:
        report.suggestions = suggest_splits(text.split("\n"), kind)

    logger.debug(f"{report.path}: {lines} lines ({classification.value})")
    return report


def summarize(reports: list[SizeReport]) -> SizeSummary:
    """Totals and per-classification counts."""
    total_lines = sum(r.lines for r in reports)
    return SizeSummary(
        total_files=len(reports),
        total_lines=total_lines,
        average_lines=round(total_lines / len(reports), 1) if reports else 0.0,
        ok=sum(1 for r in reports if r.classification == SizeClass.OK),
        warnings=sum(1 for r in reports if r.classification == SizeClass.WARN),
        errors=sum(1 for r in reports if r.classification == SizeClass.ERROR),
    )


def build_alerts(reports: list[SizeReport]) -> list[SizeAlert]:
    """One alert per file over a threshold, errors first."""
    alerts = []
    for report in reports:
        if report.classification == SizeClass.ERROR:
            threshold = SIZE_ERROR_LINES
            message = f"File has {report.lines} lines, at or over the {threshold}-line limit"
        elif report.classification == SizeClass.WARN:
            threshold = SIZE_WARN_LINES
            message = f"File has {report.lines} lines, approaching the {SIZE_ERROR_LINES}-line limit"
        else:
            continue
        alerts.append(
            SizeAlert(
                level=report.classification,
                file=report.path,
                lines=report.lines,
                excess=report.lines - threshold,
                message=message,
            )
        )
    alerts.sort(key=lambda a: (a.level != SizeClass.ERROR, a.file))
    return alerts


class SizeGovernor:
    """Runs the line-budget check over a site and writes its reports."""

    def __init__(self, site_root: Path | str, storage: FileManager | None = None):
        self.site_root = Path(site_root)
        self.storage = storage or FileManager(self.site_root)
        self.policy = ExclusionPolicy.for_sources()

    def source_files(self) -> list[Path]:
        """All markup, style and script files under the root, excluding minified ones."""
        return walk_site(self.site_root, frozenset(SOURCE_SUFFIXES), self.policy)

    def scan(self, only: Path | None = None) -> list[SizeReport]:
        """Measure every source file, or a single one.

        Args:
            only: Optional file (absolute or relative to the root) to restrict to.

        Returns:
            SizeReports sorted by path.
        """
        if only is not None:
            relative = only.relative_to(self.site_root) if only.is_absolute() else only
            files = [relative]
        else:
            files = self.source_files()

        reports = [r for r in (measure_file(self.site_root, f) for f in files) if r is not None]
        return sorted(reports, key=lambda r: r.path)

    def write_reports(self, reports: list[SizeReport]) -> dict[str, str]:
        """Write file-size-report.json and size-alerts.json.

        A failed write does not stop the other report.

        Returns:
            Failed report paths mapped to the error, empty when both were written.
        """
        summary = summarize(reports)
        alerts = build_alerts(reports)
        counts = SizeAlertCounts(
            total=len(alerts),
            errors=sum(1 for a in alerts if a.level == SizeClass.ERROR),
            warnings=sum(1 for a in alerts if a.level == SizeClass.WARN),
        )

        failures: dict[str, str] = {}
        for key, data in [
            (SIZE_REPORT_KEY, SizeReportFile(summary=summary, files=reports)),
            (SIZE_ALERTS_KEY, SizeAlertsFile(alerts=alerts, summary=counts)),
        ]:
            try:
                self.storage.save(key, data)
            except OSError as e:
                path = self.storage.report_path(key)
                logger.error(f"Failed to write {path}: {e}")
                failures[str(path)] = str(e)
        return failures

    def run(self, only: Path | None = None) -> list[SizeReport]:
        """Scan and write reports.

        Returns:
            SizeReports sorted by path.

        Raises:
            ArtifactWriteError: If a report could not be written. The
                reports are attached as the error's result.
        """
        reports = self.scan(only)
        failures = self.write_reports(reports)
        summary = summarize(reports)
        logger.info(
            f"Size check: {summary.total_files} files, "
            f"{summary.warnings} warnings, {summary.errors} errors"
        )
        if failures:
            raise ArtifactWriteError(failures, reports)
        return reports
