"""Report aggregation: severity counts, score, grade and recommendations."""

import logging
from pathlib import Path

from sitekeeper.consts import GRADE_THRESHOLDS
from sitekeeper.errors import ArtifactWriteError
from sitekeeper.models.model_report import FreshnessResult, ReportSummary, RunReport
from sitekeeper.models.model_size import SizeClass, SizeReport
from sitekeeper.models.model_storage import ValidationReportFile
from sitekeeper.models.model_validation import Severity, ValidationFinding
from sitekeeper.reporting.html_report import render_html_report
from sitekeeper.sizing.size_governor import summarize
from sitekeeper.storage.file_manager import FileManager

logger = logging.getLogger(__name__)

VALIDATION_REPORT_KEY = "validation-report"
COMPREHENSIVE_REPORT_KEY = "comprehensive-test-report"
LINE_BUDGET_RULE_ID = "line-budget"

SIZE_SEVERITY = {
    SizeClass.OK: Severity.PASS,
    SizeClass.WARN: Severity.WARN,
    SizeClass.ERROR: Severity.FAIL,
}

RECOMMENDATIONS = {
    "title-present": "Give every page exactly one non-empty <title> in its head.",
    "title-length": "Keep titles between 30 and 60 characters so they are not truncated in results.",
    "meta-description-present": "Add a meta description to every page.",
    "meta-description-length": "Keep meta descriptions between 120 and 160 characters.",
    "viewport-present": "Add <meta name=\"viewport\"> so pages render correctly on mobile.",
    "canonical-present": "Declare a canonical link on every page to avoid duplicate-content issues.",
    "single-h1": "Use exactly one h1 per page.",
    "heading-hierarchy": "Do not skip heading levels; go from h1 to h2 to h3.",
    "structured-data-present": "Add a JSON-LD block describing each page.",
    "structured-data-well-formed": "Fix JSON-LD syntax errors and give every record @context and @type.",
    "structured-data-required-fields": "Fill in the required and recommended schema.org fields.",
    "image-alt-text": "Add descriptive alt text to every image.",
    "open-graph-core": "Declare og:title, og:description, og:type and og:url for link previews.",
    "internal-link-integrity": "Fix or remove internal links that point to missing files or ids.",
    "file-size-page": "Reduce page weight below 100 KiB by moving inline assets out.",
    "css-size": "Split or trim stylesheets larger than 50 KiB.",
    "js-size": "Split or trim scripts larger than 100 KiB.",
    "escaped-markup-artifact": "Remove escaped tag fragments and duplicate script includes left by edits.",
    "sitemap-entry": "Correct the per-kind priority and change frequency in sitemap-config.json.",
    LINE_BUDGET_RULE_ID: "Split source files over 500 lines using the suggested split points.",
}


def grade_for(score: float) -> str:
    """Letter grade for a pass ratio."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def summarize_findings(findings: list[ValidationFinding]) -> ReportSummary:
    """Count findings per severity and derive score and grade.

    An empty set of findings scores 0.0.
    """
    passed = sum(1 for f in findings if f.severity == Severity.PASS)
    warnings = sum(1 for f in findings if f.severity == Severity.WARN)
    failed = sum(1 for f in findings if f.severity == Severity.FAIL)
    total = len(findings)
    score = passed / total if total else 0.0
    return ReportSummary(
        passed=passed,
        warnings=warnings,
        failed=failed,
        total=total,
        score=round(score, 4),
        grade=grade_for(score),
    )


def size_findings(reports: list[SizeReport]) -> list[ValidationFinding]:
    """One line-budget finding per source file."""
    findings = []
    for report in reports:
        if report.classification == SizeClass.OK:
            message = f"{report.lines} lines, within budget."
        elif report.classification == SizeClass.WARN:
            message = f"{report.lines} lines, approaching the limit."
        else:
            message = f"{report.lines} lines, {report.excess} over the limit."
        findings.append(
            ValidationFinding(
                rule_id=LINE_BUDGET_RULE_ID,
                severity=SIZE_SEVERITY[report.classification],
                subject=report.path,
                message=message,
                detail={"lines": report.lines, "suggestions": len(report.suggestions)},
            )
        )
    return findings


def recommendations_for(findings: list[ValidationFinding]) -> list[str]:
    """One recommendation per rule with a non-pass finding, most failures first."""
    counts: dict[str, tuple[int, int]] = {}
    for f in findings:
        if f.severity == Severity.PASS:
            continue
        fails, warns = counts.get(f.rule_id, (0, 0))
        if f.severity == Severity.FAIL:
            fails += 1
        else:
            warns += 1
        counts[f.rule_id] = (fails, warns)

    ordered = sorted(counts, key=lambda rule_id: (-counts[rule_id][0], -counts[rule_id][1], rule_id))
    return [RECOMMENDATIONS.get(rule_id, f"Review findings of rule {rule_id}.") for rule_id in ordered]


class ReportAggregator:
    """Builds the graded run report and writes it as JSON and HTML."""

    def __init__(self, site_root: Path | str, storage: FileManager | None = None):
        self.site_root = Path(site_root)
        self.storage = storage or FileManager(self.site_root)

    def build_report(
        self,
        findings: list[ValidationFinding],
        size_reports: list[SizeReport] | None = None,
        freshness: FreshnessResult | None = None,
    ) -> RunReport:
        """Combine component outputs into one report.

        Args:
            findings: Validator and sitemap findings.
            size_reports: Size governor reports, turned into line-budget findings.
            freshness: Freshness result, contributing its change count.

        Returns:
            RunReport with summary, findings and recommendations.
        """
        all_findings = list(findings)
        if size_reports is not None:
            all_findings.extend(size_findings(size_reports))

        return RunReport(
            site_root=str(self.site_root),
            summary=summarize_findings(all_findings),
            findings=all_findings,
            size_summary=summarize(size_reports) if size_reports is not None else None,
            change_count=freshness.change_count if freshness else 0,
            recommendations=recommendations_for(all_findings),
        )

    def write_validation_report(self, findings: list[ValidationFinding]) -> Path:
        """Write build-reports/validation-report.json.

        Raises:
            ArtifactWriteError: If the report could not be written.
        """
        report = ValidationReportFile(summary=summarize_findings(findings), findings=findings)
        try:
            return self.storage.save(VALIDATION_REPORT_KEY, report)
        except OSError as e:
            path = self.storage.report_path(VALIDATION_REPORT_KEY)
            logger.error(f"Failed to write {path}: {e}")
            raise ArtifactWriteError({str(path): str(e)}) from e

    def write(self, report: RunReport) -> tuple[Path, Path]:
        """Write comprehensive-test-report.json and .html.

        The HTML file is written even when the JSON file fails, and the other
        way round.

        Returns:
            Tuple of (JSON path, HTML path).

        Raises:
            ArtifactWriteError: If either file could not be written.
        """
        json_path = self.storage.report_path(COMPREHENSIVE_REPORT_KEY)
        html_path = json_path.with_suffix(".html")
        failures: dict[str, str] = {}

        try:
            self.storage.save(COMPREHENSIVE_REPORT_KEY, report)
        except OSError as e:
            logger.error(f"Failed to write {json_path}: {e}")
            failures[str(json_path)] = str(e)
        try:
            self.storage.save_text(html_path.name, render_html_report(report))
        except OSError as e:
            logger.error(f"Failed to write {html_path}: {e}")
            failures[str(html_path)] = str(e)

        summary = report.summary
        logger.info(
            f"Report: {summary.passed} passed, {summary.warnings} warnings, "
            f"{summary.failed} failed, grade {summary.grade}"
        )
        if failures:
            raise ArtifactWriteError(failures)
        return json_path, html_path
