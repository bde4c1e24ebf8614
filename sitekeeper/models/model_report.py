from datetime import date, datetime

from pydantic import BaseModel, Field

from sitekeeper.models.common import _utc_now
from sitekeeper.models.model_sitemap import DiscoveryResult
from sitekeeper.models.model_size import SizeClass, SizeReport, SizeSummary
from sitekeeper.models.model_validation import Severity, ValidationFinding


class ReportSummary(BaseModel):
    """Severity counts with derived score and grade."""

    passed: int = 0
    warnings: int = 0
    failed: int = 0
    total: int = 0
    score: float = Field(default=0.0, description="passed / total, 0.0 when empty")
    grade: str = "F"


class RunReport(BaseModel):
    """Aggregated, graded result of a run."""

    generated_at: datetime = Field(default_factory=_utc_now)
    site_root: str
    summary: ReportSummary
    findings: list[ValidationFinding] = Field(default_factory=list)
    size_summary: SizeSummary | None = None
    change_count: int = 0
    recommendations: list[str] = Field(default_factory=list)


class FreshnessChange(BaseModel):
    """A region the updater brought to the state of the run date."""

    target: str = Field(description="File path relative to the site root")
    region: str
    description: str


class FreshnessResult(BaseModel):
    """Outcome of one freshness run, serialized as the daily summary."""

    run_date: date
    timestamp: str
    next_update: date
    rotation_index: int
    banner_text: str
    insight_text: str
    changes: list[FreshnessChange] = Field(default_factory=list)
    failures: dict[str, str] = Field(default_factory=dict)

    @property
    def change_count(self) -> int:
        return len(self.changes)


class PipelineResult(BaseModel):
    """Everything one CLI command produced, with the derived exit code."""

    size_reports: list[SizeReport] = Field(default_factory=list)
    findings: list[ValidationFinding] = Field(default_factory=list)
    discovery: DiscoveryResult | None = None
    freshness: FreshnessResult | None = None
    report: RunReport | None = None

    @property
    def size_errors(self) -> list[SizeReport]:
        return [r for r in self.size_reports if r.classification == SizeClass.ERROR]

    @property
    def failed_findings(self) -> list[ValidationFinding]:
        return [f for f in self.findings if f.severity == Severity.FAIL]

    @property
    def exit_code(self) -> int:
        """1 when any file is over the error threshold or any rule failed."""
        return 1 if self.size_errors or self.failed_findings else 0
