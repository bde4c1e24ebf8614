"""Report file models for artifacts written under the reports directories."""

from datetime import datetime

from pydantic import BaseModel, Field

from sitekeeper.consts import SIZE_ERROR_LINES, SIZE_WARN_LINES
from sitekeeper.models.common import _utc_now
from sitekeeper.models.model_report import ReportSummary
from sitekeeper.models.model_size import SizeAlert, SizeReport, SizeSummary
from sitekeeper.models.model_validation import ValidationFinding


class SizeReportFile(BaseModel):
    """Per-file line counts stored in build-reports/file-size-report.json."""

    version: str = Field(default="1.0", description="Schema version")
    generated_at: datetime = Field(default_factory=_utc_now)
    warn_threshold: int = SIZE_WARN_LINES
    error_threshold: int = SIZE_ERROR_LINES
    summary: SizeSummary
    files: list[SizeReport]


class SizeAlertCounts(BaseModel):
    total: int = 0
    errors: int = 0
    warnings: int = 0


class SizeAlertsFile(BaseModel):
    """Threshold violations stored in build-reports/size-alerts.json."""

    version: str = Field(default="1.0")
    generated_at: datetime = Field(default_factory=_utc_now)
    alerts: list[SizeAlert]
    summary: SizeAlertCounts


class ValidationReportFile(BaseModel):
    """Validator output stored in build-reports/validation-report.json."""

    version: str = Field(default="1.0")
    generated_at: datetime = Field(default_factory=_utc_now)
    summary: ReportSummary
    findings: list[ValidationFinding]
