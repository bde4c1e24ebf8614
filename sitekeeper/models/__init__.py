"""Pydantic models for sitekeeper."""

from sitekeeper.models.model_config import PageTypeDefaults, SiteConfig
from sitekeeper.models.model_page import Inventory, Page, PageKind
from sitekeeper.models.model_report import (
    FreshnessChange,
    FreshnessResult,
    PipelineResult,
    ReportSummary,
    RunReport,
)
from sitekeeper.models.model_sitemap import DiscoveryResult, SitemapEntry
from sitekeeper.models.model_size import (
    AnchorTag,
    FileKind,
    SizeAlert,
    SizeClass,
    SizeReport,
    SizeSummary,
    SplitAnchor,
    SplitResult,
    SplitSuggestion,
)
from sitekeeper.models.model_storage import (
    SizeAlertCounts,
    SizeAlertsFile,
    SizeReportFile,
    ValidationReportFile,
)
from sitekeeper.models.model_validation import Severity, ValidationFinding

__all__ = [
    # Config
    "PageTypeDefaults",
    "SiteConfig",
    # Pages
    "Inventory",
    "Page",
    "PageKind",
    # Sitemaps
    "DiscoveryResult",
    "SitemapEntry",
    # Size
    "AnchorTag",
    "FileKind",
    "SizeAlert",
    "SizeClass",
    "SizeReport",
    "SizeSummary",
    "SplitAnchor",
    "SplitResult",
    "SplitSuggestion",
    # Validation
    "Severity",
    "ValidationFinding",
    # Reports
    "FreshnessChange",
    "FreshnessResult",
    "PipelineResult",
    "ReportSummary",
    "RunReport",
    # Storage files
    "SizeAlertCounts",
    "SizeAlertsFile",
    "SizeReportFile",
    "ValidationReportFile",
]
