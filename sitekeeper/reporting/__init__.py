"""Run report aggregation and rendering."""

from sitekeeper.reporting.aggregator import (
    ReportAggregator,
    grade_for,
    recommendations_for,
    size_findings,
    summarize_findings,
)
from sitekeeper.reporting.html_report import render_html_report

__all__ = [
    "ReportAggregator",
    "grade_for",
    "recommendations_for",
    "render_html_report",
    "size_findings",
    "summarize_findings",
]
