"""Standalone HTML rendering of a run report."""

from html import escape

from sitekeeper.models.model_report import RunReport
from sitekeeper.models.model_validation import Severity

GRADE_COLORS = {"A": "#2e7d32", "B": "#558b2f", "C": "#f9a825", "D": "#ef6c00", "F": "#c62828"}
SEVERITY_ORDER = {Severity.FAIL: 0, Severity.WARN: 1, Severity.PASS: 2}

STYLE = """
body { font-family: system-ui, sans-serif; margin: 2rem; color: #222; }
header { border-bottom: 2px solid #ddd; margin-bottom: 1.5rem; }
.grade { font-size: 3rem; font-weight: bold; }
.metrics { display: flex; gap: 1rem; flex-wrap: wrap; margin-bottom: 1.5rem; }
.metric { border: 1px solid #ddd; border-radius: 6px; padding: 0.75rem 1.25rem; min-width: 8rem; }
.metric .value { font-size: 1.5rem; font-weight: bold; }
table { border-collapse: collapse; width: 100%; }
th, td { text-align: left; padding: 0.4rem 0.6rem; border-bottom: 1px solid #eee; }
.sev-fail { color: #c62828; font-weight: bold; }
.sev-warn { color: #ef6c00; font-weight: bold; }
.sev-pass { color: #2e7d32; }
""".strip()


def _metric(label: str, value: str) -> str:
    return (
        f'<div class="metric"><div class="label">{escape(label)}</div>'
        f'<div class="value">{escape(value)}</div></div>'
    )


def render_html_report(report: RunReport) -> str:
    """Render the report as a single HTML page.

    Findings are listed failures first, then warnings, then passes.

    Args:
        report: Run report to render.

    Returns:
        HTML document text.
    """
    summary = report.summary
    color = GRADE_COLORS.get(summary.grade, "#222")

    metrics = [
        _metric("Score", f"{summary.score * 100:.1f}%"),
        _metric("Passed", str(summary.passed)),
        _metric("Warnings", str(summary.warnings)),
        _metric("Failed", str(summary.failed)),
        _metric("Total checks", str(summary.total)),
    ]
    if report.size_summary is not None:
        metrics.append(_metric("Source files", str(report.size_summary.total_files)))
        metrics.append(_metric("Oversized files", str(report.size_summary.errors)))
    if report.change_count:
        metrics.append(_metric("Freshness changes", str(report.change_count)))

    ordered = sorted(
        report.findings, key=lambda f: (SEVERITY_ORDER[f.severity], f.rule_id, f.subject)
    )
    rows = "\n".join(
        f'<tr><td class="sev-{f.severity.value}">{f.severity.value.upper()}</td>'
        f"<td>{escape(f.rule_id)}</td><td>{escape(f.subject)}</td><td>{escape(f.message)}</td></tr>"
        for f in ordered
    )

    if report.recommendations:
        recommendations = "\n".join(f"<li>{escape(r)}</li>" for r in report.recommendations)
    else:
        recommendations = "<li>No issues found.</li>"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Site Maintenance Report</title>
<style>
{STYLE}
</style>
</head>
<body>
<header>
<h1>Site Maintenance Report</h1>
<p>Generated {escape(report.generated_at.isoformat())} for {escape(report.site_root)}</p>
<p class="grade" style="color: {color}">Grade {escape(summary.grade)}</p>
</header>
<section class="metrics">
{chr(10).join(metrics)}
</section>
<section>
<h2>Recommendations</h2>
<ul>
{recommendations}
</ul>
</section>
<section>
<h2>Findings</h2>
<table>
<thead><tr><th>Severity</th><th>Rule</th><th>Subject</th><th>Message</th></tr></thead>
<tbody>
{rows}
</tbody>
</table>
</section>
</body>
</html>
"""
