"""Anchored, in-place rewrites for the daily freshness pass.

Every function here takes file text and returns new text. Regions are found
either by a sentinel comment pair or by an exact pattern, so applying a
rewrite twice for the same date gives the same text as applying it once.
Nothing is parsed and re-serialized.
"""

import html as html_lib
import re
from collections.abc import Callable
from datetime import date

from sitekeeper.consts import (
    BANNER_SENTINEL_END,
    BANNER_SENTINEL_START,
    INSIGHT_SENTINEL_END,
    INSIGHT_SENTINEL_START,
    ROBOTS_CRAWL_DELAY_ANCHOR,
    ROBOTS_SENTINEL_END,
    ROBOTS_SENTINEL_START,
)
from sitekeeper.discovery.robots_writer import DAILY_BLOCK_RE
from sitekeeper.inventory.jsonld import JSONLD_BLOCK_RE
from sitekeeper.models.common import long_date
from sitekeeper.models.model_report import FreshnessResult

HERO_OPEN_RE = re.compile(
    r"<section\b[^>]*\bclass\s*=\s*([\"'])[^\"']*\bhero\b[^\"']*\1[^>]*>", re.IGNORECASE
)
SECTION_TAG_RE = re.compile(r"<(/?)section\b[^>]*>", re.IGNORECASE)
FIRST_H2_RE = re.compile(r"<h2\b[^>]*>.*?</h2\s*>", re.IGNORECASE | re.DOTALL)

DATE_MODIFIED_RE = re.compile(r'("dateModified"\s*:\s*)"[^"]*"')
ARTICLE_TYPE_RE = re.compile(r'"@type"\s*:\s*(?:"Article"|\[[^\]]*"Article"[^\]]*\])')
LAST_REVIEWED_KEY = '"lastReviewed"'

LAST_UPDATED_RE = re.compile(r"^# Last updated: .*$", re.MULTILINE)
CACHE_VERSION_RE = re.compile(r"(const\s+CACHE_VERSION\s*=\s*)(['\"])[^'\"]*\2")

CHANGELOG_HEADER = "# Daily Updates Log"


# === SENTINEL BLOCKS ===


def line_indent(text: str, position: int) -> str:
    """Leading whitespace of the line containing position."""
    line_start = text.rfind("\n", 0, position) + 1
    line = text[line_start:position + 1]
    return line[: len(line) - len(line.lstrip(" \t"))]


def sentinel_block(start: str, end: str, body_lines: list[str], indent: str) -> str:
    """Sentinel pair around body lines, every line after the first indented."""
    inner = "\n".join(f"{indent}{line}" for line in body_lines)
    return f"{start}\n{inner}\n{indent}{end}"


def upsert_sentinel_block(
    text: str,
    start: str,
    end: str,
    body_lines: list[str],
    find_anchor: Callable[[str], int | None],
) -> str | None:
    """Replace the region between a sentinel pair, or insert it at an anchor.

    Args:
        text: File contents.
        start: Opening sentinel comment.
        end: Closing sentinel comment.
        body_lines: Lines between the sentinels, without indentation.
        find_anchor: Returns the offset to insert after, or None.

    Returns:
        New text, or None when there is no sentinel pair and no anchor.
    """
    start_at = text.find(start)
    if start_at != -1:
        end_at = text.find(end, start_at)
        if end_at != -1:
            block = sentinel_block(start, end, body_lines, line_indent(text, start_at))
            return text[:start_at] + block + text[end_at + len(end):]

    anchor = find_anchor(text)
    if anchor is None:
        return None
    indent = line_indent(text, anchor - 1)
    block = sentinel_block(start, end, body_lines, indent)
    return f"{text[:anchor]}\n{indent}{block}{text[anchor:]}"


def find_hero_end(text: str) -> int | None:
    """Offset just past the closing tag of the hero <section>."""
    opening = HERO_OPEN_RE.search(text)
    if not opening:
        return None
    depth = 1
    for tag in SECTION_TAG_RE.finditer(text, opening.end()):
        depth += -1 if tag.group(1) else 1
        if depth == 0:
            return tag.end()
    return None


def find_first_h2_end(text: str) -> int | None:
    """Offset just past the first </h2>."""
    match = FIRST_H2_RE.search(text)
    return match.end() if match else None


def banner_lines(day: date, tip: str) -> list[str]:
    return [
        '<div class="daily-update-banner" role="note">',
        f"    <p><strong>📅 {long_date(day)}</strong> | {html_lib.escape(tip, quote=False)}</p>",
        "</div>",
    ]


def insight_lines(day: date, insight: str) -> list[str]:
    return [
        '<div class="daily-research-insight" role="note">',
        f"    <p><strong>🔬 Research Update ({long_date(day)}):</strong> "
        f"{html_lib.escape(insight, quote=False)}</p>",
        "</div>",
    ]


def rewrite_homepage_banner(text: str, day: date, tip: str) -> str | None:
    """Banner after the hero section. None if the page has no hero section."""
    return upsert_sentinel_block(
        text, BANNER_SENTINEL_START, BANNER_SENTINEL_END, banner_lines(day, tip), find_hero_end
    )


def rewrite_document_insight(text: str, day: date, insight: str) -> str | None:
    """Insight note after the first h2. None if the page has no h2."""
    return upsert_sentinel_block(
        text,
        INSIGHT_SENTINEL_START,
        INSIGHT_SENTINEL_END,
        insight_lines(day, insight),
        find_first_h2_end,
    )


# === STRUCTURED DATA ===


def _insert_last_reviewed(body: str, timestamp: str) -> str:
    match = DATE_MODIFIED_RE.search(body)
    if match is None:
        return body
    line_start = body.rfind("\n", 0, match.start()) + 1
    prefix = body[line_start:match.start()]
    if prefix.strip():
        insertion = f', "lastReviewed": "{timestamp}"'
    else:
        insertion = f',\n{prefix}"lastReviewed": "{timestamp}"'
    return body[: match.end()] + insertion + body[match.end():]


def rewrite_structured_dates(text: str, timestamp: str) -> tuple[str, int]:
    """Set every JSON-LD dateModified to timestamp.

    Article blocks without lastReviewed get one next to dateModified.
    Existing lastReviewed values are left alone.

    Returns:
        Tuple of (new text, number of dateModified fields set).
    """
    count = 0

    def _rewrite_block(match: re.Match[str]) -> str:
        nonlocal count
        opening, body, closing = match.groups()
        new_body, replaced = DATE_MODIFIED_RE.subn(
            lambda m: f'{m.group(1)}"{timestamp}"', body
        )
        count += replaced
        if replaced and ARTICLE_TYPE_RE.search(new_body) and LAST_REVIEWED_KEY not in new_body:
            new_body = _insert_last_reviewed(new_body, timestamp)
        return opening + new_body + closing

    return JSONLD_BLOCK_RE.sub(_rewrite_block, text), count


# === ROBOTS AND SERVICE WORKER ===


def robots_daily_block(day: date) -> str:
    return (
        f"{ROBOTS_SENTINEL_START}\n"
        f"# Daily Update: Fresh content available as of {long_date(day)}\n"
        "# Recommended crawl frequency: Daily for optimal freshness\n"
        f"{ROBOTS_SENTINEL_END}\n"
    )


def rewrite_robots(text: str, timestamp: str, day: date) -> tuple[str, bool]:
    """Update the header timestamp and the daily-update block.

    Returns:
        Tuple of (new text, whether the daily block is in place).
    """
    text = LAST_UPDATED_RE.sub(lambda _: f"# Last updated: {timestamp}", text, count=1)
    block = robots_daily_block(day)

    existing = DAILY_BLOCK_RE.search(text)
    if existing:
        return text[: existing.start()] + block + text[existing.end():], True

    anchor = text.find(ROBOTS_CRAWL_DELAY_ANCHOR)
    if anchor == -1:
        return text, False
    return f"{text[:anchor]}{block}\n{text[anchor:]}", True


def cache_version(day: date) -> str:
    return f"v{day.strftime('%Y.%m.%d')}"


def rewrite_cache_version(text: str, day: date) -> tuple[str, bool]:
    """Set `const CACHE_VERSION = '...'` to the date-derived version.

    Returns:
        Tuple of (new text, whether the constant was found).
    """
    version = cache_version(day)
    new_text, replaced = CACHE_VERSION_RE.subn(
        lambda m: f"{m.group(1)}{m.group(2)}{version}{m.group(2)}", text, count=1
    )
    return new_text, bool(replaced)


# === CHANGELOG ===


def changelog_markers(day: date) -> tuple[str, str]:
    return (
        f"<!-- daily-update:{day.isoformat()}:start -->",
        f"<!-- daily-update:{day.isoformat()}:end -->",
    )


def render_changelog_entry(result: FreshnessResult) -> str:
    """Markdown entry for one run, wrapped in its date's sentinel pair."""
    start, end = changelog_markers(result.run_date)
    lines = [start, f"## {long_date(result.run_date)}", "", "### Updates Applied"]
    if result.changes:
        lines.extend(
            f"- `{change.target}` ({change.region}): {change.description}"
            for change in result.changes
        )
    else:
        lines.append("- No regions updated")

    if result.failures:
        lines.extend(["", "### Failed"])
        lines.extend(f"- `{target}`: {reason}" for target, reason in result.failures.items())

    lines.append(end)
    return "\n".join(lines)


def upsert_changelog(existing: str | None, day: date, entry: str) -> str:
    """Put the entry for a date at the top, or replace that date's entry."""
    start, end = changelog_markers(day)
    if existing and start in existing:
        start_at = existing.find(start)
        end_at = existing.find(end, start_at)
        if end_at != -1:
            return existing[:start_at] + entry + existing[end_at + len(end):]

    body = existing or ""
    if body.startswith(CHANGELOG_HEADER):
        body = body[len(CHANGELOG_HEADER):]
    rest = body.strip("\n")
    parts = [CHANGELOG_HEADER, entry] + ([rest] if rest else [])
    return "\n\n".join(parts) + "\n"
