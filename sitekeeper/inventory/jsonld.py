"""Lightweight access to JSON-LD blocks in raw page source.

Used where a full HTML parse is not needed (inventory dates) or not allowed
(in-place rewriting). Matching is case-insensitive and accepts the type attribute quoted
with either character or unquoted.
"""

import json
import logging
import re
from collections.abc import Iterator
from datetime import date
from typing import Any

logger = logging.getLogger(__name__)

JSONLD_BLOCK_RE = re.compile(
    r"(<script\b[^>]*\btype\s*=\s*[\"']?application/ld\+json\b[\"']?[^>]*>)(.*?)(</script\s*>)",
    re.IGNORECASE | re.DOTALL,
)

ISO_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})")


def iter_jsonld_bodies(html: str) -> Iterator[str]:
    """Yield the raw text of every JSON-LD block in document order."""
    for match in JSONLD_BLOCK_RE.finditer(html):
        yield match.group(2)


def iter_records(data: Any) -> Iterator[dict[str, Any]]:
    """Flatten a parsed JSON-LD value into its top-level records.

    Handles a single object, a list of objects, and objects carrying @graph.
    """
    if isinstance(data, list):
        for item in data:
            yield from iter_records(item)
    elif isinstance(data, dict):
        if "@graph" in data and isinstance(data["@graph"], list):
            yield from iter_records(data["@graph"])
        else:
            yield data


def parse_iso_date(value: Any) -> date | None:
    """Parse the date part of an ISO date or timestamp string."""
    if not isinstance(value, str):
        return None
    match = ISO_DATE_RE.match(value.strip())
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None


def declared_dates(html: str) -> tuple[date | None, date | None]:
    """Find the first declared datePublished and dateModified in a page.

    Blocks that do not parse are ignored here; the validator reports them.

    Returns:
        Tuple of (date_published, date_modified).
    """
    published: date | None = None
    modified: date | None = None

    for body in iter_jsonld_bodies(html):
        try:
            data = json.loads(body)
        except ValueError:
            continue
        for record in iter_records(data):
            if published is None:
                published = parse_iso_date(record.get("datePublished"))
            if modified is None:
                modified = parse_iso_date(record.get("dateModified"))

    return published, modified
