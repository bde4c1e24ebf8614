"""Sitemap entries, pre-emission checks, and XML serialization."""

import logging
import re
import xml.etree.ElementTree as ET
from datetime import date
from urllib.parse import quote

from sitekeeper.consts import (
    CHANGE_FREQUENCIES,
    SITEMAP_INDEX_SCHEMA_LOCATION,
    SITEMAP_NAMESPACE,
    SITEMAP_SCHEMA_LOCATION,
    XSI_NAMESPACE,
)
from sitekeeper.models.model_config import SiteConfig
from sitekeeper.models.model_page import Inventory, Page, PageKind
from sitekeeper.models.model_sitemap import SitemapEntry
from sitekeeper.models.model_validation import Severity, ValidationFinding

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
ENTRY_RULE_ID = "sitemap-entry"


def absolute_url(config: SiteConfig, path: str) -> str:
    """Join the base URL and a leading-slash path."""
    return f"{config.base_url}{quote(path, safe='/#?=&')}"


def build_entry(page: Page, config: SiteConfig, default_date: date) -> SitemapEntry:
    """Derive the sitemap entry of a page from its kind defaults.

    Args:
        page: Page to describe.
        config: Site configuration (base URL, per-kind defaults).
        default_date: Date used when the page has no last-modified date.

    Returns:
        SitemapEntry with values exactly as configured.
    """
    defaults = config.defaults_for(page.kind)
    lastmod = page.last_modified or default_date
    return SitemapEntry(
        path=page.path,
        loc=absolute_url(config, page.path),
        lastmod=lastmod.isoformat(),
        changefreq=defaults.changefreq,
        priority=defaults.priority,
        kind=page.kind.value,
    )


def build_entries(inventory: Inventory, config: SiteConfig, default_date: date) -> list[SitemapEntry]:
    """One entry per page, in inventory order."""
    return [build_entry(page, config, default_date) for page in inventory.pages]


def check_entry(entry: SitemapEntry) -> ValidationFinding:
    """Check an entry before it is written.

    Problems are reported as a warning; the entry is still emitted unchanged.

    Args:
        entry: Entry to check.

    Returns:
        A pass finding, or a warn finding listing every problem.
    """
    problems = []
    if not entry.path.startswith("/"):
        problems.append(f"path '{entry.path}' does not start with '/'")
    if not DATE_RE.match(entry.lastmod):
        problems.append(f"lastmod '{entry.lastmod}' is not YYYY-MM-DD")
    if entry.changefreq not in CHANGE_FREQUENCIES:
        problems.append(f"changefreq '{entry.changefreq}' is not a sitemap frequency")
    if not 0.0 <= entry.priority <= 1.0:
        problems.append(f"priority {entry.priority} is outside [0.0, 1.0]")

    if problems:
        logger.warning(f"Invalid sitemap entry {entry.path}: {'; '.join(problems)}")
        return ValidationFinding(
            rule_id=ENTRY_RULE_ID,
            severity=Severity.WARN,
            subject=entry.path,
            message=f"Sitemap entry is invalid: {'; '.join(problems)}.",
            detail={"problems": problems},
        )

    return ValidationFinding(
        rule_id=ENTRY_RULE_ID,
        severity=Severity.PASS,
        subject=entry.path,
        message="Sitemap entry is valid.",
    )


def _serialize(root: ET.Element) -> str:
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return f"{XML_DECLARATION}\n{body}\n"


def render_urlset(entries: list[SitemapEntry]) -> str:
    """Serialize entries as a <urlset> document.

    Children appear in the order loc, lastmod, changefreq, priority.
    """
    root = ET.Element(
        "urlset",
        {
            "xmlns": SITEMAP_NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:schemaLocation": SITEMAP_SCHEMA_LOCATION,
        },
    )
    for entry in entries:
        url = ET.SubElement(root, "url")
        ET.SubElement(url, "loc").text = entry.loc
        ET.SubElement(url, "lastmod").text = entry.lastmod
        ET.SubElement(url, "changefreq").text = entry.changefreq
        ET.SubElement(url, "priority").text = f"{entry.priority:.1f}"
    return _serialize(root)


def render_sitemap_index(sitemap_urls: list[str], lastmod: date) -> str:
    """Serialize a <sitemapindex> naming each sitemap, stamped with one date."""
    root = ET.Element(
        "sitemapindex",
        {
            "xmlns": SITEMAP_NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:schemaLocation": SITEMAP_INDEX_SCHEMA_LOCATION,
        },
    )
    for url in sitemap_urls:
        sitemap = ET.SubElement(root, "sitemap")
        ET.SubElement(sitemap, "loc").text = url
        ET.SubElement(sitemap, "lastmod").text = lastmod.isoformat()
    return _serialize(root)


def entries_of_kind(entries: list[SitemapEntry], kind: PageKind) -> list[SitemapEntry]:
    return [entry for entry in entries if entry.kind == kind.value]
