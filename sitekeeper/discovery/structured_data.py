"""JSON-LD records a page should carry, derived from its kind and path.

Records are built, never injected into pages. Authors paste them in, or
templates render them; the validator then checks what is actually there.
"""

import re
from typing import Any

from sitekeeper.discovery.sitemap_writer import absolute_url
from sitekeeper.models.model_config import SiteConfig
from sitekeeper.models.model_page import Page, PageKind

SCHEMA_CONTEXT = "https://schema.org"
SITE_DESCRIPTION = (
    "Comprehensive guide and resources for LLM tools, AI development, and machine learning"
)


def _organization(config: SiteConfig) -> dict[str, Any]:
    return {
        "@type": "Organization",
        "name": config.site_name,
        "url": config.base_url,
        "logo": f"{config.base_url}/assets/images/logo.png",
    }


def _crumb_name(segment: str) -> str:
    name = re.sub(r"\.html$", "", segment).replace("-", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name)


def breadcrumb_record(page: Page, config: SiteConfig) -> dict[str, Any]:
    """BreadcrumbList from Home down to the page itself."""
    crumbs = [("Home", f"{config.base_url}/")]
    current = ""
    for segment in [s for s in page.path.split("/") if s]:
        current += f"/{segment}"
        crumbs.append((_crumb_name(segment), absolute_url(config, current)))

    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": position, "name": name, "item": url}
            for position, (name, url) in enumerate(crumbs, start=1)
        ],
    }


def primary_record(page: Page, config: SiteConfig, title: str, description: str) -> dict[str, Any]:
    """The main record of a page, typed by page kind."""
    url = absolute_url(config, page.path)
    published = page.date_published.isoformat() if page.date_published else None
    modified = page.last_modified.isoformat() if page.last_modified else published

    if page.kind == PageKind.HOMEPAGE:
        return {
            "@context": SCHEMA_CONTEXT,
            "@type": "WebSite",
            "name": config.site_name,
            "description": description or SITE_DESCRIPTION,
            "url": config.base_url,
            "potentialAction": {
                "@type": "SearchAction",
                "target": f"{config.base_url}/search?q={{search_term_string}}",
                "query-input": "required name=search_term_string",
            },
            "publisher": _organization(config),
        }

    if page.kind == PageKind.DOCUMENT:
        return {
            "@context": SCHEMA_CONTEXT,
            "@type": "Article",
            "headline": title,
            "description": description,
            "url": url,
            "datePublished": published or modified,
            "dateModified": modified,
            "author": {"@type": "Organization", "name": config.site_name},
            "publisher": _organization(config),
            "image": {
                "@type": "ImageObject",
                "url": f"{config.base_url}/assets/images/default-article-image.jpg",
                "width": 1200,
                "height": 630,
            },
            "mainEntityOfPage": {"@type": "WebPage", "@id": url},
        }

    if page.kind == PageKind.COMPARISON:
        return {
            "@context": SCHEMA_CONTEXT,
            "@type": "Review",
            "name": title,
            "description": description,
            "url": url,
            "datePublished": published or modified,
            "dateModified": modified,
            "author": {"@type": "Organization", "name": config.site_name},
            "publisher": _organization(config),
        }

    record: dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebPage",
        "name": title,
        "description": description,
        "url": url,
        "isPartOf": {"@type": "WebSite", "name": config.site_name, "url": config.base_url},
        "publisher": _organization(config),
    }
    if published:
        record["datePublished"] = published
    if modified:
        record["dateModified"] = modified
    return record


def build_structured_records(
    page: Page,
    config: SiteConfig,
    title: str = "",
    description: str = "",
) -> list[dict[str, Any]]:
    """All records for a page: the primary one, plus breadcrumbs at depth >= 2.

    Args:
        page: Page to describe.
        config: Site configuration.
        title: Page title, used as name/headline.
        description: Page meta description.

    Returns:
        List of JSON-LD records.
    """
    records = [primary_record(page, config, title, description)]
    if page.kind != PageKind.HOMEPAGE and page.depth >= 2:
        records.append(breadcrumb_record(page, config))
    return records
