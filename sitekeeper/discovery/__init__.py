"""Discovery artifacts: robots.txt, sitemaps and structured-data records."""

from sitekeeper.discovery.generator import DiscoveryArtifactGenerator
from sitekeeper.discovery.robots_writer import extract_daily_block, render_robots
from sitekeeper.discovery.sitemap_writer import (
    build_entries,
    check_entry,
    render_sitemap_index,
    render_urlset,
)
from sitekeeper.discovery.structured_data import build_structured_records

__all__ = [
    "DiscoveryArtifactGenerator",
    "build_entries",
    "build_structured_records",
    "check_entry",
    "extract_daily_block",
    "render_robots",
    "render_sitemap_index",
    "render_urlset",
]
