"""robots.txt rendering."""

import re

from sitekeeper import GENERATOR_NAME, __version__
from sitekeeper.consts import ROBOTS_CRAWL_DELAY_ANCHOR, ROBOTS_SENTINEL_END, ROBOTS_SENTINEL_START
from sitekeeper.models.model_config import SiteConfig

DAILY_BLOCK_RE = re.compile(
    rf"^{re.escape(ROBOTS_SENTINEL_START)}\n.*?^{re.escape(ROBOTS_SENTINEL_END)}\n",
    re.MULTILINE | re.DOTALL,
)


def extract_daily_block(robots_text: str) -> str | None:
    """Return the daily-update block (sentinels included) if present."""
    match = DAILY_BLOCK_RE.search(robots_text)
    return match.group(0) if match else None


def render_robots(
    config: SiteConfig,
    sitemap_urls: list[str],
    generated_at: str,
    daily_block: str | None = None,
) -> str:
    """Render robots.txt.

    Layout is fixed: header comment, one group per agent in configured
    order, disallow list, allow list, crawl delay, sitemap lines.

    Args:
        config: Site configuration.
        sitemap_urls: Absolute URLs of every generated sitemap.
        generated_at: Timestamp recorded in the header.
        daily_block: Existing daily-update block to keep before the crawl delay.

    Returns:
        robots.txt contents.
    """
    lines = [
        f"# Robots.txt for {config.site_name}",
        f"# Generated by {GENERATOR_NAME}/{__version__}",
        f"# Last updated: {generated_at}",
        "",
    ]

    for agent in config.allowed_agents:
        lines.append(f"User-agent: {agent}")
        lines.append("Allow: /")
        lines.append("")

    lines.append("# Disallow access to admin and private areas")
    lines.extend(f"Disallow: {path}" for path in config.disallowed_paths)
    lines.append("")

    lines.append("# Allow access to static assets")
    lines.extend(f"Allow: {path}" for path in config.allowed_paths)
    lines.append("")

    text = "\n".join(lines) + "\n"
    if daily_block:
        text += daily_block + "\n"

    tail = [
        ROBOTS_CRAWL_DELAY_ANCHOR,
        f"Crawl-delay: {config.crawl_delay}",
        "",
        "# Sitemap locations",
    ]
    tail.extend(f"Sitemap: {url}" for url in sitemap_urls)
    return text + "\n".join(tail) + "\n"
