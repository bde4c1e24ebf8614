"""Discovery-artifact generation: robots.txt and the sitemap family."""

import logging
from datetime import date
from pathlib import Path

from sitekeeper.cancellation import CancellationToken
from sitekeeper.consts import (
    ROBOTS_FILENAME,
    SITEMAP_COMPARISONS_FILENAME,
    SITEMAP_DOCUMENTS_FILENAME,
    SITEMAP_FILENAME,
    SITEMAP_INDEX_FILENAME,
)
from sitekeeper.discovery.robots_writer import extract_daily_block, render_robots
from sitekeeper.discovery.sitemap_writer import (
    absolute_url,
    build_entries,
    check_entry,
    entries_of_kind,
    render_sitemap_index,
    render_urlset,
)
from sitekeeper.errors import ArtifactWriteError
from sitekeeper.models.model_config import SiteConfig
from sitekeeper.models.model_page import Inventory, PageKind
from sitekeeper.models.model_sitemap import DiscoveryResult
from sitekeeper.storage.file_manager import atomic_write_text

logger = logging.getLogger(__name__)

# Sitemaps named by the index, in index order
INDEXED_SITEMAPS = [SITEMAP_FILENAME, SITEMAP_DOCUMENTS_FILENAME, SITEMAP_COMPARISONS_FILENAME]


class DiscoveryArtifactGenerator:
    """Writes robots.txt, sitemap.xml, sitemap-index.xml and the per-kind sitemaps.

    Output depends only on the inventory, the configuration, the date and
    the header timestamp passed in, so identical inputs give identical bytes.
    """

    def __init__(self, site_root: Path | str, config: SiteConfig):
        self.site_root = Path(site_root)
        self.config = config

    def sitemap_urls(self) -> list[str]:
        """Absolute URLs of all generated sitemaps, index first."""
        names = [SITEMAP_INDEX_FILENAME, *INDEXED_SITEMAPS]
        return [absolute_url(self.config, f"/{name}") for name in names]

    def render_all(self, inventory: Inventory, today: date, generated_at: str) -> dict[str, str]:
        """Render every artifact without writing anything.

        Args:
            inventory: Pages to describe.
            today: Default last-modified date and sitemap-index stamp.
            generated_at: Timestamp for the robots header.

        Returns:
            Mapping of file name to contents, in write order.
        """
        entries = build_entries(inventory, self.config, today)
        index_urls = [absolute_url(self.config, f"/{name}") for name in INDEXED_SITEMAPS]

        robots_path = self.site_root / ROBOTS_FILENAME
        daily_block = None
        if robots_path.exists():
            daily_block = extract_daily_block(robots_path.read_text(encoding="utf-8"))

        return {
            SITEMAP_FILENAME: render_urlset(entries),
            SITEMAP_DOCUMENTS_FILENAME: render_urlset(entries_of_kind(entries, PageKind.DOCUMENT)),
            SITEMAP_COMPARISONS_FILENAME: render_urlset(
                entries_of_kind(entries, PageKind.COMPARISON)
            ),
            SITEMAP_INDEX_FILENAME: render_sitemap_index(index_urls, today),
            ROBOTS_FILENAME: render_robots(
                self.config, self.sitemap_urls(), generated_at, daily_block
            ),
        }

    def generate(
        self,
        inventory: Inventory,
        today: date,
        generated_at: str,
        token: CancellationToken | None = None,
    ) -> DiscoveryResult:
        """Check entries, then write all five artifacts.

        A failed write does not stop the remaining artifacts. Cancellation is
        honored between writes.

        Args:
            inventory: Pages to describe.
            today: Default last-modified date and sitemap-index stamp.
            generated_at: Timestamp for the robots header.
            token: Optional cancellation token.

        Returns:
            DiscoveryResult with written file names, entries and entry findings.

        Raises:
            ArtifactWriteError: If any artifact could not be written.
            RunCancelled: If cancellation was requested between writes.
        """
        token = token or CancellationToken()
        entries = build_entries(inventory, self.config, today)
        result = DiscoveryResult(entries=entries, findings=[check_entry(e) for e in entries])

        failures: dict[str, str] = {}
        for name, content in self.render_all(inventory, today, generated_at).items():
            token.raise_if_cancelled(f"writing {name}")
            path = self.site_root / name
            try:
                atomic_write_text(path, content)
            except OSError as e:
                logger.error(f"Failed to write {path}: {e}")
                failures[str(path)] = str(e)
                continue
            result.written.append(name)
            logger.info(f"Wrote {path}")

        if failures:
            raise ArtifactWriteError(failures, result)

        return result
