"""Daily freshness pass over a site.

Order of work:
1. Structured-data dates on every page
2. Homepage banner
3. Document insight notes
4. Service-worker cache version
5. Inventory refresh and discovery artifacts
6. robots.txt daily-update block
7. Daily summary and changelog (always written, even after a failure)
"""

import logging
from collections.abc import Callable
from datetime import date, timedelta
from pathlib import Path

from sitekeeper.cancellation import CancellationToken
from sitekeeper.consts import (
    CHANGELOG_DIR_NAME,
    CHANGELOG_FILENAME,
    ROBOTS_FILENAME,
    SERVICE_WORKER_FILENAME,
)
from sitekeeper.discovery.generator import DiscoveryArtifactGenerator
from sitekeeper.errors import ArtifactWriteError
from sitekeeper.freshness.rewriters import (
    cache_version,
    render_changelog_entry,
    rewrite_cache_version,
    rewrite_document_insight,
    rewrite_homepage_banner,
    rewrite_robots,
    rewrite_structured_dates,
    upsert_changelog,
)
from sitekeeper.freshness.rotation import daily_texts, rotation_index
from sitekeeper.inventory.page_inventory import build_inventory
from sitekeeper.models.common import day_timestamp
from sitekeeper.models.model_config import SiteConfig
from sitekeeper.models.model_page import Inventory, Page, PageKind
from sitekeeper.models.model_report import FreshnessChange, FreshnessResult
from sitekeeper.storage.file_manager import FileManager, atomic_write_text

logger = logging.getLogger(__name__)

DAILY_SUMMARY_KEY = "daily-summary-{day}"
LATEST_SUMMARY_KEY = "latest-daily-summary"


class FreshnessUpdater:
    """Brings a site to the 'fresh' state for one calendar date.

    Running it twice with the same date leaves every file as the first run
    left it. Pages are written one at a time through temp-file-then-rename,
    and cancellation is honored between pages.
    """

    def __init__(
        self,
        site_root: Path | str,
        config: SiteConfig,
        storage: FileManager | None = None,
    ):
        self.site_root = Path(site_root)
        self.config = config
        self.storage = storage or FileManager(self.site_root)
        self.generator = DiscoveryArtifactGenerator(self.site_root, config)

    def _rewrite_file(
        self,
        result: FreshnessResult,
        relative: str,
        rewrite: Callable[[str], str | None],
    ) -> bool | None:
        """Apply a text rewrite to one file and write it if it changed.

        Args:
            result: Run result collecting failures.
            relative: File path relative to the site root.
            rewrite: Returns the new text, or None when the region has no anchor.

        Returns:
            True if the file is now in the rewritten state, False if the
            region has no anchor, None if the file could not be read or written.
        """
        path = self.site_root / relative
        try:
            original = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable {path}: {e}")
            return None

        updated = rewrite(original)
        if updated is None:
            return False
        if updated != original:
            try:
                atomic_write_text(path, updated)
            except OSError as e:
                logger.error(f"Failed to write {path}: {e}")
                result.failures[relative] = str(e)
                return None
            logger.info(f"Updated {path}")
        else:
            logger.debug(f"Already up to date: {path}")
        return True

    def _update_structured_dates(
        self, result: FreshnessResult, pages: list[Page], token: CancellationToken
    ) -> None:
        for page in pages:
            token.raise_if_cancelled(f"structured-data dates of {page.path}")
            counted: list[int] = []

            def _rewrite(text: str) -> str | None:
                new_text, count = rewrite_structured_dates(text, result.timestamp)
                counted.append(count)
                return new_text if count else None

            relative = page.source_file.as_posix()
            if self._rewrite_file(result, relative, _rewrite):
                result.changes.append(
                    FreshnessChange(
                        target=relative,
                        region="structured-data-dates",
                        description=f"dateModified set to {result.timestamp} ({counted[0]} field(s))",
                    )
                )

    def _update_homepage(
        self, result: FreshnessResult, inventory: Inventory, token: CancellationToken
    ) -> None:
        homepage = inventory.homepage
        if homepage is None:
            logger.warning("No homepage in inventory, skipping daily banner")
            return

        token.raise_if_cancelled("homepage banner")
        relative = homepage.source_file.as_posix()
        applied = self._rewrite_file(
            result,
            relative,
            lambda text: rewrite_homepage_banner(text, result.run_date, result.banner_text),
        )
        if applied:
            result.changes.append(
                FreshnessChange(
                    target=relative,
                    region="homepage-banner",
                    description=f"Daily banner set to tip {result.rotation_index}",
                )
            )
        elif applied is False:
            logger.warning(f"{relative} has no hero section, banner not placed")

    def _update_documents(
        self, result: FreshnessResult, inventory: Inventory, token: CancellationToken
    ) -> None:
        for page in inventory.by_kind(PageKind.DOCUMENT):
            token.raise_if_cancelled(f"insight note of {page.path}")
            relative = page.source_file.as_posix()
            applied = self._rewrite_file(
                result,
                relative,
                lambda text: rewrite_document_insight(text, result.run_date, result.insight_text),
            )
            if applied:
                result.changes.append(
                    FreshnessChange(
                        target=relative,
                        region="document-insight",
                        description=f"Insight note set to insight {result.rotation_index}",
                    )
                )
            elif applied is False:
                logger.warning(f"{relative} has no h2, insight note not placed")

    def _update_service_worker(self, result: FreshnessResult, token: CancellationToken) -> None:
        if not (self.site_root / SERVICE_WORKER_FILENAME).exists():
            logger.info(f"No {SERVICE_WORKER_FILENAME}, skipping cache version")
            return

        token.raise_if_cancelled("service worker cache version")

        def _rewrite(text: str) -> str | None:
            new_text, found = rewrite_cache_version(text, result.run_date)
            return new_text if found else None

        applied = self._rewrite_file(result, SERVICE_WORKER_FILENAME, _rewrite)
        if applied:
            result.changes.append(
                FreshnessChange(
                    target=SERVICE_WORKER_FILENAME,
                    region="cache-version",
                    description=f"CACHE_VERSION set to {cache_version(result.run_date)}",
                )
            )
        elif applied is False:
            logger.warning(f"No CACHE_VERSION constant in {SERVICE_WORKER_FILENAME}")

    def _regenerate_discovery(self, result: FreshnessResult, token: CancellationToken) -> None:
        inventory = build_inventory(self.site_root)
        try:
            discovery = self.generator.generate(inventory, result.run_date, result.timestamp, token)
        except ArtifactWriteError as e:
            result.failures.update(e.failures)
            return
        result.changes.append(
            FreshnessChange(
                target=", ".join(discovery.written),
                region="discovery-artifacts",
                description=f"Sitemaps and robots.txt regenerated for {len(inventory.pages)} pages",
            )
        )

    def _update_robots(self, result: FreshnessResult, token: CancellationToken) -> None:
        token.raise_if_cancelled("robots daily update")

        def _rewrite(text: str) -> str | None:
            new_text, placed = rewrite_robots(text, result.timestamp, result.run_date)
            return new_text if placed else None

        if not (self.site_root / ROBOTS_FILENAME).exists():
            logger.warning(f"No {ROBOTS_FILENAME} to update")
            return
        if self._rewrite_file(result, ROBOTS_FILENAME, _rewrite):
            result.changes.append(
                FreshnessChange(
                    target=ROBOTS_FILENAME,
                    region="robots-daily-update",
                    description="Daily-update comment and header timestamp refreshed",
                )
            )

    def write_summary(self, result: FreshnessResult) -> None:
        """Write the daily summary, the latest-summary copy and the changelog entry.

        Write failures are added to ``result.failures`` so that they surface
        after the run instead of replacing an error already in flight.
        """
        day = result.run_date.isoformat()
        for key in (DAILY_SUMMARY_KEY.format(day=day), LATEST_SUMMARY_KEY):
            try:
                self.storage.save(key, result, FileManager.ANALYTICS)
            except OSError as e:
                path = self.storage.report_path(key, FileManager.ANALYTICS)
                logger.error(f"Failed to write {path}: {e}")
                result.failures[str(path)] = str(e)

        try:
            existing = self.storage.read_text(CHANGELOG_FILENAME, CHANGELOG_DIR_NAME)
            changelog = upsert_changelog(existing, result.run_date, render_changelog_entry(result))
            if changelog != existing:
                self.storage.save_text(CHANGELOG_FILENAME, changelog, CHANGELOG_DIR_NAME)
        except (OSError, UnicodeDecodeError) as e:
            path = f"{CHANGELOG_DIR_NAME}/{CHANGELOG_FILENAME}"
            logger.error(f"Failed to update {path}: {e}")
            result.failures[path] = str(e)

    def run(
        self,
        inventory: Inventory,
        day: date,
        token: CancellationToken | None = None,
    ) -> FreshnessResult:
        """Run the freshness pass for a date.

        The summary and changelog are written even when a step fails or the
        run is cancelled; the exception then propagates.

        Args:
            inventory: Pages as they are before the run.
            day: Calendar date the site is refreshed for.
            token: Optional cancellation token.

        Returns:
            FreshnessResult with the change list.

        Raises:
            ArtifactWriteError: If any file could not be written.
            RunCancelled: If cancellation was requested between pages.
        """
        token = token or CancellationToken()
        tip, insight = daily_texts(day)
        result = FreshnessResult(
            run_date=day,
            timestamp=day_timestamp(day),
            next_update=day + timedelta(days=1),
            rotation_index=rotation_index(day),
            banner_text=tip,
            insight_text=insight,
        )
        logger.info(f"Freshness update for {day.isoformat()} (rotation {result.rotation_index})")

        try:
            logger.info("Step 1/6: Structured-data dates")
            self._update_structured_dates(result, inventory.pages, token)

            logger.info("Step 2/6: Homepage banner")
            self._update_homepage(result, inventory, token)

            logger.info("Step 3/6: Document insight notes")
            self._update_documents(result, inventory, token)

            logger.info("Step 4/6: Service worker cache version")
            self._update_service_worker(result, token)

            logger.info("Step 5/6: Discovery artifacts")
            self._regenerate_discovery(result, token)

            logger.info("Step 6/6: robots.txt daily update")
            self._update_robots(result, token)
        finally:
            self.write_summary(result)

        logger.info(
            f"Freshness update done: {result.change_count} regions, {len(result.failures)} failures"
        )
        if result.failures:
            raise ArtifactWriteError(result.failures, result)
        return result
