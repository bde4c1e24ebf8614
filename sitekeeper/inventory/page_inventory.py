"""Page inventory: walk the site root and describe every HTML page."""

import logging
import os
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from sitekeeper.consts import (
    ASSETS_DIR_NAME,
    DEPENDENCY_DIR_NAME,
    HIDDEN_DIR_PREFIX,
    MINIFIED_SUFFIXES,
    REPORTS_DIR_NAME,
)
from sitekeeper.errors import TraversalError
from sitekeeper.inventory.classification import classify_path, page_path_for
from sitekeeper.inventory.jsonld import declared_dates
from sitekeeper.models.model_page import Inventory, Page

logger = logging.getLogger(__name__)


class ExclusionPolicy(BaseModel):
    """Which directories and files a site walk skips."""

    skip_hidden: bool = Field(default=True, description="Skip directories starting with '.'")
    excluded_dir_names: set[str] = Field(
        default_factory=lambda: {DEPENDENCY_DIR_NAME, REPORTS_DIR_NAME},
        description="Directory names skipped at any depth",
    )
    excluded_root_dirs: set[str] = Field(
        default_factory=set,
        description="Directory names skipped only directly under the site root",
    )
    skip_minified: bool = Field(default=False, description="Skip *.min.js and *.min.css")

    @classmethod
    def for_pages(cls) -> "ExclusionPolicy":
        """Policy for the page inventory (static assets are not pages)."""
        return cls(excluded_root_dirs={ASSETS_DIR_NAME})

    @classmethod
    def for_sources(cls) -> "ExclusionPolicy":
        """Policy for the size governor (assets included, minified output skipped)."""
        return cls(skip_minified=True)

    def skips_dir(self, name: str, at_root: bool) -> bool:
        if self.skip_hidden and name.startswith(HIDDEN_DIR_PREFIX):
            return True
        if name in self.excluded_dir_names:
            return True
        return at_root and name in self.excluded_root_dirs

    def skips_file(self, name: str) -> bool:
        return self.skip_minified and name.endswith(MINIFIED_SUFFIXES)


def walk_site(
    site_root: Path,
    suffixes: set[str] | frozenset[str],
    policy: ExclusionPolicy,
) -> list[Path]:
    """List files under the site root with one of the given suffixes.

    Symlinked directories are followed once; a directory whose real path was
    already visited is skipped, which breaks symlink loops.

    Args:
        site_root: Directory to walk.
        suffixes: Lower-case file suffixes to keep, e.g. {'.html'}.
        policy: Exclusion policy for directories and files.

    Returns:
        File paths relative to the site root, sorted.

    Raises:
        TraversalError: If a directory cannot be listed.
    """
    site_root = Path(site_root)
    visited: set[Path] = set()
    found: list[Path] = []

    def _walk(directory: Path) -> None:
        real = directory.resolve()
        if real in visited:
            logger.warning(f"Skipping already visited directory (symlink loop?): {directory}")
            return
        visited.add(real)

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise TraversalError(directory, e.strerror or str(e)) from e

        for entry in entries:
            entry_path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=True)
            except OSError:
                logger.warning(f"Cannot stat {entry_path}, skipping")
                continue

            if is_dir:
                if policy.skips_dir(entry.name, at_root=directory == site_root):
                    logger.debug(f"Excluded directory: {entry_path}")
                    continue
                _walk(entry_path)
            elif entry_path.suffix.lower() in suffixes and not policy.skips_file(entry.name):
                found.append(entry_path.relative_to(site_root))

    _walk(site_root)
    return sorted(found, key=lambda p: p.as_posix())


def build_page(site_root: Path, relative_file: Path) -> Page | None:
    """Describe one HTML file.

    Args:
        site_root: Site root directory.
        relative_file: HTML file path relative to the root.

    Returns:
        The Page, or None if the file could not be read.
    """
    file_path = site_root / relative_file
    try:
        html = file_path.read_text(encoding="utf-8")
        mtime = file_path.stat().st_mtime
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping unreadable page {file_path}: {e}")
        return None

    path = page_path_for(relative_file.as_posix())
    published, modified = declared_dates(html)

    return Page(
        path=path,
        kind=classify_path(path),
        source_file=relative_file,
        last_modified=modified or date.fromtimestamp(mtime),
        date_published=published,
        date_modified=modified,
    )


def build_inventory(site_root: Path | str, policy: ExclusionPolicy | None = None) -> Inventory:
    """Build the inventory of all pages under a site root.

    Args:
        site_root: Site root directory.
        policy: Exclusion policy (defaults to ExclusionPolicy.for_pages()).

    Returns:
        Inventory with pages sorted by path.

    Raises:
        TraversalError: If any directory under the root cannot be listed.
    """
    site_root = Path(site_root)
    policy = policy or ExclusionPolicy.for_pages()

    if not site_root.is_dir():
        raise TraversalError(site_root, "not a directory")

    pages = []
    for relative_file in walk_site(site_root, {".html"}, policy):
        page = build_page(site_root, relative_file)
        if page is not None:
            pages.append(page)

    pages.sort(key=lambda p: p.path)
    inventory = Inventory(site_root=site_root, pages=pages)

    if inventory.homepage is None:
        logger.warning(f"No homepage (index.html) found under {site_root}")

    logger.info(f"Inventory: {len(pages)} pages under {site_root}")
    return inventory
