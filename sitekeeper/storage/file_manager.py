"""File-based storage for pipeline reports and rewritten site files.

Provides operations for:
- Atomic text writes (temp file in the same directory, then rename)
- JSON reports under build-reports/ and analytics-reports/
- Standalone report files (HTML, Markdown) in the same directories
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from sitekeeper.consts import ANALYTICS_DIR_NAME, CHANGELOG_DIR_NAME, REPORTS_DIR_NAME
from sitekeeper.storage.base import PermanentStorage

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644


def atomic_write_text(path: Path, text: str) -> None:
    """Write text so readers see either the old or the new file, never a partial one.

    The permission bits of an existing file are kept.

    Args:
        path: Destination file.
        text: Full file contents, written as UTF-8 with '\\n' newlines.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = (path.stat().st_mode & 0o777) if path.exists() else DEFAULT_FILE_MODE

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class FileManager(PermanentStorage):
    """Report storage rooted at a site directory.

    Directory structure:
        <site root>/
        ├── build-reports/{key}.json | .html    # Size, validation, run reports
        ├── analytics-reports/{key}.json         # Daily freshness summaries
        └── changelog/DAILY_UPDATES.md           # Freshness changelog
    """

    REPORTS = REPORTS_DIR_NAME
    ANALYTICS = ANALYTICS_DIR_NAME

    def __init__(self, site_root: Path | str):
        """Initialize FileManager for a site.

        Args:
            site_root: Root directory of the site.
        """
        self.site_root = Path(site_root)
        self.reports_dir = self.site_root / REPORTS_DIR_NAME
        self.analytics_dir = self.site_root / ANALYTICS_DIR_NAME
        self.changelog_dir = self.site_root / CHANGELOG_DIR_NAME

    def _ensure_dirs(self, *dirs: Path) -> None:
        """Create directories if they don't exist."""
        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)

    def _category_dir(self, category: str) -> Path:
        return self.site_root / category

    def save(self, key: str, data: Any, category: str = REPORTS) -> Path:
        """Save a JSON report.

        Args:
            key: Report file stem, e.g. 'size-alerts'.
            data: Pydantic model or JSON-serializable data.
            category: Reports directory name (REPORTS or ANALYTICS).

        Returns:
            Path where the report was stored.
        """
        category_dir = self._category_dir(category)
        self._ensure_dirs(category_dir)

        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")

        path = self.report_path(key, category)
        atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n")
        logger.info(f"Wrote report {path}")
        return path

    def report_path(self, key: str, category: str = REPORTS) -> Path:
        """Where the JSON report for a key is stored."""
        return self._category_dir(category) / f"{key}.json"

    def load(self, key: str, category: str = REPORTS) -> Any | None:
        path = self.report_path(key, category)
        if not path.exists():
            return None

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load {key} from {category}: {e}")
            return None

    def save_text(self, filename: str, text: str, category: str = REPORTS) -> Path:
        """Save a non-JSON report file (HTML summary, changelog).

        Args:
            filename: File name including extension.
            text: File contents.
            category: Directory name under the site root.

        Returns:
            Path where the file was stored.
        """
        category_dir = self._category_dir(category)
        self._ensure_dirs(category_dir)
        path = category_dir / filename
        atomic_write_text(path, text)
        logger.info(f"Wrote {path}")
        return path

    def read_text(self, filename: str, category: str) -> str | None:
        """Read a report file, None if it does not exist."""
        path = self._category_dir(category) / filename
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")
