from datetime import date, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from sitekeeper.models.common import _utc_now


class PageKind(str, Enum):
    """Page classification derived from the page path."""

    HOMEPAGE = "homepage"
    DOCUMENT = "document"
    COMPARISON = "comparison"
    OTHER = "other"


class Page(BaseModel):
    """A single HTML file under the site root."""

    path: str = Field(description="Site-relative URL path in leading-slash form")
    kind: PageKind = Field(description="Classification by path prefix")
    source_file: Path = Field(description="File path relative to the site root")
    last_modified: date | None = Field(
        default=None, description="Declared dateModified, else filesystem mtime"
    )
    date_published: date | None = Field(default=None, description="Declared datePublished")
    date_modified: date | None = Field(default=None, description="Declared dateModified")

    @property
    def depth(self) -> int:
        """Number of non-empty path segments ('/' is 0, '/documents/a.html' is 2)."""
        return len([segment for segment in self.path.split("/") if segment])


class Inventory(BaseModel):
    """All pages discovered in one run, sorted by path."""

    site_root: Path
    pages: list[Page] = Field(default_factory=list)
    captured_at: datetime = Field(default_factory=_utc_now)

    def by_kind(self, kind: PageKind) -> list[Page]:
        return [page for page in self.pages if page.kind == kind]

    @property
    def homepage(self) -> Page | None:
        for page in self.pages:
            if page.kind == PageKind.HOMEPAGE:
                return page
        return None

    def find(self, path: str) -> Page | None:
        """Look up a page by URL path or by file path relative to the root."""
        normalized = path.replace("\\", "/")
        for page in self.pages:
            if page.path == normalized or page.source_file.as_posix() == normalized.lstrip("/"):
                return page
        return None

    def file_for(self, page: Page) -> Path:
        """Absolute file path of a page."""
        return self.site_root / page.source_file
