"""Read-only view of one page for the validator rules."""

import re
from functools import cached_property
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from sitekeeper.models.model_page import Page

JSONLD_TYPE_RE = re.compile(r"application/ld\+json", re.IGNORECASE)


class PageDocument:
    """A page's raw source plus a lazily built, lenient HTML tree.

    The tree is only for reading. Rules that match surface patterns use
    `html` directly so they see the bytes exactly as authored.
    """

    def __init__(self, page: Page, html: str, site_root: Path, size_bytes: int | None = None):
        self.page = page
        self.html = html
        self.site_root = Path(site_root)
        self.size_bytes = size_bytes if size_bytes is not None else len(html.encode("utf-8"))

    @classmethod
    def load(cls, page: Page, site_root: Path) -> "PageDocument":
        """Read a page from disk.

        Raises:
            OSError: If the file cannot be read.
            UnicodeDecodeError: If the file is not UTF-8.
        """
        file_path = Path(site_root) / page.source_file
        raw = file_path.read_bytes()
        return cls(page, raw.decode("utf-8"), site_root, size_bytes=len(raw))

    @property
    def subject(self) -> str:
        return self.page.path

    @property
    def file_path(self) -> Path:
        return self.site_root / self.page.source_file

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    def head_or_document(self) -> Tag:
        """The <head> element, or the whole document when there is none."""
        return self.soup.head or self.soup

    def meta_by_name(self, name: str) -> list[Tag]:
        """<meta name=...> elements, name compared case-insensitively."""
        wanted = name.lower()
        return [
            meta
            for meta in self.soup.find_all("meta")
            if str(meta.get("name", "")).strip().lower() == wanted
        ]

    def meta_by_property(self, prop: str) -> list[Tag]:
        """<meta property=...> elements (Open Graph), also accepting name=."""
        wanted = prop.lower()
        matches = []
        for meta in self.soup.find_all("meta"):
            declared = meta.get("property") or meta.get("name") or ""
            if str(declared).strip().lower() == wanted:
                matches.append(meta)
        return matches

    def links_with_rel(self, rel: str) -> list[Tag]:
        """<link> elements whose rel list contains rel (case-insensitive)."""
        wanted = rel.lower()
        matches = []
        for link in self.soup.find_all("link"):
            rels = link.get("rel") or []
            if isinstance(rels, str):
                rels = rels.split()
            if wanted in (r.lower() for r in rels):
                matches.append(link)
        return matches

    def jsonld_scripts(self) -> list[str]:
        """Raw text of every JSON-LD script block, in document order."""
        scripts = self.soup.find_all("script", attrs={"type": JSONLD_TYPE_RE})
        return [(script.string or script.get_text() or "").strip() for script in scripts]

    @cached_property
    def element_ids(self) -> set[str]:
        return {str(tag["id"]) for tag in self.soup.find_all(id=True)}
