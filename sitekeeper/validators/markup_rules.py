"""Body markup rules: image alt text, internal links, escaped-markup artifacts."""

import os
import re
from collections import Counter
from pathlib import Path
from urllib.parse import unquote

from sitekeeper.models.model_page import Inventory
from sitekeeper.models.model_validation import Severity, ValidationFinding
from sitekeeper.validators.base import Parsing, finding
from sitekeeper.validators.page_document import PageDocument

# Scheme ('https:', 'mailto:', 'data:') or protocol-relative ('//cdn...')
ABSOLUTE_LINK_RE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.\-]*:|//)")

HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
PREFORMATTED_RE = re.compile(r"<(pre|code)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
ESCAPED_TAG_RE = re.compile(
    r"&lt;/?(?:script|style|link|meta|iframe)\b[^<>]*?&gt;"
    r"|\b(?:ipt|script|style)&gt;",
    re.IGNORECASE,
)
SCRIPT_SRC_RE = re.compile(
    r"<script\b[^>]*?\ssrc\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s>]+))",
    re.IGNORECASE,
)


def resolve_local_target(document: PageDocument, href: str) -> Path | None:
    """File a relative or root-relative reference points to.

    Query strings and fragments are dropped. Returns None when the reference
    escapes the site root.
    """
    target = unquote(href.split("#", 1)[0].split("?", 1)[0])
    site_root = document.site_root.resolve()
    if target.startswith("/"):
        candidate = site_root / target.lstrip("/")
    else:
        candidate = document.file_path.resolve().parent / target

    normalized = Path(os.path.normpath(candidate))
    if normalized != site_root and site_root not in normalized.parents:
        return None
    return normalized


def target_exists(path: Path) -> bool:
    """A file, or a directory that has an index.html."""
    if path.is_file():
        return True
    return path.is_dir() and (path / "index.html").is_file()


class ImageAltTextRule:
    rule_id = "image-alt-text"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        images = document.soup.find_all("img")
        if not images:
            return finding(self.rule_id, Severity.PASS, document, "No images found.")

        missing = [str(img.get("src", "")) for img in images if not str(img.get("alt", "")).strip()]
        if missing:
            return finding(
                self.rule_id,
                Severity.FAIL,
                document,
                f"{len(missing)} of {len(images)} image(s) lack alt text.",
                {"images": missing},
            )
        return finding(
            self.rule_id, Severity.PASS, document, f"All {len(images)} image(s) have alt text."
        )


class InternalLinkIntegrityRule:
    """Relative links resolve to a file or directory index; '#id' links to an element."""

    rule_id = "internal-link-integrity"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        broken: list[str] = []
        checked = 0

        for anchor in document.soup.find_all("a", href=True):
            href = str(anchor["href"]).strip()
            if not href or ABSOLUTE_LINK_RE.match(href):
                continue

            if href.startswith("#"):
                fragment = unquote(href[1:])
                if not fragment:
                    continue
                checked += 1
                if fragment not in document.element_ids:
                    broken.append(href)
                continue

            if href.startswith("?"):
                continue
            checked += 1
            target = resolve_local_target(document, href)
            if target is None or not target_exists(target):
                broken.append(href)

        if broken:
            return finding(
                self.rule_id,
                Severity.FAIL,
                document,
                f"{len(broken)} internal link(s) do not resolve.",
                {"broken": broken},
            )
        return finding(
            self.rule_id, Severity.PASS, document, f"All {checked} internal link(s) resolve."
        )


class EscapedMarkupArtifactRule:
    """Leftovers of partial edits: escaped tag fragments and repeated script includes.

    Reported only; the page is never normalized.
    """

    rule_id = "escaped-markup-artifact"
    parsing: Parsing = "pattern"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        source = HTML_COMMENT_RE.sub("", document.html)
        prose = PREFORMATTED_RE.sub("", source)

        fragments = [m.group(0) for m in ESCAPED_TAG_RE.finditer(prose)]
        sources = [next(g for g in m.groups() if g is not None) for m in SCRIPT_SRC_RE.finditer(source)]
        duplicates = sorted(src for src, count in Counter(sources).items() if count > 1 and src)

        if fragments or duplicates:
            problems = []
            if fragments:
                problems.append(f"{len(fragments)} escaped tag fragment(s)")
            if duplicates:
                problems.append(f"duplicate script include(s): {', '.join(duplicates)}")
            return finding(
                self.rule_id,
                Severity.WARN,
                document,
                f"Possible markup edit artifacts: {'; '.join(problems)}.",
                {"fragments": fragments, "duplicate_scripts": duplicates},
            )
        return finding(self.rule_id, Severity.PASS, document, "No markup edit artifacts found.")
