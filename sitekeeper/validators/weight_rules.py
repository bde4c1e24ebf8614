"""Page-weight heuristics: page, stylesheet and script sizes."""

from sitekeeper.consts import MAX_PAGE_BYTES, MAX_SCRIPT_BYTES, MAX_STYLESHEET_BYTES
from sitekeeper.models.model_page import Inventory
from sitekeeper.models.model_validation import Severity, ValidationFinding
from sitekeeper.validators.base import Parsing, finding
from sitekeeper.validators.markup_rules import ABSOLUTE_LINK_RE, resolve_local_target
from sitekeeper.validators.page_document import PageDocument


def _kib(size: int) -> str:
    return f"{size / 1024:.1f} KiB"


def referenced_sizes(document: PageDocument, references: list[str]) -> dict[str, int]:
    """Byte sizes of local files a page references.

    Remote references and files that do not exist are left out.
    """
    sizes: dict[str, int] = {}
    for reference in references:
        reference = reference.strip()
        if not reference or ABSOLUTE_LINK_RE.match(reference):
            continue
        target = resolve_local_target(document, reference)
        if target is not None and target.is_file():
            sizes[reference] = target.stat().st_size
    return sizes


class FileSizePageRule:
    rule_id = "file-size-page"
    parsing: Parsing = "pattern"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        size = document.size_bytes
        detail = {"bytes": size, "limit": MAX_PAGE_BYTES}
        if size < MAX_PAGE_BYTES:
            return finding(self.rule_id, Severity.PASS, document, f"Page is {_kib(size)}.", detail)
        return finding(
            self.rule_id,
            Severity.WARN,
            document,
            f"Page is {_kib(size)}, over the {_kib(MAX_PAGE_BYTES)} budget.",
            detail,
        )


class _ReferencedAssetSizeRule:
    """Shared check for assets a page pulls in."""

    rule_id = ""
    parsing: Parsing = "tree"
    limit = 0
    asset_name = ""

    def references(self, document: PageDocument) -> list[str]:
        raise NotImplementedError

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        sizes = referenced_sizes(document, self.references(document))
        oversized = {ref: size for ref, size in sizes.items() if size >= self.limit}
        if oversized:
            listed = ", ".join(f"{ref} ({_kib(size)})" for ref, size in oversized.items())
            return finding(
                self.rule_id,
                Severity.WARN,
                document,
                f"{self.asset_name} over the {_kib(self.limit)} budget: {listed}.",
                {"oversized": oversized, "limit": self.limit},
            )
        return finding(
            self.rule_id,
            Severity.PASS,
            document,
            f"{len(sizes)} local {self.asset_name.lower()} within budget.",
            {"checked": sizes},
        )


class CssSizeRule(_ReferencedAssetSizeRule):
    rule_id = "css-size"
    limit = MAX_STYLESHEET_BYTES
    asset_name = "Stylesheets"

    def references(self, document: PageDocument) -> list[str]:
        return [str(link.get("href", "")) for link in document.links_with_rel("stylesheet")]


class JsSizeRule(_ReferencedAssetSizeRule):
    rule_id = "js-size"
    limit = MAX_SCRIPT_BYTES
    asset_name = "Scripts"

    def references(self, document: PageDocument) -> list[str]:
        return [str(script["src"]) for script in document.soup.find_all("script", src=True)]
