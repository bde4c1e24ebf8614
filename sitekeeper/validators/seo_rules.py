"""Head metadata and heading-structure rules."""

import re

from sitekeeper.consts import (
    META_DESCRIPTION_LENGTH_RANGE,
    MIN_OPEN_GRAPH_TAGS,
    TITLE_LENGTH_RANGE,
)
from sitekeeper.models.model_page import Inventory
from sitekeeper.models.model_validation import Severity, ValidationFinding
from sitekeeper.validators.base import Parsing, finding
from sitekeeper.validators.page_document import PageDocument

HEADING_RE = re.compile(r"^h[1-6]$")
OPEN_GRAPH_CORE = ["og:title", "og:description", "og:type", "og:url"]


def _normalized_text(text: str) -> str:
    return " ".join(text.split())


def _titles(document: PageDocument) -> list[str]:
    return [
        _normalized_text(title.get_text())
        for title in document.head_or_document().find_all("title")
    ]


def _description(document: PageDocument) -> str:
    for meta in document.meta_by_name("description"):
        content = _normalized_text(str(meta.get("content", "")))
        if content:
            return content
    return ""


class TitlePresentRule:
    """Exactly one non-empty <title> in the head."""

    rule_id = "title-present"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        titles = _titles(document)
        non_empty = [t for t in titles if t]

        if len(titles) == 1 and non_empty:
            return finding(self.rule_id, Severity.PASS, document, "Page has one title.")
        if not titles:
            return finding(self.rule_id, Severity.FAIL, document, "Page has no title element.")
        if not non_empty:
            return finding(self.rule_id, Severity.FAIL, document, "Page title is empty.")
        return finding(
            self.rule_id,
            Severity.FAIL,
            document,
            f"Page has {len(titles)} title elements, expected one.",
            {"count": len(titles)},
        )


class TitleLengthRule:
    """Title length within the recommended range."""

    rule_id = "title-length"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        low, high = TITLE_LENGTH_RANGE
        titles = [t for t in _titles(document) if t]
        if not titles:
            return finding(self.rule_id, Severity.WARN, document, "No title to measure.")

        length = len(titles[0])
        detail = {"length": length, "min": low, "max": high}
        if low <= length <= high:
            return finding(
                self.rule_id, Severity.PASS, document, f"Title length {length} is in range.", detail
            )
        return finding(
            self.rule_id,
            Severity.WARN,
            document,
            f"Title length {length} is outside [{low}, {high}].",
            detail,
        )


class MetaDescriptionPresentRule:
    rule_id = "meta-description-present"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        if _description(document):
            return finding(self.rule_id, Severity.PASS, document, "Meta description present.")
        return finding(
            self.rule_id, Severity.FAIL, document, "Meta description is missing or empty."
        )


class MetaDescriptionLengthRule:
    rule_id = "meta-description-length"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        low, high = META_DESCRIPTION_LENGTH_RANGE
        description = _description(document)
        if not description:
            return finding(self.rule_id, Severity.WARN, document, "No meta description to measure.")

        length = len(description)
        detail = {"length": length, "min": low, "max": high}
        if low <= length <= high:
            return finding(
                self.rule_id,
                Severity.PASS,
                document,
                f"Meta description length {length} is in range.",
                detail,
            )
        return finding(
            self.rule_id,
            Severity.WARN,
            document,
            f"Meta description length {length} is outside [{low}, {high}].",
            detail,
        )


class ViewportPresentRule:
    rule_id = "viewport-present"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        if document.meta_by_name("viewport"):
            return finding(self.rule_id, Severity.PASS, document, "Viewport meta present.")
        return finding(self.rule_id, Severity.FAIL, document, "Viewport meta element is missing.")


class CanonicalPresentRule:
    rule_id = "canonical-present"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        canonicals = [link for link in document.links_with_rel("canonical") if link.get("href")]
        if canonicals:
            return finding(
                self.rule_id,
                Severity.PASS,
                document,
                "Canonical link present.",
                {"href": str(canonicals[0]["href"])},
            )
        return finding(self.rule_id, Severity.WARN, document, "Canonical link element is missing.")


class SingleH1Rule:
    """Exactly one h1: none is a failure, several is a warning."""

    rule_id = "single-h1"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        count = len(document.soup.find_all("h1"))
        if count == 1:
            return finding(self.rule_id, Severity.PASS, document, "Page has one h1.")
        if count == 0:
            return finding(self.rule_id, Severity.FAIL, document, "Page has no h1.")
        return finding(
            self.rule_id,
            Severity.WARN,
            document,
            f"Page has {count} h1 elements.",
            {"count": count},
        )


class HeadingHierarchyRule:
    """Headings never go down more than one level at a time."""

    rule_id = "heading-hierarchy"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        heading_seq = [int(tag.name[1]) for tag in document.soup.find_all(HEADING_RE)]
        skips = [
            f"h{heading_seq[i - 1]}->h{heading_seq[i]}"
            for i in range(1, len(heading_seq))
            if heading_seq[i] > heading_seq[i - 1] + 1
        ]
        if skips:
            return finding(
                self.rule_id,
                Severity.FAIL,
                document,
                f"Heading levels skip {len(skips)} time(s): {', '.join(skips)}.",
                {"skips": skips},
            )
        return finding(self.rule_id, Severity.PASS, document, "Heading levels do not skip.")


class OpenGraphCoreRule:
    rule_id = "open-graph-core"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        present = [
            prop
            for prop in OPEN_GRAPH_CORE
            if any(str(m.get("content", "")).strip() for m in document.meta_by_property(prop))
        ]
        detail = {"present": present}
        if len(present) >= MIN_OPEN_GRAPH_TAGS:
            return finding(
                self.rule_id,
                Severity.PASS,
                document,
                f"{len(present)} of {len(OPEN_GRAPH_CORE)} core Open Graph tags present.",
                detail,
            )
        return finding(
            self.rule_id,
            Severity.WARN,
            document,
            f"Only {len(present)} of {len(OPEN_GRAPH_CORE)} core Open Graph tags present.",
            detail,
        )
