"""Tests for the page validator rules and registry."""

from collections.abc import Callable
from pathlib import Path

import pytest

from sitekeeper.cancellation import CancellationToken
from sitekeeper.errors import RunCancelled
from sitekeeper.inventory.page_inventory import build_inventory
from sitekeeper.models.model_page import Inventory, Page, PageKind
from sitekeeper.models.model_validation import Severity
from sitekeeper.reporting.aggregator import summarize_findings
from sitekeeper.validators.base import BaseRule
from sitekeeper.validators.markup_rules import (
    EscapedMarkupArtifactRule,
    ImageAltTextRule,
    InternalLinkIntegrityRule,
)
from sitekeeper.validators.page_document import PageDocument
from sitekeeper.validators.registry import ValidatorRegistry
from sitekeeper.validators.seo_rules import (
    CanonicalPresentRule,
    HeadingHierarchyRule,
    MetaDescriptionLengthRule,
    OpenGraphCoreRule,
    SingleH1Rule,
    TitleLengthRule,
    TitlePresentRule,
    ViewportPresentRule,
)
from sitekeeper.validators.structured_data_rules import (
    StructuredDataPresentRule,
    StructuredDataRequiredFieldsRule,
    StructuredDataWellFormedRule,
)
from sitekeeper.validators.weight_rules import CssSizeRule, FileSizePageRule, JsSizeRule

TRAILING_COMMA_JSONLD = """{
  "@context": "https://schema.org",
  "@type": "WebPage",
  "name": "Broken",
}"""


@pytest.fixture
def make_document(
    temp_dir: Path, write_file: Callable[[str, str], Path]
) -> Callable[[str, str], PageDocument]:
    """Write a page under the temp root and wrap it for the rules."""

    def _make(html: str, relative: str = "documents/page.html") -> PageDocument:
        write_file(relative, html)
        path = "/" if relative == "index.html" else f"/{relative}"
        page = Page(path=path, kind=PageKind.DOCUMENT, source_file=Path(relative))
        return PageDocument.load(page, temp_dir)

    return _make


def _inventory(document: PageDocument) -> Inventory:
    return Inventory(site_root=document.site_root, pages=[document.page])


def _severity(rule: BaseRule, document: PageDocument) -> Severity:
    result = rule.evaluate(document, _inventory(document))
    assert result.rule_id == rule.rule_id
    assert result.subject == document.subject
    return result.severity


class TestHeadRules:
    """Tests for title, description, viewport, canonical and Open Graph rules."""

    def test_missing_canonical_and_58_char_title(
        self, make_document: Callable[..., PageDocument], page_html: Callable[..., str]
    ) -> None:
        """Test canonical warns and a 58-character title passes."""
        title = ("LLM guide " * 6)[:58]
        assert len(title) == 58
        document = make_document(page_html("<h1>Guide</h1>", title=title, canonical=None))

        canonical = CanonicalPresentRule().evaluate(document, _inventory(document))
        title_length = TitleLengthRule().evaluate(document, _inventory(document))
        assert canonical.severity == Severity.WARN
        assert title_length.severity == Severity.PASS

        summary = summarize_findings([canonical, title_length])
        assert (summary.passed, summary.warnings, summary.failed) == (1, 1, 0)

    def test_title_rules(self, make_document: Callable[..., PageDocument]) -> None:
        """Test missing, empty and short titles."""
        missing = make_document("<html><head></head><body><h1>x</h1></body></html>")
        assert _severity(TitlePresentRule(), missing) == Severity.FAIL
        assert _severity(TitleLengthRule(), missing) == Severity.WARN

        empty = make_document("<html><head><title>  </title></head></html>", "b.html")
        assert _severity(TitlePresentRule(), empty) == Severity.FAIL

        short = make_document("<html><head><title>Home</title></head></html>", "c.html")
        assert _severity(TitlePresentRule(), short) == Severity.PASS
        assert _severity(TitleLengthRule(), short) == Severity.WARN

    def test_description_length(
        self, make_document: Callable[..., PageDocument], page_html: Callable[..., str]
    ) -> None:
        """Test a short description warns."""
        document = make_document(page_html("<h1>x</h1>", description="Too short."))
        assert _severity(MetaDescriptionLengthRule(), document) == Severity.WARN

    def test_attribute_names_are_case_insensitive(
        self, make_document: Callable[..., PageDocument]
    ) -> None:
        """Test upper-case tags and single-quoted values are recognized."""
        document = make_document(
            "<HTML><HEAD><META NAME='Viewport' CONTENT='width=device-width'>"
            "<LINK REL='Canonical' HREF='https://example.com/'></HEAD></HTML>"
        )
        assert _severity(ViewportPresentRule(), document) == Severity.PASS
        assert _severity(CanonicalPresentRule(), document) == Severity.PASS

    def test_open_graph_needs_three_tags(
        self, make_document: Callable[..., PageDocument], page_html: Callable[..., str]
    ) -> None:
        """Test three core tags pass and two warn."""
        complete = make_document(page_html("<h1>x</h1>"))
        assert _severity(OpenGraphCoreRule(), complete) == Severity.PASS

        partial = make_document(
            '<html><head><meta property="og:title" content="T">'
            '<meta property="og:type" content="website"></head></html>',
            "partial.html",
        )
        assert _severity(OpenGraphCoreRule(), partial) == Severity.WARN


class TestHeadingRules:
    """Tests for h1 count and heading hierarchy."""

    def test_single_h1(self, make_document: Callable[..., PageDocument]) -> None:
        """Test zero h1 fails and two warn."""
        none = make_document("<body><h2>x</h2></body>", "none.html")
        two = make_document("<body><h1>a</h1><h1>b</h1></body>", "two.html")
        one = make_document("<body><h1>a</h1></body>", "one.html")
        assert _severity(SingleH1Rule(), none) == Severity.FAIL
        assert _severity(SingleH1Rule(), two) == Severity.WARN
        assert _severity(SingleH1Rule(), one) == Severity.PASS

    def test_heading_hierarchy(self, make_document: Callable[..., PageDocument]) -> None:
        """Test a skipped level fails and going back up is allowed."""
        skip = make_document("<body><h1>a</h1><h3>b</h3></body>", "skip.html")
        ok = make_document("<body><h1>a</h1><h2>b</h2><h3>c</h3><h2>d</h2></body>", "ok.html")
        starts_low = make_document("<body><h2>a</h2><h3>b</h3></body>", "low.html")
        assert _severity(HeadingHierarchyRule(), skip) == Severity.FAIL
        assert _severity(HeadingHierarchyRule(), ok) == Severity.PASS
        assert _severity(HeadingHierarchyRule(), starts_low) == Severity.PASS


class TestStructuredDataRules:
    """Tests for JSON-LD rules."""

    def test_trailing_comma_is_malformed(
        self, make_document: Callable[..., PageDocument], page_html: Callable[..., str]
    ) -> None:
        """Test invalid JSON fails the well-formed rule only."""
        document = make_document(page_html("<h1>x</h1>", jsonld=TRAILING_COMMA_JSONLD))
        assert _severity(StructuredDataPresentRule(), document) == Severity.PASS
        assert _severity(StructuredDataWellFormedRule(), document) == Severity.FAIL
        assert _severity(StructuredDataRequiredFieldsRule(), document) == Severity.PASS

    def test_missing_block(
        self, make_document: Callable[..., PageDocument], page_html: Callable[..., str]
    ) -> None:
        """Test a page without JSON-LD fails presence."""
        document = make_document(page_html("<h1>x</h1>"))
        assert _severity(StructuredDataPresentRule(), document) == Severity.FAIL
        assert _severity(StructuredDataWellFormedRule(), document) == Severity.PASS

    def test_missing_context(
        self, make_document: Callable[..., PageDocument], page_html: Callable[..., str]
    ) -> None:
        """Test a record without @context fails."""
        document = make_document(page_html("<h1>x</h1>", jsonld='{"@type": "WebPage"}'))
        assert _severity(StructuredDataWellFormedRule(), document) == Severity.FAIL

    def test_required_and_recommended_fields(
        self,
        make_document: Callable[..., PageDocument],
        page_html: Callable[..., str],
        page_jsonld: Callable[..., str],
    ) -> None:
        """Test missing required fields fail and missing recommended fields warn."""
        complete = make_document(page_html("<h1>x</h1>", jsonld=page_jsonld("https://example.com/a")))
        assert _severity(StructuredDataRequiredFieldsRule(), complete) == Severity.PASS

        no_author = make_document(
            page_html("<h1>x</h1>", jsonld=page_jsonld("https://example.com/b", author=None)),
            "b.html",
        )
        result = StructuredDataRequiredFieldsRule().evaluate(no_author, _inventory(no_author))
        assert result.severity == Severity.WARN
        assert result.detail["missing_recommended"] == ["WebPage.author"]

        no_url = make_document(
            page_html("<h1>x</h1>", jsonld=page_jsonld("")),
            "c.html",
        )
        result = StructuredDataRequiredFieldsRule().evaluate(no_url, _inventory(no_url))
        assert result.severity == Severity.FAIL
        assert result.detail["missing_required"] == ["WebPage.url"]

    def test_breadcrumb_items_need_fields(
        self, make_document: Callable[..., PageDocument], page_html: Callable[..., str]
    ) -> None:
        """Test a breadcrumb item without position fails."""
        jsonld = (
            '{"@context": "https://schema.org", "@type": "BreadcrumbList", '
            '"itemListElement": [{"@type": "ListItem", "name": "Home", '
            '"item": "https://example.com/"}]}'
        )
        document = make_document(page_html("<h1>x</h1>", jsonld=jsonld))
        result = StructuredDataRequiredFieldsRule().evaluate(document, _inventory(document))
        assert result.severity == Severity.FAIL
        assert "BreadcrumbList.itemListElement[1].position" in result.detail["missing_required"]


class TestMarkupRules:
    """Tests for images, links and markup artifacts."""

    def test_image_alt_text(self, make_document: Callable[..., PageDocument]) -> None:
        """Test images without alt fail, pages without images pass."""
        missing = make_document('<body><img src="a.png"><img src="b.png" alt="B"></body>')
        assert _severity(ImageAltTextRule(), missing) == Severity.FAIL
        no_images = make_document("<body><p>text</p></body>", "plain.html")
        assert _severity(ImageAltTextRule(), no_images) == Severity.PASS

    def test_internal_links(
        self, temp_dir: Path, write_file: Callable[[str, str], Path], make_document: Callable[..., PageDocument]
    ) -> None:
        """Test relative, root-relative, directory and fragment links."""
        write_file("index.html", "<html></html>")
        write_file("documents/other.html", "<html></html>")
        write_file("guides/index.html", "<html></html>")

        good = make_document(
            '<body><h2 id="intro">Intro</h2>'
            '<a href="other.html">a</a><a href="/index.html">b</a>'
            '<a href="../guides/">c</a><a href="#intro">d</a><a href="#">top</a>'
            '<a href="https://example.org/x">ext</a><a href="mailto:a@b.c">mail</a></body>'
        )
        result = InternalLinkIntegrityRule().evaluate(good, _inventory(good))
        assert result.severity == Severity.PASS

        bad = make_document(
            '<body><a href="missing.html">a</a><a href="#nowhere">b</a>'
            '<a href="../../outside.html">c</a></body>',
            "documents/bad.html",
        )
        result = InternalLinkIntegrityRule().evaluate(bad, _inventory(bad))
        assert result.severity == Severity.FAIL
        assert result.detail["broken"] == ["missing.html", "#nowhere", "../../outside.html"]

    def test_escaped_markup_artifact(self, make_document: Callable[..., PageDocument]) -> None:
        """Test a stray escaped tag tail and a duplicated script include are reported."""
        document = make_document(
            '<body><script src="/assets/js/app.js"></script>\n'
            "<p>ipt&gt;</p>\n"
            '<script src="/assets/js/app.js"></script></body>'
        )
        result = EscapedMarkupArtifactRule().evaluate(document, _inventory(document))
        assert result.severity == Severity.WARN
        assert result.detail["duplicate_scripts"] == ["/assets/js/app.js"]
        assert result.detail["fragments"] == ["ipt&gt;"]
        # The page is reported, never rewritten
        assert "ipt&gt;" in document.file_path.read_text(encoding="utf-8")

    def test_escaped_markup_in_code_is_fine(self, make_document: Callable[..., PageDocument]) -> None:
        """Test escaped tags inside code samples are not artifacts."""
        document = make_document("<body><pre>&lt;script src=\"x.js\"&gt;</pre></body>")
        assert _severity(EscapedMarkupArtifactRule(), document) == Severity.PASS


class TestWeightRules:
    """Tests for page, stylesheet and script size budgets."""

    def test_page_size(self, make_document: Callable[..., PageDocument]) -> None:
        """Test pages at or over 100 KiB warn."""
        small = make_document("<body>small</body>", "small.html")
        big = make_document("<body>" + "x" * (100 * 1024) + "</body>", "big.html")
        assert _severity(FileSizePageRule(), small) == Severity.PASS
        assert _severity(FileSizePageRule(), big) == Severity.WARN

    def test_referenced_assets(
        self, write_file: Callable[[str, str], Path], make_document: Callable[..., PageDocument]
    ) -> None:
        """Test a stylesheet at the limit warns and a small script passes."""
        write_file("assets/css/big.css", "a" * (50 * 1024))
        write_file("assets/js/app.js", "let a = 1;")
        document = make_document(
            '<html><head><link rel="stylesheet" href="/assets/css/big.css">'
            '<link rel="stylesheet" href="https://cdn.example.org/x.css">'
            '<script src="../assets/js/app.js"></script></head></html>'
        )
        assert _severity(CssSizeRule(), document) == Severity.WARN
        assert _severity(JsSizeRule(), document) == Severity.PASS


class TestValidatorRegistry:
    """Tests for running all rules."""

    def test_one_finding_per_rule_per_page(self, site_root: Path) -> None:
        """Test the fixture site produces one passing finding per rule per page."""
        registry = ValidatorRegistry()
        inventory = build_inventory(site_root)
        findings = registry.validate_inventory(inventory)

        assert len(registry.rule_ids) == 18
        assert len(findings) == 18 * len(inventory.pages)
        for page in inventory.pages:
            page_rules = [f.rule_id for f in findings if f.subject == page.path]
            assert page_rules == registry.rule_ids
        assert [f for f in findings if f.severity != Severity.PASS] == []

    def test_unreadable_page_is_skipped(self, site_root: Path) -> None:
        """Test a page that vanished after the inventory is skipped."""
        inventory = build_inventory(site_root)
        (site_root / "comparisons" / "models.html").unlink()

        findings = ValidatorRegistry().validate_inventory(inventory)
        assert {f.subject for f in findings} == {"/", "/documents/guide.html"}

    def test_cancellation_between_rules(self, site_root: Path) -> None:
        """Test a cancelled token stops before the next rule."""
        token = CancellationToken()
        token.cancel()
        with pytest.raises(RunCancelled):
            ValidatorRegistry().validate_inventory(build_inventory(site_root), token=token)
