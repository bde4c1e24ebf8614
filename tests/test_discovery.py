"""Tests for robots.txt, sitemaps and structured-data records."""

import xml.etree.ElementTree as ET
from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest

from sitekeeper.config import load_site_config
from sitekeeper.discovery.generator import DiscoveryArtifactGenerator
from sitekeeper.discovery.robots_writer import extract_daily_block, render_robots
from sitekeeper.discovery.sitemap_writer import (
    absolute_url,
    build_entries,
    check_entry,
    render_sitemap_index,
    render_urlset,
)
from sitekeeper.discovery.structured_data import build_structured_records
from sitekeeper.errors import ArtifactWriteError
from sitekeeper.inventory.page_inventory import build_inventory
from sitekeeper.models.model_config import SiteConfig
from sitekeeper.models.model_page import Inventory, Page, PageKind
from sitekeeper.models.model_sitemap import SitemapEntry
from sitekeeper.models.model_validation import Severity

NS = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}
TODAY = date(2026, 10, 17)
GENERATED_AT = "2026-10-17T00:00:00+00:00"
ARTIFACTS = [
    "sitemap.xml",
    "sitemap-documents.xml",
    "sitemap-comparisons.xml",
    "sitemap-index.xml",
    "robots.txt",
]


def _locs(path: Path) -> list[str]:
    root = ET.fromstring(path.read_text(encoding="utf-8"))
    return [loc.text or "" for loc in root.iter(f"{{{NS['sm']}}}loc")]


def build_entries_for(pages: list[Page], config: SiteConfig) -> list[SitemapEntry]:
    return build_entries(Inventory(site_root=Path("."), pages=pages), config, TODAY)


@pytest.fixture
def config() -> SiteConfig:
    return SiteConfig(site_url="https://example.com", site_name="LLM Tools Hub")


class TestSitemapWriter:
    """Tests for sitemap entries and serialization."""

    def test_absolute_url(self, config: SiteConfig) -> None:
        """Test base URL and path are joined with a single slash."""
        assert absolute_url(config, "/") == "https://example.com/"
        assert absolute_url(config, "/documents/a b.html") == "https://example.com/documents/a%20b.html"

    def test_entries_use_kind_defaults(self, site_root: Path, config: SiteConfig) -> None:
        """Test priority and changefreq come from the kind table."""
        entries = build_entries(build_inventory(site_root), config, TODAY)
        by_path = {e.path: e for e in entries}

        assert by_path["/"].priority == 1.0
        assert by_path["/"].changefreq == "weekly"
        assert by_path["/documents/guide.html"].priority == 0.8
        assert by_path["/comparisons/models.html"].priority == 0.9
        assert by_path["/documents/guide.html"].lastmod == "2026-02-10"

    def test_check_entry_flags_out_of_range_values(self) -> None:
        """Test invalid values produce a warning but are kept."""
        entry = SitemapEntry(
            path="/x.html",
            loc="https://example.com/x.html",
            lastmod="2026-10-17",
            changefreq="sometimes",
            priority=1.5,
            kind="other",
        )
        finding = check_entry(entry)
        assert finding.severity == Severity.WARN
        assert len(finding.detail["problems"]) == 2

        xml = render_urlset([entry])
        assert "<priority>1.5</priority>" in xml
        assert "<changefreq>sometimes</changefreq>" in xml

    def test_urlset_child_order(self, config: SiteConfig) -> None:
        """Test children are emitted as loc, lastmod, changefreq, priority."""
        page = Page(path="/", kind=PageKind.HOMEPAGE, source_file=Path("index.html"))
        entries = build_entries_for([page], config)
        root = ET.fromstring(render_urlset(entries))
        url = root.find("sm:url", NS)
        assert url is not None
        assert [child.tag.split("}")[1] for child in url] == [
            "loc",
            "lastmod",
            "changefreq",
            "priority",
        ]
        assert url.findtext("sm:lastmod", namespaces=NS) == TODAY.isoformat()

    def test_empty_urlset_is_well_formed(self) -> None:
        """Test a sitemap without entries still parses."""
        root = ET.fromstring(render_urlset([]))
        assert root.tag == f"{{{NS['sm']}}}urlset"
        assert len(root) == 0

    def test_sitemap_index(self) -> None:
        """Test every named sitemap gets the run date."""
        xml = render_sitemap_index(["https://example.com/sitemap.xml"], TODAY)
        root = ET.fromstring(xml)
        assert root.findtext("sm:sitemap/sm:lastmod", namespaces=NS) == "2026-10-17"
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n')


class TestRobotsWriter:
    """Tests for robots.txt rendering."""

    def test_layout_order(self, config: SiteConfig) -> None:
        """Test sections appear in the fixed order."""
        text = render_robots(config, ["https://example.com/sitemap-index.xml"], GENERATED_AT)
        lines = text.splitlines()

        assert lines[0] == "# Robots.txt for LLM Tools Hub"
        assert lines[2] == f"# Last updated: {GENERATED_AT}"
        assert text.index("User-agent: *") < text.index("Disallow: /admin/")
        assert text.index("Disallow: /admin/") < text.index("Allow: /assets/")
        assert text.index("Allow: /assets/") < text.index("Crawl-delay: 1")
        assert text.index("Crawl-delay: 1") < text.index("Sitemap: ")
        assert text.endswith("Sitemap: https://example.com/sitemap-index.xml\n")

    def test_agent_groups_in_config_order(self, config: SiteConfig) -> None:
        """Test one group per agent, in configured order."""
        text = render_robots(config, [], GENERATED_AT)
        agents = [line.split(": ", 1)[1] for line in text.splitlines() if line.startswith("User-agent:")]
        assert agents == config.allowed_agents

    def test_daily_block_kept_before_crawl_delay(self, config: SiteConfig) -> None:
        """Test an existing daily block survives regeneration."""
        block = (
            "# sitekeeper:daily-update:start\n"
            "# Daily Update: Fresh content\n"
            "# sitekeeper:daily-update:end\n"
        )
        text = render_robots(config, [], GENERATED_AT, block)
        assert extract_daily_block(text) == block
        assert text.index(block) < text.index("# Crawl delay for respectful crawling")


class TestDiscoveryArtifactGenerator:
    """Tests for writing all discovery artifacts."""

    def test_generate_writes_all_artifacts(self, site_root: Path) -> None:
        """Test every artifact is written and parses."""
        config = load_site_config(site_root, env={})
        generator = DiscoveryArtifactGenerator(site_root, config)
        result = generator.generate(build_inventory(site_root), TODAY, GENERATED_AT)

        assert result.written == ARTIFACTS
        assert all(f.severity == Severity.PASS for f in result.findings)
        assert _locs(site_root / "sitemap.xml") == [
            "https://example.com/",
            "https://example.com/comparisons/models.html",
            "https://example.com/documents/guide.html",
        ]
        assert _locs(site_root / "sitemap-documents.xml") == [
            "https://example.com/documents/guide.html"
        ]
        assert "Crawl-delay: 2" in (site_root / "robots.txt").read_text(encoding="utf-8")

    def test_generate_is_deterministic(self, site_root: Path) -> None:
        """Test the same inputs give byte-identical artifacts."""
        config = load_site_config(site_root, env={})
        generator = DiscoveryArtifactGenerator(site_root, config)
        inventory = build_inventory(site_root)

        generator.generate(inventory, TODAY, GENERATED_AT)
        first = {name: (site_root / name).read_bytes() for name in ARTIFACTS}
        generator.generate(inventory, TODAY, GENERATED_AT)
        second = {name: (site_root / name).read_bytes() for name in ARTIFACTS}
        assert first == second

    def test_empty_comparisons_directory(
        self, temp_dir: Path, write_file: Callable[[str, str], Path], page_html: Callable[..., str]
    ) -> None:
        """Test the comparisons sitemap exists and is empty when there are no comparisons."""
        write_file("index.html", page_html("<h1>Home</h1>"))
        write_file("documents/a.html", page_html("<h1>A</h1>"))
        (temp_dir / "comparisons").mkdir()

        generator = DiscoveryArtifactGenerator(temp_dir, SiteConfig(site_url="https://example.com"))
        generator.generate(build_inventory(temp_dir), TODAY, GENERATED_AT)

        comparisons = ET.fromstring((temp_dir / "sitemap-comparisons.xml").read_text(encoding="utf-8"))
        assert comparisons.findall("sm:url", NS) == []
        assert "https://example.com/sitemap-comparisons.xml" in _locs(temp_dir / "sitemap-index.xml")

    def test_env_base_url_override(self, site_root: Path) -> None:
        """Test an overridden base URL reaches every loc and Sitemap line."""
        config = load_site_config(site_root, env={"SITE_URL": "https://example.org"})
        DiscoveryArtifactGenerator(site_root, config).generate(
            build_inventory(site_root), TODAY, GENERATED_AT
        )

        for name in ARTIFACTS[:4]:
            locs = _locs(site_root / name)
            assert all(loc.startswith("https://example.org/") for loc in locs)

        robots = (site_root / "robots.txt").read_text(encoding="utf-8")
        sitemap_lines = [line for line in robots.splitlines() if line.startswith("Sitemap:")]
        assert len(sitemap_lines) == 4
        assert all(line.startswith("Sitemap: https://example.org/") for line in sitemap_lines)

    def test_write_failure_does_not_stop_other_artifacts(self, site_root: Path) -> None:
        """Test one unwritable artifact is reported after the rest are written."""
        (site_root / "sitemap-documents.xml").mkdir()
        config = load_site_config(site_root, env={})
        generator = DiscoveryArtifactGenerator(site_root, config)

        with pytest.raises(ArtifactWriteError) as exc_info:
            generator.generate(build_inventory(site_root), TODAY, GENERATED_AT)

        assert list(exc_info.value.failures) == [str(site_root / "sitemap-documents.xml")]
        assert (site_root / "robots.txt").exists()
        assert (site_root / "sitemap-index.xml").exists()


class TestStructuredData:
    """Tests for recommended JSON-LD records."""

    def test_homepage_is_website(self, config: SiteConfig) -> None:
        """Test the homepage gets a WebSite record and no breadcrumb."""
        page = Page(path="/", kind=PageKind.HOMEPAGE, source_file=Path("index.html"))
        records = build_structured_records(page, config, title="Home", description="Hub")
        assert [r["@type"] for r in records] == ["WebSite"]
        assert records[0]["url"] == "https://example.com"

    def test_document_gets_article_and_breadcrumb(self, config: SiteConfig) -> None:
        """Test nested pages get a breadcrumb starting at Home."""
        page = Page(
            path="/documents/getting-started.html",
            kind=PageKind.DOCUMENT,
            source_file=Path("documents/getting-started.html"),
            date_published=date(2026, 1, 5),
        )
        records = build_structured_records(page, config, title="Getting Started")
        assert [r["@type"] for r in records] == ["Article", "BreadcrumbList"]

        crumbs = records[1]["itemListElement"]
        assert crumbs[0]["name"] == "Home"
        assert [c["position"] for c in crumbs] == list(range(1, len(crumbs) + 1))
        assert crumbs[-1]["item"] == "https://example.com/documents/getting-started.html"
