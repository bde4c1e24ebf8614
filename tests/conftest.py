"""Pytest configuration and fixtures."""

import json
import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

DEFAULT_TITLE = "LLM Toolkit Guide - Choosing Local and Hosted Models"
DEFAULT_DESCRIPTION = ("Practical notes on LLM tooling. " * 4).strip()
SITE_URL = "https://example.com"


def webpage_jsonld(url: str, **overrides: object) -> str:
    """A complete WebPage JSON-LD record, pretty-printed like hand-written pages."""
    record = {
        "@context": "https://schema.org",
        "@type": "WebPage",
        "name": "LLM Toolkit Guide",
        "description": DEFAULT_DESCRIPTION,
        "url": url,
        "author": {"@type": "Organization", "name": "LLM Tools Hub"},
        "datePublished": "2026-01-05",
        "dateModified": "2026-02-10",
    }
    record.update(overrides)
    return json.dumps(record, indent=2)


def render_page(
    body: str,
    title: str = DEFAULT_TITLE,
    description: str = DEFAULT_DESCRIPTION,
    canonical: str | None = SITE_URL + "/",
    jsonld: str | None = None,
) -> str:
    """A page with a complete head unless a part is switched off."""
    head = [
        '    <meta charset="utf-8">',
        '    <meta name="viewport" content="width=device-width, initial-scale=1">',
        f"    <title>{title}</title>",
        f'    <meta name="description" content="{description}">',
    ]
    if canonical is not None:
        head.append(f'    <link rel="canonical" href="{canonical}">')
    head.extend(
        [
            f'    <meta property="og:title" content="{title}">',
            f'    <meta property="og:description" content="{description}">',
            '    <meta property="og:type" content="website">',
        ]
    )
    if jsonld is not None:
        head.append('    <script type="application/ld+json">')
        head.append(jsonld)
        head.append("    </script>")

    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            *head,
            "</head>",
            "<body>",
            body,
            "</body>",
            "</html>",
            "",
        ]
    )


HOMEPAGE_BODY = """    <section class="hero">
        <h1>LLM Tools Hub</h1>
        <p>Guides and comparisons.</p>
    </section>
    <main>
        <h2>Start here</h2>
        <p><a href="documents/guide.html">Read the guide</a></p>
        <p><a href="comparisons/models.html">Compare models</a></p>
    </main>"""

GUIDE_BODY = """    <main>
        <h1>LLM Toolkit Guide</h1>
        <h2>Overview</h2>
        <p>What to look for in a toolkit.</p>
        <h2>Details</h2>
        <p><a href="../index.html">Home</a> <a href="#top">Top</a></p>
        <img src="../assets/chart.png" alt="Toolkit adoption chart">
    </main>"""

COMPARISON_BODY = """    <main>
        <h1>Model Comparison</h1>
        <h2>Results</h2>
        <p>Side by side.</p>
    </main>"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_file(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write a file relative to the temporary site root."""

    def _write(relative: str, content: str) -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def page_html() -> Callable[..., str]:
    """Expose render_page to tests."""
    return render_page


@pytest.fixture
def page_jsonld() -> Callable[..., str]:
    """Expose webpage_jsonld to tests."""
    return webpage_jsonld


@pytest.fixture
def site_root(temp_dir: Path, write_file: Callable[[str, str], Path]) -> Path:
    """A small, valid site: homepage, one document, one comparison, assets and config."""
    write_file(
        "index.html",
        render_page(HOMEPAGE_BODY, jsonld=webpage_jsonld(SITE_URL + "/")),
    )
    write_file(
        "documents/guide.html",
        render_page(
            GUIDE_BODY.replace('<h1>', '<h1 id="top">'),
            canonical=SITE_URL + "/documents/guide.html",
            jsonld=webpage_jsonld(SITE_URL + "/documents/guide.html"),
        ),
    )
    write_file(
        "comparisons/models.html",
        render_page(
            COMPARISON_BODY,
            canonical=SITE_URL + "/comparisons/models.html",
            jsonld=webpage_jsonld(SITE_URL + "/comparisons/models.html"),
        ),
    )
    write_file("assets/chart.png", "not really a png")
    write_file("assets/css/site.css", "body {\n    margin: 0;\n}\n")
    write_file("sw.js", "const CACHE_VERSION = 'v2026.01.01';\nself.addEventListener('install', () => {});\n")
    write_file("node_modules/pkg/index.html", "<html><body>vendored</body></html>")
    write_file(".git/notes.html", "<html><body>hidden</body></html>")
    write_file(
        "sitemap-config.json",
        json.dumps(
            {
                "siteUrl": SITE_URL,
                "siteName": "LLM Tools Hub",
                "crawlDelay": 2,
                "allowedBots": ["*", "Googlebot"],
            }
        ),
    )
    return temp_dir
