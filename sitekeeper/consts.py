# Configuration
CONFIG_FILENAME = "sitemap-config.json"
SITE_URL_ENV_VAR = "SITE_URL"

DEFAULT_SITE_URL = "https://llm-toolkit.github.io"
DEFAULT_SITE_NAME = "LLM Tools & AI Resources Hub"
DEFAULT_CRAWL_DELAY = 1

DEFAULT_ALLOWED_AGENTS = [
    "*",
    # Search engines
    "Googlebot",
    "Bingbot",
    "Slurp",
    "DuckDuckBot",
    "Baiduspider",
    "YandexBot",
    # LLM crawlers
    "GPTBot",
    "ChatGPT-User",
    "CCBot",
    "anthropic-ai",
    "Claude-Web",
]

DEFAULT_DISALLOWED_PATHS = ["/admin/", "/private/", "/.git/", "/node_modules/"]
DEFAULT_ALLOWED_PATHS = ["/assets/"]

# Per-kind sitemap defaults: kind -> (priority, changefreq)
DEFAULT_PAGE_TYPES = {
    "homepage": (1.0, "weekly"),
    "document": (0.8, "monthly"),
    "comparison": (0.9, "monthly"),
    "other": (0.7, "monthly"),
}

CHANGE_FREQUENCIES = frozenset(
    {"always", "hourly", "daily", "weekly", "monthly", "yearly", "never"}
)

# Site layout
DOCUMENTS_PREFIX = "/documents/"
COMPARISONS_PREFIX = "/comparisons/"

REPORTS_DIR_NAME = "build-reports"
ANALYTICS_DIR_NAME = "analytics-reports"
CHANGELOG_DIR_NAME = "changelog"
CHANGELOG_FILENAME = "DAILY_UPDATES.md"
HIDDEN_DIR_PREFIX = "."
DEPENDENCY_DIR_NAME = "node_modules"
ASSETS_DIR_NAME = "assets"
SERVICE_WORKER_FILENAME = "sw.js"

# Discovery artifacts
ROBOTS_FILENAME = "robots.txt"
SITEMAP_FILENAME = "sitemap.xml"
SITEMAP_INDEX_FILENAME = "sitemap-index.xml"
SITEMAP_DOCUMENTS_FILENAME = "sitemap-documents.xml"
SITEMAP_COMPARISONS_FILENAME = "sitemap-comparisons.xml"

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
SITEMAP_SCHEMA_LOCATION = (
    "http://www.sitemaps.org/schemas/sitemap/0.9 "
    "http://www.sitemaps.org/schemas/sitemap/0.9/sitemap.xsd"
)
SITEMAP_INDEX_SCHEMA_LOCATION = (
    "http://www.sitemaps.org/schemas/sitemap/0.9 "
    "http://www.sitemaps.org/schemas/sitemap/0.9/siteindex.xsd"
)

ROBOTS_CRAWL_DELAY_ANCHOR = "# Crawl delay for respectful crawling"

# Size governor
SIZE_WARN_LINES = 400
SIZE_ERROR_LINES = 500
SPLIT_TOLERANCE = 0.2
SOURCE_SUFFIXES = {".html": "markup", ".css": "style", ".js": "script"}
MINIFIED_SUFFIXES = (".min.js", ".min.css")

# Validator thresholds
TITLE_LENGTH_RANGE = (30, 60)
META_DESCRIPTION_LENGTH_RANGE = (120, 160)
MIN_OPEN_GRAPH_TAGS = 3
MAX_PAGE_BYTES = 100 * 1024
MAX_STYLESHEET_BYTES = 50 * 1024
MAX_SCRIPT_BYTES = 100 * 1024

# Grade thresholds, highest first
GRADE_THRESHOLDS = [(0.90, "A"), (0.80, "B"), (0.70, "C"), (0.60, "D")]

# Sentinel comment pairs. These strings are persisted in site files and must not change.
BANNER_SENTINEL_START = "<!-- sitekeeper:daily-banner:start -->"
BANNER_SENTINEL_END = "<!-- sitekeeper:daily-banner:end -->"
INSIGHT_SENTINEL_START = "<!-- sitekeeper:daily-insight:start -->"
INSIGHT_SENTINEL_END = "<!-- sitekeeper:daily-insight:end -->"
ROBOTS_SENTINEL_START = "# sitekeeper:daily-update:start"
ROBOTS_SENTINEL_END = "# sitekeeper:daily-update:end"

# Daily rotation, indexed by day-of-year % 7
HOMEPAGE_TIPS = [
    "💡 Daily Insight: Prompt structure often matters as much as model size for answer quality.",
    "🚀 Today's Focus: Attention optimizations keep shrinking the cost of long contexts.",
    "🔍 Fresh Perspective: Breaking a task into explicit reasoning steps tends to improve results.",
    "⚡ Current Trend: Running models on edge hardware is now practical for interactive use.",
    "🎯 Today's Tip: A fine-tuned small model can beat a large general model on a narrow task.",
    "🌟 Latest Update: Quantized weights make capable models fit on ordinary laptops.",
    "🔧 Developer Focus: Plan for rate limits and retries before shipping an LLM feature.",
]

DOCUMENT_INSIGHTS = [
    "Careful context management is one of the largest levers on LLM efficiency.",
    "Multi-modal benchmarks keep moving as vision and audio support matures.",
    "Adoption of local LLM tooling continues to grow across engineering teams.",
    "Picking a token budget per use case avoids paying for context you never read.",
    "Reasoning benchmarks show steady gains from one model generation to the next.",
    "Batching and caching strategies can cut inference cost substantially.",
    "Small, specific prompt changes are easier to evaluate than large rewrites.",
]
