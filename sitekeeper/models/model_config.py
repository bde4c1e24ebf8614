from pydantic import BaseModel, ConfigDict, Field

from sitekeeper.consts import (
    DEFAULT_ALLOWED_AGENTS,
    DEFAULT_ALLOWED_PATHS,
    DEFAULT_CRAWL_DELAY,
    DEFAULT_DISALLOWED_PATHS,
    DEFAULT_PAGE_TYPES,
    DEFAULT_SITE_NAME,
    DEFAULT_SITE_URL,
)
from sitekeeper.models.model_page import PageKind


class PageTypeDefaults(BaseModel):
    """Sitemap priority and change frequency for one page kind."""

    priority: float
    changefreq: str


def _default_page_types() -> dict[str, PageTypeDefaults]:
    return {
        kind: PageTypeDefaults(priority=priority, changefreq=changefreq)
        for kind, (priority, changefreq) in DEFAULT_PAGE_TYPES.items()
    }


class SiteConfig(BaseModel):
    """Site-wide settings read from sitemap-config.json."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    site_url: str = Field(default=DEFAULT_SITE_URL, alias="siteUrl")
    site_name: str = Field(default=DEFAULT_SITE_NAME, alias="siteName")
    crawl_delay: int = Field(default=DEFAULT_CRAWL_DELAY, alias="crawlDelay")
    allowed_agents: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_AGENTS), alias="allowedBots"
    )
    disallowed_paths: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DISALLOWED_PATHS), alias="disallowedPaths"
    )
    allowed_paths: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_PATHS), alias="allowedPaths"
    )
    page_types: dict[str, PageTypeDefaults] = Field(
        default_factory=_default_page_types, alias="pageTypes"
    )

    @property
    def base_url(self) -> str:
        return self.site_url.rstrip("/")

    def defaults_for(self, kind: PageKind) -> PageTypeDefaults:
        """Priority and change frequency for a page kind.

        'page' is accepted as a config key for the 'other' kind. Kinds missing
        from the config fall back to the built-in table.
        """
        if kind.value in self.page_types:
            return self.page_types[kind.value]
        if kind == PageKind.OTHER and "page" in self.page_types:
            return self.page_types["page"]
        priority, changefreq = DEFAULT_PAGE_TYPES[kind.value]
        return PageTypeDefaults(priority=priority, changefreq=changefreq)
