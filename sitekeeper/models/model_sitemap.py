from pydantic import BaseModel, Field

from sitekeeper.models.model_validation import ValidationFinding


class SitemapEntry(BaseModel):
    """One <url> element of a sitemap.

    Values are kept as produced, even when out of range, so that problems
    show up in the emitted file and in the pre-emission findings.
    """

    path: str = Field(description="Page path the entry was derived from")
    loc: str = Field(description="Absolute URL under the base URL")
    lastmod: str = Field(description="Last-modified date, YYYY-MM-DD")
    changefreq: str = Field(description="Change-frequency tag")
    priority: float = Field(description="Crawl priority, expected in [0.0, 1.0]")
    kind: str = Field(description="Page kind of the source page")


class DiscoveryResult(BaseModel):
    """What one discovery-artifact run produced."""

    written: list[str] = Field(default_factory=list, description="Artifact file names written")
    entries: list[SitemapEntry] = Field(default_factory=list)
    findings: list[ValidationFinding] = Field(default_factory=list)
