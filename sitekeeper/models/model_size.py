from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from sitekeeper.models.common import _utc_now


class SizeClass(str, Enum):
    """Line-budget classification of a source file."""

    OK = "ok"
    WARN = "warn"
    ERROR = "error"


class FileKind(str, Enum):
    """Source file family, decides which split anchors apply."""

    MARKUP = "markup"
    STYLE = "style"
    SCRIPT = "script"


class AnchorTag(str, Enum):
    """Syntactic anchor a split suggestion sits on."""

    CLASS = "class"
    FUNCTION = "function"
    EXPORT = "export"
    SECTION_COMMENT = "section-comment"
    MEDIA_QUERY = "media-query"
    COMPONENT_COMMENT = "component-comment"
    SECTION_ELEMENT = "section-element"
    SCRIPT_ELEMENT = "script-element"
    STYLE_ELEMENT = "style-element"
    LINE_BOUNDARY = "line-boundary"


class SplitAnchor(BaseModel):
    """A line that matched one of the anchor patterns."""

    line: int = Field(description="1-based line number")
    tag: AnchorTag
    text: str = Field(description="Stripped source line")


class SplitSuggestion(BaseModel):
    """Advisory place to break an oversized file."""

    line: int = Field(description="1-based line where the new part would start")
    tag: AnchorTag
    description: str


class SizeReport(BaseModel):
    """Line-budget result for one source file."""

    path: str = Field(description="File path relative to the site root")
    kind: FileKind
    lines: int
    size_bytes: int
    classification: SizeClass
    excess: int = Field(default=0, description="Lines over the error threshold")
    suggestions: list[SplitSuggestion] = Field(default_factory=list)


class SizeAlert(BaseModel):
    """One entry of size-alerts.json."""

    level: SizeClass
    file: str
    lines: int
    excess: int = Field(description="Lines over the threshold that was crossed")
    message: str
    timestamp: datetime = Field(default_factory=_utc_now)


class SizeSummary(BaseModel):
    """Totals over all size reports of a run."""

    total_files: int = 0
    total_lines: int = 0
    average_lines: float = 0.0
    ok: int = 0
    warnings: int = 0
    errors: int = 0


class SplitResult(BaseModel):
    """Files produced by a mechanical split."""

    source: str
    backup: str
    parts: list[str] = Field(default_factory=list)
