from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Outcome of a rule for one subject."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class ValidationFinding(BaseModel):
    """Result of one rule evaluated against one subject."""

    rule_id: str
    severity: Severity
    subject: str = Field(description="Page path or file path the rule looked at")
    message: str
    detail: dict[str, Any] | None = None
