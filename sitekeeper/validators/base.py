"""Base rule protocol defining the contract for all page rules."""

from typing import Any, Literal, Protocol

from sitekeeper.models.model_page import Inventory
from sitekeeper.models.model_validation import Severity, ValidationFinding
from sitekeeper.validators.page_document import PageDocument

Parsing = Literal["tree", "pattern"]


class BaseRule(Protocol):
    """Protocol defining the rule contract.

    A rule is a pure function of one page and the inventory: it reads the
    page bytes (and, for link and size rules, the files the page points to)
    and returns exactly one finding for that page. Rules never modify pages.

    Each rule declares how it reads the page:
    - "tree": needs the lenient HTML tree (BeautifulSoup, html.parser)
    - "pattern": works on the raw source with anchored regular expressions
    """

    rule_id: str
    parsing: Parsing

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        """Evaluate one page.

        Args:
            document: The page with its source and lazily built tree
            inventory: All pages of the run

        Returns:
            Exactly one finding for document.subject
        """
        ...


def finding(
    rule_id: str,
    severity: Severity,
    document: PageDocument,
    message: str,
    detail: dict[str, Any] | None = None,
) -> ValidationFinding:
    """Build a finding for a page."""
    return ValidationFinding(
        rule_id=rule_id,
        severity=severity,
        subject=document.subject,
        message=message,
        detail=detail,
    )
