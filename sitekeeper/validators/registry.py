"""Validator registry for running the fixed rule set over an inventory."""

import logging

from sitekeeper.cancellation import CancellationToken
from sitekeeper.models.model_page import Inventory, Page
from sitekeeper.models.model_validation import Severity, ValidationFinding
from sitekeeper.validators.base import BaseRule
from sitekeeper.validators.markup_rules import (
    EscapedMarkupArtifactRule,
    ImageAltTextRule,
    InternalLinkIntegrityRule,
)
from sitekeeper.validators.page_document import PageDocument
from sitekeeper.validators.seo_rules import (
    CanonicalPresentRule,
    HeadingHierarchyRule,
    MetaDescriptionLengthRule,
    MetaDescriptionPresentRule,
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

logger = logging.getLogger(__name__)


class ValidatorRegistry:
    """Runs every page rule and collects one finding per rule per page.

    The rule set is fixed. Rules run in a stable order so reports are
    reproducible, and cancellation is honored between rules.
    """

    def __init__(self) -> None:
        """Initialize registry with all rules."""
        rules: list[BaseRule] = [
            TitlePresentRule(),
            TitleLengthRule(),
            MetaDescriptionPresentRule(),
            MetaDescriptionLengthRule(),
            ViewportPresentRule(),
            CanonicalPresentRule(),
            SingleH1Rule(),
            HeadingHierarchyRule(),
            StructuredDataPresentRule(),
            StructuredDataWellFormedRule(),
            StructuredDataRequiredFieldsRule(),
            ImageAltTextRule(),
            OpenGraphCoreRule(),
            InternalLinkIntegrityRule(),
            FileSizePageRule(),
            CssSizeRule(),
            JsSizeRule(),
            EscapedMarkupArtifactRule(),
        ]
        self.rules = {rule.rule_id: rule for rule in rules}

    @property
    def rule_ids(self) -> list[str]:
        return list(self.rules)

    def validate_document(
        self,
        document: PageDocument,
        inventory: Inventory,
        token: CancellationToken | None = None,
    ) -> list[ValidationFinding]:
        """Run every rule against one page.

        Args:
            document: Page to validate
            inventory: All pages of the run
            token: Optional cancellation token, checked before each rule

        Returns:
            One finding per rule, in rule order
        """
        token = token or CancellationToken()
        findings = []
        for rule_id, rule in self.rules.items():
            token.raise_if_cancelled(f"rule {rule_id} on {document.subject}")
            result = rule.evaluate(document, inventory)
            logger.debug(f"{document.subject} {rule_id}: {result.severity.value}")
            findings.append(result)
        return findings

    def validate_inventory(
        self,
        inventory: Inventory,
        pages: list[Page] | None = None,
        token: CancellationToken | None = None,
    ) -> list[ValidationFinding]:
        """Validate pages of an inventory.

        Pages that cannot be read are logged and skipped.

        Args:
            inventory: All pages of the run
            pages: Subset to validate (defaults to every page)
            token: Optional cancellation token

        Returns:
            Findings grouped by page, pages in inventory order
        """
        findings: list[ValidationFinding] = []
        for page in pages if pages is not None else inventory.pages:
            try:
                document = PageDocument.load(page, inventory.site_root)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable page {page.source_file}: {e}")
                continue
            findings.extend(self.validate_document(document, inventory, token))

        failed = sum(1 for f in findings if f.severity == Severity.FAIL)
        logger.info(f"Validated {len(findings)} rule results, {failed} failing")
        return findings
