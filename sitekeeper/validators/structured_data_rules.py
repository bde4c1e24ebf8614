"""JSON-LD presence, syntax and field-completeness rules."""

import json
from typing import Any

from sitekeeper.inventory.jsonld import iter_records
from sitekeeper.models.model_page import Inventory
from sitekeeper.models.model_validation import Severity, ValidationFinding
from sitekeeper.validators.base import Parsing, finding
from sitekeeper.validators.page_document import PageDocument

# Missing any of these fails the page
REQUIRED_FIELDS: dict[str, list[str]] = {
    "WebPage": ["name", "description", "url"],
    "Article": ["headline", "author", "datePublished"],
    "Organization": ["name", "url"],
    "WebSite": ["name", "url"],
    "BreadcrumbList": ["itemListElement"],
}

# Missing any of these only warns
RECOMMENDED_FIELDS: dict[str, list[str]] = {
    "WebPage": ["author", "datePublished", "dateModified"],
    "Article": ["description", "image", "publisher"],
    "Organization": ["logo", "description", "sameAs"],
    "WebSite": ["description", "publisher", "potentialAction"],
}

BREADCRUMB_ITEM_FIELDS = ["position", "name", "item"]


def _is_missing(value: Any) -> bool:
    return value in (None, "", [], {})


def _types_of(record: dict[str, Any]) -> list[str]:
    declared = record.get("@type")
    if isinstance(declared, str):
        return [declared]
    if isinstance(declared, list):
        return [t for t in declared if isinstance(t, str)]
    return []


def parse_blocks(document: PageDocument) -> tuple[list[Any], list[str]]:
    """Parse every JSON-LD block of a page.

    Returns:
        Tuple of (parsed payloads, error messages for blocks that did not parse).
    """
    payloads: list[Any] = []
    errors: list[str] = []
    for index, raw in enumerate(document.jsonld_scripts(), start=1):
        if not raw:
            errors.append(f"Block {index}: empty JSON-LD script")
            continue
        try:
            payloads.append(json.loads(raw))
        except json.JSONDecodeError as e:
            errors.append(f"Block {index}: invalid JSON ({e.msg} at line {e.lineno} column {e.colno})")
    return payloads, errors


class StructuredDataPresentRule:
    rule_id = "structured-data-present"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        count = len(document.jsonld_scripts())
        if count:
            return finding(
                self.rule_id,
                Severity.PASS,
                document,
                f"Page has {count} JSON-LD block(s).",
                {"count": count},
            )
        return finding(self.rule_id, Severity.FAIL, document, "Page has no JSON-LD block.")


class StructuredDataWellFormedRule:
    """Every block parses, and every record has @context and @type."""

    rule_id = "structured-data-well-formed"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        payloads, errors = parse_blocks(document)
        if not payloads and not errors:
            return finding(self.rule_id, Severity.PASS, document, "No JSON-LD blocks to check.")

        for index, payload in enumerate(payloads, start=1):
            # @context may sit on a wrapping object or list item carrying @graph
            top_level = payload if isinstance(payload, list) else [payload]
            for item in top_level:
                if not isinstance(item, dict):
                    errors.append(f"Block {index}: top-level value is not an object")
                    continue
                if "@context" not in item:
                    errors.append(f"Block {index}: missing @context")
                records = list(iter_records(item))
                if any("@type" not in record for record in records):
                    errors.append(f"Block {index}: record without @type")

        if errors:
            return finding(
                self.rule_id,
                Severity.FAIL,
                document,
                f"Structured data is malformed: {errors[0]}.",
                {"errors": errors},
            )
        return finding(self.rule_id, Severity.PASS, document, "All JSON-LD blocks are well-formed.")


def check_record(record: dict[str, Any]) -> tuple[list[str], list[str]]:
    """Field completeness of one record.

    Returns:
        Tuple of (missing required fields, missing recommended fields), each
        entry formatted as 'Type.field'.
    """
    missing_required: list[str] = []
    missing_recommended: list[str] = []

    for schema_type in _types_of(record):
        for field_name in REQUIRED_FIELDS.get(schema_type, []):
            if _is_missing(record.get(field_name)):
                missing_required.append(f"{schema_type}.{field_name}")
        for field_name in RECOMMENDED_FIELDS.get(schema_type, []):
            if _is_missing(record.get(field_name)):
                missing_recommended.append(f"{schema_type}.{field_name}")

        if schema_type == "BreadcrumbList":
            items = record.get("itemListElement")
            if not _is_missing(items) and not isinstance(items, list):
                missing_required.append("BreadcrumbList.itemListElement[]")
            for position, item in enumerate(items if isinstance(items, list) else [], start=1):
                if not isinstance(item, dict):
                    missing_required.append(f"BreadcrumbList.itemListElement[{position}]")
                    continue
                for field_name in BREADCRUMB_ITEM_FIELDS:
                    if _is_missing(item.get(field_name)):
                        missing_required.append(
                            f"BreadcrumbList.itemListElement[{position}].{field_name}"
                        )

    return missing_required, missing_recommended


class StructuredDataRequiredFieldsRule:
    """Required fields per type fail when missing; recommended fields warn.

    Blocks that do not parse are skipped here; the well-formed rule reports them.
    """

    rule_id = "structured-data-required-fields"
    parsing: Parsing = "tree"

    def evaluate(self, document: PageDocument, inventory: Inventory) -> ValidationFinding:
        payloads, _ = parse_blocks(document)
        records = [record for payload in payloads for record in iter_records(payload)]
        if not records:
            return finding(self.rule_id, Severity.PASS, document, "No structured records to check.")

        missing_required: list[str] = []
        missing_recommended: list[str] = []
        for record in records:
            required, recommended = check_record(record)
            missing_required.extend(required)
            missing_recommended.extend(recommended)

        detail = {"missing_required": missing_required, "missing_recommended": missing_recommended}
        if missing_required:
            return finding(
                self.rule_id,
                Severity.FAIL,
                document,
                f"Missing required structured-data fields: {', '.join(missing_required)}.",
                detail,
            )
        if missing_recommended:
            return finding(
                self.rule_id,
                Severity.WARN,
                document,
                f"Missing recommended structured-data fields: {', '.join(missing_recommended)}.",
                detail,
            )
        return finding(
            self.rule_id,
            Severity.PASS,
            document,
            f"All {len(records)} structured record(s) carry their fields.",
        )
