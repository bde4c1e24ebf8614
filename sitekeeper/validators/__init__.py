"""Page validation rules and their registry."""

from sitekeeper.validators.base import BaseRule
from sitekeeper.validators.page_document import PageDocument
from sitekeeper.validators.registry import ValidatorRegistry

__all__ = ["BaseRule", "PageDocument", "ValidatorRegistry"]
