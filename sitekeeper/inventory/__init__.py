"""Page discovery and classification."""

from sitekeeper.inventory.classification import classify_path, page_path_for
from sitekeeper.inventory.page_inventory import (
    ExclusionPolicy,
    build_inventory,
    build_page,
    walk_site,
)

__all__ = [
    "ExclusionPolicy",
    "build_inventory",
    "build_page",
    "classify_path",
    "page_path_for",
    "walk_site",
]
