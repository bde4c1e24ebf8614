"""Daily freshness pass: rotation, anchored rewrites, updater."""

from sitekeeper.freshness.rotation import daily_texts, day_of_year, rotation_index
from sitekeeper.freshness.updater import FreshnessUpdater

__all__ = ["FreshnessUpdater", "daily_texts", "day_of_year", "rotation_index"]
