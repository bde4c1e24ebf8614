"""Storage for reports and atomic file writes."""

from sitekeeper.storage.base import PermanentStorage
from sitekeeper.storage.file_manager import FileManager, atomic_write_text

__all__ = ["FileManager", "PermanentStorage", "atomic_write_text"]
