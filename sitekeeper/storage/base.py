"""Abstract base class for report storage backends.

Reports are JSON documents grouped by category. A category maps to one
reports directory under the site root.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class PermanentStorage(ABC):
    """Interface for storing and retrieving JSON reports by category."""

    @abstractmethod
    def save(self, key: str, data: Any, category: str) -> Path:
        """Save data to storage.

        Args:
            key: Report name within the category (file stem).
            data: JSON-serializable data or a pydantic model.
            category: Category the report belongs to.

        Returns:
            Path where data was stored.
        """
        ...

    @abstractmethod
    def load(self, key: str, category: str) -> Any | None:
        """Load data from storage.

        Args:
            key: Report name within the category.
            category: Category to look in.

        Returns:
            Stored data if found and readable, None otherwise.
        """
        ...
