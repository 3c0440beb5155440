"""Base class for primary-export classifiers."""

from abc import ABC, abstractmethod


class ExportClassifier(ABC):
    """Decides whether a module's source text declares a primary (default) export."""

    @abstractmethod
    def has_primary_export(self, source: str) -> bool:
        """Return True when ``source`` marks a symbol as its default export."""
