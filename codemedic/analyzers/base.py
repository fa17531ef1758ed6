"""Base classes for per-language source analyzers."""

from abc import ABC, abstractmethod
from typing import FrozenSet

from ..models import StructuralSummary


class ParseError(ValueError):
    """Raised when source or manifest content cannot be parsed."""


class SourceAnalyzer(ABC):
    """Contract for analyzers that summarise the structure of one source file."""

    extensions: FrozenSet[str] = frozenset()

    def supports(self, extension: str) -> bool:
        """Return True when this analyzer handles files with ``extension``."""
        return extension.lower() in self.extensions

    @abstractmethod
    def analyze(self, content: str) -> StructuralSummary:
        """Return the structural summary of ``content``, raising ParseError on bad input."""


class NullAnalyzer(SourceAnalyzer):
    """Handler for unsupported extensions: always the empty summary."""

    def supports(self, extension: str) -> bool:
        return True

    def analyze(self, content: str) -> StructuralSummary:
        return StructuralSummary()
