"""Static analyzers and the extension registry that dispatches to them."""

from __future__ import annotations

from typing import Dict, List, Sequence

from .base import NullAnalyzer, ParseError, SourceAnalyzer
from .dependencies import MANIFEST_FILES, extract_dependencies
from .javascript import JavaScriptAnalyzer
from .language import detect_language, detect_project_type
from ..logging import get_logger
from ..models import StructuralSummary

logger = get_logger("analyzers")

UNSUPPORTED = NullAnalyzer()


class AnalyzerRegistry:
    """Closed mapping of file extension to the analyzer that parses it."""

    def __init__(self, analyzers: Sequence[SourceAnalyzer] | None = None) -> None:
        self._by_extension: Dict[str, SourceAnalyzer] = {}
        for analyzer in analyzers if analyzers is not None else (JavaScriptAnalyzer(),):
            for extension in analyzer.extensions:
                self._by_extension[extension.lower()] = analyzer

    @property
    def extensions(self) -> List[str]:
        return sorted(self._by_extension)

    def resolve(self, extension: str) -> SourceAnalyzer:
        """Return the analyzer for ``extension``, or the no-op handler."""
        return self._by_extension.get(extension.lower(), UNSUPPORTED)

    def analyze(self, content: str, extension: str) -> StructuralSummary:
        """Summarise ``content``; parse failures degrade to the empty summary."""
        analyzer = self.resolve(extension)
        try:
            return analyzer.analyze(content)
        except ParseError as exc:
            logger.debug("Static analysis skipped for %s content: %s", extension, exc)
        except (RecursionError, ValueError, UnicodeError) as exc:
            logger.warning("Static analysis failed for %s content: %s", extension, exc)
        return StructuralSummary()


_default_registry: AnalyzerRegistry | None = None


def default_registry() -> AnalyzerRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = AnalyzerRegistry()
    return _default_registry


def analyze_source(content: str, extension: str) -> StructuralSummary:
    """Return the structural summary of one file using the default registry."""
    return default_registry().analyze(content, extension)


__all__ = [
    "AnalyzerRegistry",
    "MANIFEST_FILES",
    "NullAnalyzer",
    "ParseError",
    "SourceAnalyzer",
    "UNSUPPORTED",
    "analyze_source",
    "default_registry",
    "detect_language",
    "detect_project_type",
    "extract_dependencies",
]
