"""Language and project-type classification."""

from __future__ import annotations

from typing import Iterable

from ..models import UNKNOWN_LANGUAGE

_LANGUAGE_BY_EXTENSION = {
    ".js": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".jsx": "JavaScript (React)",
    ".ts": "TypeScript",
    ".tsx": "TypeScript (React)",
    ".py": "Python",
    ".java": "Java",
    ".php": "PHP",
    ".rb": "Ruby",
    ".go": "Go",
    ".rs": "Rust",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".cs": "C#",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".hpp": "C++",
    ".cc": "C++",
}

# Checked top to bottom; the first ecosystem with a marker present wins, so a
# polyglot upload with both package.json and requirements.txt is Node.js.
PROJECT_TYPE_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Node.js/JavaScript", ("package.json",)),
    ("Python", ("requirements.txt", "pyproject.toml", "setup.py", "Pipfile")),
    ("Java", ("pom.xml", "build.gradle", "build.gradle.kts")),
    ("Ruby", ("Gemfile",)),
    ("Go", ("go.mod",)),
    ("Rust", ("Cargo.toml",)),
    ("PHP", ("composer.json",)),
)

GENERIC_PROJECT_TYPE = "Generic"


def detect_language(extension: str) -> str:
    """Map a file extension (with leading dot) to a language label."""
    return _LANGUAGE_BY_EXTENSION.get(extension.lower(), UNKNOWN_LANGUAGE)


def detect_project_type(file_names: Iterable[str]) -> str:
    """Guess the ecosystem of a project from the marker files it contains."""
    present = set(file_names)
    for project_type, markers in PROJECT_TYPE_MARKERS:
        if any(marker in present for marker in markers):
            return project_type
    return GENERIC_PROJECT_TYPE


__all__ = [
    "GENERIC_PROJECT_TYPE",
    "PROJECT_TYPE_MARKERS",
    "detect_language",
    "detect_project_type",
]
