"""Tests for language and project-type classification."""

from __future__ import annotations

import pytest

from codemedic.analyzers.language import GENERIC_PROJECT_TYPE, detect_language, detect_project_type


@pytest.mark.parametrize(
    ("extension", "expected"),
    [
        (".js", "JavaScript"),
        (".jsx", "JavaScript (React)"),
        (".ts", "TypeScript"),
        (".tsx", "TypeScript (React)"),
        (".py", "Python"),
        (".rs", "Rust"),
        (".PY", "Python"),
    ],
)
def test_detect_language_maps_known_extensions(extension: str, expected: str) -> None:
    assert detect_language(extension) == expected


def test_detect_language_unknown_extension() -> None:
    assert detect_language(".md") == "Unknown"
    assert detect_language("") == "Unknown"


def test_detect_project_type_prefers_node_marker_regardless_of_order() -> None:
    names = ["requirements.txt", "app.py", "package.json"]

    assert detect_project_type(names) == "Node.js/JavaScript"
    assert detect_project_type(reversed(names)) == "Node.js/JavaScript"


def test_detect_project_type_recognises_other_ecosystems() -> None:
    assert detect_project_type(["pyproject.toml"]) == "Python"
    assert detect_project_type(["pom.xml", "Main.java"]) == "Java"
    assert detect_project_type(["go.mod"]) == "Go"
    assert detect_project_type(["Cargo.toml"]) == "Rust"
    assert detect_project_type(["Gemfile"]) == "Ruby"
    assert detect_project_type(["composer.json"]) == "PHP"


def test_detect_project_type_falls_back_to_generic() -> None:
    assert detect_project_type(["notes.txt", "index.js"]) == GENERIC_PROJECT_TYPE
    assert detect_project_type([]) == "Generic"
