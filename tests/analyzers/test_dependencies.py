"""Tests for manifest dependency extraction."""

from __future__ import annotations

import json

import pytest

from codemedic.analyzers.base import ParseError
from codemedic.analyzers.dependencies import (
    extract_dependencies,
    parse_package_json,
    parse_pyproject,
    parse_requirements,
)
from codemedic.models import AnalyzedFile, StructuralSummary


def _manifest(name: str, content: str) -> AnalyzedFile:
    return AnalyzedFile(
        name=name,
        content=content,
        size_bytes=len(content),
        line_count=len(content.split("\n")),
        extension="",
        language="Unknown",
        summary=StructuralSummary(),
    )


def test_package_json_merges_runtime_and_dev_dependencies() -> None:
    content = json.dumps(
        {
            "dependencies": {"express": "^4.18.0", "shared": "1.0.0"},
            "devDependencies": {"jest": "^29.0.0", "shared": "2.0.0"},
        }
    )

    assert parse_package_json(content) == {
        "express": "^4.18.0",
        "jest": "^29.0.0",
        "shared": "2.0.0",
    }


def test_package_json_rejects_malformed_content() -> None:
    with pytest.raises(ParseError):
        parse_package_json("{not json")
    with pytest.raises(ParseError):
        parse_package_json("[]")


def test_malformed_manifest_is_skipped() -> None:
    files = [_manifest("package.json", "{"), _manifest("index.js", "")]

    assert extract_dependencies(files) == {}


def test_only_manifest_named_files_are_read() -> None:
    files = [_manifest("config.json", json.dumps({"dependencies": {"a": "1"}}))]

    assert extract_dependencies(files) == {}


def test_requirements_txt_parses_pins_and_unpinned_entries() -> None:
    content = "\n".join(
        [
            "# web stack",
            "fastapi==0.110.0",
            "uvicorn[standard]>=0.29",
            "requests",
            "-r other.txt",
            "pytest ; python_version > '3.8'",
        ]
    )

    assert parse_requirements(content) == {
        "fastapi": "==0.110.0",
        "uvicorn": ">=0.29",
        "requests": "*",
        "pytest": "*",
    }


def test_pyproject_collects_pep621_and_poetry_tables() -> None:
    content = "\n".join(
        [
            "[project]",
            'dependencies = ["jinja2>=3.1", "pyyaml"]',
            "",
            "[project.optional-dependencies]",
            'test = ["pytest>=8"]',
            "",
            "[tool.poetry.dependencies]",
            'python = "^3.11"',
            'httpx = { version = "^0.27" }',
        ]
    )

    assert parse_pyproject(content) == {
        "jinja2": ">=3.1",
        "pyyaml": "*",
        "pytest": ">=8",
        "httpx": "^0.27",
    }


def test_extract_dependencies_groups_by_ecosystem() -> None:
    files = [
        _manifest("package.json", json.dumps({"dependencies": {"react": "18.2.0"}})),
        _manifest("requirements.txt", "flask==3.0.0\n"),
        _manifest("composer.json", json.dumps({"require": {"laravel/framework": "^10.0"}})),
    ]

    assert extract_dependencies(files) == {
        "npm": {"react": "18.2.0"},
        "pypi": {"flask": "==3.0.0"},
        "composer": {"laravel/framework": "^10.0"},
    }


@pytest.mark.parametrize(
    "content",
    [
        "[project]\ndependencies = 5\n",
        '[project]\ndependencies = "requests"\n',
        "[project.optional-dependencies]\ntest = 3\n",
    ],
)
def test_pyproject_with_scalar_dependency_fields_yields_nothing(content: str) -> None:
    assert parse_pyproject(content) == {}


def test_pyproject_scalar_fields_keep_valid_groups() -> None:
    content = "\n".join(
        [
            "[project]",
            "dependencies = 5",
            "",
            "[project.optional-dependencies]",
            "broken = true",
            'docs = ["mkdocs>=1.5"]',
        ]
    )

    assert extract_dependencies([_manifest("pyproject.toml", content)]) == {
        "pypi": {"mkdocs": ">=1.5"}
    }
