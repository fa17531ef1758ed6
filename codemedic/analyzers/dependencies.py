"""Dependency extraction from manifest files."""

from __future__ import annotations

import json
import re
import tomllib
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple

from .base import ParseError
from ..logging import get_logger
from ..models import AnalyzedFile

logger = get_logger("analyzers.dependencies")

_REQUIREMENT = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)\s*(?:\[[^\]]*\])?\s*([^;#]*)")

DependencyMap = Dict[str, str]


def extract_dependencies(files: Iterable[AnalyzedFile]) -> Dict[str, DependencyMap]:
    """Merge the dependencies declared by every recognised manifest, keyed by ecosystem.

    Manifests that fail to parse are logged and skipped; their ecosystem is
    only present when at least one manifest for it parsed.
    """
    dependencies: Dict[str, DependencyMap] = {}
    for file in files:
        handler = _MANIFEST_HANDLERS.get(file.name)
        if handler is None:
            continue
        ecosystem, parse = handler
        try:
            declared = parse(file.content)
        except ParseError as exc:
            logger.warning("Skipping malformed manifest %s: %s", file.name, exc)
            continue
        dependencies.setdefault(ecosystem, {}).update(declared)
    return dependencies


def parse_package_json(content: str) -> DependencyMap:
    """Return runtime and development dependencies of a package.json."""
    data = _load_json(content, "package.json")
    return _merge_sections(data, ("dependencies", "devDependencies"))


def parse_composer_json(content: str) -> DependencyMap:
    data = _load_json(content, "composer.json")
    return _merge_sections(data, ("require", "require-dev"))


def parse_requirements(content: str) -> DependencyMap:
    """Parse a pip requirements file; unpinned requirements map to ``*``."""
    packages: DependencyMap = {}
    for line in content.splitlines():
        stripped = line.split("#", 1)[0].strip()
        if not stripped or stripped.startswith("-"):
            continue
        name, version = _parse_requirement(stripped)
        if name:
            packages[name] = version
    return packages


def parse_pyproject(content: str) -> DependencyMap:
    """Collect PEP 621 and Poetry dependencies from a pyproject.toml."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ParseError(f"invalid TOML: {exc}") from exc

    packages: DependencyMap = {}
    project = data.get("project")
    if isinstance(project, dict):
        requirements: List[Any] = _as_list(project.get("dependencies"))
        optional = project.get("optional-dependencies")
        if isinstance(optional, dict):
            for values in optional.values():
                requirements.extend(_as_list(values))
        for requirement in requirements:
            if isinstance(requirement, str):
                name, version = _parse_requirement(requirement)
                if name:
                    packages[name] = version

    tool = data.get("tool")
    poetry = tool.get("poetry", {}) if isinstance(tool, dict) else {}
    if isinstance(poetry, dict):
        tables = [poetry.get("dependencies"), poetry.get("dev-dependencies")]
        groups = poetry.get("group", {})
        if isinstance(groups, dict):
            tables.extend(group.get("dependencies") for group in groups.values() if isinstance(group, dict))
        for table in tables:
            if not isinstance(table, dict):
                continue
            for name, spec in table.items():
                if name.lower() == "python":
                    continue
                packages[name] = _poetry_version(spec)
    return packages


def _load_json(content: str, label: str) -> Mapping[str, Any]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ParseError(f"invalid JSON in {label}: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"{label} must contain an object at the root")
    return data


def _merge_sections(data: Mapping[str, Any], keys: Tuple[str, ...]) -> DependencyMap:
    merged: DependencyMap = {}
    for key in keys:
        section = data.get(key)
        if isinstance(section, dict):
            merged.update({str(name): str(version) for name, version in section.items()})
    return merged


def _parse_requirement(requirement: str) -> Tuple[str, str]:
    match = _REQUIREMENT.match(requirement.strip())
    if not match:
        return "", ""
    name, version = match.groups()
    return name, version.strip() or "*"


def _as_list(value: Any) -> List[Any]:
    # Well-formed TOML may still put a scalar where an array is expected.
    return list(value) if isinstance(value, list) else []


def _poetry_version(spec: Any) -> str:
    if isinstance(spec, str):
        return spec
    if isinstance(spec, dict):
        version = spec.get("version")
        if isinstance(version, str):
            return version
    return "*"


_MANIFEST_HANDLERS: Dict[str, Tuple[str, Callable[[str], DependencyMap]]] = {
    "package.json": ("npm", parse_package_json),
    "composer.json": ("composer", parse_composer_json),
    "pyproject.toml": ("pypi", parse_pyproject),
    "requirements.txt": ("pypi", parse_requirements),
}

MANIFEST_FILES = frozenset(_MANIFEST_HANDLERS)


__all__ = [
    "MANIFEST_FILES",
    "extract_dependencies",
    "parse_composer_json",
    "parse_package_json",
    "parse_pyproject",
    "parse_requirements",
]
