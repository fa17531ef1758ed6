"""Tests for turning uploads into project snapshots."""

from __future__ import annotations

import asyncio
import json

from codemedic.ingestion import (
    DEFAULT_PROJECT_NAME,
    ProjectProcessor,
    count_lines,
    file_extension,
)
from codemedic.models import AppProjectMetadata, FunctionInfo


def test_count_lines_counts_segments() -> None:
    assert count_lines("") == 1
    assert count_lines("a") == 1
    assert count_lines("a\nb") == 2
    assert count_lines("a\nb\n") == 3


def test_file_extension_uses_last_suffix_of_basename() -> None:
    assert file_extension("src/app.test.js") == ".js"
    assert file_extension("Makefile") == ""
    assert file_extension("dir.d/README") == ""


def test_process_files_builds_consistent_snapshot(upload_builder) -> None:
    uploads = upload_builder.write(
        {
            "index.js": "function foo(a,b){}",
            "package.json": json.dumps({"dependencies": {"express": "4.18.2"}}),
            "notes.md": "first\nsecond\nthird",
        }
    )

    snapshot = asyncio.run(ProjectProcessor().process_files(uploads))

    assert snapshot.name == DEFAULT_PROJECT_NAME
    assert snapshot.total_files == len(snapshot.files) == 3
    assert snapshot.total_lines == sum(file.line_count for file in snapshot.files) == 5
    assert snapshot.languages == frozenset({"JavaScript"})
    assert snapshot.project_type == "Node.js/JavaScript"
    assert snapshot.dependencies == {"npm": {"express": "4.18.2"}}

    by_name = {file.name: file for file in snapshot.files}
    assert by_name["index.js"].summary.functions == [
        FunctionInfo(name="foo", line=1, param_count=2)
    ]
    assert by_name["index.js"].extension == ".js"
    assert by_name["notes.md"].language == "Unknown"
    assert by_name["notes.md"].summary.is_empty()


def test_unreadable_file_is_dropped_without_aborting(upload_builder) -> None:
    uploads = upload_builder.write({"a.py": "print('hi')\n"})
    uploads.append(upload_builder.missing("b.js"))

    snapshot = asyncio.run(ProjectProcessor().process_files(uploads))

    assert [file.name for file in snapshot.files] == ["a.py"]
    assert snapshot.total_files == 1
    assert snapshot.total_lines == 2
    assert snapshot.languages == frozenset({"Python"})


def test_empty_upload_counts_one_line(upload_builder) -> None:
    uploads = upload_builder.write({"empty.js": ""})

    snapshot = asyncio.run(ProjectProcessor().process_files(uploads))

    assert snapshot.total_lines == 1
    assert snapshot.files[0].summary.is_empty()


def test_malformed_manifest_does_not_abort_ingestion(upload_builder) -> None:
    uploads = upload_builder.write({"package.json": "{broken", "main.js": "class A {}"})

    snapshot = asyncio.run(ProjectProcessor().process_files(uploads))

    assert snapshot.total_files == 2
    assert "npm" not in snapshot.dependencies
    assert snapshot.project_type == "Node.js/JavaScript"


def test_empty_batch_yields_generic_snapshot() -> None:
    snapshot = asyncio.run(ProjectProcessor().process_files([]))

    assert snapshot.files == []
    assert snapshot.total_files == 0
    assert snapshot.total_lines == 0
    assert snapshot.languages == frozenset()
    assert snapshot.project_type == "Generic"
    assert snapshot.dependencies == {}


def test_custom_reader_is_used(upload_builder) -> None:
    uploads = upload_builder.write({"x.js": "ignored"})
    processor = ProjectProcessor(reader=lambda upload: "function bar() {}\n")

    snapshot = asyncio.run(processor.process_files(uploads))

    assert snapshot.files[0].content == "function bar() {}\n"
    assert snapshot.files[0].summary.functions[0].name == "bar"


def test_process_app_project_overrides_name_only(upload_builder) -> None:
    uploads = upload_builder.write({"requirements.txt": "flask==3.0.0\n", "app.py": "x = 1\n"})
    metadata = AppProjectMetadata.from_dict(
        {
            "name": "Storefront",
            "description": "Online shop",
            "codebaseUrl": "https://example.com/repo.git",
            "accessType": "public",
        }
    )

    processor = ProjectProcessor()
    plain = asyncio.run(processor.process_files(uploads))
    described = asyncio.run(processor.process_app_project(uploads, metadata))

    assert described.name == "Storefront"
    assert described.description == "Online shop"
    assert described.codebase_url == "https://example.com/repo.git"
    assert described.access_type == "public"
    assert described.deployment_url is None
    assert described.total_files == plain.total_files
    assert described.total_lines == plain.total_lines
    assert described.project_type == plain.project_type == "Python"
    assert described.dependencies == plain.dependencies == {"pypi": {"flask": "==3.0.0"}}


def test_snapshot_serialises_with_camel_case_keys(upload_builder) -> None:
    uploads = upload_builder.write({"index.js": "function foo(a,b){}"})

    data = asyncio.run(ProjectProcessor().process_files(uploads)).to_dict()

    assert data["totalFiles"] == 1
    assert data["totalLines"] == 1
    assert data["languages"] == ["JavaScript"]
    assert data["projectType"] == "Generic"
    assert data["files"][0]["analysis"]["functions"] == [
        {"name": "foo", "line": 1, "paramCount": 2}
    ]
    assert "description" not in data


def test_scalar_pyproject_dependencies_do_not_abort_ingestion(upload_builder) -> None:
    uploads = upload_builder.write(
        {"pyproject.toml": "[project]\ndependencies = 5\n", "a.py": "x = 1\n"}
    )

    snapshot = asyncio.run(ProjectProcessor().process_files(uploads))

    assert snapshot.total_files == 2
    assert snapshot.project_type == "Python"
    assert snapshot.dependencies == {"pypi": {}}


def test_invalid_utf8_manifest_is_kept_and_only_its_dependencies_are_absent(
    upload_builder,
) -> None:
    uploads = upload_builder.write({"main.js": "function run() {}\n"})
    uploads.append(upload_builder.write_bytes("package.json", b'{"name": "caf\xe9"'))

    snapshot = asyncio.run(ProjectProcessor().process_files(uploads))

    assert snapshot.total_files == 2
    assert snapshot.total_lines == 3
    assert snapshot.project_type == "Node.js/JavaScript"
    assert "npm" not in snapshot.dependencies


def test_latin1_source_file_is_read_with_replacement_characters(upload_builder) -> None:
    upload = upload_builder.write_bytes("legacy.js", b"// caf\xe9\nfunction legacy(a) {}\n")

    snapshot = asyncio.run(ProjectProcessor().process_files([upload]))

    assert snapshot.total_files == 1
    assert snapshot.total_lines == 3
    legacy = snapshot.files[0]
    assert "�" in legacy.content
    assert legacy.summary.functions[0].name == "legacy"
