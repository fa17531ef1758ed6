"""Ingestion of uploaded files into a project snapshot."""

from __future__ import annotations

import asyncio
import dataclasses
import os
from pathlib import Path
from typing import Callable, Optional, Sequence

from .analyzers import AnalyzerRegistry, default_registry, detect_language, detect_project_type, extract_dependencies
from .logging import get_logger
from .models import (
    UNKNOWN_LANGUAGE,
    AnalyzedFile,
    AppProjectMetadata,
    ProjectSnapshot,
    UploadedFile,
)

DEFAULT_PROJECT_NAME = "Uploaded Project"

FileReader = Callable[[UploadedFile], str]


def read_uploaded_file(upload: UploadedFile) -> str:
    """Read an upload as UTF-8 text; undecodable bytes become U+FFFD."""
    return Path(upload.storage_path).read_bytes().decode("utf-8", errors="replace")


def count_lines(content: str) -> int:
    """Number of newline-separated segments; an empty file counts as one line."""
    return len(content.split("\n"))


def file_extension(name: str) -> str:
    return os.path.splitext(os.path.basename(name))[1]


def build_snapshot(name: str, files: Sequence[AnalyzedFile]) -> ProjectSnapshot:
    """Reduce independently analysed files into one snapshot."""
    languages = frozenset(
        file.language for file in files if file.language != UNKNOWN_LANGUAGE
    )
    return ProjectSnapshot(
        name=name,
        files=list(files),
        total_files=len(files),
        total_lines=sum(file.line_count for file in files),
        languages=languages,
        project_type=detect_project_type(file.name for file in files),
        dependencies=extract_dependencies(files),
    )


class ProjectProcessor:
    """Turns a batch of uploads into a :class:`ProjectSnapshot`.

    Files are read concurrently; a file that cannot be read is logged and
    left out of the snapshot without affecting the rest of the batch.
    """

    def __init__(
        self,
        registry: AnalyzerRegistry | None = None,
        reader: FileReader | None = None,
    ) -> None:
        self.registry = registry or default_registry()
        self.reader = reader or read_uploaded_file
        self.logger = get_logger("ingestion")

    async def process_files(self, files: Sequence[UploadedFile]) -> ProjectSnapshot:
        self.logger.info("Processing %d uploaded files", len(files))
        results = await asyncio.gather(*(self._process_one(upload) for upload in files))
        analyzed = [result for result in results if result is not None]
        dropped = len(files) - len(analyzed)
        if dropped:
            self.logger.warning("Dropped %d unreadable file(s) from the batch", dropped)
        return build_snapshot(DEFAULT_PROJECT_NAME, analyzed)

    async def process_app_project(
        self, files: Sequence[UploadedFile], metadata: AppProjectMetadata
    ) -> ProjectSnapshot:
        """Ingest ``files`` and overlay the caller's project details.

        Only ``name`` replaces a computed field; the rest are added alongside.
        """
        self.logger.info("Processing app project %s", metadata.name)
        snapshot = await self.process_files(files)
        return dataclasses.replace(
            snapshot,
            name=metadata.name,
            description=metadata.description,
            codebase_url=metadata.codebase_url,
            access_type=metadata.access_type,
            deployment_url=metadata.deployment_url,
        )

    def analyze_file(self, upload: UploadedFile, content: str) -> AnalyzedFile:
        extension = file_extension(upload.name)
        return AnalyzedFile(
            name=upload.name,
            content=content,
            size_bytes=upload.size_bytes,
            line_count=count_lines(content),
            extension=extension,
            language=detect_language(extension),
            summary=self.registry.analyze(content, extension),
        )

    async def _process_one(self, upload: UploadedFile) -> Optional[AnalyzedFile]:
        try:
            content = await asyncio.to_thread(self.reader, upload)
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Error processing file %s: %s", upload.name, exc)
            return None
        return self.analyze_file(upload, content)


__all__ = [
    "DEFAULT_PROJECT_NAME",
    "ProjectProcessor",
    "build_snapshot",
    "count_lines",
    "file_extension",
    "read_uploaded_file",
]
