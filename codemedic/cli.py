"""CLI entrypoints for codemedic commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import ConfigError, load_config
from .ingestion import ProjectProcessor
from .logging import configure_logging
from .models import UploadedFile
from .orchestrator import BugAnalyzer
from .service import run_service

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    "dist",
    "build",
}


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_paths_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to ingest (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codemedic",
        description="Ingest a codebase and analyse bugs with a language model.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .codemedic.yml or the directory containing it.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    snapshot_parser = subparsers.add_parser(
        "snapshot", help="Print the structural snapshot of the given files as JSON."
    )
    _add_verbose_option(snapshot_parser, suppress_default=True)
    _add_paths_argument(snapshot_parser)

    analyze_parser = subparsers.add_parser(
        "analyze", help="Ingest files and print the model's bug analysis as JSON."
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_paths_argument(analyze_parser)
    analyze_parser.add_argument(
        "--bug",
        default=None,
        help="Free-text description of the bug to investigate.",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def collect_uploads(paths: Sequence[str]) -> List[UploadedFile]:
    """Expand files and directories into upload descriptors named relative to their root."""
    uploads: List[UploadedFile] = []
    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_dir():
            for file_path in _iter_files(path):
                uploads.append(_upload_for(file_path, file_path.relative_to(path).as_posix()))
        elif path.is_file():
            uploads.append(_upload_for(path, path.name))
        else:
            raise FileNotFoundError(f"No such file or directory: {raw}")
    return uploads


def _iter_files(root: Path) -> Iterator[Path]:
    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(name for name in dirs if name not in _EXCLUDED_DIRS)
        for name in sorted(files):
            yield Path(current) / name


def _upload_for(path: Path, name: str) -> UploadedFile:
    return UploadedFile(name=name, storage_path=str(path), size_bytes=path.stat().st_size)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codemedic commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=args.log_file,
        service=args.command == "serve",
    )

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        run_service(host=args.host, port=args.port)
        return

    try:
        uploads = collect_uploads(args.paths)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")

    processor = ProjectProcessor()
    snapshot = asyncio.run(processor.process_files(uploads))

    if args.command == "snapshot":
        payload = snapshot.to_dict()
        for file in payload["files"]:
            file.pop("content", None)
        print(json.dumps(payload, indent=2))
    elif args.command == "analyze":
        analyzer = BugAnalyzer.from_config(config.llm)
        analysis = asyncio.run(analyzer.analyze_bug(snapshot, args.bug))
        print(json.dumps(analysis.to_dict(), indent=2))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
