"""Logging setup for the codemedic CLI and HTTP service."""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "codemedic"

CONSOLE_FORMAT = "[codemedic] %(levelname)s %(message)s"
SERVICE_FORMAT = "%(asctime)s [codemedic] %(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``codemedic.<name>``, or the package root logger when ``name`` is empty."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    service: bool = False,
) -> logging.Logger:
    """Install codemedic's handlers on the package root logger.

    CLI runs get a terse console format. Service runs (``service=True``) add
    timestamps and logger names so request logs interleave readably with
    uvicorn's access log. ``log_file`` adds a persistent sink in either mode.
    Calling this again replaces the previous handlers.
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(SERVICE_FORMAT if service else CONSOLE_FORMAT))
    root.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(sink)

    return root


__all__ = [
    "CONSOLE_FORMAT",
    "FILE_FORMAT",
    "ROOT_LOGGER",
    "SERVICE_FORMAT",
    "configure_logging",
    "get_logger",
]
