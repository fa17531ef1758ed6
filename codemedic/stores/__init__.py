"""Persistence helpers."""

from .project_store import ProjectStore

__all__ = ["ProjectStore"]
