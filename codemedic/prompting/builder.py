"""Builds model prompts from project snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import FixRecommendation, ProjectSnapshot
from .constants import (
    ANALYSIS_MAX_TOKENS,
    ANALYSIS_SYSTEM_PROMPT,
    ANALYSIS_TEMPERATURE,
    DEFAULT_BUG_DESCRIPTION,
    ELISION_MARKER,
    IMPLEMENTATION_MAX_TOKENS,
    IMPLEMENTATION_SYSTEM_PROMPT,
    IMPLEMENTATION_TEMPERATURE,
    NO_FILES_PLACEHOLDER,
    SAMPLE_CHAR_LIMIT,
    SAMPLE_FILE_LIMIT,
)


@dataclass(frozen=True)
class PromptRequest:
    """A single model call: prompts plus sampling settings."""

    system: str
    prompt: str
    temperature: float
    max_tokens: int


class PromptBuilder:
    """Renders analysis and implementation prompts from Jinja2 templates."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )

    def build_analysis_prompt(
        self, snapshot: ProjectSnapshot, bug_description: Optional[str] = None
    ) -> str:
        template = self._env.get_template("analysis.j2")
        return template.render(
            project_type=snapshot.project_type,
            name=snapshot.name,
            total_files=snapshot.total_files,
            languages=", ".join(sorted(snapshot.languages)),
            total_lines=snapshot.total_lines,
            bug_description=(bug_description or "").strip() or DEFAULT_BUG_DESCRIPTION,
            code_sample=self.code_sample(snapshot),
        )

    def build_implementation_prompt(
        self,
        snapshot: ProjectSnapshot,
        fix: FixRecommendation,
        custom_instructions: Optional[str] = None,
    ) -> str:
        template = self._env.get_template("implementation.j2")
        return template.render(
            title=_text(fix.title),
            description=_text(fix.description),
            steps=_join_steps(fix.steps),
            custom_instructions=(custom_instructions or "").strip() or "None",
            name=snapshot.name,
            project_type=snapshot.project_type,
        )

    def analysis_request(
        self, snapshot: ProjectSnapshot, bug_description: Optional[str] = None
    ) -> PromptRequest:
        return PromptRequest(
            system=ANALYSIS_SYSTEM_PROMPT,
            prompt=self.build_analysis_prompt(snapshot, bug_description),
            temperature=ANALYSIS_TEMPERATURE,
            max_tokens=ANALYSIS_MAX_TOKENS,
        )

    def implementation_request(
        self,
        snapshot: ProjectSnapshot,
        fix: FixRecommendation,
        custom_instructions: Optional[str] = None,
    ) -> PromptRequest:
        return PromptRequest(
            system=IMPLEMENTATION_SYSTEM_PROMPT,
            prompt=self.build_implementation_prompt(snapshot, fix, custom_instructions),
            temperature=IMPLEMENTATION_TEMPERATURE,
            max_tokens=IMPLEMENTATION_MAX_TOKENS,
        )

    @staticmethod
    def code_sample(snapshot: ProjectSnapshot) -> str:
        """First files of the snapshot, each cut to a fixed number of characters."""
        samples = [
            f"File: {file.name}\n{file.content[:SAMPLE_CHAR_LIMIT]}{ELISION_MARKER}"
            for file in snapshot.files[:SAMPLE_FILE_LIMIT]
        ]
        return "\n\n".join(samples) if samples else NO_FILES_PLACEHOLDER


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _join_steps(steps: Any) -> str:
    if isinstance(steps, (list, tuple)):
        return ", ".join(_text(step) for step in steps)
    return _text(steps)


__all__ = ["PromptBuilder", "PromptRequest"]
