"""Bug analysis and fix implementation flows over an ingested project."""

from __future__ import annotations

import asyncio
from typing import Optional

from .config import LLMConfig
from .failsafe import implementation_fallback, unavailable_analysis
from .interpreter import interpret_response
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import BugAnalysis, FixRecommendation, ProjectSnapshot
from .prompting.builder import PromptBuilder, PromptRequest

DEFAULT_CALL_TIMEOUT = 90.0


class ModelCallFailed(Exception):
    """Internal signal that the single model call for a request did not complete."""


class BugAnalyzer:
    """Runs the analysis and implementation requests against the model backend.

    Each request makes exactly one model call. When that call fails or times
    out the caller receives a fixed fallback instead of an exception.
    """

    def __init__(
        self,
        runner: LLMRunner | None = None,
        prompt_builder: PromptBuilder | None = None,
        *,
        call_timeout: Optional[float] = DEFAULT_CALL_TIMEOUT,
    ) -> None:
        self.runner = runner or LLMRunner()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.call_timeout = call_timeout
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_config(cls, config: LLMConfig) -> "BugAnalyzer":
        runner = LLMRunner(
            model=config.model,
            base_url=config.base_url,
            api_key=config.api_key,
            request_timeout=config.request_timeout or 60.0,
        )
        timeout = DEFAULT_CALL_TIMEOUT
        if config.request_timeout:
            timeout = config.request_timeout + 5.0
        return cls(runner, call_timeout=timeout)

    async def analyze_bug(
        self, snapshot: ProjectSnapshot, bug_description: Optional[str] = None
    ) -> BugAnalysis:
        self.logger.info("AI analyzing bug for project: %s", snapshot.name)
        request = self.prompt_builder.analysis_request(snapshot, bug_description)
        try:
            reply = await self._complete(request)
        except ModelCallFailed as exc:
            self.logger.warning("AI analysis error, returning mock analysis: %s", exc)
            return unavailable_analysis()
        return interpret_response(reply)

    async def generate_implementation(
        self,
        snapshot: ProjectSnapshot,
        fix: FixRecommendation,
        custom_instructions: Optional[str] = None,
    ) -> str:
        """Return the model's implementation text verbatim, or manual steps on failure."""
        self.logger.info("Generating implementation for fix: %s", fix.title)
        request = self.prompt_builder.implementation_request(snapshot, fix, custom_instructions)
        try:
            return await self._complete(request)
        except ModelCallFailed as exc:
            self.logger.warning("Implementation generation error: %s", exc)
            return implementation_fallback(fix)

    async def _complete(self, request: PromptRequest) -> str:
        call = asyncio.to_thread(
            self.runner.run,
            request.prompt,
            system=request.system,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )
        try:
            if self.call_timeout is None:
                return await call
            return await asyncio.wait_for(call, timeout=self.call_timeout)
        except asyncio.TimeoutError as exc:
            raise ModelCallFailed(f"model call exceeded {self.call_timeout}s") from exc
        except Exception as exc:
            # ServiceError from the HTTP runner, or whatever an injected runner raises.
            raise ModelCallFailed(str(exc) or type(exc).__name__) from exc


__all__ = ["BugAnalyzer", "DEFAULT_CALL_TIMEOUT"]
