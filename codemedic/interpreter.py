"""Interpretation of raw model replies into :class:`BugAnalysis` objects.

Replies are tried against an ordered chain of strategies:

1. :func:`parse_structured` decodes the outermost ``{...}`` region as JSON and
   passes it through without validating fields.
2. :func:`parse_sections` recovers labeled sections ("Root cause:", "Impact:",
   "Testing strategy:") and a severity keyword from free text, attaching one
   generic fix.
3. :func:`codemedic.failsafe.default_analysis` when neither applies or an
   error escapes them.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, Optional, Tuple, Union

from .failsafe import default_analysis, generic_fix
from .logging import get_logger
from .models import BugAnalysis

logger = get_logger("interpreter")

SEVERITY_PRIORITY: Tuple[str, ...] = ("critical", "high", "medium", "low")
DEFAULT_SEVERITY = "medium"

ROOT_CAUSE_LABEL = r"root[\s_-]*cause"
IMPACT_LABEL = r"impact"
TESTING_LABEL = r"testing(?:[\s_-]*strategy)?"

# Labels must open a line; list markers, headings and bold markup may precede them.
LABEL_PREFIX = r"^[ \t]*(?:[-*#>]+[ \t]*|\d+[.)][ \t]*)?"

FALLBACK_ROOT_CAUSE = "Analysis completed"
FALLBACK_IMPACT = "Potential application issues"
FALLBACK_TESTING = "Comprehensive testing recommended"


class FormatError(ValueError):
    """Raised when a reply does not contain a decodable structured object."""


def extract_structured_region(text: str) -> str:
    """Return the text from the first ``{`` to the last ``}``."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise FormatError("no brace-delimited object in reply")
    return text[start : end + 1]


def decode_structured(text: str) -> Dict[str, Any]:
    region = extract_structured_region(text)
    try:
        data = json.loads(region)
    except json.JSONDecodeError as exc:
        raise FormatError(f"reply object is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise FormatError("reply JSON is not an object")
    return data


def parse_structured(text: str) -> Optional[BugAnalysis]:
    try:
        data = decode_structured(text)
    except FormatError as exc:
        logger.debug("Structured parse declined: %s", exc)
        return None
    return BugAnalysis.from_dict(data, source="structured")


def extract_section(text: str, label: str) -> Optional[str]:
    """Text following a line-leading ``label`` up to the next blank line or the end of ``text``."""
    pattern = re.compile(
        rf"{LABEL_PREFIX}{label}[*_]*[:\s]*(.*?)(?=\n[ \t]*\n|\Z)",
        re.IGNORECASE | re.DOTALL | re.MULTILINE,
    )
    match = pattern.search(text)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def extract_severity(text: str) -> str:
    lowered = text.lower()
    for level in SEVERITY_PRIORITY:
        if re.search(rf"\b{level}\b", lowered):
            return level
    return DEFAULT_SEVERITY


def parse_sections(text: str) -> Optional[BugAnalysis]:
    if not text.strip():
        return None
    return BugAnalysis(
        root_cause=extract_section(text, ROOT_CAUSE_LABEL) or FALLBACK_ROOT_CAUSE,
        severity=extract_severity(text),
        impact=extract_section(text, IMPACT_LABEL) or FALLBACK_IMPACT,
        fixes=[generic_fix()],
        related_issues=[],
        testing_strategy=extract_section(text, TESTING_LABEL) or FALLBACK_TESTING,
        source="lenient",
    )


Strategy = Callable[[str], Optional[BugAnalysis]]

STRATEGIES: Tuple[Strategy, ...] = (parse_structured, parse_sections)


def interpret_response(raw: Union[str, bytes, None]) -> BugAnalysis:
    """Turn a raw model reply into a BugAnalysis. Never raises."""
    try:
        if isinstance(raw, (bytes, bytearray)):
            text = bytes(raw).decode("utf-8")
        elif isinstance(raw, str):
            text = raw
        else:
            raise FormatError(f"unsupported reply type {type(raw).__name__}")
        for strategy in STRATEGIES:
            result = strategy(text)
            if result is not None:
                return result
        logger.info("Model reply was empty; using default analysis")
    except Exception as exc:
        logger.warning("Parse analysis error, using default analysis: %s", exc)
    return default_analysis()


__all__ = [
    "FormatError",
    "STRATEGIES",
    "decode_structured",
    "extract_section",
    "extract_severity",
    "extract_structured_region",
    "interpret_response",
    "parse_sections",
    "parse_structured",
]
