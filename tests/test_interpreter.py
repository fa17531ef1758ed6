"""Tests for interpreting raw model replies."""

from __future__ import annotations

import json

import pytest

from codemedic.failsafe import DEFAULT_ROOT_CAUSE
from codemedic.interpreter import (
    FormatError,
    extract_section,
    extract_severity,
    extract_structured_region,
    interpret_response,
)
from codemedic.models import FixRecommendation


def test_structured_reply_is_passed_through() -> None:
    reply = 'Here you go: {"rootCause":"X","severity":"low","impact":"Y","fixes":[],"testingStrategy":"Z"} thanks'

    analysis = interpret_response(reply)

    assert analysis.source == "structured"
    assert analysis.root_cause == "X"
    assert analysis.severity == "low"
    assert analysis.impact == "Y"
    assert analysis.fixes == []
    assert analysis.testing_strategy == "Z"


def test_structured_reply_is_not_validated() -> None:
    reply = json.dumps(
        {
            "rootCause": "Race",
            "severity": "catastrophic",
            "fixes": [{"id": "a", "title": "Lock", "recommendedAI": "claude"}],
            "confidence": 0.4,
        }
    )

    analysis = interpret_response(reply)

    assert analysis.severity == "catastrophic"
    assert analysis.impact is None
    assert analysis.testing_strategy is None
    assert analysis.fixes[0] == FixRecommendation(
        id="a",
        title="Lock",
        description=None,
        steps=[],
        risk_level=None,
        recommended_provider="claude",
    )
    assert analysis.to_dict()["confidence"] == 0.4


def test_labeled_sections_are_recovered() -> None:
    analysis = interpret_response("Root cause: something broke\n\nSeverity is HIGH")

    assert analysis.source == "lenient"
    assert analysis.root_cause == "something broke"
    assert analysis.severity == "high"
    assert analysis.impact == "Potential application issues"
    assert analysis.testing_strategy == "Comprehensive testing recommended"
    assert len(analysis.fixes) == 1
    assert analysis.fixes[0].title == "Primary Fix"


def test_labeled_sections_with_trailing_severity_sentence() -> None:
    analysis = interpret_response(
        "Root cause: something broke\n\nImpact: minor\n\nThis is high severity."
    )

    assert analysis.source == "lenient"
    assert analysis.severity == "high"
    assert analysis.root_cause == "something broke"
    assert analysis.impact == "minor"
    assert len(analysis.fixes) == 1


def test_invalid_json_between_braces_falls_back_to_sections() -> None:
    analysis = interpret_response("Impact: {broken json}\n\nTesting strategy: add unit tests")

    assert analysis.source == "lenient"
    assert analysis.impact == "{broken json}"
    assert analysis.testing_strategy == "add unit tests"
    assert analysis.severity == "medium"


def test_empty_reply_returns_default_analysis() -> None:
    analysis = interpret_response("")

    assert analysis.source == "default"
    assert analysis.root_cause == DEFAULT_ROOT_CAUSE
    assert analysis.fixes[0].title == "Code Improvement"


def test_undecodable_bytes_return_default_analysis() -> None:
    analysis = interpret_response(b"\xff\xfe\xfa")

    assert analysis.source == "default"


def test_bytes_reply_is_decoded() -> None:
    analysis = interpret_response(b'{"rootCause": "bytes", "severity": "medium"}')

    assert analysis.root_cause == "bytes"


def test_non_text_reply_returns_default_analysis() -> None:
    assert interpret_response(None).source == "default"


def test_extract_structured_region_spans_first_to_last_brace() -> None:
    assert extract_structured_region('a {"x": {"y": 1}} b') == '{"x": {"y": 1}}'
    with pytest.raises(FormatError):
        extract_structured_region("no object here")
    with pytest.raises(FormatError):
        extract_structured_region("} reversed {")


def test_extract_severity_prefers_most_severe_whole_word() -> None:
    assert extract_severity("low impact but critical path") == "critical"
    assert extract_severity("please follow up") == "medium"
    assert extract_severity("Medium risk") == "medium"


def test_extract_section_stops_at_blank_line() -> None:
    text = "Root cause: first line\ncontinues here\n\nImpact: later"

    assert extract_section(text, r"root[\s_-]*cause") == "first line\ncontinues here"
    assert extract_section(text, "testing") is None


def test_section_labels_only_match_at_line_start() -> None:
    analysis = interpret_response(
        "Root cause: missing testing of the parser\n\nTesting strategy: add unit tests"
    )

    assert analysis.root_cause == "missing testing of the parser"
    assert analysis.testing_strategy == "add unit tests"


def test_section_labels_accept_markdown_prefixes() -> None:
    text = "**Root Cause**: null deref\n\n- Impact: crash on save\n\n1. Testing: add a save test"

    assert extract_section(text, r"root[\s_-]*cause") == "null deref"
    assert extract_section(text, "impact") == "crash on save"
    assert extract_section(text, r"testing(?:[\s_-]*strategy)?") == "add a save test"


def test_label_mentioned_mid_sentence_is_ignored() -> None:
    assert extract_section("We saw a big impact: slow pages", "impact") is None
