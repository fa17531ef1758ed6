"""Fixed fallback results used when the model reply or the model itself fails."""

from __future__ import annotations

from typing import Any

from .models import BugAnalysis, FixRecommendation

UNAVAILABLE_ROOT_CAUSE = (
    "Unable to connect to AI service. Mock analysis: The application may have error "
    "handling issues based on common patterns."
)
DEFAULT_ROOT_CAUSE = "Code analysis completed. Review recommended fixes."


def generic_fix() -> FixRecommendation:
    """The single fix attached to analyses recovered from free text."""
    return FixRecommendation(
        id=1,
        title="Primary Fix",
        description="Main recommended solution",
        steps=["Analyze the issue", "Implement the fix", "Test the solution"],
        risk_level="low",
        estimated_time="30 minutes",
        recommended_provider="openai",
        reasoning="Best for this type of fix",
    )


def default_analysis() -> BugAnalysis:
    """Placeholder analysis for replies that could not be interpreted at all."""
    return BugAnalysis(
        root_cause=DEFAULT_ROOT_CAUSE,
        severity="medium",
        impact="Potential improvements identified",
        fixes=[
            FixRecommendation(
                id=1,
                title="Code Improvement",
                description="Implement recommended code improvements",
                steps=["Review code structure", "Apply best practices", "Add error handling"],
                risk_level="low",
                estimated_time="45 minutes",
                recommended_provider="openai",
                reasoning="Comprehensive analysis capabilities",
            )
        ],
        related_issues=[],
        testing_strategy="Unit and integration testing recommended",
        source="default",
    )


def unavailable_analysis() -> BugAnalysis:
    """Mock analysis returned when the model backend could not be reached."""
    return BugAnalysis(
        root_cause=UNAVAILABLE_ROOT_CAUSE,
        severity="medium",
        impact="Potential runtime errors when handling edge cases",
        fixes=[
            FixRecommendation(
                id=1,
                title="Add Error Handling",
                description="Implement comprehensive error handling and validation",
                steps=["Add try-catch blocks", "Implement input validation", "Add error logging"],
                risk_level="low",
                estimated_time="30 minutes",
                recommended_provider="openai",
                reasoning="GPT-4 excels at error handling patterns",
            )
        ],
        related_issues=["Input validation", "Error logging"],
        testing_strategy="Unit tests for error conditions and edge cases",
        source="unavailable",
    )


def implementation_fallback(fix: FixRecommendation) -> str:
    """Manual instructions returned when implementation text cannot be generated."""
    title: Any = fix.title if fix.title is not None else "selected fix"
    lines = [
        f"Implementation for: {title}",
        "",
        "1. Review the identified issue",
        "2. Apply the recommended changes",
        "3. Test the implementation",
        "4. Deploy when ready",
        "",
        "Note: AI service unavailable. Manual implementation recommended.",
    ]
    return "\n".join(lines) + "\n"


__all__ = [
    "DEFAULT_ROOT_CAUSE",
    "UNAVAILABLE_ROOT_CAUSE",
    "default_analysis",
    "generic_fix",
    "implementation_fallback",
    "unavailable_analysis",
]
