"""Fixed prompt limits and model settings for analysis and implementation requests."""

from __future__ import annotations

# Code sample bounds; prompt size stays bounded regardless of project size.
SAMPLE_FILE_LIMIT = 3
SAMPLE_CHAR_LIMIT = 1000
ELISION_MARKER = "..."

DEFAULT_BUG_DESCRIPTION = "Please analyze the code for potential bugs and issues."
NO_FILES_PLACEHOLDER = "No file contents available"

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert software debugging assistant. Analyze code and provide structured "
    "bug analysis with fix recommendations."
)
ANALYSIS_TEMPERATURE = 0.3
ANALYSIS_MAX_TOKENS = 2000

IMPLEMENTATION_SYSTEM_PROMPT = (
    "You are a senior developer. Generate specific code implementations with clear file changes."
)
IMPLEMENTATION_TEMPERATURE = 0.2
IMPLEMENTATION_MAX_TOKENS = 1500


__all__ = [
    "ANALYSIS_MAX_TOKENS",
    "ANALYSIS_SYSTEM_PROMPT",
    "ANALYSIS_TEMPERATURE",
    "DEFAULT_BUG_DESCRIPTION",
    "ELISION_MARKER",
    "IMPLEMENTATION_MAX_TOKENS",
    "IMPLEMENTATION_SYSTEM_PROMPT",
    "IMPLEMENTATION_TEMPERATURE",
    "NO_FILES_PLACEHOLDER",
    "SAMPLE_CHAR_LIMIT",
    "SAMPLE_FILE_LIMIT",
]
