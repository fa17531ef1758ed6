"""Project ingestion and AI-assisted bug analysis."""

__version__ = "0.1.0"
