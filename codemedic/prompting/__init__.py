"""Prompt construction for model requests."""

from .builder import PromptBuilder, PromptRequest

__all__ = ["PromptBuilder", "PromptRequest"]
