"""Model backend adapters."""

from .runner import LLMRequest, LLMRunner, ServiceError

__all__ = ["LLMRequest", "LLMRunner", "ServiceError"]
