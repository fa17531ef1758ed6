"""HTTP service mode."""

from .app import ServiceContext, build_context, create_app, run_service

__all__ = ["ServiceContext", "build_context", "create_app", "run_service"]
