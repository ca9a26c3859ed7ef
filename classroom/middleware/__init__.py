"""Application middleware package."""

from .logging import StructuredLoggingMiddleware

__all__ = ["StructuredLoggingMiddleware"]
