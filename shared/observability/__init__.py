"""Observability utilities shared across the snippets."""

from .logger import (
    GoogleLibraryInterceptHandler,
    configure_logging,
    get_logger,
    get_operation_id,
    operation_context,
)

__all__ = [
    "GoogleLibraryInterceptHandler",
    "configure_logging",
    "get_logger",
    "get_operation_id",
    "operation_context",
]
