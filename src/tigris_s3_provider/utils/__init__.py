"""Utility functions for the Tigris S3 provider."""

from .context import (
    CallContext,
    get_context_dict,
    get_correlation_id,
    with_correlation_id,
)
from .errors import sanitize_dict, sanitize_error_message, sanitize_exception

__all__ = [
    "CallContext",
    "get_correlation_id",
    "with_correlation_id",
    "get_context_dict",
    "sanitize_error_message",
    "sanitize_exception",
    "sanitize_dict",
]
