"""Structured logging configuration for the Tigris S3 provider."""

import json
import logging
import sys
from typing import Any

from .utils.context import get_context_dict

SECRET_FIELDS = {
    "access_key",
    "secret_key",
    "shadow_access_key",
    "shadow_secret_key",
    "session_token",
    "password",
}


def setup_structured_logging(level: int = logging.INFO) -> None:
    """Configure structured JSON logging."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def log_bucket_event(
    logger: logging.Logger,
    operation: str,
    bucket: str,
    event: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured bucket event."""
    log_data = get_context_dict(
        {
            "component": "tigris-s3-provider",
            "operation": operation,
            "bucket_name": bucket,
            "event": event,
            "message": message,
        }
    )
    log_data.update(sanitize_secrets(kwargs))
    logger.log(level, json.dumps(log_data, default=str))


def sanitize_secrets(log_data: dict[str, Any]) -> dict[str, Any]:
    """Remove secret fields from log data."""
    sanitized = log_data.copy()
    for field in SECRET_FIELDS:
        if field in sanitized:
            sanitized[field] = "***REDACTED***"
    return sanitized
