"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging
import sys
from unittest.mock import patch

import pytest

from tigris_s3_provider.logging import log_bucket_event, sanitize_secrets, setup_structured_logging
from tigris_s3_provider.utils.context import with_correlation_id


class TestLogBucketEvent:
    """Test structured bucket event logging."""

    def test_event_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the JSON layout of a bucket event."""
        logger = logging.getLogger("test.bucket")

        with caplog.at_level(logging.INFO, logger="test.bucket"):
            with with_correlation_id("corr-1"):
                log_bucket_event(logger, "update_bucket", "my-bucket", "updated", "Bucket updated", fields=["acl"])

        data = json.loads(caplog.records[-1].getMessage())
        assert data == {
            "correlation_id": "corr-1",
            "component": "tigris-s3-provider",
            "operation": "update_bucket",
            "bucket_name": "my-bucket",
            "event": "updated",
            "message": "Bucket updated",
            "fields": ["acl"],
        }

    def test_level(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that the requested level is used."""
        logger = logging.getLogger("test.bucket")

        with caplog.at_level(logging.INFO, logger="test.bucket"):
            log_bucket_event(logger, "head_bucket", "my-bucket", "not_found", "missing", level=logging.WARNING)

        assert caplog.records[-1].levelno == logging.WARNING

    def test_secrets_redacted(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that secret extras never reach the log."""
        logger = logging.getLogger("test.bucket")

        with caplog.at_level(logging.INFO, logger="test.bucket"):
            log_bucket_event(
                logger, "update_bucket", "my-bucket", "updated", "ok", shadow_secret_key="s3cr3t"
            )

        assert "s3cr3t" not in caplog.text
        assert json.loads(caplog.records[-1].getMessage())["shadow_secret_key"] == "***REDACTED***"


class TestSanitizeSecrets:
    """Test secret field redaction."""

    def test_redacts_known_fields(self) -> None:
        """Test redaction of secret fields only."""
        data = {"access_key": "AKIA", "shadow_access_key": "AKIA2", "region": "us-east-1"}

        result = sanitize_secrets(data)

        assert result == {
            "access_key": "***REDACTED***",
            "shadow_access_key": "***REDACTED***",
            "region": "us-east-1",
        }
        assert data["access_key"] == "AKIA"


class TestSetupStructuredLogging:
    """Test logging installation."""

    def test_installs_stdout_handler(self) -> None:
        """Test that raw JSON messages go to stdout at the requested level."""
        with patch("tigris_s3_provider.logging.logging.basicConfig") as mock_config:
            setup_structured_logging(logging.DEBUG)

        kwargs = mock_config.call_args.kwargs
        assert kwargs["level"] == logging.DEBUG
        assert kwargs["format"] == "%(message)s"
        (handler,) = kwargs["handlers"]
        assert handler.stream is sys.stdout
