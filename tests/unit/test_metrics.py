"""Tests for Prometheus metrics."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import requests
from prometheus_client import REGISTRY

from tigris_s3_provider.metrics import (
    api_call_duration_seconds,
    api_call_total,
    api_retry_total,
    bucket_operations_total,
)
from tigris_s3_provider.services.tigris.builder import build_metadata_request
from tigris_s3_provider.services.tigris.retry import SignedRetryExecutor
from tigris_s3_provider.services.tigris.signing import RequestSigner

from http_helpers import build_response


class TestMetricsExist:
    """Test that all expected metrics are defined."""

    def test_bucket_operations_total_exists(self):
        """Test bucket_operations_total counter exists."""
        # Prometheus counters don't include "_total" in their _name attribute
        assert bucket_operations_total._name == "tigris_s3_provider_bucket_operations"

    def test_api_call_total_exists(self):
        """Test api_call_total counter exists."""
        assert api_call_total._name == "tigris_s3_provider_api_call"

    def test_api_call_duration_exists(self):
        """Test api_call_duration_seconds histogram exists."""
        assert api_call_duration_seconds._name == "tigris_s3_provider_api_call_duration_seconds"

    def test_api_retry_total_exists(self):
        """Test api_retry_total counter exists."""
        assert api_retry_total._name == "tigris_s3_provider_api_retry"


class TestMetricLabels:
    """Test that metrics have correct labels."""

    def test_bucket_operations_total_labels(self):
        """Test bucket_operations_total has correct labels."""
        bucket_operations_total.labels(operation="create_bucket", result="success").inc(0)
        bucket_operations_total.labels(operation="delete_bucket", result="failed").inc(0)

    def test_api_call_labels(self):
        """Test api_call_total and api_call_duration_seconds labels."""
        api_call_total.labels(api_type="s3", operation="head_bucket", result="success").inc(0)
        api_call_duration_seconds.labels(api_type="tigris", operation="update_bucket").observe(0.2)

    def test_api_retry_total_labels(self):
        """Test api_retry_total has correct labels."""
        api_retry_total.labels(operation="update_bucket", reason="server_error").inc(0)
        api_retry_total.labels(operation="update_bucket", reason="transport").inc(0)


class TestExecutorMetrics:
    """Test metrics recorded by the signed retry executor."""

    def _sample(self, name: str, labels: dict[str, str]) -> float:
        return REGISTRY.get_sample_value(name, labels) or 0.0

    def test_retries_counted(self):
        """Test that each retry after a server error is counted."""
        labels = {"operation": "get_bucket_metadata", "reason": "server_error"}
        before = self._sample("tigris_s3_provider_api_retry_total", labels)
        session = MagicMock(spec=requests.Session)
        session.request.side_effect = [build_response(503), build_response(503), build_response(200, {})]
        executor = SignedRetryExecutor(RequestSigner("AKIDEXAMPLE", "secret"), session=session)

        with patch("tigris_s3_provider.utils.context.time.sleep"):
            executor.execute(build_metadata_request("https://fly.storage.tigris.dev", "my-bucket"))

        assert self._sample("tigris_s3_provider_api_retry_total", labels) == before + 2

    def test_api_calls_counted(self):
        """Test that each attempt is counted by outcome."""
        labels = {"api_type": "tigris", "operation": "get_bucket_metadata", "result": "failed"}
        before = self._sample("tigris_s3_provider_api_call_total", labels)
        session = MagicMock(spec=requests.Session)
        session.request.return_value = build_response(404, {"Code": "NoSuchBucket"})
        executor = SignedRetryExecutor(RequestSigner("AKIDEXAMPLE", "secret"), session=session)

        executor.execute(build_metadata_request("https://fly.storage.tigris.dev", "my-bucket"))

        assert self._sample("tigris_s3_provider_api_call_total", labels) == before + 1
