"""Prometheus metrics for the Tigris S3 provider."""

from prometheus_client import Counter, Histogram

# Bucket operation metrics
bucket_operations_total = Counter(
    "tigris_s3_provider_bucket_operations_total",
    "Total number of bucket operations",
    ["operation", "result"],
)

# API call metrics
api_call_total = Counter(
    "tigris_s3_provider_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "tigris_s3_provider_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

api_retry_total = Counter(
    "tigris_s3_provider_api_retry_total",
    "Total number of retried API attempts",
    ["operation", "reason"],
)
