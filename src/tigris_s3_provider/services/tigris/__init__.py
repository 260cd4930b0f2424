"""Tigris bucket control-plane client."""

from .client import TigrisProvider
from .models import (
    UNSET,
    BucketCannedACL,
    BucketMD,
    BucketMetadata,
    BucketShadow,
    BucketUpdateInput,
    BucketUpdateResponse,
    BucketWebsite,
    validate_bucket_name,
)
from .retry import RetryPolicy, SignedRetryExecutor, backoff_delays
from .signing import RequestSigner

__all__ = [
    "TigrisProvider",
    "UNSET",
    "BucketCannedACL",
    "BucketMD",
    "BucketMetadata",
    "BucketShadow",
    "BucketUpdateInput",
    "BucketUpdateResponse",
    "BucketWebsite",
    "validate_bucket_name",
    "RetryPolicy",
    "SignedRetryExecutor",
    "backoff_delays",
    "RequestSigner",
]
