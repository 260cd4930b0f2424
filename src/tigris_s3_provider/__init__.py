"""Tigris S3 provider: bucket control-plane client for Tigris object storage."""

from .builders import create_provider_from_spec
from .exceptions import (
    ApiError,
    BucketValidationError,
    ConfigurationError,
    DeadlineExceededError,
    OperationCancelledError,
    ResponseDecodeError,
    SigningError,
    TigrisError,
    TransportError,
)
from .services.tigris import (
    UNSET,
    BucketCannedACL,
    BucketMetadata,
    BucketShadow,
    BucketUpdateInput,
    BucketWebsite,
    RetryPolicy,
    TigrisProvider,
)
from .utils.context import CallContext

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "BucketCannedACL",
    "BucketMetadata",
    "BucketShadow",
    "BucketUpdateInput",
    "BucketValidationError",
    "BucketWebsite",
    "CallContext",
    "ConfigurationError",
    "DeadlineExceededError",
    "OperationCancelledError",
    "ResponseDecodeError",
    "RetryPolicy",
    "SigningError",
    "TigrisError",
    "TigrisProvider",
    "TransportError",
    "UNSET",
    "create_provider_from_spec",
]
