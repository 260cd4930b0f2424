"""Exception hierarchy for the Tigris S3 provider."""

from __future__ import annotations


class TigrisError(Exception):
    """Base class for all provider errors."""


class BucketValidationError(TigrisError, ValueError):
    """Raised when a request is rejected before dispatch."""


class ConfigurationError(TigrisError, ValueError):
    """Raised when the provider configuration is incomplete."""


class SigningError(TigrisError):
    """Raised when a request cannot be signed."""


class TransportError(TigrisError):
    """Raised when the service could not be reached after all attempts."""


class ApiError(TigrisError):
    """Raised when the service rejects a request."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.server_message = server_message


class ResponseDecodeError(TigrisError):
    """Raised when a response body is not valid JSON."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


class OperationCancelledError(TigrisError):
    """Raised when the caller cancelled an in-flight operation."""


class DeadlineExceededError(OperationCancelledError):
    """Raised when the caller's deadline leaves no room for another attempt."""
