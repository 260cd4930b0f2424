"""SigV4 request signing for the Tigris extension API."""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone

from botocore.auth import SIGV4_TIMESTAMP, SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials, ReadOnlyCredentials
from botocore.exceptions import NoCredentialsError

from ...constants import DEFAULT_REGION, HEADER_AMZ_CONTENT_SHA, SIGNING_SERVICE
from ...exceptions import SigningError

logger = logging.getLogger(__name__)


class _TimestampedSigV4Auth(SigV4Auth):
    """SigV4 signer that signs at a caller-supplied instant."""

    def __init__(
        self,
        credentials: ReadOnlyCredentials,
        service_name: str,
        region_name: str,
        timestamp: datetime,
    ) -> None:
        super().__init__(credentials, service_name, region_name)
        self._timestamp = timestamp

    def add_auth(self, request: AWSRequest) -> None:
        if self.credentials is None:
            raise NoCredentialsError()
        request.context["timestamp"] = self._timestamp.strftime(SIGV4_TIMESTAMP)
        # Drops any Authorization/X-Amz-Date left by a previous attempt.
        self._modify_request_before_signing(request)
        canonical_request = self.canonical_request(request)
        string_to_sign = self.string_to_sign(request, canonical_request)
        signature = self.signature(string_to_sign, request)
        self._inject_signature_to_request(request, signature)


def payload_hash(body: bytes) -> str:
    """Hex SHA-256 of the exact bytes to be transmitted."""
    return hashlib.sha256(body).hexdigest()


class RequestSigner:
    """Signs requests with long-lived static credentials."""

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        region: str = DEFAULT_REGION,
        service_name: str = SIGNING_SERVICE,
    ) -> None:
        """Initialize the signer.

        Args:
            access_key: Access key ID
            secret_key: Secret access key
            region: Signing region
            service_name: Signing service name
        """
        self._credentials = Credentials(access_key, secret_key).get_frozen_credentials()
        self.region = region
        self.service_name = service_name

    @property
    def access_key(self) -> str:
        return self._credentials.access_key

    def sign(self, request: AWSRequest, timestamp: datetime | None = None) -> AWSRequest:
        """Sign a request in place.

        The body is read into bytes and its hash is set as a header before the
        signature is computed, so the request must not be modified afterwards.

        Args:
            request: Request to sign
            timestamp: Signing instant, defaults to now (UTC)

        Returns:
            The signed request

        Raises:
            SigningError: If the body cannot be read or signing fails
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        body = _read_body(request)
        request.data = body
        if HEADER_AMZ_CONTENT_SHA in request.headers:
            del request.headers[HEADER_AMZ_CONTENT_SHA]
        request.headers[HEADER_AMZ_CONTENT_SHA] = payload_hash(body)

        signer = _TimestampedSigV4Auth(self._credentials, self.service_name, self.region, timestamp)
        try:
            signer.add_auth(request)
        except (NoCredentialsError, ValueError, TypeError) as e:
            raise SigningError(f"failed to sign request: {e}") from e

        logger.debug(f"Signed {request.method} {request.url} at {timestamp.strftime(SIGV4_TIMESTAMP)}")
        return request


def _read_body(request: AWSRequest) -> bytes:
    data = request.data
    if data is None:
        return b""
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    if hasattr(data, "read"):
        try:
            content = data.read()
        except (OSError, ValueError) as e:
            raise SigningError(f"failed to read request body: {e}") from e
        return content.encode("utf-8") if isinstance(content, str) else bytes(content)
    raise SigningError(f"unsupported request body type: {type(data).__name__}")
