"""Tigris bucket operations client."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Iterator

import boto3
import requests
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import (
    API_TYPE_S3,
    DEFAULT_ENDPOINT,
    DEFAULT_REGION,
    DEFAULT_REQUEST_TIMEOUT,
    HEADER_AMZ_IDENTITY_ID,
    OP_CREATE_BUCKET,
    OP_DELETE_BUCKET,
    OP_GET_BUCKET_METADATA,
    OP_HEAD_BUCKET,
    OP_UPDATE_BUCKET,
)
from ...exceptions import TransportError
from ...logging import log_bucket_event
from ...tracing import add_span_attribute, trace_span
from ...utils.context import CallContext, get_correlation_id, with_correlation_id
from ...utils.errors import sanitize_exception
from .builder import ApiRequest, build_metadata_request, build_update_request
from .decoder import (
    api_error_from_client_error,
    decode_metadata_response,
    decode_update_response,
    is_not_found,
)
from .models import BucketMetadata, BucketUpdateInput, BucketUpdateResponse, validate_bucket_name
from .retry import RetryPolicy, SignedRetryExecutor
from .signing import RequestSigner

logger = logging.getLogger(__name__)


class TigrisProvider:
    """Bucket operations against Tigris.

    Bucket creation, existence checks and deletion go through the S3 API.
    Access settings, website and shadow configuration go through the signed
    JSON extension API.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        region: str = DEFAULT_REGION,
        identity_id: str | None = None,
        retry_policy: RetryPolicy | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the Tigris provider.

        Args:
            access_key: Access key ID
            secret_key: Secret access key
            endpoint: Service endpoint URL
            region: Signing region
            identity_id: Optional value sent as the S3-Identity-Id header on HeadBucket
            retry_policy: Retry limits for the extension API
            timeout: Per-attempt HTTP timeout in seconds
            session: HTTP session for the extension API
        """
        self.endpoint = endpoint.rstrip("/")
        self.region = region
        self.identity_id = identity_id
        self.retry_policy = retry_policy or RetryPolicy()

        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
            retries={"max_attempts": self.retry_policy.max_attempts, "mode": "standard"},
            connect_timeout=timeout,
            read_timeout=timeout,
        )
        self.client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=config,
        )
        if identity_id:
            self.client.meta.events.register("before-sign.s3.HeadBucket", self._add_identity_header)

        self.signer = RequestSigner(access_key, secret_key, region=region)
        self.executor = SignedRetryExecutor(
            self.signer,
            session=session,
            policy=self.retry_policy,
            timeout=timeout,
        )

    def create_bucket(self, update: BucketUpdateInput, ctx: CallContext | None = None) -> None:
        """Create a bucket and apply the requested configuration.

        The service decides what a create on an existing bucket means; no
        existence check is made here.

        Args:
            update: Bucket name and the configuration to apply after creation
            ctx: Cancellation and deadline for the call

        Raises:
            BucketValidationError: If the bucket name is invalid
            ApiError: If the service rejects the request
            TransportError: If the service cannot be reached
        """
        validate_bucket_name(update.bucket)
        ctx = ctx or CallContext()

        with self._operation(OP_CREATE_BUCKET, update.bucket):
            try:
                self._call_s3(OP_CREATE_BUCKET, ctx, self.client.create_bucket, Bucket=update.bucket)
            except ClientError as e:
                raise api_error_from_client_error(e, OP_CREATE_BUCKET) from e
            log_bucket_event(logger, OP_CREATE_BUCKET, update.bucket, "created", "Bucket created")

            if update.has_changes():
                self._apply_update(update, ctx)

    def update_bucket(
        self, update: BucketUpdateInput, ctx: CallContext | None = None
    ) -> BucketUpdateResponse | None:
        """Apply a bucket changeset.

        Only the fields set on ``update`` are transmitted.

        Returns:
            The service's update response, or None when nothing was changed

        Raises:
            BucketValidationError: If the bucket name is invalid
            ApiError: If the service rejects the update
            ResponseDecodeError: If the response body is malformed
            TransportError: If the service cannot be reached
        """
        validate_bucket_name(update.bucket)
        if not update.has_changes():
            logger.debug(f"No changes requested for bucket {update.bucket}, skipping update")
            return None

        with self._operation(OP_UPDATE_BUCKET, update.bucket):
            return self._apply_update(update, ctx)

    def head_bucket(self, name: str, ctx: CallContext | None = None) -> bool:
        """Check whether a bucket exists.

        Returns:
            True if the bucket exists, False if the service reports it missing

        Raises:
            BucketValidationError: If the bucket name is invalid
            ApiError: For any failure other than not-found
            TransportError: If the service cannot be reached
        """
        validate_bucket_name(name)
        ctx = ctx or CallContext()

        with self._operation(OP_HEAD_BUCKET, name):
            try:
                self._call_s3(OP_HEAD_BUCKET, ctx, self.client.head_bucket, Bucket=name)
            except ClientError as e:
                if is_not_found(e):
                    log_bucket_event(
                        logger, OP_HEAD_BUCKET, name, "not_found", "Bucket not found", level=logging.WARNING
                    )
                    return False
                raise api_error_from_client_error(e, OP_HEAD_BUCKET) from e
            return True

    def delete_bucket(self, name: str, ctx: CallContext | None = None) -> None:
        """Delete a bucket. Deleting a bucket that does not exist is not an error.

        Raises:
            BucketValidationError: If the bucket name is invalid
            ApiError: If the service rejects the request
            TransportError: If the service cannot be reached
        """
        validate_bucket_name(name)
        ctx = ctx or CallContext()

        with self._operation(OP_DELETE_BUCKET, name):
            try:
                self._call_s3(OP_DELETE_BUCKET, ctx, self.client.delete_bucket, Bucket=name)
            except ClientError as e:
                if is_not_found(e):
                    log_bucket_event(
                        logger,
                        OP_DELETE_BUCKET,
                        name,
                        "not_found",
                        "Bucket already absent",
                        level=logging.WARNING,
                    )
                    return
                raise api_error_from_client_error(e, OP_DELETE_BUCKET) from e
            log_bucket_event(logger, OP_DELETE_BUCKET, name, "deleted", "Bucket deleted")

    def get_bucket_metadata(self, name: str, ctx: CallContext | None = None) -> BucketMetadata:
        """Fetch the service-side configuration of a bucket.

        Raises:
            BucketValidationError: If the bucket name is invalid
            ApiError: If the request fails
            ResponseDecodeError: If the response body is malformed
            TransportError: If the service cannot be reached
        """
        validate_bucket_name(name)

        with self._operation(OP_GET_BUCKET_METADATA, name):
            request = build_metadata_request(self.endpoint, name)
            response = self._execute(request, ctx)
            return decode_metadata_response(response)

    def _apply_update(self, update: BucketUpdateInput, ctx: CallContext | None) -> BucketUpdateResponse:
        request = build_update_request(self.endpoint, update)
        response = self._execute(request, ctx)
        result = decode_update_response(response)
        log_bucket_event(
            logger,
            OP_UPDATE_BUCKET,
            update.bucket,
            "updated",
            f"Bucket update {result.update}",
            fields=update.changed_fields(),
        )
        return result

    def _execute(self, request: ApiRequest, ctx: CallContext | None) -> requests.Response:
        try:
            return self.executor.execute(request, ctx)
        except requests.RequestException as e:
            raise TransportError(f"failed to send {request.operation} request: {e}") from e

    def _call_s3(self, operation: str, ctx: CallContext, func: Callable[..., Any], **params: Any) -> Any:
        ctx.check()
        start = time.time()
        result = "success"
        try:
            return func(**params)
        except ClientError:
            result = "failed"
            raise
        except BotoCoreError as e:
            result = "failed"
            raise TransportError(f"{operation} failed: {e}") from e
        finally:
            metrics.api_call_total.labels(api_type=API_TYPE_S3, operation=operation, result=result).inc()
            metrics.api_call_duration_seconds.labels(api_type=API_TYPE_S3, operation=operation).observe(
                time.time() - start
            )

    @contextmanager
    def _operation(self, operation: str, bucket: str) -> Iterator[None]:
        # Keep a caller-supplied correlation ID, otherwise one per operation.
        corr_id = get_correlation_id() or uuid.uuid4().hex
        with with_correlation_id(corr_id), trace_span(operation, attributes={"bucket.name": bucket}):
            add_span_attribute("correlation.id", corr_id)
            try:
                yield
            except Exception as e:
                metrics.bucket_operations_total.labels(operation=operation, result="failed").inc()
                log_bucket_event(
                    logger,
                    operation,
                    bucket,
                    "failed",
                    sanitize_exception(e),
                    level=logging.ERROR,
                    error_type=type(e).__name__,
                )
                raise
            metrics.bucket_operations_total.labels(operation=operation, result="success").inc()

    def _add_identity_header(self, request: Any, **kwargs: Any) -> None:
        request.headers[HEADER_AMZ_IDENTITY_ID] = self.identity_id
