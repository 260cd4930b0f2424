"""Signed request dispatch with exponential backoff.

Every attempt is cloned from an immutable ``ApiRequest`` and signed with a
fresh timestamp right before it is sent. Server errors (5xx), connection
failures and timeouts are retried. Anything below 500 is returned to the
caller as is, and a malformed request (bad URL or header) fails at once.

Mutating requests (bucket update) are retried without idempotency keys. This
relies on the service applying the same attribute set again being harmless:
an update replaces the same attributes, a repeated create returns a defined
outcome and deleting an absent bucket is tolerated.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterator

import requests

from ... import metrics
from ...constants import (
    API_TYPE_TIGRIS,
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
    DEFAULT_REQUEST_TIMEOUT,
)
from ...utils.context import CallContext
from .builder import ApiRequest
from .signing import RequestSigner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry limits for the extension API."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: float = DEFAULT_MAX_DELAY

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must not be negative")


def backoff_delays(policy: RetryPolicy) -> Iterator[float]:
    """Yield one delay per attempt, doubling from the base and capped at the max."""
    delay = policy.base_delay
    for _ in range(policy.max_attempts):
        yield min(delay, policy.max_delay)
        delay *= 2


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500


# Transport failures worth another attempt; InvalidURL, InvalidHeader and the
# like are raised on the first attempt.
TRANSIENT_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


class SignedRetryExecutor:
    """Sends signed requests, retrying transient failures."""

    def __init__(
        self,
        signer: RequestSigner,
        session: requests.Session | None = None,
        policy: RetryPolicy | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the executor.

        Args:
            signer: Signer applied to every attempt
            session: HTTP session used for dispatch
            policy: Retry limits
            timeout: Per-attempt HTTP timeout in seconds
        """
        self.signer = signer
        self.session = session or requests.Session()
        self.policy = policy or RetryPolicy()
        self.timeout = timeout

    def execute(self, request: ApiRequest, ctx: CallContext | None = None) -> requests.Response:
        """Execute a request with retries.

        Args:
            request: Request to send
            ctx: Cancellation and deadline for the call

        Returns:
            The first non-5xx response, or the last response once attempts run out

        Raises:
            requests.RequestException: The last transient transport failure once attempts
                run out, or a non-transient one immediately
            SigningError: If the request cannot be signed
            OperationCancelledError: If the call is cancelled or its deadline passes
        """
        ctx = ctx or CallContext()
        operation = request.operation or request.method
        delays = backoff_delays(self.policy)
        response: requests.Response | None = None
        error: requests.RequestException | None = None

        for attempt in range(1, self.policy.max_attempts + 1):
            ctx.check()
            signed = self.signer.sign(request.clone())

            start = time.time()
            try:
                response = self._send(signed, ctx)
                error = None
            except TRANSIENT_ERRORS as e:
                response = None
                error = e
                reason = "transport"
                metrics.api_call_total.labels(api_type=API_TYPE_TIGRIS, operation=operation, result="error").inc()
                logger.warning(
                    f"{operation} attempt {attempt}/{self.policy.max_attempts} failed: {type(e).__name__}"
                )
            except requests.RequestException as e:
                metrics.api_call_total.labels(api_type=API_TYPE_TIGRIS, operation=operation, result="error").inc()
                logger.error(f"{operation} failed with non-retryable {type(e).__name__}")
                raise
            else:
                metrics.api_call_duration_seconds.labels(
                    api_type=API_TYPE_TIGRIS, operation=operation
                ).observe(time.time() - start)
                metrics.api_call_total.labels(
                    api_type=API_TYPE_TIGRIS,
                    operation=operation,
                    result="success" if response.status_code < 400 else "failed",
                ).inc()
                if not is_retryable_status(response.status_code):
                    logger.debug(f"{operation} completed with status {response.status_code} after {attempt} attempt(s)")
                    return response
                reason = "server_error"
                logger.warning(
                    f"{operation} attempt {attempt}/{self.policy.max_attempts} returned status {response.status_code}"
                )

            delay = next(delays)
            if attempt == self.policy.max_attempts:
                break

            metrics.api_retry_total.labels(operation=operation, reason=reason).inc()
            if response is not None:
                response.close()
            logger.info(f"Retrying {operation} in {delay:.1f}s")
            ctx.sleep(delay)

        logger.error(f"{operation} failed after {self.policy.max_attempts} attempts")
        if error is not None:
            raise error
        return response

    def _send(self, signed, ctx: CallContext) -> requests.Response:
        prepared = signed.prepare()
        timeout = self.timeout
        remaining = ctx.remaining()
        if remaining is not None:
            timeout = max(min(timeout, remaining), 0.001)
        return self.session.request(
            prepared.method,
            prepared.url,
            headers=dict(prepared.headers.items()),
            data=prepared.body,
            timeout=timeout,
        )
