"""Call context: cancellation, deadlines and correlation IDs."""

from __future__ import annotations

import contextvars
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

from ..exceptions import DeadlineExceededError, OperationCancelledError

# Correlation ID of the current provider operation
correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


@dataclass
class CallContext:
    """Cancellation and deadline for a single provider call.

    Attributes:
        cancel_event: Set by the caller to abort the call
        deadline: Absolute ``time.monotonic()`` value after which the call is abandoned
    """

    cancel_event: threading.Event | None = None
    deadline: float | None = None

    @classmethod
    def with_timeout(cls, timeout: float, cancel_event: threading.Event | None = None) -> CallContext:
        """Create a context expiring ``timeout`` seconds from now."""
        return cls(cancel_event=cancel_event, deadline=time.monotonic() + timeout)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def check(self) -> None:
        """Raise if the call was cancelled or its deadline has passed.

        Raises:
            OperationCancelledError: If the cancel event is set
            DeadlineExceededError: If the deadline has passed
        """
        if self.cancelled:
            raise OperationCancelledError("operation cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceededError("deadline exceeded")

    def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds unless cancelled first.

        Raises:
            OperationCancelledError: If cancelled before or during the sleep
            DeadlineExceededError: If the deadline expires before the sleep would end
        """
        self.check()
        remaining = self.remaining()
        if remaining is not None and remaining < delay:
            raise DeadlineExceededError(
                f"deadline exceeded: {remaining:.2f}s left, next attempt in {delay:.2f}s"
            )
        if self.cancel_event is None:
            time.sleep(delay)
            return
        if self.cancel_event.wait(delay):
            raise OperationCancelledError("operation cancelled")


def get_correlation_id() -> str | None:
    """Correlation ID of the provider operation in progress, if any."""
    return correlation_id.get()


@contextmanager
def with_correlation_id(corr_id: str) -> Iterator[str]:
    """Tag every bucket event logged inside the block with ``corr_id``.

    Provider operations open one of these per call. Wrapping several calls in
    a caller-level block makes them share the caller's ID instead.

    Args:
        corr_id: Correlation ID to use

    Yields:
        The correlation ID
    """
    token = correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        correlation_id.reset(token)


def get_context_dict(additional: dict[str, Any] | None = None) -> dict[str, Any]:
    """Base fields for a structured log record.

    Args:
        additional: Event fields merged over the context fields

    Returns:
        ``additional`` plus ``correlation_id`` when one is active
    """
    fields: dict[str, Any] = {}
    corr_id = get_correlation_id()
    if corr_id:
        fields["correlation_id"] = corr_id
    if additional:
        fields.update(additional)
    return fields
