"""Opt-in retry policy for calls made through ``ApiWrapper.invoke``.

The client never retries on its own.  Callers that want retries decorate
their own call site::

    @retrying()
    def load() -> list[Workspace]:
        return client.get_all_workspaces()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fabriclink.exceptions import RateLimitError, ServerError, TransportError

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    TransportError,
    RateLimitError,
    ServerError,
)


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry attempt."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        f"Fabric API call failed (attempt {retry_state.attempt_number}), "
        f"retrying: {exc!r}"
    )


class _WaitRetryAfter:
    """Exponential backoff, but never shorter than a 429 ``Retry-After``."""

    def __init__(self, multiplier: float, min_wait: float, max_wait: float) -> None:
        self._backoff = wait_exponential(
            multiplier=multiplier, min=min_wait, max=max_wait
        )

    def __call__(self, retry_state: RetryCallState) -> float:
        delay = self._backoff(retry_state)
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, RateLimitError) and exc.retry_after is not None:
            return max(delay, exc.retry_after)
        return delay


def retrying(
    *,
    attempts: int = 3,
    multiplier: float = 1,
    min_wait: float = 1,
    max_wait: float = 30,
    retry_on: tuple[type[Exception], ...] = RETRYABLE_ERRORS,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Return a tenacity decorator retrying transient Fabric failures.

    ``NotFoundError``, authentication errors and other 4xx responses are not
    retried by default.
    """
    return retry(
        retry=retry_if_exception_type(retry_on),
        stop=stop_after_attempt(attempts),
        wait=_WaitRetryAfter(multiplier, min_wait, max_wait),
        before_sleep=_log_retry,
        reraise=True,
    )
