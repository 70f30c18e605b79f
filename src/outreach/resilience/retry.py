"""Retry decorator for transient failures of record-source page fetches.

Only page fetches are wrapped: a page request is idempotent and the import
is committed only after the final page.  Generation calls are never retried.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from outreach.domain.errors import TransportFailure

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_ATTEMPTS = 3


def is_transient(exc: BaseException) -> bool:
    """True for errors worth retrying: network errors, 429 and 5xx responses."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, TransportFailure) and exc.status_code is not None:
        return exc.status_code == 429 or exc.status_code >= 500
    return False


def _log_final_failure(retry_state: RetryCallState) -> Any:
    """Log exhaustion, then re-raise the last exception."""
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    api_name = getattr(retry_state.fn, "_api_name", "unknown") if retry_state.fn else "unknown"
    logger.error(
        "api_call_failed_after_retries",
        api_name=api_name,
        attempts=retry_state.attempt_number,
        exception=str(exception),
    )
    if retry_state.outcome is None:
        return None
    return retry_state.outcome.result()


def _before_sleep_log(retry_state: RetryCallState) -> None:
    """Log a warning before each retry attempt."""
    api_name = getattr(retry_state.fn, "_api_name", "unknown") if retry_state.fn else "unknown"
    logger.warning(
        "retrying_api_call",
        api_name=api_name,
        attempt=retry_state.attempt_number,
        wait=retry_state.next_action.sleep if retry_state.next_action else 0,
    )


def resilient_api_call(
    api_name: str,
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    wait: wait_base | None = None,
) -> Callable[[F], F]:
    """Create a retry decorator for a record-source call.

    Defaults: 3 attempts, exponential backoff with jitter (1s initial, 30s
    max), a warning before each retry, and the original exception re-raised
    after exhaustion.  Non-transient errors are raised immediately.

    Args:
        api_name: Name of the API, used in logs.
        attempts: Maximum number of attempts.
        wait: Override the tenacity wait strategy.

    Returns:
        A decorator that wraps the function with retry logic.
    """

    def decorator(func: F) -> F:
        func._api_name = api_name  # type: ignore[attr-defined]

        wrapped = retry(
            retry=retry_if_exception(is_transient),
            stop=stop_after_attempt(attempts),
            wait=wait if wait is not None else wait_exponential_jitter(initial=1, max=30, jitter=5),
            before_sleep=_before_sleep_log,
            retry_error_callback=_log_final_failure,
            reraise=True,
        )(func)

        return wrapped  # type: ignore[return-value]

    return decorator
