"""Retry helpers for calls to external AI and vision APIs."""
import logging
from typing import Any, Callable, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 1
DEFAULT_MAX_WAIT_SECONDS = 10

_RETRYABLE_MARKERS = (
    "429",
    "500",
    "502",
    "503",
    "504",
    "timeout",
    "timed out",
    "connection",
    "temporary failure in name resolution",
    "name or service not known",
)
_FATAL_MARKERS = ("400", "401", "403", "404", "unauthorized", "authentication")


def is_retryable_error(exception: BaseException) -> bool:
    """
    Decide whether a failed call is worth repeating.

    Rate limits, 5xx responses, timeouts and connection/DNS failures are
    transient. Client errors (4xx other than 429), bad credentials and
    exhausted quotas are not, and neither is anything unrecognised.
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__.lower()

    if "rate" in error_str and "limit" in error_str:
        return True
    if "timeout" in exception_type or "connect" in exception_type:
        return True
    if any(marker in error_str for marker in _RETRYABLE_MARKERS):
        return not any(marker in error_str for marker in _FATAL_MARKERS)
    return False


def retry_sync_call(
    func: Callable[..., T],
    *args: Any,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
    **kwargs: Any,
) -> T:
    """
    Call ``func`` with exponential backoff on retryable errors.

    Non-retryable errors propagate on the first attempt; the last error is
    re-raised once attempts are exhausted.
    """
    retrying = Retrying(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait_seconds, min=min_wait_seconds, max=max_wait_seconds),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retrying(func, *args, **kwargs)
