"""Retry with linear backoff for provider calls."""

import time
from typing import Any, Callable, Optional, TypeVar

import structlog

from ..errors import DataQualityError, RecoverableError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def call_with_retry(
    fn: Callable[[], T],
    max_attempts: int = 2,
    backoff_ms: float = 500,
    sleep: Callable[[float], Any] = time.sleep,
    context: Optional[dict[str, Any]] = None
) -> T:
    """
    Call fn, retrying transient failures with linear backoff.

    The wait before attempt n+1 is backoff_ms * n. Data quality errors are
    not transient and are raised immediately.

    Args:
        fn: Zero-argument callable performing one provider request
        max_attempts: Total attempts, including the first
        backoff_ms: Backoff unit in milliseconds
        sleep: Blocking sleep function taking seconds
        context: Extra log context (e.g. symbol, operation)

    Returns:
        Result of the first successful call

    Raises:
        DataQualityError: Propagated from fn without retrying
        RecoverableError: When every attempt failed; chained to the last error
    """
    context = context or {}
    attempts = max(1, max_attempts)
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            return fn()

        except DataQualityError:
            raise

        except Exception as e:
            last_error = e

            if attempt < attempts:
                delay_ms = backoff_ms * attempt
                logger.warning(
                    "Provider request failed, retrying",
                    attempt=attempt,
                    max_attempts=attempts,
                    delay_ms=delay_ms,
                    error=str(e),
                    **context
                )
                sleep(delay_ms / 1000.0)

    raise RecoverableError(
        f"Provider request failed after {attempts} attempts: {last_error}",
        retry_count=attempts,
        max_retries=attempts,
    ) from last_error
