"""Retry decorators using tenacity."""

from __future__ import annotations

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)


def retry_api(max_attempts: int = 3, *, max_wait: float = 30.0):
    """Retry decorator for capability calls with exponential backoff.

    Only transient transport errors are retried; everything else surfaces
    on the first attempt.
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=max_wait),
        retry=retry_if_exception_type((TimeoutError, ConnectionError)),
        reraise=True,
    )
