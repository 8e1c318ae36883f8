"""
Retry - Exponential backoff for outbound API calls.

Every request to GitHub or Jira goes through `call_with_backoff`. Only
TransientError (and its RateLimitError subclass) is retried; anything else
is a definite answer and surfaces immediately. The total time spent waiting
is bounded by the configured timeout rather than by an attempt count.
"""

import logging
from typing import Callable, Optional, TypeVar

from ..core.exceptions import RateLimitError, TransientError
from ..core.ports.clock import Clock, SystemClock


T = TypeVar("T")

INITIAL_INTERVAL = 0.5
MULTIPLIER = 1.5
MAX_INTERVAL = 60.0


def call_with_backoff(
    operation: Callable[[], T],
    timeout: float,
    clock: Optional[Clock] = None,
    logger: Optional[logging.Logger] = None,
    description: str = "request",
) -> T:
    """
    Call an operation, retrying transient failures with growing delays.

    Delays start at INITIAL_INTERVAL and grow by MULTIPLIER up to
    MAX_INTERVAL. A RateLimitError that says when the limit resets waits at
    least that long. Once the next wait would push the elapsed time past
    `timeout`, the last error is raised.

    Args:
        operation: Zero-argument callable performing one attempt
        timeout: Maximum total seconds to keep retrying
        clock: Clock used for elapsed time and sleeping
        logger: Logger for retry messages
        description: What the operation is, for log output

    Returns:
        The operation's result

    Raises:
        TransientError: The last failure, when the time budget is spent
        TrackerError: Any non-transient failure, immediately
    """
    clock = clock or SystemClock()
    logger = logger or logging.getLogger("Retry")

    started = clock.monotonic()
    interval = INITIAL_INTERVAL
    attempt = 1

    while True:
        try:
            return operation()
        except TransientError as e:
            delay = interval
            if isinstance(e, RateLimitError) and e.retry_after:
                delay = max(delay, e.retry_after)

            elapsed = clock.monotonic() - started
            if elapsed + delay > timeout:
                logger.error(f"Giving up on {description} after {attempt} attempts: {e}")
                raise

            logger.warning(f"Attempt {attempt} of {description} failed ({e}); retrying in {delay:.1f}s")
            clock.sleep(delay)

            interval = min(interval * MULTIPLIER, MAX_INTERVAL)
            attempt += 1
