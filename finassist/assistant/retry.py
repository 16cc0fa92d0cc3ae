"""Exponential backoff for upstream rate limits.

Only RateLimitError is retried. Anything else, including cancellation of the
awaiting task, propagates on the first occurrence.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from finassist.config import settings
from finassist.errors import RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(
    attempt: int,
    retry_after: Optional[float],
    base_delay: float,
    max_delay: float,
) -> float:
    """Delay before the retry following zero-based ``attempt``."""
    candidates = [base_delay * (2 ** attempt), max_delay]
    if retry_after is not None and retry_after >= 0:
        candidates.append(retry_after)
    return min(candidates)


async def with_rate_limit_retries(
    op: Callable[[], Awaitable[T]],
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run ``op`` and retry it while the provider keeps rate limiting.

    Args:
        op: Zero-argument coroutine factory, called once per attempt
        max_attempts: Total attempts including the first
        base_delay: Backoff base in seconds
        max_delay: Upper bound for a single wait
        sleep: Awaitable sleep, swappable in tests

    Raises:
        RateLimitError: After ``max_attempts`` throttled attempts, with
            ``attempts`` set to the number made
    """
    max_attempts = max_attempts if max_attempts is not None else settings.ASSISTANT_MAX_ATTEMPTS
    base_delay = base_delay if base_delay is not None else settings.ASSISTANT_RETRY_BASE_DELAY
    max_delay = max_delay if max_delay is not None else settings.ASSISTANT_RETRY_MAX_DELAY
    max_attempts = max(1, max_attempts)

    for attempt in range(max_attempts):
        try:
            return await op()
        except RateLimitError as e:
            if attempt == max_attempts - 1:
                raise RateLimitError(
                    "Rate limit exceeded. Please try again later.",
                    retry_after=e.retry_after,
                    attempts=max_attempts,
                ) from e

            delay = backoff_delay(attempt, e.retry_after, base_delay, max_delay)
            logger.warning(
                f"Rate limit retry: waiting {delay:.2f}s (attempt {attempt + 1}/{max_attempts})"
            )
            await sleep(delay)

    # Unreachable: the loop either returns or raises
    raise RateLimitError(attempts=max_attempts)
