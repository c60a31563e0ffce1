"""
Retry loop with exponential backoff for check attempts.

Plays the part of a job queue's retry loop: each attempt receives
its retry count so that it can tell a failure after the last retry
from one that will be retried.
"""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

from privacy_check.utils import errors, logger

log = logger.create_logger("Retry")

T = TypeVar("T")


def backoff_delay_ms(
    retry_count: int,
    *,
    initial_delay_ms: int,
    max_delay_ms: int,
    backoff_multiplier: float = 2.0,
) -> int:
    """Delay before retry number ``retry_count + 1``, with +/-20% jitter."""
    base = min(initial_delay_ms * backoff_multiplier**retry_count, max_delay_ms)
    jitter = base * 0.2 * (random.random() * 2 - 1)
    return max(0, min(round(base + jitter), max_delay_ms))


async def with_retry(
    fn: Callable[[int], Awaitable[T]],
    *,
    max_retries: int = 3,
    initial_delay_ms: int = 1000,
    max_delay_ms: int = 30000,
    backoff_multiplier: float = 2.0,
    context: str | None = None,
) -> T:
    """
    Await ``fn(retry_count)`` until it returns or fails for good.

    Only a ``FetchFailure`` flagged ``retryable`` leads to another
    attempt; anything else, or a failure on the last allowed
    attempt, propagates.
    """
    retry_count = 0
    while True:
        try:
            return await fn(retry_count)
        except errors.FetchFailure as failure:
            if not failure.retryable or retry_count >= max_retries:
                raise
            delay_ms = backoff_delay_ms(
                retry_count,
                initial_delay_ms=initial_delay_ms,
                max_delay_ms=max_delay_ms,
                backoff_multiplier=backoff_multiplier,
            )
            log.warn(
                "Retrying failed attempt",
                {
                    "context": context,
                    "retry": retry_count + 1,
                    "maxRetries": max_retries,
                    "delayMs": delay_ms,
                    "reason": failure.reason[:100],
                },
            )
        await asyncio.sleep(delay_ms / 1000)
        retry_count += 1
