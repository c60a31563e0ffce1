"""
Classification of crawl failures into retryable and terminal.

The headless browser backend fails randomly often enough that
most failures are worth another attempt.  Some, such as a domain
that does not resolve, will never succeed and are reported to the
user straight away.
"""

from __future__ import annotations

from privacy_check.utils import errors

# Compared case-insensitively against the end of the failure reason.
TERMINAL_REASON_SUFFIXES: tuple[str, ...] = (
    "not found",
    "connection refused",
)


def is_terminal_reason(reason: str) -> bool:
    """Check whether *reason* names a failure that retrying cannot fix."""
    normalized = reason.strip().lower()
    return normalized.endswith(TERMINAL_REASON_SUFFIXES)


def classify_failure(
    reason: str,
    retry_count: int,
    max_retries: int,
) -> errors.FetchFailure:
    """Decide whether a failed attempt should be retried.

    Args:
        reason: Failure reason reported for this attempt.
        retry_count: Number of retries already made (0 on the
            first attempt).
        max_retries: Retry budget of the job.

    Returns:
        A ``FetchFailure`` whose ``retryable`` flag is ``False``
        when the budget is spent or the reason is terminal.
    """
    exhausted = retry_count >= max_retries
    return errors.FetchFailure(reason, retryable=not (exhausted or is_terminal_reason(reason)))
