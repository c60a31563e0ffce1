"""
Exception types and helpers for consistent error message extraction.

Payload-level problems abort a check and propagate to the worker.
Per-cookie and per-request problems are absorbed where they occur.
"""

from __future__ import annotations


class PrivacyCheckError(Exception):
    """Base class for all errors raised by this package."""


class MalformedPayloadError(PrivacyCheckError):
    """The crawl payload cannot be turned into a report."""


class UnresolvableHostError(PrivacyCheckError):
    """A cookie or request URL has no usable host."""

    def __init__(self, url: str) -> None:
        super().__init__(f"No host in URL: {url!r}")
        self.url = url


class InvalidTargetError(PrivacyCheckError):
    """A submitted URL cannot be checked."""


class FetchFailure(PrivacyCheckError):
    """The crawl backend did not produce a usable payload.

    Attributes:
        reason: Human-readable failure reason, shown to the
            user when the failure is terminal.
        retryable: Whether the job should be attempted again.
    """

    def __init__(self, reason: str, *, retryable: bool = True) -> None:
        super().__init__(reason)
        self.reason = reason
        self.retryable = retryable


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.
    """
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"
