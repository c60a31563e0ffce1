"""Tests for privacy_check.pipeline.failures: retryable vs terminal failures."""

from __future__ import annotations

import pytest

from privacy_check.pipeline import failures


class TestIsTerminalReason:
    """Tests for is_terminal_reason()."""

    @pytest.mark.parametrize(
        "reason",
        [
            "Host foo.invalid not found",
            "Connection refused",
            "Error: connection refused",
            "Page NOT FOUND  ",
        ],
    )
    def test_terminal(self, reason: str) -> None:
        assert failures.is_terminal_reason(reason) is True

    @pytest.mark.parametrize(
        "reason",
        [
            "Timeout",
            "Backend responded with status 503",
            "not found in cache, retrying",
            "",
        ],
    )
    def test_retryable(self, reason: str) -> None:
        assert failures.is_terminal_reason(reason) is False


class TestClassifyFailure:
    """Tests for classify_failure()."""

    def test_transient_failure_is_retryable(self) -> None:
        failure = failures.classify_failure("Timeout", retry_count=0, max_retries=3)
        assert failure.retryable is True
        assert failure.reason == "Timeout"

    def test_budget_exhausted_is_terminal(self) -> None:
        failure = failures.classify_failure("Timeout", retry_count=3, max_retries=3)
        assert failure.retryable is False

    def test_terminal_reason_on_first_attempt(self) -> None:
        failure = failures.classify_failure("Host x.invalid not found", retry_count=0, max_retries=3)
        assert failure.retryable is False

    def test_zero_budget_never_retries(self) -> None:
        failure = failures.classify_failure("Timeout", retry_count=0, max_retries=0)
        assert failure.retryable is False
