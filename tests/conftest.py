"""Shared fixtures for the test suite."""

from __future__ import annotations

import json
import pathlib
from collections.abc import Callable
from typing import Any

import pytest

from privacy_check import config
from privacy_check.data import loader
from privacy_check.models import payload

FIXTURES_DIR = pathlib.Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from the environment and from cached config."""
    for name in ("MAX_RETRIES", "BACKEND_URL", "REFERRER_POLICY_FILE", "INCLUDE_PRIVATE_SUFFIXES", "WRITE_TO_FILE"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    monkeypatch.setattr(loader, "_referrer_policy_table", None)


# ── Payload Factories ──────────────────────────────────────────


def load_fixture(name: str) -> dict[str, Any]:
    """Read a crawl payload fixture as raw JSON."""
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


@pytest.fixture()
def read_payload() -> Callable[[str], payload.CrawlPayload]:
    """Load a crawl payload fixture by file name."""

    def _read(name: str) -> payload.CrawlPayload:
        return payload.CrawlPayload.model_validate(load_fixture(name))

    return _read


def make_cookie(domain: str, name: str = "c", **extra: Any) -> payload.Cookie:
    return payload.Cookie(domain=domain, name=name, **extra)


def make_request(url: str, **extra: Any) -> payload.Request:
    return payload.Request(url=url, **extra)


@pytest.fixture()
def sample_cookie() -> payload.Cookie:
    """A first-party session cookie with pass-through attributes."""
    return make_cookie(
        ".example.com",
        "session_id",
        value="abc123",
        path="/",
        httpOnly=True,
        secure=True,
    )


@pytest.fixture()
def tracking_cookie() -> payload.Cookie:
    """A third-party advertising cookie."""
    return make_cookie(".doubleclick.net", "IDE", value="AHWqTUm", path="/")


@pytest.fixture()
def minimal_payload() -> payload.CrawlPayload:
    """An HTTPS page with no cookies and only its own requests."""
    return payload.CrawlPayload(
        input_url="http://example.com/",
        final_url="https://example.com/",
        response_headers={"Content-Type": "text/html"},
        content="<html><head><title>t</title></head></html>",
        requests=[
            make_request("http://example.com/"),
            make_request("https://example.com/"),
        ],
    )
