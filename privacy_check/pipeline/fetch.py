"""
Crawl backend access: the HTTPS-only probe and the crawl request.

Both calls share the worker's ``aiohttp.ClientSession`` so that
TCP connections are reused across jobs.
"""

from __future__ import annotations

import asyncio
import json

import aiohttp
import pydantic

from privacy_check import config
from privacy_check.models import payload
from privacy_check.utils import errors, logger
from privacy_check.utils import url as url_mod

log = logger.create_logger("Fetch")


# ============================================================================
# HTTPS-only probe
# ============================================================================


async def check_if_https_only(
    session: aiohttp.ClientSession,
    url: str,
    settings: config.Settings | None = None,
) -> str:
    """Switch *url* to HTTPS when the site refuses plain HTTP.

    Submitted URLs are always ``http://`` so the crawl shows
    whether a site redirects to HTTPS by itself.  A few sites have
    no HTTP listener at all; for those the connection is actively
    refused and the check is run against ``https://`` instead.
    Any other outcome, including other errors, keeps the URL.
    """
    settings = settings or config.get_settings()
    timeout = aiohttp.ClientTimeout(total=settings.probe_timeout_seconds)
    try:
        async with session.head(url, allow_redirects=False, timeout=timeout):
            return url
    except aiohttp.ClientConnectorError as exc:
        if isinstance(exc.os_error, ConnectionRefusedError):
            https_url = url_mod.get_https_url(url)
            log.info("Plain HTTP refused, switching to HTTPS", {"url": url, "httpsUrl": https_url})
            return https_url
        log.debug("HTTPS-only probe failed", {"url": url, "error": errors.get_error_message(exc)})
        return url
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        log.debug("HTTPS-only probe failed", {"url": url, "error": errors.get_error_message(exc)})
        return url


# ============================================================================
# Crawl request
# ============================================================================


def _crawl_params(url: str, refresh: bool, settings: config.Settings) -> dict[str, str]:
    params = {
        "fetch_url": url,
        "parse_delay": str(settings.parse_delay_ms),
        "get_requests": "true",
        "get_cookies": "true",
    }
    if refresh:
        params["force"] = "true"
    return params


def _reason_from_body(status: int, body: str) -> str:
    """Pull the failure reason out of an error response body."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("reason"), str) and data["reason"]:
        return data["reason"]
    return f"Backend responded with status {status}"


def _reason_from_exception(exc: BaseException) -> str:
    """Describe a transport error talking to the crawl backend.

    The wording names the backend, not the checked site, and never
    ends in a terminal reason suffix.
    """
    if isinstance(exc, aiohttp.ClientConnectorDNSError):
        return f"Crawl backend host {exc.host} could not be resolved"
    if isinstance(exc, aiohttp.ClientConnectorError):
        return f"Crawl backend {exc.host}:{exc.port} unreachable"
    if isinstance(exc, asyncio.TimeoutError):
        return "Timeout"
    return errors.get_error_message(exc)


async def fetch_crawl(
    session: aiohttp.ClientSession,
    url: str,
    refresh: bool,
    backend_url: str,
    settings: config.Settings | None = None,
) -> payload.CrawlPayload:
    """Ask the crawl backend to load *url* and return what it captured.

    Args:
        session: Shared HTTP session.
        url: Page to crawl.
        refresh: Make the backend skip its own cache.
        backend_url: Crawl backend endpoint.
        settings: Timeouts and crawl parameters.

    Returns:
        The validated crawl payload.

    Raises:
        FetchFailure: For transport errors, non-200 responses, and
            bodies that are not a valid crawl payload.  The failure
            is not yet classified as retryable or terminal.
    """
    settings = settings or config.get_settings()
    timeout = aiohttp.ClientTimeout(total=settings.fetch_timeout_seconds)
    params = _crawl_params(url, refresh, settings)

    log.start_timer("crawl")
    try:
        async with session.get(backend_url, params=params, timeout=timeout) as response:
            status = response.status
            raw = await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        log.end_timer("crawl", "Crawl request failed")
        raise errors.FetchFailure(_reason_from_exception(exc)) from exc
    log.end_timer("crawl", "Crawl response received")

    if status != 200:
        reason = _reason_from_body(status, raw.decode("utf-8", errors="replace"))
        log.warn("Crawl backend returned an error", {"status": status, "reason": reason})
        raise errors.FetchFailure(reason)

    try:
        body = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        log.warn("Undecodable crawl response", {"bytes": len(raw), "error": exc.reason})
        raise errors.FetchFailure(f"Malformed crawl response: {exc.reason}") from exc

    try:
        return payload.CrawlPayload.model_validate_json(body)
    except pydantic.ValidationError as exc:
        log.warn("Malformed crawl payload", {"errors": exc.error_count()})
        raise errors.FetchFailure(f"Malformed crawl payload: {exc.error_count()} validation errors") from exc
