"""
URL utility functions for crawl targets and captured requests.
"""

from __future__ import annotations

from urllib import parse

from privacy_check.analysis import domains
from privacy_check.utils import errors


def extract_host(url: str) -> str:
    """Extract the hostname from a URL string.

    Raises:
        UnresolvableHostError: If the URL has no parseable host.
    """
    try:
        host = parse.urlsplit(url).hostname
    except ValueError as exc:
        raise errors.UnresolvableHostError(url) from exc
    if not host:
        raise errors.UnresolvableHostError(url)
    return host


def get_scheme(url: str) -> str:
    """Return the lower-cased scheme of *url*, or ``""`` if it has none."""
    try:
        return parse.urlsplit(url).scheme
    except ValueError:
        return ""


def get_https_url(url: str) -> str:
    """Rewrite *url* to ``https`` on the default port (443).

    The port is dropped from the netloc since 443 is the
    implicit port for ``https``.
    """
    parts = parse.urlsplit(url)
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    return parse.urlunsplit(("https", host, parts.path, parts.query, parts.fragment))


def normalize_target_url(raw: str) -> str:
    """Turn user input into a checkable ``http://`` URL.

    A missing scheme is filled in and ``https`` is downgraded to
    ``http`` so the crawl shows whether the site redirects to
    HTTPS by itself.

    Raises:
        InvalidTargetError: If the input cannot be parsed, has no
            host, or its host does not end in a known public suffix.
    """
    candidate = raw.strip()
    if not candidate:
        raise errors.InvalidTargetError("No URL given")
    if "://" not in candidate:
        candidate = f"http://{candidate}"

    try:
        parts = parse.urlsplit(candidate)
    except ValueError as exc:
        raise errors.InvalidTargetError(f"Invalid URL: {raw}") from exc
    if parts.scheme not in ("http", "https"):
        raise errors.InvalidTargetError(f"Unsupported scheme: {parts.scheme}")

    try:
        host = extract_host(candidate)
    except errors.UnresolvableHostError as exc:
        raise errors.InvalidTargetError(f"Invalid URL: {raw}") from exc

    if not domains.has_public_suffix(host):
        raise errors.InvalidTargetError(f"Unknown top-level domain: {host}")

    return parse.urlunsplit(("http", parts.netloc, parts.path or "/", parts.query, ""))
