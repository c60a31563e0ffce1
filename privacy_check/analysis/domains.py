"""
Registrable-domain resolution using the Public Suffix List.

Ownership of a host is decided by its registrable domain
(public suffix plus one label), so ``cdn.example.co.uk`` and
``www.example.co.uk`` belong to the same party.
"""

from __future__ import annotations

import functools

import tldextract

from privacy_check import config


@functools.cache
def _extractor(include_private: bool) -> tldextract.TLDExtract:
    """Build an extractor on the bundled suffix list snapshot.

    No suffix list is fetched over the network and nothing is
    cached on disk, so results only change with the installed
    ``tldextract`` release.
    """
    return tldextract.TLDExtract(
        suffix_list_urls=(),
        cache_dir=None,
        include_psl_private_domains=include_private,
    )


def _extract(host: str) -> tldextract.tldextract.ExtractResult:
    include_private = config.get_settings().include_private_suffixes
    return _extractor(include_private)(host.lower())


def registrable_domain(host: str) -> str:
    """Return the registrable domain of *host*.

    When the host ends in a suffix listed in the Public Suffix
    List and has a label in front of it, the result is that
    label plus the suffix, lower-cased.  Anything else (IP
    addresses, ``localhost``, unknown TLDs, a bare suffix, a host
    with an empty label such as ``.example.com``) is returned
    unchanged so it still has a stable identity for comparison.

    Args:
        host: A hostname such as ``"www.example.co.uk"``.

    Returns:
        The registrable domain, e.g. ``"example.co.uk"``.
    """
    if host.startswith(".") or ".." in host:
        return host
    ext = _extract(host)
    if ext.suffix and ext.domain:
        return f"{ext.domain}.{ext.suffix}"
    return host


def has_public_suffix(host: str) -> bool:
    """Check whether *host* ends in a Public Suffix List entry."""
    return bool(_extract(host).suffix)
