"""
First-/third-party cookie classification.

A cookie belongs to the party that owns its ``domain`` attribute,
not to whichever request happened to set it.
"""

from __future__ import annotations

from privacy_check.analysis import domains
from privacy_check.models import payload
from privacy_check.models import report as report_models


def _cookie_registrable_domain(cookie: payload.Cookie) -> str:
    """Registrable domain of a cookie's ``domain`` attribute.

    Domain cookies are reported with a leading dot
    (``.example.com``); exactly one is removed.  The attribute is
    lower-cased first, like the hosts parsed out of URLs.
    """
    return domains.registrable_domain(cookie.domain.lower().removeprefix("."))


def classify_cookies(
    cookies: list[payload.Cookie],
    registrable_domain: str,
) -> report_models.CookieBuckets:
    """Split cookies into first- and third-party buckets.

    Every cookie ends up in exactly one bucket and each bucket
    keeps the input order.

    Args:
        cookies: Cookies captured during the crawl.
        registrable_domain: The page's registrable domain.

    Returns:
        The two buckets.
    """
    first_party: list[payload.Cookie] = []
    third_party: list[payload.Cookie] = []
    for cookie in cookies:
        if _cookie_registrable_domain(cookie) == registrable_domain:
            first_party.append(cookie)
        else:
            third_party.append(cookie)
    return report_models.CookieBuckets(first_party=first_party, third_party=third_party)


def cookie_count(buckets: report_models.CookieBuckets) -> report_models.CookieCount:
    return report_models.CookieCount(
        first_party=len(buckets.first_party),
        third_party=len(buckets.third_party),
    )


def third_party_cookie_domains(cookies: list[payload.Cookie]) -> int:
    """Count the distinct ``domain`` attributes among *cookies*."""
    return len({cookie.domain for cookie in cookies})
