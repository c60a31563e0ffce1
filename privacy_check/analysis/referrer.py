"""
Referrer policy extraction, precedence, and rating.

A page can state its referrer policy in three places.  When
several are present, a ``<meta name="referrer">`` element wins
over a ``referrer`` directive in the Content-Security-Policy
header, which wins over a dedicated ``Referrer-Policy`` header.
Each raw value is kept in the report; only the rating follows
the precedence.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

import bs4

from privacy_check.data import loader
from privacy_check.models import referrer
from privacy_check.utils import headers as headers_mod

_META_NAME = re.compile(r"^\s*referrer\s*$", re.IGNORECASE)

# ``referrer <value>`` (or ``referrer-policy <value>``) at the start
# of the header or after a ``;``.
_CSP_REFERRER_DIRECTIVE = re.compile(r"(?:^|;)\s*referrer(?:-policy)?\s+([^;]+)", re.IGNORECASE)


def resolve_meta_referrer(content: str) -> str | None:
    """Return the ``content`` of the page's referrer meta element.

    When the document has several, the last one is used since
    browsers apply them in document order.  An empty value counts
    as absent.
    """
    if not content:
        return None
    soup = bs4.BeautifulSoup(content, "html.parser")
    tags = soup.find_all("meta", attrs={"name": _META_NAME})
    if not tags:
        return None
    value = tags[-1].get("content")
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def extract_csp_referrer(response_headers: Mapping[str, str]) -> str | None:
    """Return the ``referrer`` directive of the Content-Security-Policy header."""
    csp = headers_mod.get_header(response_headers, "Content-Security-Policy")
    if csp is None:
        return None
    match = _CSP_REFERRER_DIRECTIVE.search(csp)
    if match is None:
        return None
    value = match.group(1).strip().strip("'\"").strip()
    return value or None


def extract_referrer_header(response_headers: Mapping[str, str]) -> str | None:
    """Return the dedicated ``Referrer-Policy`` header value."""
    return headers_mod.get_header(response_headers, "Referrer-Policy")


def resolve_referrer_signal(
    meta: str | None,
    csp: str | None,
    header: str | None,
) -> referrer.ReferrerPolicySignal | None:
    """Pick the highest-precedence referrer policy that is present."""
    for source, value in (("meta", meta), ("csp", csp), ("header", header)):
        if value:
            return referrer.ReferrerPolicySignal(source=source, value=value)
    return None


def rate_referrer_policy(
    value: str,
    table: referrer.ReferrerPolicyTable | None = None,
) -> str:
    """Rate a referrer policy value against the policy table.

    The value may be a comma-separated fallback list, as allowed
    for the ``Referrer-Policy`` header; browsers use the last
    token they understand, so the last known token decides.

    Returns:
        ``"success"``, ``"warning"`` or ``"alert"``.
    """
    table = table or loader.get_referrer_policy_table()
    tokens = [token.strip().strip("'\"").lower() for token in value.split(",")]
    known = [token for token in tokens if token in table.ratings]
    if not known:
        return table.unrecognized
    return table.ratings[known[-1]]


def evaluate_referrer_policy(
    meta: str | None,
    csp: str | None,
    header: str | None,
    table: referrer.ReferrerPolicyTable | None = None,
) -> referrer.ReferrerPolicyRating:
    """Resolve the effective referrer policy and rate it."""
    signal = resolve_referrer_signal(meta, csp, header)
    if signal is None:
        return referrer.ReferrerPolicyRating(status="missing")
    return referrer.ReferrerPolicyRating(
        source=signal.source,
        value=signal.value,
        status=rate_referrer_policy(signal.value, table),
    )
