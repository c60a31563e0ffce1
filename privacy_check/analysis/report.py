"""
Privacy report assembly.

Turns one crawl payload into a ``PrivacyReport``.  The page's
registrable domain is derived once from ``final_url`` and shared
by every classifier so that a report is internally consistent.
"""

from __future__ import annotations

from urllib import parse

from privacy_check.analysis import cookies, domains, referrer, requests
from privacy_check.models import payload
from privacy_check.models import report as report_models
from privacy_check.utils import errors, logger

log = logger.create_logger("Report")


def _parse_final_url(final_url: str) -> parse.SplitResult:
    """Parse the post-redirect URL of the page.

    Raises:
        MalformedPayloadError: If the URL lacks a scheme or host.
    """
    try:
        parts = parse.urlsplit(final_url)
        host = parts.hostname
    except ValueError as exc:
        raise errors.MalformedPayloadError(f"Unparsable final_url: {final_url!r}") from exc
    if not parts.scheme or not host:
        raise errors.MalformedPayloadError(f"Unparsable final_url: {final_url!r}")
    return parts


def build_report(crawl: payload.CrawlPayload) -> report_models.PrivacyReport:
    """Classify a crawl payload into a privacy report.

    Args:
        crawl: The payload returned by the crawl backend.

    Returns:
        The assembled report.

    Raises:
        MalformedPayloadError: If ``final_url`` cannot be parsed.
    """
    url = _parse_final_url(crawl.final_url)
    reg_domain = domains.registrable_domain(url.hostname or "")

    cookie_buckets = cookies.classify_cookies(crawl.cookies, reg_domain)
    request_buckets = requests.classify_requests(crawl.requests, reg_domain)
    third_party_types = requests.request_type_counts(request_buckets.third_party)

    report = report_models.PrivacyReport(
        input_url=crawl.input_url,
        final_url=crawl.final_url,
        scheme=url.scheme,
        cookies=cookie_buckets,
        cookie_count=cookies.cookie_count(cookie_buckets),
        cookie_domains=cookies.third_party_cookie_domains(cookie_buckets.third_party),
        insecure_first_party_requests=request_buckets.insecure_first_party,
        third_party_requests=request_buckets.third_party,
        third_party_request_types=third_party_types,
        third_party_request_count=requests.request_counts(request_buckets.third_party),
        insecure_requests_count=requests.insecure_requests_count(
            third_party_types, request_buckets.insecure_first_party
        ),
        meta_referrer=referrer.resolve_meta_referrer(crawl.content),
        csp_referrer=referrer.extract_csp_referrer(crawl.response_headers),
        referrer_header=referrer.extract_referrer_header(crawl.response_headers),
        headers=dict(crawl.response_headers),
    )

    log.info(
        "Report assembled",
        {
            "domain": reg_domain,
            "scheme": report.scheme,
            "firstPartyCookies": report.cookie_count.first_party,
            "thirdPartyCookies": report.cookie_count.third_party,
            "thirdPartyRequests": report.third_party_request_count.total,
            "insecureRequests": report.insecure_requests_count,
        },
    )
    return report
