"""
Network request classification.

Finds requests that go to other parties and plain-HTTP requests
to the site itself, and computes the counts shown in the report.
Requests whose URL has no usable host are left out of every
bucket and every count.
"""

from __future__ import annotations

from collections.abc import Iterator

from privacy_check.analysis import domains
from privacy_check.models import payload
from privacy_check.models import report as report_models
from privacy_check.utils import errors, logger
from privacy_check.utils import url as url_mod

log = logger.create_logger("Requests")


def _with_hosts(
    requests: list[payload.Request],
) -> Iterator[tuple[payload.Request, str]]:
    """Yield each request with its host, skipping requests without one."""
    for request in requests:
        try:
            host = url_mod.extract_host(request.url)
        except errors.UnresolvableHostError as exc:
            log.debug("Skipping request without host", {"url": exc.url})
            continue
        yield request, host


def _annotate(request: payload.Request, host: str) -> payload.Request:
    return request.model_copy(update={"host": host})


def third_party_requests(
    requests: list[payload.Request],
    registrable_domain: str,
) -> list[payload.Request]:
    """Requests whose host belongs to another registrable domain."""
    return [
        _annotate(request, host)
        for request, host in _with_hosts(requests)
        if domains.registrable_domain(host) != registrable_domain
    ]


def drop_navigation_request(
    candidates: list[payload.Request],
) -> list[payload.Request]:
    """Remove the top-level navigation from the insecure first-party list.

    The crawl always starts with a plain ``http://`` navigation to
    the site (so that HTTPS redirects can be observed), which would
    otherwise show up as the first insecure first-party request on
    every site.  That request is a measurement artifact, so the
    first candidate is dropped unconditionally.
    """
    return candidates[1:]


def insecure_first_party_requests(
    requests: list[payload.Request],
    registrable_domain: str,
) -> list[payload.Request]:
    """Plain-HTTP requests to the page's own registrable domain."""
    candidates = [
        _annotate(request, host)
        for request, host in _with_hosts(requests)
        if domains.registrable_domain(host) == registrable_domain
        and url_mod.get_scheme(request.url) == "http"
    ]
    return drop_navigation_request(candidates)


def classify_requests(
    requests: list[payload.Request],
    registrable_domain: str,
) -> report_models.RequestBuckets:
    return report_models.RequestBuckets(
        third_party=third_party_requests(requests, registrable_domain),
        insecure_first_party=insecure_first_party_requests(requests, registrable_domain),
    )


def request_type_counts(requests: list[payload.Request]) -> report_models.RequestTypeCounts:
    """Count requests by whether their URL starts with ``https``."""
    secure = sum(1 for request in requests if request.url.startswith("https"))
    return report_models.RequestTypeCounts(secure=secure, insecure=len(requests) - secure)


def request_counts(requests: list[payload.Request]) -> report_models.RequestCount:
    """Total number of requests and the number of distinct hosts they go to."""
    hosts = {request.host for request in requests if request.host is not None}
    return report_models.RequestCount(total=len(requests), unique_hosts=len(hosts))


def insecure_requests_count(
    third_party_types: report_models.RequestTypeCounts,
    insecure_first_party: list[payload.Request],
) -> int:
    return third_party_types.insecure + len(insecure_first_party)
