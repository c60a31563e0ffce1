"""Tests for privacy_check.analysis.report: report assembly over crawl fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable

import pytest

from privacy_check.analysis import report as report_mod
from privacy_check.analysis import site_meta
from privacy_check.models import payload
from privacy_check.utils import errors

ReadPayload = Callable[[str], payload.CrawlPayload]


class TestScenarios:
    """End-to-end analysis of recorded crawl payloads."""

    def test_https_hsts_no_cookies_or_external_requests(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("https_hsts_referrer_no_cookies_or_ext_requests.json"))
        meta = site_meta.build_site_meta(report)

        assert report.scheme == "https"
        assert report.meta_referrer == "never"
        assert report.cookie_count.first_party == 0
        assert report.cookie_count.third_party == 0
        assert report.third_party_request_count.total == 0
        assert report.insecure_requests_count == 0
        assert meta.hsts is not None
        assert "max-age=10886400;" in meta.hsts
        assert meta.https is True
        assert meta.referrer_policy.status == "success"

    def test_https_with_insecure_first_party_resource(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("mixed_content.json"))
        assert report.insecure_requests_count == 1
        assert [r.url for r in report.insecure_first_party_requests] == ["http://example.com/logo.png"]

    def test_http_with_cookies_and_external_requests(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("http_with_cookies_and_ext_requests.json"))

        assert report.scheme == "http"
        assert report.meta_referrer is None
        assert report.cookie_count.first_party == 13
        assert report.cookie_count.third_party == 2
        assert report.cookie_domains == 2
        assert report.third_party_request_types.insecure == 9
        assert report.third_party_request_types.secure == 2
        assert report.third_party_request_count.total == 11
        assert report.third_party_request_count.unique_hosts == 9
        assert len(report.insecure_first_party_requests) == 2
        assert report.insecure_requests_count == 11

    def test_csp_referrer(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("csp_referrer.json"))
        meta = site_meta.build_site_meta(report)
        assert meta.referrer_policy.status == "success"
        assert meta.csp_referrer == "no-referrer"

    def test_referrer_header(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("referrer_header.json"))
        meta = site_meta.build_site_meta(report)
        assert meta.referrer_policy.status == "success"
        assert meta.referrer_header == "no-referrer"

    def test_csp_takes_precedence_over_header(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("csp_and_referrer_header.json"))
        meta = site_meta.build_site_meta(report)
        assert meta.referrer_policy.status == "alert"
        assert meta.csp_referrer == "unsafe-url"
        assert meta.referrer_header == "no-referrer"

    def test_meta_takes_precedence_over_csp(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("csp_and_meta_referrer.json"))
        meta = site_meta.build_site_meta(report)
        assert meta.referrer_policy.status == "success"
        assert meta.csp_referrer == "unsafe-url"
        assert meta.meta_referrer == "no-referrer"


class TestBuildReport:
    """Tests for build_report() behaviour beyond the scenarios."""

    def test_headers_passed_through(self, minimal_payload: payload.CrawlPayload) -> None:
        report = report_mod.build_report(minimal_payload)
        assert report.headers == {"Content-Type": "text/html"}

    def test_urls_copied(self, minimal_payload: payload.CrawlPayload) -> None:
        report = report_mod.build_report(minimal_payload)
        assert report.input_url == "http://example.com/"
        assert report.final_url == "https://example.com/"

    def test_redirect_to_other_domain_uses_final_url(self) -> None:
        crawl = payload.CrawlPayload(
            input_url="http://example.com/",
            final_url="https://www.example.org/",
            cookies=[payload.Cookie(domain=".example.org", name="a"), payload.Cookie(domain="example.com", name="b")],
        )
        report = report_mod.build_report(crawl)
        assert [c.name for c in report.cookies.first_party] == ["a"]
        assert [c.name for c in report.cookies.third_party] == ["b"]

    def test_unknown_tld_site(self) -> None:
        crawl = payload.CrawlPayload(
            input_url="http://Intranet.corp/",
            final_url="http://Intranet.corp/",
            cookies=[
                payload.Cookie(domain="Intranet.corp", name="sid"),
                payload.Cookie(domain=".doubleclick.net", name="IDE"),
            ],
            requests=[
                payload.Request(url="http://intranet.corp/"),
                payload.Request(url="http://INTRANET.corp/app.js"),
                payload.Request(url="https://wiki.intranet.corp/logo.png"),
                payload.Request(url="https://stats.doubleclick.net/t.js"),
            ],
        )
        report = report_mod.build_report(crawl)

        assert [c.name for c in report.cookies.first_party] == ["sid"]
        assert [c.name for c in report.cookies.third_party] == ["IDE"]
        assert [r.url for r in report.insecure_first_party_requests] == ["http://INTRANET.corp/app.js"]
        assert [r.host for r in report.third_party_requests] == ["wiki.intranet.corp", "stats.doubleclick.net"]
        assert report.insecure_requests_count == 1

    def test_ip_address_site(self) -> None:
        crawl = payload.CrawlPayload(
            input_url="http://192.168.1.10:8080/",
            final_url="http://192.168.1.10:8080/",
            cookies=[payload.Cookie(domain="192.168.1.10", name="sid")],
            requests=[
                payload.Request(url="http://192.168.1.10:8080/"),
                payload.Request(url="http://192.168.1.10:8080/api"),
                payload.Request(url="http://10.0.0.5/pixel.gif"),
            ],
        )
        report = report_mod.build_report(crawl)

        assert report.cookie_count.first_party == 1
        assert [r.url for r in report.insecure_first_party_requests] == ["http://192.168.1.10:8080/api"]
        assert [r.host for r in report.third_party_requests] == ["10.0.0.5"]
        assert report.third_party_request_types.insecure == 1
        assert report.insecure_requests_count == 2

    @pytest.mark.parametrize("final_url", ["", "example.com/path", "//example.com/", "http://", "http://[::1/"])
    def test_malformed_final_url(self, final_url: str) -> None:
        crawl = payload.CrawlPayload(input_url="http://example.com/", final_url=final_url)
        with pytest.raises(errors.MalformedPayloadError):
            report_mod.build_report(crawl)

    def test_json_output_has_all_fields(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("https_hsts_referrer_no_cookies_or_ext_requests.json"))
        data = json.loads(report.model_dump_json())
        assert data["cookies"] == {"first_party": [], "third_party": []}
        assert data["third_party_requests"] == []
        assert data["insecure_first_party_requests"] == []
        assert data["third_party_request_types"] == {"secure": 0, "insecure": 0}
        assert data["third_party_request_count"] == {"total": 0, "unique_hosts": 0}
        assert data["cookie_domains"] == 0
        assert data["csp_referrer"] is None
        assert data["referrer_header"] is None

    def test_json_output_keeps_opaque_attributes(self, read_payload: ReadPayload) -> None:
        report = report_mod.build_report(read_payload("http_with_cookies_and_ext_requests.json"))
        data = report.model_dump(mode="json")
        ide = next(c for c in data["cookies"]["third_party"] if c["name"] == "IDE")
        assert ide["expires"] == 1893456000
        assert ide["httpOnly"] is True
        assert all(r["method"] == "GET" for r in data["third_party_requests"])
        assert all(r["host"] for r in data["third_party_requests"])
