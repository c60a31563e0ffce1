"""Header-derived facts shown alongside a report (HTTPS, HSTS, referrer policy)."""

from __future__ import annotations

from privacy_check.analysis import referrer
from privacy_check.models import report as report_models
from privacy_check.utils import headers as headers_mod


def build_site_meta(report: report_models.PrivacyReport) -> report_models.SiteMeta:
    """Derive the site meta view from a stored report.

    The effective referrer policy is resolved here from the three
    raw values kept in the report, never stored alongside them.
    """
    return report_models.SiteMeta(
        https=report.scheme == "https",
        hsts=headers_mod.get_header(report.headers, "Strict-Transport-Security"),
        meta_referrer=report.meta_referrer,
        csp_referrer=report.csp_referrer,
        referrer_header=report.referrer_header,
        referrer_policy=referrer.evaluate_referrer_policy(
            report.meta_referrer,
            report.csp_referrer,
            report.referrer_header,
        ),
    )
