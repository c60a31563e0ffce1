"""Pydantic models for the privacy report and its derived views.

Field names match the JSON shape the report is stored and served
in, so ``model_dump(mode="json")`` needs no aliasing.
"""

from __future__ import annotations

import pydantic

from privacy_check.models import payload, referrer


class CookieBuckets(pydantic.BaseModel):
    """Cookies split by the party that owns their domain."""

    model_config = pydantic.ConfigDict(frozen=True)

    first_party: list[payload.Cookie] = pydantic.Field(default_factory=list)
    third_party: list[payload.Cookie] = pydantic.Field(default_factory=list)


class CookieCount(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    first_party: int = pydantic.Field(default=0, ge=0)
    third_party: int = pydantic.Field(default=0, ge=0)


class RequestBuckets(pydantic.BaseModel):
    """Requests to other parties, and plain-HTTP requests to the site itself."""

    model_config = pydantic.ConfigDict(frozen=True)

    third_party: list[payload.Request] = pydantic.Field(default_factory=list)
    insecure_first_party: list[payload.Request] = pydantic.Field(default_factory=list)


class RequestTypeCounts(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    secure: int = pydantic.Field(default=0, ge=0)
    insecure: int = pydantic.Field(default=0, ge=0)


class RequestCount(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    total: int = pydantic.Field(default=0, ge=0)
    unique_hosts: int = pydantic.Field(default=0, ge=0)


class PrivacyReport(pydantic.BaseModel):
    """The classified result of analysing one crawl payload."""

    model_config = pydantic.ConfigDict(frozen=True)

    input_url: str
    final_url: str
    scheme: str
    cookies: CookieBuckets
    cookie_count: CookieCount
    cookie_domains: int = pydantic.Field(ge=0)
    insecure_first_party_requests: list[payload.Request]
    third_party_requests: list[payload.Request]
    third_party_request_types: RequestTypeCounts
    third_party_request_count: RequestCount
    insecure_requests_count: int = pydantic.Field(ge=0)
    meta_referrer: str | None = None
    csp_referrer: str | None = None
    referrer_header: str | None = None
    headers: dict[str, str] = pydantic.Field(default_factory=dict)


class SiteMeta(pydantic.BaseModel):
    """Header-derived facts shown next to a report."""

    https: bool
    hsts: str | None = None
    meta_referrer: str | None = None
    csp_referrer: str | None = None
    referrer_header: str | None = None
    referrer_policy: referrer.ReferrerPolicyRating
