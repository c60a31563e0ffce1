"""Pydantic models for the raw crawl payload returned by the browser backend."""

from __future__ import annotations

import pydantic


class Cookie(pydantic.BaseModel):
    """A cookie set while the page loaded.

    Only ``domain`` and ``name`` are interpreted; every other
    attribute the backend reports (value, path, expiry, flags)
    is kept and serialized back unchanged.
    """

    model_config = pydantic.ConfigDict(extra="allow", frozen=True)

    domain: str
    name: str


class Request(pydantic.BaseModel):
    """A network request issued by the page, in browser issue order.

    ``host`` is absent in the payload and filled in when the
    request is classified.
    """

    model_config = pydantic.ConfigDict(extra="allow", frozen=True)

    url: str
    host: str | None = None


class CrawlPayload(pydantic.BaseModel):
    """Everything the backend captured for one page load."""

    model_config = pydantic.ConfigDict(extra="ignore", frozen=True)

    input_url: str
    final_url: str
    response_headers: dict[str, str] = pydantic.Field(default_factory=dict)
    content: str = ""
    cookies: list[Cookie] = pydantic.Field(default_factory=list)
    requests: list[Request] = pydantic.Field(default_factory=list)
