"""
Runtime configuration for the worker, crawl backend, and API server.

Uses ``pydantic_settings.BaseSettings`` for automatic environment
variable binding, type coercion, and validation.  ``main`` loads a
``.env`` file before the first settings instance is created.
"""

from __future__ import annotations

import functools

import pydantic
import pydantic_settings


class Settings(pydantic_settings.BaseSettings):
    """Configuration for a privacy check deployment.

    Attributes:
        backend_url: Endpoint of the headless-browser crawl backend.
        max_retries: Number of retries before a job is failed.
        fetch_timeout_seconds: Total time allowed for one backend call.
        probe_timeout_seconds: Time allowed for the HTTPS-only probe.
        parse_delay_ms: How long the backend waits after page load
            before collecting cookies and requests.
        retry_initial_delay_ms: First delay between job attempts.
        retry_max_delay_ms: Upper bound for the delay between attempts.
        include_private_suffixes: Whether private Public Suffix List
            rules (e.g. ``github.io``) count as public suffixes.
        referrer_policy_file: Optional JSON file replacing the bundled
            referrer policy rating table.
        host: Interface the API server binds to.
        port: Port the API server listens on.
    """

    model_config = pydantic_settings.SettingsConfigDict(populate_by_name=True)

    backend_url: str = pydantic.Field(
        default="http://localhost:8100/", validation_alias="BACKEND_URL"
    )
    max_retries: int = pydantic.Field(
        default=5, ge=0, validation_alias="MAX_RETRIES"
    )
    fetch_timeout_seconds: float = pydantic.Field(
        default=30.0, gt=0, validation_alias="FETCH_TIMEOUT_SECONDS"
    )
    probe_timeout_seconds: float = pydantic.Field(
        default=10.0, gt=0, validation_alias="PROBE_TIMEOUT_SECONDS"
    )
    parse_delay_ms: int = pydantic.Field(
        default=10_000, ge=0, validation_alias="PARSE_DELAY_MS"
    )
    retry_initial_delay_ms: int = pydantic.Field(
        default=2000, ge=0, validation_alias="RETRY_INITIAL_DELAY_MS"
    )
    retry_max_delay_ms: int = pydantic.Field(
        default=60_000, ge=0, validation_alias="RETRY_MAX_DELAY_MS"
    )
    include_private_suffixes: bool = pydantic.Field(
        default=True, validation_alias="INCLUDE_PRIVATE_SUFFIXES"
    )
    referrer_policy_file: str | None = pydantic.Field(
        default=None, validation_alias="REFERRER_POLICY_FILE"
    )
    host: str = pydantic.Field(default="0.0.0.0", validation_alias="UVICORN_HOST")
    port: int = pydantic.Field(default=3001, validation_alias="UVICORN_PORT")


@functools.cache
def get_settings() -> Settings:
    """Return the process-wide settings (read from the environment once)."""
    return Settings()
