"""
Check worker: crawl a URL, build its report, and track job status.

A job moves ``processing -> done`` on success and
``processing -> failed`` on a terminal failure.  A retryable
failure leaves it ``processing`` and raises so the caller can run
the attempt again.
"""

from __future__ import annotations

import aiohttp

from privacy_check import config
from privacy_check.analysis import report as report_mod
from privacy_check.models import job as job_models
from privacy_check.pipeline import failures, fetch, jobs
from privacy_check.utils import errors, logger, retry
from privacy_check.utils import url as url_mod

log = logger.create_logger("Worker")


def _handle_error(
    store: jobs.JobStore,
    job_id: str,
    reason: str,
    retry_count: int,
    max_retries: int,
) -> errors.FetchFailure:
    """Classify a failed attempt and fail the job if it is terminal."""
    failure = failures.classify_failure(reason, retry_count, max_retries)
    if failure.retryable:
        log.warn("Attempt failed, will retry", {"id": job_id, "reason": reason, "retryCount": retry_count})
    else:
        log.error("Check failed", {"id": job_id, "reason": reason, "retryCount": retry_count})
        store.update(job_id, status="failed", status_message=reason)
    return failure


async def perform(
    job_id: str,
    url: str,
    refresh: bool,
    backend_url: str,
    *,
    retry_count: int,
    max_retries: int,
    store: jobs.JobStore,
    session: aiohttp.ClientSession,
    settings: config.Settings | None = None,
) -> job_models.JobRecord:
    """Run one attempt of a check.

    Args:
        job_id: Job to update.
        url: Normalized ``http://`` URL to check.
        refresh: Ask the backend to bypass its cache.
        backend_url: Crawl backend endpoint.
        retry_count: Retries made before this attempt.
        max_retries: Retry budget of the job.
        store: Job registry.
        session: Shared HTTP session.
        settings: Timeouts and crawl parameters.

    Returns:
        The finished (``done``) job record.

    Raises:
        FetchFailure: When the attempt failed; ``retryable`` tells
            whether another attempt should be made.
    """
    settings = settings or config.get_settings()
    store.update(job_id, status="processing")

    try:
        host = url_mod.extract_host(url)
    except errors.UnresolvableHostError:
        host = url
    with logger.job_scope(job_id, host):
        try:
            target = await fetch.check_if_https_only(session, url, settings)
            crawl = await fetch.fetch_crawl(session, target, refresh, backend_url, settings)
            report = report_mod.build_report(crawl)
        except errors.FetchFailure as exc:
            raise _handle_error(store, job_id, exc.reason, retry_count, max_retries) from exc
        except errors.MalformedPayloadError as exc:
            raise _handle_error(
                store, job_id, errors.get_error_message(exc), retry_count, max_retries
            ) from exc
        except Exception as exc:
            log.error(
                "Check failed with unexpected exception",
                {"error": errors.get_error_message(exc), "type": type(exc).__name__},
            )
            raise _handle_error(
                store, job_id, f"Unexpected error: {errors.get_error_message(exc)}", retry_count, max_retries
            ) from exc

        log.success("Check complete", {"finalUrl": report.final_url, "retryCount": retry_count})
        return store.update(
            job_id,
            status="done",
            status_message=None,
            final_url=report.final_url,
            report=report,
        )


async def run_job(
    job_id: str,
    url: str,
    refresh: bool,
    *,
    store: jobs.JobStore,
    session: aiohttp.ClientSession,
    settings: config.Settings | None = None,
) -> job_models.JobRecord:
    """Run a check to completion, retrying retryable failures.

    Returns:
        The final job record, ``done`` or ``failed``.
    """
    settings = settings or config.get_settings()
    log.section(f"Check {url}")

    async def attempt(retry_count: int) -> job_models.JobRecord:
        return await perform(
            job_id,
            url,
            refresh,
            settings.backend_url,
            retry_count=retry_count,
            max_retries=settings.max_retries,
            store=store,
            session=session,
            settings=settings,
        )

    try:
        return await retry.with_retry(
            attempt,
            max_retries=settings.max_retries,
            initial_delay_ms=settings.retry_initial_delay_ms,
            max_delay_ms=settings.retry_max_delay_ms,
            context=job_id,
        )
    except errors.FetchFailure:
        record = store.get(job_id)
        if record is None:
            raise
        return record
