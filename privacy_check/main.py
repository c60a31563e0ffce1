"""
Server entry point: FastAPI app setup and route configuration.
Accepts check requests, runs them as background jobs, and serves
job status and finished reports.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator
from typing import Any

import aiohttp
import dotenv
import fastapi
import uvicorn
from fastapi.middleware import cors
from starlette import responses

from privacy_check import config
from privacy_check.analysis import site_meta
from privacy_check.pipeline import jobs, worker
from privacy_check.utils import errors, logger
from privacy_check.utils import url as url_mod

dotenv.load_dotenv()

log = logger.create_logger("Server")


@contextlib.asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncGenerator[None]:
    """Create the shared HTTP session and job registry."""
    settings = config.get_settings()
    app.state.store = jobs.JobStore()
    app.state.session = aiohttp.ClientSession()
    log.section("Privacy Check Server Started")
    log.info("Crawl backend", {"url": settings.backend_url, "maxRetries": settings.max_retries})
    try:
        yield
    finally:
        await app.state.session.close()


app = fastapi.FastAPI(title="Privacy Check Server", lifespan=lifespan)

# ============================================================================
# Middleware
# ============================================================================

app.add_middleware(
    cors.CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# API Routes
# ============================================================================


def _get_store(request: fastapi.Request) -> jobs.JobStore:
    return request.app.state.store


@app.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/check")
async def check_endpoint(
    request: fastapi.Request,
    background_tasks: fastapi.BackgroundTasks,
    url: str = fastapi.Query(..., description="The site to check"),
    refresh: str | None = fastapi.Query(None, description='"on" to bypass the backend cache'),
) -> responses.RedirectResponse:
    """Start a check and redirect to its status."""
    try:
        target = url_mod.normalize_target_url(url)
    except errors.InvalidTargetError as exc:
        log.warn("Rejected check request", {"url": url, "error": errors.get_error_message(exc)})
        raise fastapi.HTTPException(status_code=400, detail=errors.get_error_message(exc)) from exc

    store = _get_store(request)
    record = store.create(target)
    log.info("Check queued", {"id": record.id, "url": target, "refresh": refresh == "on"})

    background_tasks.add_task(
        worker.run_job,
        record.id,
        target,
        refresh == "on",
        store=store,
        session=request.app.state.session,
    )
    return responses.RedirectResponse(url=f"/api/status/{record.id}", status_code=302)


@app.get("/api/status/{job_id}")
async def status_endpoint(request: fastapi.Request, job_id: str) -> dict[str, Any]:
    """Return a job's status without its report."""
    record = _get_store(request).get(job_id)
    if record is None:
        raise fastapi.HTTPException(status_code=404, detail="Unknown job")
    return record.model_dump(mode="json", exclude={"report"})


@app.get("/api/results")
async def results_endpoint(
    request: fastapi.Request,
    url: str = fastapi.Query(..., description="Input or final URL of a finished check"),
) -> dict[str, Any]:
    """Return the latest finished report for *url* and its site meta."""
    record = _get_store(request).latest_done(url)
    if record is None or record.report is None:
        raise fastapi.HTTPException(status_code=404, detail="No results for this URL")
    return {
        "id": record.id,
        "input_url": record.input_url,
        "final_url": record.final_url,
        "data": record.report.model_dump(mode="json"),
        "site_meta": site_meta.build_site_meta(record.report).model_dump(mode="json"),
    }


def run() -> None:
    """Start the API server with uvicorn."""
    settings = config.get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
