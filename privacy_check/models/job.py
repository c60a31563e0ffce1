"""Pydantic model for a privacy check job and its status."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Literal

import pydantic

from privacy_check.models import report as report_models

JobStatus = Literal["processing", "done", "failed"]


def _now() -> datetime:
    return datetime.now(UTC)


class JobRecord(pydantic.BaseModel):
    """One requested check of one URL.

    ``processing`` is the only non-terminal status; a job that is
    retried stays ``processing`` until it ends ``done`` or ``failed``.
    """

    id: str = pydantic.Field(default_factory=lambda: uuid.uuid4().hex)
    input_url: str
    final_url: str | None = None
    status: JobStatus = "processing"
    status_message: str | None = None
    report: report_models.PrivacyReport | None = None
    created_at: datetime = pydantic.Field(default_factory=_now)
    updated_at: datetime = pydantic.Field(default_factory=_now)
