"""
In-memory registry of check jobs.

Jobs only live as long as the process; nothing is persisted.
"""

from __future__ import annotations

from datetime import UTC, datetime

from privacy_check.models import job as job_models
from privacy_check.utils import logger

log = logger.create_logger("Jobs")


class JobStore:
    """Keeps job records by id."""

    def __init__(self) -> None:
        self._jobs: dict[str, job_models.JobRecord] = {}

    def create(self, input_url: str) -> job_models.JobRecord:
        record = job_models.JobRecord(input_url=input_url)
        self._jobs[record.id] = record
        log.debug("Job created", {"id": record.id, "url": input_url})
        return record

    def get(self, job_id: str) -> job_models.JobRecord | None:
        return self._jobs.get(job_id)

    def update(self, job_id: str, **changes: object) -> job_models.JobRecord:
        """Replace a job record with a copy that has *changes* applied.

        Raises:
            KeyError: If no job with *job_id* exists.
        """
        current = self._jobs[job_id]
        updated = job_models.JobRecord.model_validate(
            {**dict(current), **changes, "updated_at": datetime.now(UTC)}
        )
        self._jobs[job_id] = updated
        if updated.status != current.status:
            log.info("Job status changed", {"id": job_id, "from": current.status, "to": updated.status})
        return updated

    def latest_done(self, url: str) -> job_models.JobRecord | None:
        """Most recent finished job whose input or final URL is *url*."""
        matches = [
            record
            for record in self._jobs.values()
            if record.status == "done" and url in (record.input_url, record.final_url)
        ]
        if not matches:
            return None
        return max(matches, key=lambda record: record.updated_at)
