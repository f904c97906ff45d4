"""
services.job_service - Persistence of ImportJob audit records.

All session management is the caller's responsibility (open before,
close after).  save() commits, so every status transition and every
row's accounting is visible to pollers as soon as it happens.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from db.models import ImportJob, JobStatus


class JobService:

    @staticmethod
    def create(
        session: Session,
        *,
        date: datetime,
        target_type: str,
        status: JobStatus = JobStatus.PENDING,
        container: str = "",
        file_name: str = "",
    ) -> ImportJob:
        job = ImportJob(
            date=date,
            target_type=target_type,
            status=status.value,
            container=container,
            file_name=file_name,
            warnings=[],
            errors=[],
        )
        session.add(job)
        session.commit()
        return job

    @staticmethod
    def find_by_id(session: Session, job_id: int) -> ImportJob | None:
        return session.get(ImportJob, job_id)

    @staticmethod
    def discard(session: Session, job_id: int) -> bool:
        """Delete a job that never left PENDING.  Returns True if deleted."""
        job = session.get(ImportJob, job_id)
        if job is None or job.status != JobStatus.PENDING.value:
            return False
        session.delete(job)
        session.commit()
        return True

    @staticmethod
    def save(session: Session, job: ImportJob) -> ImportJob:
        session.add(job)
        session.commit()
        return job
