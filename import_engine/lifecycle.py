"""
import_engine.lifecycle - Owns the ImportJob record during a run.

PENDING → PROCESSING → FINISHED, each transition committed on the
spot, and every row's warnings/errors committed before the next row
is accounted.  Any failure to read or write the record is fatal.
"""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import ImportJob, JobStatus, JobStateError
from import_engine.errors import FatalImportError
from services.job_service import JobService

logger = logging.getLogger(__name__)


class JobLifecycle:

    def __init__(
        self,
        job_id: int,
        session_factory: Callable[[], Session],
        job_store=JobService,
    ):
        self.job_id = job_id
        self._session_factory = session_factory
        self._store = job_store
        self._session: Session | None = None
        self.job: ImportJob | None = None

    def load(self) -> ImportJob:
        try:
            self._session = self._session_factory()
            job = self._store.find_by_id(self._session, self.job_id)
        except SQLAlchemyError as exc:
            raise FatalImportError(f"Cannot load ImportJob {self.job_id}: {exc}") from exc
        if job is None:
            raise FatalImportError(f"ImportJob {self.job_id} does not exist")
        self.job = job
        return job

    def begin(self) -> None:
        self._transition(JobStatus.PROCESSING)

    def finish(self) -> None:
        self._transition(JobStatus.FINISHED)

    def account(self, line: int, row: dict, warnings: list[str], errors: list[str]) -> None:
        """Append one row's outcomes (warnings first) and persist them."""
        if not warnings and not errors:
            return
        try:
            for message in warnings:
                self.job.add_warning(line, row, message)
            for message in errors:
                self.job.add_error(line, row, message)
        except JobStateError as exc:
            raise FatalImportError(str(exc)) from exc
        self._save()

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    # ── Private helpers ────────────────────────────────────────────────

    def _transition(self, status: JobStatus) -> None:
        try:
            self.job.advance(status)
        except JobStateError as exc:
            raise FatalImportError(str(exc)) from exc
        self._save()
        logger.info("ImportJob %s → %s", self.job_id, status.value)

    def _save(self) -> None:
        try:
            self._store.save(self._session, self.job)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise FatalImportError(f"Cannot persist ImportJob {self.job_id}: {exc}") from exc
