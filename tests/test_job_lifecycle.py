from datetime import datetime, timezone

import pytest

from db import get_session
from db.models import ImportJob, JobStatus, JobStateError
from import_engine.errors import FatalImportError
from import_engine.lifecycle import JobLifecycle
from services.job_service import JobService


def _new_job():
    s = get_session()
    try:
        return JobService.create(
            s, date=datetime.now(timezone.utc), target_type="Part",
        ).id
    finally:
        s.close()


def test_status_is_monotonic():
    job = ImportJob(id=1, target_type="Part", status="PENDING", warnings=[], errors=[])
    job.advance(JobStatus.PROCESSING)

    with pytest.raises(JobStateError):
        job.advance(JobStatus.PENDING)

    job.advance(JobStatus.FINISHED)
    assert job.finished_at is not None

    with pytest.raises(JobStateError):
        job.advance(JobStatus.FINISHED)
    with pytest.raises(JobStateError):
        job.add_warning(2, {"MPN": "R1"}, "late")


def test_transitions_and_entries_are_persisted_immediately():
    job_id = _new_job()
    lifecycle = JobLifecycle(job_id, get_session)
    lifecycle.load()

    lifecycle.begin()
    lifecycle.account(2, {"MPN": "R1"}, ["first"], ["broken"])

    # Observed from another session while the run is still open
    observer = get_session()
    try:
        seen = JobService.find_by_id(observer, job_id)
        assert seen.status == "PROCESSING"
        assert seen.warnings == [{"line": 2, "row": {"MPN": "R1"}, "message": "first"}]
        assert seen.errors == [{"line": 2, "row": {"MPN": "R1"}, "message": "broken"}]
    finally:
        observer.close()

    lifecycle.finish()
    lifecycle.close()


def test_missing_job_is_fatal():
    lifecycle = JobLifecycle(999, get_session)
    with pytest.raises(FatalImportError):
        lifecycle.load()
    lifecycle.close()


def test_restarting_a_finished_job_is_fatal():
    job_id = _new_job()
    lifecycle = JobLifecycle(job_id, get_session)
    lifecycle.load()
    lifecycle.begin()
    lifecycle.finish()

    with pytest.raises(FatalImportError):
        lifecycle.begin()
    lifecycle.close()
