"""
import_engine.launcher - Stage an upload and hand the run to a worker.

start_import() returns as soon as the file is staged and the ImportJob
exists at PENDING.  The worker only receives RunParameters.to_dict(),
never a session, model instance or open file.
"""

from __future__ import annotations

import json
import logging
import multiprocessing
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

import config
from db.engine import get_session
from db.models import JobStatus
from import_engine import registry
from import_engine.context import RunParameters
from import_engine.errors import ImportRejected, ImportSetupError
from services.container_service import StagedFile

logger = logging.getLogger(__name__)

DISPATCH_MODES = ("celery", "process", "inline")


@dataclass(frozen=True)
class StagingResult:
    job_id: int
    file: StagedFile

    def to_dict(self) -> dict:
        return {"job_id": self.job_id, **self.file.to_dict()}


def start_import(
    type_name: str,
    upload,
    *,
    callback: Optional[Callable] = None,
    dispatch_mode: Optional[str] = None,
) -> StagingResult:
    """
    Stage `upload` for an import into `type_name` and dispatch the run.

    `callback`, when given, is called as callback(error, result) once
    staging succeeds or fails; errors are re-raised either way.
    """
    try:
        result = _stage_and_dispatch(type_name, upload, dispatch_mode)
    except Exception as exc:
        if callable(callback):
            callback(exc, None)
        raise
    if callable(callback):
        callback(None, result)
    return result


def container_name(type_name: str) -> str:
    return f"{type_name}-{round(time.time() * 1000)}-{random.randint(0, 1000)}"


def dispatch(params: RunParameters, mode: Optional[str] = None) -> None:
    """Run the import in an isolated context chosen by config.DISPATCH."""
    mode = mode or config.DISPATCH
    payload = params.to_dict()

    if mode == "celery":
        from worker.tasks import run_import_task
        run_import_task.delay(payload)
    elif mode == "process":
        from worker.process import main as process_main
        reap_workers()
        ctx = multiprocessing.get_context("spawn")
        proc = ctx.Process(target=process_main, args=(json.dumps(payload),),
                           name=f"import-{params.job_id}", daemon=False)
        proc.start()
        logger.info("Import job %s running in pid %s", params.job_id, proc.pid)
    elif mode == "inline":
        from worker.tasks import execute
        execute(payload)
    else:
        raise ImportSetupError(f"Unknown dispatch mode {mode!r}")


def reap_workers() -> int:
    """
    Join import processes that have exited and return how many are still
    running.  Called before every spawn, so a finished child lingers as a
    zombie at most until the next import starts.
    """
    return len(multiprocessing.active_children())


# ── Private helpers ────────────────────────────────────────────────────

def _stage_and_dispatch(type_name: str, upload, dispatch_mode: Optional[str]) -> StagingResult:
    importable = registry.get(type_name)
    containers = registry.collaborator(config.CONTAINER_STORE)(config.STORAGE_ROOT)
    job_store = registry.collaborator(config.JOB_LOG)
    mode = dispatch_mode or config.DISPATCH
    if mode not in DISPATCH_MODES:
        raise ImportSetupError(f"Unknown dispatch mode {mode!r}")

    container = container_name(importable.name)
    containers.create_container(container)
    try:
        staged = containers.upload(container, upload)
    except Exception:
        containers.destroy_container(container)
        raise

    if staged.content_type != config.ACCEPTED_CONTENT_TYPE:
        containers.destroy_container(container)
        raise ImportRejected("The file you selected is not csv format")

    job_id = None
    try:
        session = get_session()
        try:
            job = job_store.create(
                session,
                date=datetime.now(timezone.utc),
                target_type=importable.name,
                status=JobStatus.PENDING,
                container=container,
                file_name=staged.name,
            )
            job_id = job.id
        finally:
            session.close()

        params = RunParameters(
            scope=importable.name,
            job_id=job_id,
            root=staged.root,
            container=container,
            file=staged.name,
            container_store=config.CONTAINER_STORE,
            job_log=config.JOB_LOG,
        )
        dispatch(params, mode)
    except Exception:
        _discard(containers, job_store, container, job_id)
        raise

    logger.info("Import job %s queued (%s, %s)", job_id, mode, staged.name)
    return StagingResult(job_id, staged)


def _discard(containers, job_store, container: str, job_id: Optional[int]) -> None:
    """Undo staging after a failed hand-off; a job already picked up is kept."""
    containers.destroy_container(container)
    if job_id is None:
        return
    session = get_session()
    try:
        job_store.discard(session, job_id)
    finally:
        session.close()
