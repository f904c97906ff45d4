"""
import_engine.importer - Top-level orchestrator, run inside the worker.

Streams the staged CSV row by row, runs each row through the
RowProcessor, and has the JobLifecycle record the outcome before the
next row is read.  Row failures are recorded and skipped over; only a
FatalImportError ends a run early.
"""

from __future__ import annotations

import csv
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from sqlalchemy.orm import Session

import config
from db.engine import get_session
from import_engine import registry
from import_engine.context import RunContext, RunParameters
from import_engine.csv_parser import iter_rows
from import_engine.errors import FatalImportError
from import_engine.lifecycle import JobLifecycle
from import_engine.relations import build_strategies
from import_engine.report import ImportReport
from import_engine.row_processor import FAILED, RowProcessor, RowResult, describe

logger = logging.getLogger(__name__)


def run_import(
    params: RunParameters,
    *,
    session_factory: Callable[[], Session] = get_session,
) -> ImportReport:
    """
    Process one staged file for one ImportJob.

    Parameters
    ----------
    params : the payload handed over by the launcher
    session_factory : returns a new Session (one per row / relation task)

    Returns
    -------
    ImportReport with the run's counters; details live on the job record
    """
    importable = registry.get(params.scope)
    job_store = registry.collaborator(params.job_log)
    containers = registry.collaborator(params.container_store)(params.root)
    path = Path(containers.file_path(params.container, params.file))

    strategies = build_strategies(importable)
    workers = max(1, min(len(strategies), config.RELATION_WORKERS))
    lifecycle = JobLifecycle(params.job_id, session_factory, job_store)

    try:
        lifecycle.load()
        if not path.is_file():
            raise FatalImportError(f"Staged file {path} is missing")

        with ThreadPoolExecutor(max_workers=workers,
                                thread_name_prefix="relations") as pool:
            ctx = RunContext(
                params=params,
                importable=importable,
                store=importable.store(),
                lifecycle=lifecycle,
                session_factory=session_factory,
                executor=pool,
                strategies=strategies,
            )
            lifecycle.begin()
            logger.info("Importing %s into %s (job %s)",
                        params.file, importable.name, params.job_id)
            _process_stream(ctx, path)
            lifecycle.finish()
    finally:
        lifecycle.close()

    if config.CLEANUP_CONTAINER:
        containers.destroy_container(params.container)

    report = ctx.report
    logger.info("Job %s done: %s", params.job_id, report.to_dict())
    return report


def _process_stream(ctx: RunContext, path: Path) -> None:
    processor = RowProcessor()
    try:
        for line, row in iter_rows(path):
            _account(ctx, processor, line, row)
    except csv.Error as exc:
        raise FatalImportError(f"Unreadable CSV {path}: {exc}") from exc


def _account(ctx: RunContext, processor: RowProcessor, line: int, row: dict) -> None:
    try:
        result = processor.process(ctx, row)
    except Exception as exc:
        logger.exception("Row %d of job %s failed", line, ctx.params.job_id)
        result = RowResult(FAILED, errors=[describe(exc)])

    ctx.report.tally(result.outcome, len(result.warnings), len(result.errors))
    ctx.lifecycle.account(line, row, result.warnings, result.errors)
