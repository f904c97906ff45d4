"""
Celery tasks for import runs.
"""

import logging

import config
from db.engine import init_db, is_initialised
from import_engine.context import RunParameters
from import_engine.errors import FatalImportError
from import_engine.importer import run_import
from worker.celery import app

logger = logging.getLogger(__name__)


def execute(payload: dict) -> dict:
    """
    Run one import from its serialized parameters.

    Fatal errors are logged and re-raised so the hosting context
    (Celery, a spawned process) reports the failure.
    """
    params = RunParameters.from_dict(payload)
    if not is_initialised():
        init_db(config.DB_URL)

    try:
        report = run_import(params)
    except FatalImportError:
        logger.exception("Import job %s aborted", params.job_id)
        raise
    return report.to_dict()


@app.task(name="bulkimport.run_import")
def run_import_task(payload: dict) -> dict:
    return execute(payload)
