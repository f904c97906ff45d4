"""
worker - Isolated execution of import runs.

    worker.celery   Celery app (eager when no broker is configured)
    worker.tasks    run_import_task / execute(payload)
    worker.process  entry point for a spawned OS process
"""
