"""
Celery configuration for import workers.
"""

from celery import Celery

import config

app = Celery("bulkimport")

app.conf.update(
    broker_url=config.CELERY_BROKER_URL or None,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_ignore_result=True,
    # Task will run synchronously if no broker is configured
    task_always_eager=not config.CELERY_BROKER_URL,
)
