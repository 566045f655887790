# luxejewel/celery_worker.py
from celery import Celery

from luxejewel.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
)

celery_app = Celery(
    "luxejewel",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks must be imported explicitly so the worker registers them
celery_app.conf.imports = (
    "luxejewel.services.notification_service",
    "luxejewel.tasks.embeddings",
)

celery_app.conf.beat_schedule = {
    "backfill-embeddings-hourly": {
        "task": "luxejewel.tasks.embeddings.generate_embeddings_task",
        "schedule": 3600.0,
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
