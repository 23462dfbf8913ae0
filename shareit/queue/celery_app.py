"""
Celery application - background work off the request path (search indexing).
RabbitMQ broker, Redis result backend.
"""

from celery import Celery

from shareit.config import get_settings

settings = get_settings()

celery_app = Celery(
    "shareit",
    broker=settings.celery_broker_url,
    backend=settings.redis_url,
    include=["shareit.queue.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=60,
    worker_prefetch_multiplier=1,  # Fair distribution
)
