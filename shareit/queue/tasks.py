"""
Celery tasks - item indexing fired after item create/update, removal after account deletion.
"""

import logging

from shareit.queue.celery_app import celery_app
from shareit.search.elasticsearch_client import delete_item_sync, ensure_items_index_sync, index_item_sync

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def index_item_task(self, item_doc: dict):
    """Index item in Elasticsearch. Retries with a short countdown while ES is unavailable."""
    try:
        ensure_items_index_sync()
        index_item_sync(item_doc)
    except Exception as exc:
        logger.warning("index_item_task failed for item id=%s: %s", item_doc.get("id"), exc)
        raise self.retry(exc=exc, countdown=5)


@celery_app.task(bind=True, max_retries=3)
def remove_item_task(self, item_id: int):
    """Drop a deleted item from the search index."""
    try:
        delete_item_sync(item_id)
    except Exception as exc:
        logger.warning("remove_item_task failed for item id=%s: %s", item_id, exc)
        raise self.retry(exc=exc, countdown=5)
