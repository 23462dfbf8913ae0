#!/usr/bin/env python3
"""
Reindex all existing items from the database into Elasticsearch via Celery.
Use this after fixing the worker or when the index was empty; no new data is created.
Requires: database reachable, Celery worker running to process the queue.

If Elasticsearch answers 503 / no_shard_available, delete the broken index and reindex:
  python scripts/reindex_elasticsearch.py --reset-index
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from shareit.db.models import Item
from shareit.db.session import async_session_maker, engine
from shareit.queue.tasks import index_item_task
from shareit.search.elasticsearch_client import ITEMS_INDEX, delete_items_index_sync
from shareit.services.item_service import item_to_doc


async def load_items() -> list[Item]:
    async with async_session_maker() as session:
        result = await session.execute(select(Item).order_by(Item.id))
        items = list(result.scalars().all())
    await engine.dispose()
    return items


def main():
    ap = argparse.ArgumentParser(description="Enqueue all items for Elasticsearch reindex")
    ap.add_argument("--reset-index", action="store_true", help="Delete the items index first, then enqueue")
    args = ap.parse_args()

    if args.reset_index:
        if delete_items_index_sync():
            print(f"Deleted index '{ITEMS_INDEX}'. Celery will recreate it when processing the first task.")
        else:
            print(f"Index '{ITEMS_INDEX}' does not exist.")

    items = asyncio.run(load_items())
    if not items:
        print("No items in DB. Run seed_data.py first.")
        return

    for item in items:
        index_item_task.delay(item_to_doc(item))
    print(f"Enqueued {len(items)} items for Elasticsearch reindex. Ensure Celery worker is running.")


if __name__ == "__main__":
    main()
