"""
Elasticsearch client - full-text search over items.
Index management, async search for the API, sync helpers for Celery workers (no event loop in fork).
"""

import logging
from typing import Any
from urllib.parse import urlparse

from elasticsearch import AsyncElasticsearch, Elasticsearch

from shareit.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

ITEMS_INDEX = "items"

_es_client: AsyncElasticsearch | None = None


def _es_client_options() -> dict:
    """Build client options from settings (supports HTTPS + basic auth in URL)."""
    url = settings.elasticsearch_url
    basic_auth = None
    parsed = urlparse(url)
    if parsed.username and parsed.password:
        basic_auth = (parsed.username, parsed.password)
        # The client takes credentials separately
        netloc = parsed.hostname or ""
        if parsed.port:
            netloc += f":{parsed.port}"
        url = f"{parsed.scheme}://{netloc}"
    opts = {
        "hosts": [url],
        "verify_certs": settings.elasticsearch_verify_certs,
        "request_timeout": 30,
    }
    if basic_auth:
        opts["basic_auth"] = basic_auth
    return opts


async def get_elasticsearch() -> AsyncElasticsearch:
    global _es_client
    if _es_client is None:
        _es_client = AsyncElasticsearch(**_es_client_options())
    return _es_client


def _items_index_mappings() -> dict:
    return {
        "properties": {
            "id": {"type": "integer"},
            "name": {"type": "text", "analyzer": "standard"},
            "description": {"type": "text", "analyzer": "standard"},
            "available": {"type": "boolean"},
            "owner_id": {"type": "integer"},
        }
    }


async def ensure_items_index() -> None:
    """Create items index with mapping if not exists. Single-node: 0 replicas to avoid unassigned shards."""
    es = await get_elasticsearch()
    if not await es.indices.exists(index=ITEMS_INDEX):
        await es.indices.create(
            index=ITEMS_INDEX,
            settings={"index": {"number_of_replicas": 0}},
            mappings=_items_index_mappings(),
        )


async def search_items(query: str, skip: int = 0, limit: int = 20) -> list[dict[str, Any]]:
    """Full-text search on name and description, restricted to available items."""
    try:
        es = await get_elasticsearch()
        response = await es.search(
            index=ITEMS_INDEX,
            query={
                "bool": {
                    "must": {
                        "multi_match": {
                            "query": query,
                            "fields": ["name^2", "description"],
                            "fuzziness": "AUTO",
                        }
                    },
                    "filter": {"term": {"available": True}},
                }
            },
            from_=skip,
            size=limit,
        )
        body = getattr(response, "body", response)
        hits = body["hits"]["hits"]
        if not hits:
            logger.info("search_items: query=%r returned 0 hits", query)
        return [hit["_source"] for hit in hits]
    except Exception as e:
        logger.warning("search_items failed: query=%r error=%s", query, e)
        return []


# --- Sync API for Celery (workers run in sync context) ---

def sync_es_client() -> Elasticsearch:
    """New sync client per call (safe in forked Celery worker)."""
    return Elasticsearch(**_es_client_options())


def ensure_items_index_sync() -> None:
    es = sync_es_client()
    if not es.indices.exists(index=ITEMS_INDEX):
        es.indices.create(
            index=ITEMS_INDEX,
            settings={"index": {"number_of_replicas": 0}},
            mappings=_items_index_mappings(),
        )


def index_item_sync(doc: dict[str, Any]) -> None:
    """Index a single item. ES 8 requires the document id as str. Errors propagate so the task can retry."""
    es = sync_es_client()
    es.index(index=ITEMS_INDEX, id=str(doc["id"]), document=doc)


def delete_item_sync(item_id: int) -> None:
    """Remove a single item from the index. A missing document is not an error."""
    es = sync_es_client()
    es.options(ignore_status=404).delete(index=ITEMS_INDEX, id=str(item_id))


def delete_items_index_sync() -> bool:
    es = sync_es_client()
    if es.indices.exists(index=ITEMS_INDEX):
        es.indices.delete(index=ITEMS_INDEX)
        return True
    return False
