"""
Elasticsearch client - connection, index management for the courses index.
The async client serves the API; the sync helpers are used by the command-line loader.
"""

import logging
from typing import Any
from urllib.parse import urlparse

from elasticsearch import AsyncElasticsearch, Elasticsearch

from coursesearch.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

_es_client: AsyncElasticsearch | None = None


def _es_client_options() -> dict:
    """Build Elasticsearch client options from settings (supports HTTPS + basic auth in URL)."""
    url = settings.elasticsearch_url
    basic_auth = None
    if "@" in url and "://" in url:
        parsed = urlparse(url)
        if parsed.username and parsed.password:
            basic_auth = (parsed.username, parsed.password)
        # The client takes credentials separately from the host
        netloc = parsed.hostname or ""
        if parsed.port:
            netloc += f":{parsed.port}"
        url = f"{parsed.scheme}://{netloc}"
    opts = {
        "hosts": [url],
        "verify_certs": settings.elasticsearch_verify_certs,
        "request_timeout": settings.elasticsearch_request_timeout,
    }
    if basic_auth:
        opts["basic_auth"] = basic_auth
    return opts


async def get_elasticsearch() -> AsyncElasticsearch:
    """Get Elasticsearch client. Used as FastAPI dependency; overridden in tests."""
    global _es_client
    if _es_client is None:
        _es_client = AsyncElasticsearch(**_es_client_options())
    return _es_client


async def close_elasticsearch() -> None:
    global _es_client
    if _es_client is not None:
        await _es_client.close()
        _es_client = None


def courses_index_mappings() -> dict[str, Any]:
    """Mapping for the courses index (shared by async and sync create)."""
    return {
        "properties": {
            "title": {"type": "text", "analyzer": "standard"},
            "description": {"type": "text", "analyzer": "standard"},
            "category": {"type": "keyword"},
            "type": {"type": "keyword"},
            "gradeRange": {"type": "keyword"},
            "minAge": {"type": "integer"},
            "maxAge": {"type": "integer"},
            "price": {"type": "double"},
            "nextSessionDate": {"type": "date", "format": "strict_date_optional_time"},
            "suggest": {"type": "completion"},
        }
    }


def _courses_index_settings() -> dict[str, Any]:
    # Single-node: 0 replicas to avoid unassigned shards
    return {"index": {"number_of_replicas": 0}}


async def ensure_courses_index(es: AsyncElasticsearch | None = None) -> bool:
    """Create courses index with mapping if not exists. Returns True when it was created."""
    es = es or await get_elasticsearch()
    if await es.indices.exists(index=settings.courses_index):
        return False
    await es.indices.create(
        index=settings.courses_index,
        settings=_courses_index_settings(),
        mappings=courses_index_mappings(),
    )
    logger.info("Created index '%s'", settings.courses_index)
    return True


# --- Sync API for scripts ---

def sync_es_client() -> Elasticsearch:
    return Elasticsearch(**_es_client_options())


def ensure_courses_index_sync(es: Elasticsearch) -> bool:
    """Create courses index if not exists."""
    if es.indices.exists(index=settings.courses_index):
        return False
    es.indices.create(
        index=settings.courses_index,
        settings=_courses_index_settings(),
        mappings=courses_index_mappings(),
    )
    return True


def reset_courses_index_sync(es: Elasticsearch) -> None:
    """Drop and recreate the courses index (fixes 503 / no_shard_available on a broken index)."""
    if es.indices.exists(index=settings.courses_index):
        es.indices.delete(index=settings.courses_index)
        logger.info("Deleted index '%s'", settings.courses_index)
    ensure_courses_index_sync(es)
