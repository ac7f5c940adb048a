"""
Health checks - for load balancers, Kubernetes, and monitoring.
Liveness is process-only; readiness pings Elasticsearch.
"""

from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import APIRouter, Depends, HTTPException, status

from coursesearch.config import get_settings
from coursesearch.search.elasticsearch_client import get_elasticsearch

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(es: Annotated[AsyncElasticsearch, Depends(get_elasticsearch)]):
    """Readiness: can Elasticsearch answer?"""
    if not await es.ping():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Elasticsearch unavailable",
        )
    return {"status": "ready"}
