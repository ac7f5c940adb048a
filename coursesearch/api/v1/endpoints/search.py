"""
Search endpoints - filtered course search and title autocomplete.
Thin controllers: parameters are validated here, queries built in the service layer.
"""

from datetime import datetime
from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import APIRouter, Depends, Query

from coursesearch.config import get_settings
from coursesearch.schemas.course import SearchResponse
from coursesearch.schemas.search import SearchParams
from coursesearch.search.elasticsearch_client import get_elasticsearch
from coursesearch.services.search_service import SearchService

router = APIRouter()
settings = get_settings()


async def get_search_service(
    es: Annotated[AsyncElasticsearch, Depends(get_elasticsearch)],
) -> SearchService:
    return SearchService(es)


SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]


@router.get("", response_model=SearchResponse)
async def search_courses(
    service: SearchServiceDep,
    q: str | None = Query(None, description="Free-text query on title and description"),
    min_age: int | None = Query(None, alias="minAge"),
    max_age: int | None = Query(None, alias="maxAge"),
    category: str | None = Query(None),
    type: str | None = Query(None, description="ONE_TIME, COURSE or CLUB"),
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    start_date: datetime | None = Query(None, alias="startDate", description="ISO-8601 date-time"),
    sort: str = Query("upcoming", description="upcoming, priceAsc or priceDesc"),
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Courses matching the free-text query and filters, one page at a time."""
    params = SearchParams(
        q=q,
        min_age=min_age,
        max_age=max_age,
        category=category,
        type=type,
        min_price=min_price,
        max_price=max_price,
        start_date=start_date,
        sort=sort,
        page=page,
        size=size,
    )
    return await service.search_courses(params)


@router.get("/suggest", response_model=list[str])
async def suggest_titles(service: SearchServiceDep, q: str = Query(...)):
    """Title suggestions for a prefix (falls back to fuzzy title match)."""
    return await service.suggest_titles(q)
