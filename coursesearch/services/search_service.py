"""
Search service - executes course searches and title suggestions against Elasticsearch.
Controllers stay thin; query assembly lives in the query builder.
"""

import logging
from typing import Any

from elasticsearch import AsyncElasticsearch

from coursesearch.config import get_settings
from coursesearch.schemas.course import CourseDocument, SearchResponse
from coursesearch.schemas.search import SearchParams
from coursesearch.search.query_builder import (
    build_completion_suggest,
    build_course_query,
    build_fuzzy_title_query,
)

logger = logging.getLogger(__name__)

SUGGEST_NAME = "title-suggest"


def _body(response: Any) -> dict:
    # Response may be ObjectApiResponse; support both .body and dict access
    return getattr(response, "body", response)


def _search_kwargs(body: dict[str, Any]) -> dict[str, Any]:
    """Map body keys that clash with Python keywords onto the client's kwargs."""
    kwargs = dict(body)
    if "from" in kwargs:
        kwargs["from_"] = kwargs.pop("from")
    if "_source" in kwargs:
        kwargs["source"] = kwargs.pop("_source")
    return kwargs


def _hit_to_course(hit: dict[str, Any]) -> CourseDocument:
    source = dict(hit.get("_source") or {})
    source.setdefault("id", hit.get("_id"))
    return CourseDocument.model_validate(source)


def _total(hits: dict[str, Any]) -> int:
    total = hits.get("total")
    if isinstance(total, dict):
        return int(total.get("value", 0))
    if total is None:
        return len(hits.get("hits", []))
    return int(total)


class SearchService:
    """Handles course search and autocomplete use cases."""

    def __init__(self, es: AsyncElasticsearch, index: str | None = None, suggest_limit: int | None = None):
        settings = get_settings()
        self.es = es
        self.index = index or settings.courses_index
        self.suggest_limit = suggest_limit or settings.suggest_limit

    async def search_courses(self, params: SearchParams) -> SearchResponse:
        """Run the assembled bool query and map hits to course documents."""
        query = build_course_query(params)
        response = _body(await self.es.search(index=self.index, **_search_kwargs(query)))
        hits = response["hits"]
        total = _total(hits)
        if total == 0:
            logger.info("search_courses: params=%s returned 0 hits", params.model_dump(exclude_none=True))
        return SearchResponse(total=total, courses=[_hit_to_course(h) for h in hits["hits"]])

    async def suggest_titles(self, prefix: str) -> list[str]:
        """Completion suggestions first; fuzzy title matches when the prefix yields none."""
        if not prefix or not prefix.strip():
            return []
        titles = await self._completion_titles(prefix)
        if titles:
            return titles
        logger.debug("suggest_titles: no completion for %r, falling back to fuzzy title match", prefix)
        return await self._fuzzy_titles(prefix)

    async def _completion_titles(self, prefix: str) -> list[str]:
        response = _body(
            await self.es.search(
                index=self.index,
                suggest=build_completion_suggest(prefix, self.suggest_limit),
                source=False,
                size=0,
            )
        )
        titles: list[str] = []
        for entry in response.get("suggest", {}).get(SUGGEST_NAME, []):
            for option in entry.get("options", []):
                text = option.get("text")
                if text and text not in titles:
                    titles.append(text)
        return titles

    async def _fuzzy_titles(self, text: str) -> list[str]:
        query = build_fuzzy_title_query(text, self.suggest_limit)
        response = _body(await self.es.search(index=self.index, **_search_kwargs(query)))
        titles = [
            hit["_source"]["title"]
            for hit in response["hits"]["hits"]
            if hit.get("_source", {}).get("title")
        ]
        return titles[: self.suggest_limit]
