"""
Query builder - translates search parameters into Elasticsearch query DSL.
Each optional parameter contributes one clause; absent parameters contribute nothing.
"""

from datetime import datetime, timezone
from typing import Any

from coursesearch.schemas.search import SearchParams, SortMode

SUGGEST_FIELD = "suggest"


def _iso_instant(value: datetime) -> str:
    """UTC ISO-8601 with a trailing Z. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _range(field: str, gte: Any = None, lte: Any = None) -> dict[str, Any] | None:
    bounds = {}
    if gte is not None:
        bounds["gte"] = gte
    if lte is not None:
        bounds["lte"] = lte
    if not bounds:
        return None
    return {"range": {field: bounds}}


def build_text_query(q: str) -> dict[str, Any]:
    """Fuzzy match on title or plain match on description; at least one must hit."""
    return {
        "bool": {
            "should": [
                {"match": {"title": {"query": q, "fuzziness": "AUTO"}}},
                {"match": {"description": {"query": q}}},
            ],
            "minimum_should_match": 1,
        }
    }


def build_filters(params: SearchParams) -> list[dict[str, Any]]:
    """Non-scoring clauses: exact category/type, inclusive age/price ranges, date lower bound."""
    filters: list[dict[str, Any]] = []
    if params.category is not None:
        filters.append({"term": {"category": params.category}})
    if params.type is not None:
        filters.append({"term": {"type": params.type}})

    # Both age bounds apply to the course's minimum age
    age = _range("minAge", gte=params.min_age, lte=params.max_age)
    if age:
        filters.append(age)

    price = _range("price", gte=params.min_price, lte=params.max_price)
    if price:
        filters.append(price)

    if params.start_date is not None:
        filters.append({"range": {"nextSessionDate": {"gte": _iso_instant(params.start_date)}}})
    return filters


def build_sort(sort: "SortMode | str | None") -> list[dict[str, Any]]:
    mode = SortMode.parse(sort)
    if mode is SortMode.PRICE_ASC:
        return [{"price": {"order": "asc"}}]
    if mode is SortMode.PRICE_DESC:
        return [{"price": {"order": "desc"}}]
    return [{"nextSessionDate": {"order": "asc"}}]


def build_course_query(params: SearchParams) -> dict[str, Any]:
    """Full search body: bool query (must + filter), sort and page window."""
    must = [build_text_query(params.q)] if params.q is not None else []
    filters = build_filters(params)

    if must or filters:
        query: dict[str, Any] = {"bool": {}}
        if must:
            query["bool"]["must"] = must
        if filters:
            query["bool"]["filter"] = filters
    else:
        query = {"match_all": {}}

    return {
        "query": query,
        "sort": build_sort(params.sort),
        "from": params.page * params.size,
        "size": params.size,
    }


def build_completion_suggest(prefix: str, size: int = 10) -> dict[str, Any]:
    """Completion suggester request on the suggest field."""
    return {
        "title-suggest": {
            "prefix": prefix,
            "completion": {
                "field": SUGGEST_FIELD,
                "size": size,
                "skip_duplicates": True,
            },
        }
    }


def build_fuzzy_title_query(text: str, size: int = 10) -> dict[str, Any]:
    """Fallback for suggestions: typo-tolerant match on title only."""
    return {
        "query": {"match": {"title": {"query": text, "fuzziness": "AUTO"}}},
        "size": size,
        "_source": ["title"],
    }
