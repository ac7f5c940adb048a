"""
Pytest fixtures - fake Elasticsearch client and HTTP client.
Tests never talk to a real cluster: get_elasticsearch is overridden with a recorder.
"""

from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from coursesearch.main import app
from coursesearch.search.elasticsearch_client import get_elasticsearch


def course_source(id: str = "c001", title: str = "Intro to Robotics", **overrides) -> dict[str, Any]:
    source = {
        "id": id,
        "title": title,
        "description": "Build and program simple robots.",
        "category": "Science",
        "type": "COURSE",
        "gradeRange": "4th-6th",
        "minAge": 9,
        "maxAge": 12,
        "price": 120.0,
        "nextSessionDate": "2025-07-01T15:00:00Z",
        "suggest": {"input": [title]},
    }
    source.update(overrides)
    return source


def hits_response(sources: list[dict[str, Any]], total: int | None = None) -> dict[str, Any]:
    return {
        "hits": {
            "total": {"value": len(sources) if total is None else total, "relation": "eq"},
            "hits": [{"_id": s.get("id", str(i)), "_source": s} for i, s in enumerate(sources)],
        }
    }


def suggest_response(texts: list[str]) -> dict[str, Any]:
    return {
        "hits": {"total": {"value": 0, "relation": "eq"}, "hits": []},
        "suggest": {
            "title-suggest": [
                {"text": "", "offset": 0, "length": 0, "options": [{"text": t} for t in texts]}
            ]
        },
    }


class FakeIndices:
    """Records index creation; `existing` holds the names that already exist."""

    def __init__(self):
        self.existing: set[str] = set()
        self.created: list[dict[str, Any]] = []

    async def exists(self, index: str) -> bool:
        return index in self.existing

    async def create(self, index: str, **kwargs):
        self.created.append({"index": index, **kwargs})
        self.existing.add(index)
        return {"acknowledged": True, "index": index}


class FakeElasticsearch:
    """Records search kwargs and answers with queued responses."""

    def __init__(self):
        self.calls: list[dict[str, Any]] = []
        self.responses: list[Any] = []
        self.available = True
        self.indices = FakeIndices()

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    async def search(self, **kwargs):
        self.calls.append(kwargs)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return hits_response([])

    async def ping(self) -> bool:
        return self.available


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def override_es(fake_es: FakeElasticsearch):
    app.dependency_overrides[get_elasticsearch] = lambda: fake_es
    yield fake_es
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(override_es):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
