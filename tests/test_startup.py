"""
Startup tests - the lifespan ensures the index, loads the fixture when enabled, and survives ES failures.
"""

import logging

import pytest

import coursesearch.main as main_module
from coursesearch.config import Settings
from coursesearch.main import app, lifespan
from tests.conftest import FakeElasticsearch


@pytest.fixture
def startup(monkeypatch, fake_es: FakeElasticsearch):
    """Patch lifespan collaborators; returns the recorded call order."""
    events = []

    async def fake_get_elasticsearch():
        return fake_es

    async def fake_ensure(es):
        events.append(("ensure", es))
        return True

    async def fake_load(es, path):
        events.append(("load", es))
        return 20

    async def fake_close():
        events.append(("close", None))

    monkeypatch.setattr(main_module, "get_elasticsearch", fake_get_elasticsearch)
    monkeypatch.setattr(main_module, "ensure_courses_index", fake_ensure)
    monkeypatch.setattr(main_module, "load_sample_courses", fake_load)
    monkeypatch.setattr(main_module, "close_elasticsearch", fake_close)
    return events


def _use_settings(monkeypatch, **values):
    monkeypatch.setattr(main_module, "get_settings", lambda: Settings(**values))


@pytest.mark.asyncio
async def test_ensures_index_then_loads_fixture(monkeypatch, startup, fake_es):
    _use_settings(monkeypatch, load_sample_courses=True)
    async with lifespan(app):
        assert [name for name, _ in startup] == ["ensure", "load"]
    assert startup[-1][0] == "close"
    assert startup[0][1] is fake_es


@pytest.mark.asyncio
async def test_index_ensured_when_fixture_load_disabled(monkeypatch, startup):
    _use_settings(monkeypatch, load_sample_courses=False)
    async with lifespan(app):
        assert [name for name, _ in startup] == ["ensure"]


@pytest.mark.asyncio
async def test_ensure_failure_is_logged_and_startup_continues(monkeypatch, startup, caplog):
    async def failing_ensure(es):
        raise ConnectionError("es down")

    monkeypatch.setattr(main_module, "ensure_courses_index", failing_ensure)
    _use_settings(monkeypatch, load_sample_courses=True)

    with caplog.at_level(logging.ERROR, logger="coursesearch.main"):
        async with lifespan(app):
            assert startup == []
    assert "es down" in caplog.text
    assert startup == [("close", None)]
