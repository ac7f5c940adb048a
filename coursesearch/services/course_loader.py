"""
Course fixture loader - bulk-indexes the static sample courses at startup.
Failures are logged and swallowed so the API still comes up without data.
"""

import json
import logging
from pathlib import Path

from elasticsearch import AsyncElasticsearch
from elasticsearch.helpers import async_bulk
from pydantic import TypeAdapter

from coursesearch.config import get_settings
from coursesearch.schemas.course import CourseDocument

logger = logging.getLogger(__name__)

_courses_adapter = TypeAdapter(list[CourseDocument])


def read_course_fixture(path: Path) -> list[CourseDocument]:
    """Parse a JSON array of course records and fill in missing suggest payloads."""
    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    courses = _courses_adapter.validate_python(raw)
    for course in courses:
        course.initialize_suggest()
    return courses


async def index_courses(es: AsyncElasticsearch, courses: list[CourseDocument], index: str | None = None) -> int:
    """Bulk-index courses, keyed by id when one is set. Returns the number of documents indexed."""
    index = index or get_settings().courses_index
    actions = [course.to_bulk_action(index) for course in courses]
    success, _ = await async_bulk(es, actions, refresh="wait_for")
    return success


async def load_sample_courses(es: AsyncElasticsearch, path: Path | None = None) -> int:
    path = Path(path or get_settings().sample_courses_path)
    logger.info("Loading %s...", path.name)
    if not path.exists():
        logger.error("%s not found.", path)
        return 0
    try:
        courses = read_course_fixture(path)
        count = await index_courses(es, courses)
    except Exception:
        logger.exception("Failed to load and index courses from %s", path)
        return 0
    logger.info("Successfully indexed %d courses into Elasticsearch.", count)
    return count
