"""
FastAPI application entry point.
Mounts routes and Prometheus metrics; startup creates the courses index and loads the fixture.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from coursesearch.api.v1.router import api_router
from coursesearch.config import get_settings
from coursesearch.search.elasticsearch_client import (
    close_elasticsearch,
    ensure_courses_index,
    get_elasticsearch,
)
from coursesearch.services.course_loader import load_sample_courses

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure the courses index and bulk-load sample courses. Shutdown: close ES client."""
    settings = get_settings()
    try:
        es = await get_elasticsearch()
        await ensure_courses_index(es)
        if settings.load_sample_courses:
            await load_sample_courses(es, settings.sample_courses_path)
    except Exception as e:
        # ES may be down; the API still starts and search requests fail until it is back
        logger.error("Startup index setup failed: %s", e)
    yield
    await close_elasticsearch()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        description="Course search over Elasticsearch: filtered full-text search and title autocomplete.",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
