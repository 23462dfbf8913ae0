"""
FastAPI application entry point.
Mounts routes, Prometheus metrics, domain error translation, and the search index on startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from shareit.api.v1.router import api_router
from shareit.config import get_settings
from shareit.core.exceptions import DomainException
from shareit.core.metrics import DOMAIN_ERRORS
from shareit.search.elasticsearch_client import ensure_items_index

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure the Elasticsearch items index when search is enabled."""
    if get_settings().search_enabled:
        try:
            await ensure_items_index()
        except Exception as e:
            # ES may be down; bookings still work and search returns empty
            logger.warning("Could not ensure items index: %s", e)
    yield


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Translate a domain error to its HTTP status with a uniform body."""
    logger.warning(
        "%s while processing %s %s: returning %d",
        exc.code, request.method, request.url.path, exc.status_code,
    )
    DOMAIN_ERRORS.labels(code=exc.code).inc()
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        description="Item sharing: listings, time-bounded bookings with owner approval, comments after completed rentals.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainException, domain_exception_handler)

    app.mount("/metrics", make_asgi_app())

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
