"""FastAPI application entry point."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from dependencies import get_app_settings, get_db_engine, get_fallback_chain, get_summarization_service
from routers.cache import router as cache_router
from routers.issues import router as issues_router
from routers.updates import router as updates_router
from utils.db import create_schema

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables and build the provider catalogs before serving."""
    settings = get_app_settings()
    create_schema(get_db_engine())
    get_summarization_service()
    get_fallback_chain()
    logger.info(
        "Ready: summaries in %s, translations to %s (order: %s)",
        settings.source_language,
        settings.target_language,
        ", ".join(settings.translator_provider_order),
    )
    yield
    get_db_engine().dispose()


app = FastAPI(
    title="Issue Summarizer",
    description="Summarize GitHub issues with rotating LLM providers and translate the results.",
    version="1.0.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def request_timing(request: Request, call_next):
    t0 = time.monotonic()
    response = await call_next(request)
    elapsed = time.monotonic() - t0
    response.headers["X-Process-Time"] = f"{elapsed:.3f}"
    logging.getLogger("timing").info(
        "%s %s - %.3fs (%d)",
        request.method,
        request.url.path,
        elapsed,
        response.status_code,
    )
    return response


app.include_router(issues_router)
app.include_router(cache_router)
app.include_router(updates_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
