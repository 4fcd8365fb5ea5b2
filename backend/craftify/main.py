"""FastAPI application entry point."""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from craftify.api import categories, item_transfer, items, meta
from craftify.api.errors import (
    ProblemException,
    http_exception_handler,
    problem_exception_handler,
    request_validation_handler,
)
from craftify.container import get_category_store, get_item_store
from craftify.core import config
from craftify.core.logging_config import configure_logging
from craftify.persistence.seed import seed_demo_data

configure_logging()
logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Startup: build the stores and seed demo data
# ------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.SEED_DEMO_DATA:
        seed_demo_data(get_category_store(), get_item_store())
    logger.info("%s %s started", config.APP_TITLE, config.APP_VERSION)
    yield


# ------------------------------------------------------------------
# App creation
# ------------------------------------------------------------------
app = FastAPI(
    title=config.APP_TITLE,
    description="In-memory catalog of categories and items with optimistic concurrency",
    version=config.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["ETag", "Location", "Content-Disposition"],
)

app.add_exception_handler(ProblemException, problem_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

# ------------------------------------------------------------------
# Routers
# ------------------------------------------------------------------
app.include_router(meta.router)
app.include_router(categories.router)
app.include_router(item_transfer.router)
app.include_router(items.router)


if __name__ == "__main__":
    uvicorn.run("craftify.main:app", host="0.0.0.0", port=8080, reload=True)
