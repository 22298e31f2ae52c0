from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import router
from app.schemas import ErrorResponse
from app.web import router as web_router
from datastore.base import ReadingStoreError
from datastore.factory import build_default_store
from logging_config import configure_logging
from services.readings import build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    try:
        build_default_service()
    except ReadingStoreError as exc:
        logger.warning("Reading store unavailable at startup: %s", exc)
    try:
        yield
    finally:
        if build_default_store.cache_info().currsize:
            build_default_store().close()
        build_default_service.cache_clear()
        build_default_store.cache_clear()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, problems or "Invalid request")


async def store_error_handler(_request: Request, exc: ReadingStoreError) -> JSONResponse:
    logger.error("Reading store unavailable: %s", exc, exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Data store unavailable")


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Canal Ice Watch",
        description="Ice-safety dashboard API over sensor-derived canal readings.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ReadingStoreError, store_error_handler)

    static_dir = Path(__file__).resolve().parent / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.include_router(router)
    app.include_router(web_router)
    return app


def run() -> None:
    """Serve the dashboard with uvicorn on the configured host and port."""
    settings = get_settings()
    configure_logging()
    base_url = f"http://localhost:{settings.port}"
    logger.info("Dashboard available at %s", base_url)
    logger.info("API endpoints under %s/api (latest, history, status, all)", base_url)
    logger.info("Health check at %s/health", base_url)
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
