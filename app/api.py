"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import (
    AllReadingsResponse,
    ErrorResponse,
    HealthResponse,
    ReadingsResponse,
    StatusResponse,
    StoreHealth,
)
from datastore.base import ReadingStoreError
from services.readings import InvalidLimitError, ReadingService, build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

_FAILURE_RESPONSES = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
}


def get_service() -> ReadingService:
    return build_default_service()


def _store_failure(message: str, exc: ReadingStoreError) -> HTTPException:
    logger.error("%s: %s", message, exc, exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message,
    )


@router.get(
    "/api/latest",
    response_model=ReadingsResponse,
    responses=_FAILURE_RESPONSES,
    summary="Latest reading for every monitored location.",
)
def get_latest(service: ReadingService = Depends(get_service)) -> ReadingsResponse:
    try:
        readings = service.get_latest()
    except ReadingStoreError as exc:
        raise _store_failure("Failed to fetch latest data", exc) from exc
    return ReadingsResponse(data=readings)


@router.get(
    "/api/history/{location}",
    response_model=ReadingsResponse,
    responses=_FAILURE_RESPONSES,
    summary="Recent readings for one location in chronological order.",
)
def get_history(
    location: str,
    limit: Optional[int] = Query(
        None,
        ge=1,
        description="Maximum number of readings to return (defaults to HISTORY_DEFAULT_LIMIT).",
    ),
    service: ReadingService = Depends(get_service),
) -> ReadingsResponse:
    try:
        if limit is None:
            limit = get_settings().history_default_limit
        readings = service.get_history(location, limit=limit)
    except InvalidLimitError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except ReadingStoreError as exc:
        raise _store_failure("Failed to fetch history", exc) from exc
    return ReadingsResponse(data=readings)


@router.get(
    "/api/status",
    response_model=StatusResponse,
    responses=_FAILURE_RESPONSES,
    summary="Overall canal status derived from each location's latest reading.",
)
def get_status(service: ReadingService = Depends(get_service)) -> StatusResponse:
    try:
        report = service.get_status()
    except ReadingStoreError as exc:
        raise _store_failure("Failed to fetch system status", exc) from exc
    return StatusResponse(overall_status=report.overall_status, locations=report.locations)


@router.get(
    "/api/all",
    response_model=AllReadingsResponse,
    responses=_FAILURE_RESPONSES,
    summary="Every stored reading, newest first (diagnostics).",
)
def get_all(
    limit: Optional[int] = Query(
        None,
        ge=1,
        description="Maximum number of readings to return (defaults to ALL_MAX_RESULTS).",
    ),
    service: ReadingService = Depends(get_service),
) -> AllReadingsResponse:
    try:
        readings = service.get_all(limit=limit)
    except InvalidLimitError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except ReadingStoreError as exc:
        raise _store_failure("Failed to fetch all data", exc) from exc
    return AllReadingsResponse(count=len(readings), data=readings)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        timestamp=datetime.now(timezone.utc),
        store=StoreHealth(
            backend=settings.store_backend,
            endpoint="configured" if settings.store_endpoint else "missing",
            key="configured" if settings.store_key else "missing",
            database=settings.store_database,
            container=settings.store_container,
        ),
    )
