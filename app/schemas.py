"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SafetyStatus(str, Enum):
    """Classification attached to each reading by the upstream pipeline."""

    safe = "Safe"
    caution = "Caution"
    unsafe = "Unsafe"


class OverallStatus(str, Enum):
    """Worst-case reduction of the latest per-location statuses."""

    safe = "Safe"
    caution = "Caution"
    unsafe = "Unsafe"
    unknown = "Unknown"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Reading(CamelModel):
    """Aggregated measurements for one location over one time window."""

    location: str = Field(..., description="Human-facing location name.")
    avg_ice_thickness: Optional[float] = Field(default=None, description="Centimetres.")
    avg_surface_temperature: Optional[float] = Field(default=None, description="Degrees Celsius.")
    avg_snow_accumulation: Optional[float] = Field(
        default=None, description="Average snow accumulation over the window, centimetres."
    )
    safety_status: Optional[SafetyStatus] = None
    window_end_time: datetime


class LocationStatus(CamelModel):
    """Latest classification known for a single location."""

    location: str
    safety_status: Optional[SafetyStatus] = None
    window_end_time: datetime


class ReadingsResponse(BaseModel):
    success: bool = True
    data: List[Reading] = Field(default_factory=list)


class AllReadingsResponse(BaseModel):
    success: bool = True
    count: int = Field(..., ge=0)
    data: List[Reading] = Field(default_factory=list)


class StatusResponse(CamelModel):
    success: bool = True
    overall_status: OverallStatus
    locations: List[LocationStatus] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Failure envelope shared by every API route."""

    success: bool = False
    error: str


class StoreHealth(BaseModel):
    backend: str
    endpoint: str = Field(..., description="Either 'configured' or 'missing'.")
    key: str = Field(..., description="Either 'configured' or 'missing'.")
    database: str
    container: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: datetime
    store: StoreHealth
