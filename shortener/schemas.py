"""Pydantic response models for the URL shortener's JSON endpoints.

Schema Hierarchy
=================
::
    HealthResponse (Output)
    ├─ status: HealthStatus
    └─ mappings: int (number of stored short codes)

The HTML pages render ``shortener.store.Mapping`` values directly, so the
only JSON surface is the health check.
"""

from pydantic import BaseModel, Field

from shortener.enums import HealthStatus

__all__ = ["HealthResponse"]


class HealthResponse(BaseModel):
    status: HealthStatus
    mappings: int = Field(..., ge=0, description="Number of short codes currently stored")
