"""
Pydantic schemas for API request/response serialization.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# ═══════════════════════════════════════════════════════════════════
# Clinic schemas
# ═══════════════════════════════════════════════════════════════════
class ClinicCluster(BaseModel):
    """One aggregation bucket for map display."""

    lat: float = Field(description="Cell latitude (rounded to the requested precision)")
    lng: float = Field(description="Cell longitude (rounded to the requested precision)")
    count: int = Field(description="Clinics rounding into this cell")


class ClinicOut(BaseModel):
    """A single clinic inside the requested bounding box."""

    id: int
    nombre: str
    latitud: float
    longitud: float
    municipio: str | None = None
    codigo_postal: str | None = None


# ═══════════════════════════════════════════════════════════════════
# Health / errors
# ═══════════════════════════════════════════════════════════════════
class HealthResponse(BaseModel):
    status: str
    service: str


class DbHealthResponse(BaseModel):
    ok: bool
    now: datetime


class ErrorResponse(BaseModel):
    error: str
