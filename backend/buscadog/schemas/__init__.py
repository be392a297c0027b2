"""Schemas subpackage — Pydantic request/response models."""

from buscadog.schemas.veterinaria import (
    ClinicCluster,
    ClinicOut,
    DbHealthResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "ClinicCluster",
    "ClinicOut",
    "DbHealthResponse",
    "ErrorResponse",
    "HealthResponse",
]
