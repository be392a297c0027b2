"""Liveness and database health checks."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from buscadog.config import get_settings
from buscadog.exceptions import UpstreamQueryError
from buscadog.models import database
from buscadog.schemas.veterinaria import DbHealthResponse, HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "service": get_settings().app_name}


@router.get("/health/db", response_model=DbHealthResponse)
async def health_db():
    """Round-trip to PostgreSQL; 500 when the pool cannot reach it."""
    try:
        return await database.db_health()
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("Database health check failed")
        raise UpstreamQueryError() from exc
