"""
Clinic Query Service
====================
Bounding-box queries for veterinary clinics.

All geometry work (envelope test, coordinate rounding, grouping) runs in
the database-side functions declared in ``buscadog.models.veterinaria``.
This layer binds the validated parameters, runs exactly one read
statement and relabels the columns for the API.
"""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from buscadog.config import QueryLimits, get_settings
from buscadog.exceptions import UpstreamQueryError
from buscadog.models.database import get_db
from buscadog.schemas.veterinaria import ClinicCluster, ClinicOut
from buscadog.spatial.bounds import BoundingBox

logger = logging.getLogger(__name__)

AGGREGATE_SQL = text(
    """
    SELECT
        lat::float8   AS lat,
        lon::float8   AS lng,
        total::int    AS count
    FROM public.veterinarias_agrupadas_bbox(:s, :w, :n, :e, :precision, :limit)
    """
)

DETAIL_SQL = text(
    """
    SELECT
        id,
        nombre,
        lat::float8   AS latitud,
        lon::float8   AS longitud,
        municipio,
        codigo_postal
    FROM public.veterinarias_detalle_bbox(:s, :w, :n, :e, :limit)
    """
)


class ClinicQueryService:
    """
    Runs the clinic bbox queries on the injected AsyncSession.

    ``limits`` carries the default and clamp range for every tunable
    parameter; routers validate request input against it before calling
    any query method.
    """

    def __init__(self, session: AsyncSession, limits: QueryLimits) -> None:
        self.session = session
        self.limits = limits

    async def _fetch(self, stmt, params: dict) -> list[dict]:
        try:
            result = await self.session.execute(stmt, params)
            return [dict(row) for row in result.mappings().all()]
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Clinic query failed (params=%s)", params)
            raise UpstreamQueryError() from exc

    # ── Aggregated clusters ───────────────────────────────────

    async def aggregate(
        self,
        bbox: BoundingBox,
        precision: int,
        limit: int,
    ) -> list[ClinicCluster]:
        """
        Clinic counts per rounded-coordinate cell inside ``bbox``.

        Bucket order is whatever the database function returns.
        """
        params = {**bbox.as_params(), "precision": precision, "limit": limit}
        rows = await self._fetch(AGGREGATE_SQL, params)
        logger.debug(
            "Aggregated %d cells (precision=%d, limit=%d)", len(rows), precision, limit
        )
        return [
            ClinicCluster(lat=row["lat"], lng=row["lng"], count=row["count"])
            for row in rows
        ]

    # ── Detail listing ────────────────────────────────────────

    async def list_in_bbox(self, bbox: BoundingBox, limit: int) -> list[ClinicOut]:
        """Clinics strictly inside ``bbox``, at most ``limit`` of them."""
        params = {**bbox.as_params(), "limit": limit}
        rows = await self._fetch(DETAIL_SQL, params)
        return [ClinicOut(**row) for row in rows]


def get_clinic_service(db: AsyncSession = Depends(get_db)) -> ClinicQueryService:
    """FastAPI dependency — a query service bound to the request session."""
    return ClinicQueryService(db, get_settings().query_limits)
