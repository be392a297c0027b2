"""
Veterinary Clinic Endpoints
===========================
Bounding-box lookups for the map view: raw listing and clustered counts.

Query parameters are taken as plain strings and validated by
``buscadog.spatial`` so that bad input yields ``400 {"error": ...}``
before any query runs.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from buscadog.schemas.veterinaria import ClinicCluster, ClinicOut, ErrorResponse
from buscadog.services.clinics import ClinicQueryService, get_clinic_service
from buscadog.spatial.bounds import parse_bbox, parse_bbox_edges
from buscadog.spatial.params import parse_limit, parse_precision

router = APIRouter(
    prefix="/veterinarias",
    tags=["Veterinarias"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


# ── Clustered counts ──────────────────────────────────────────────
@router.get("/agg", response_model=list[ClinicCluster])
async def clinic_clusters(
    s: str | None = None,
    w: str | None = None,
    n: str | None = None,
    e: str | None = None,
    precision: str | None = None,
    limit: str | None = None,
    svc: ClinicQueryService = Depends(get_clinic_service),
):
    """
    Clinic counts grouped by coordinates rounded to ``precision`` decimals.

    ``precision`` defaults to 2 and is clamped to 0–6; ``limit`` defaults
    to 1200 and is clamped to 50–10000.
    """
    bbox = parse_bbox_edges(s, w, n, e)
    digits = parse_precision(precision, svc.limits.precision)
    cap = parse_limit(limit, svc.limits.aggregate)
    return await svc.aggregate(bbox, digits, cap)


# ── Detail listing ────────────────────────────────────────────────
@router.get("", response_model=list[ClinicOut])
async def list_clinics(
    bbox: str | None = None,
    limit: str | None = None,
    svc: ClinicQueryService = Depends(get_clinic_service),
):
    """Clinics inside ``bbox`` (``"s,w,n,e"``), default limit 800, clamped 50–5000."""
    box = parse_bbox(bbox)
    cap = parse_limit(limit, svc.limits.detail)
    return await svc.list_in_bbox(box, cap)
