"""
ORM model for veterinary clinics and the PostGIS functions that query them.

The point geometry is a generated column derived from ``lat``/``lon`` so
that rows written by external tooling never drift from their geometry.

The API never selects from the table directly; it calls two set-returning
SQL functions installed by ``init_models()``:

``veterinarias_agrupadas_bbox(s, w, n, e, precision, limit)``
    Clinics inside the box (edges inclusive), grouped by coordinates
    rounded to ``precision`` decimals.  Returns ``(lat, lon, total)``
    where lat/lon are the rounded cell coordinates; at most ``limit``
    cells, largest first.

``veterinarias_detalle_bbox(s, w, n, e, limit)``
    Clinics strictly inside the box, ordered by id, at most ``limit``.

Both add plain range predicates next to the GiST ``&&`` test, so an
inverted box (south > north or west > east) matches nothing instead of
being normalised by ``ST_MakeEnvelope``.
"""

from __future__ import annotations

from geoalchemy2 import Geometry
from sqlalchemy import CheckConstraint, Computed, Float, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from buscadog.models.database import Base


class Veterinaria(Base):
    __tablename__ = "veterinarias"
    __table_args__ = (
        Index("idx_veterinarias_geom_gist", "geom", postgresql_using="gist"),
        CheckConstraint("lat >= -90 AND lat <= 90", name="ck_veterinarias_lat_range"),
        CheckConstraint("lon >= -180 AND lon <= 180", name="ck_veterinarias_lon_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False)
    # WGS84 decimal degrees
    lat: Mapped[float] = mapped_column(Float(precision=53), nullable=False)
    lon: Mapped[float] = mapped_column(Float(precision=53), nullable=False)
    municipio: Mapped[str | None] = mapped_column(Text, nullable=True)
    codigo_postal: Mapped[str | None] = mapped_column(Text, nullable=True)
    geom = mapped_column(
        Geometry(geometry_type="POINT", srid=4326, spatial_index=False),
        Computed("ST_SetSRID(ST_MakePoint(lon, lat), 4326)", persisted=True),
    )


AGGREGATE_FUNCTION_DDL = """
CREATE OR REPLACE FUNCTION public.veterinarias_agrupadas_bbox(
    p_s double precision,
    p_w double precision,
    p_n double precision,
    p_e double precision,
    p_precision integer,
    p_limit integer
)
RETURNS TABLE (lat double precision, lon double precision, total bigint)
LANGUAGE sql
STABLE
AS $$
    SELECT round(v.lat::numeric, p_precision)::double precision,
           round(v.lon::numeric, p_precision)::double precision,
           count(*)
    FROM public.veterinarias AS v
    WHERE v.geom && ST_MakeEnvelope(p_w, p_s, p_e, p_n, 4326)
      AND v.lat BETWEEN p_s AND p_n
      AND v.lon BETWEEN p_w AND p_e
    GROUP BY 1, 2
    ORDER BY 3 DESC, 1, 2
    LIMIT p_limit
$$
"""

DETAIL_FUNCTION_DDL = """
CREATE OR REPLACE FUNCTION public.veterinarias_detalle_bbox(
    p_s double precision,
    p_w double precision,
    p_n double precision,
    p_e double precision,
    p_limit integer
)
RETURNS TABLE (
    id integer,
    nombre text,
    lat double precision,
    lon double precision,
    municipio text,
    codigo_postal text
)
LANGUAGE sql
STABLE
AS $$
    SELECT v.id, v.nombre, v.lat, v.lon, v.municipio, v.codigo_postal
    FROM public.veterinarias AS v
    WHERE v.geom && ST_MakeEnvelope(p_w, p_s, p_e, p_n, 4326)
      AND v.lat > p_s AND v.lat < p_n
      AND v.lon > p_w AND v.lon < p_e
    ORDER BY v.id
    LIMIT p_limit
$$
"""

BBOX_FUNCTIONS_DDL: tuple[str, ...] = (AGGREGATE_FUNCTION_DDL, DETAIL_FUNCTION_DDL)
