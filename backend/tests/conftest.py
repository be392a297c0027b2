"""
Shared fixtures for the BuscaDog test suite.

This conftest provides:
- Sample row factories shaped like the bbox function results
- A helper that wraps rows in a mock SQLAlchemy ``Result``
"""
from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from buscadog.config import LimitRange, QueryLimits


# ---------------------------------------------------------------------------
# Sample data factories
# ---------------------------------------------------------------------------
def make_cluster_row(
    *,
    lat: float = 19.1,
    lng: float = -99.1,
    count: int = 5,
) -> dict[str, Any]:
    """A row as returned by the aggregate SELECT (already relabelled)."""
    return {"lat": lat, "lng": lng, "count": count}


def make_clinic_row(
    *,
    id: int = 1,
    nombre: str = "Vet A",
    latitud: float = 19.1,
    longitud: float = -99.1,
    municipio: str | None = "X",
    codigo_postal: str | None = "00000",
) -> dict[str, Any]:
    """A row as returned by the detail SELECT (already relabelled)."""
    return {
        "id": id,
        "nombre": nombre,
        "latitud": latitud,
        "longitud": longitud,
        "municipio": municipio,
        "codigo_postal": codigo_postal,
    }


def make_result(rows: list[dict[str, Any]]) -> MagicMock:
    """Mock of ``session.execute(...)``'s return value."""
    result = MagicMock()
    result.mappings.return_value.all.return_value = rows
    return result


@pytest.fixture()
def query_limits() -> QueryLimits:
    return QueryLimits(
        aggregate=LimitRange(default=1200, minimum=50, maximum=10_000),
        detail=LimitRange(default=800, minimum=50, maximum=5_000),
        precision=LimitRange(default=2, minimum=0, maximum=6),
    )
