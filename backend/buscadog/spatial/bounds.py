"""
Bounding Box Parsing
====================
Turns raw query-string values into a validated ``BoundingBox``.

All coordinates are WGS84 decimal degrees.  Only finiteness is checked:
an inverted (south > north) or antimeridian-crossing box is passed to the
database unchanged, where the envelope test simply matches nothing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from buscadog.exceptions import InvalidParameter


def _bbox_format_message(name: str) -> str:
    return f'{name} requerido como "s,w,n,e"'


# ── Bounding Box ──────────────────────────────────────────────────
@dataclass(frozen=True, slots=True)
class BoundingBox:
    """A latitude/longitude rectangle."""

    south: float
    west: float
    north: float
    east: float

    def as_params(self) -> dict[str, float]:
        """Bind parameters for the bbox SQL functions."""
        return {
            "s": self.south,
            "w": self.west,
            "n": self.north,
            "e": self.east,
        }


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def parse_required_number(value: Any, name: str) -> float:
    """
    Convert ``value`` to a finite float.

    Missing, blank, non-numeric, ``nan`` and ``inf`` all raise
    ``InvalidParameter`` naming the offending parameter.
    """
    # float() accepts "1_000"; digit separators are not valid input here.
    if value is None or (isinstance(value, str) and "_" in value):
        raise InvalidParameter(f"Parámetro inválido: {name}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"Parámetro inválido: {name}") from None
    if not math.isfinite(number):
        raise InvalidParameter(f"Parámetro inválido: {name}")
    return number


def parse_bbox_edges(s: Any, w: Any, n: Any, e: Any) -> BoundingBox:
    """Build a box from four separate parameters, checked in s, w, n, e order."""
    return BoundingBox(
        south=parse_required_number(s, "s"),
        west=parse_required_number(w, "w"),
        north=parse_required_number(n, "n"),
        east=parse_required_number(e, "e"),
    )


def parse_bbox(csv: str | None, name: str = "bbox") -> BoundingBox:
    """Parse a ``"south,west,north,east"`` string."""
    if csv is None:
        raise InvalidParameter(_bbox_format_message(name))
    fields = csv.split(",")
    if len(fields) != 4:
        raise InvalidParameter(_bbox_format_message(name))
    s, w, n, e = fields
    return BoundingBox(
        south=parse_required_number(s, f"{name}.s"),
        west=parse_required_number(w, f"{name}.w"),
        north=parse_required_number(n, f"{name}.n"),
        east=parse_required_number(e, f"{name}.e"),
    )
