"""Spatial subpackage — bounding boxes and query parameter validation."""

from buscadog.spatial.bounds import (
    BoundingBox,
    clamp,
    parse_bbox,
    parse_bbox_edges,
    parse_required_number,
)
from buscadog.spatial.params import parse_limit, parse_precision

__all__ = [
    "BoundingBox",
    "clamp",
    "parse_bbox",
    "parse_bbox_edges",
    "parse_limit",
    "parse_precision",
    "parse_required_number",
]
