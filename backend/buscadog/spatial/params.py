"""Precision and limit parameters for the clinic queries."""

from __future__ import annotations

import math
from typing import Any

from buscadog.config import LimitRange
from buscadog.exceptions import InvalidParameter
from buscadog.spatial.bounds import clamp, parse_required_number

PRECISION_RANGE = LimitRange(default=2, minimum=0, maximum=6)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_precision(value: Any, limits: LimitRange = PRECISION_RANGE) -> int:
    """
    Rounding precision (decimal digits) for aggregation.

    Must be integral (``"3"`` and ``"3.0"`` are fine, ``"3.5"`` is not),
    then clamped to the configured range.
    """
    if _is_missing(value):
        return limits.default
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter("precision debe ser entero") from None
    if not math.isfinite(number) or not number.is_integer():
        raise InvalidParameter("precision debe ser entero")
    return int(clamp(int(number), limits.minimum, limits.maximum))


def parse_limit(value: Any, limits: LimitRange) -> int:
    """
    Row/group cap for a query.

    Missing → default.  Non-finite → ``InvalidParameter``.  Fractional
    values are truncated toward zero before clamping.
    """
    if _is_missing(value):
        return limits.default
    number = parse_required_number(value, "limit")
    return int(clamp(int(number), limits.minimum, limits.maximum))
