"""
Application exceptions.

Hierarchy::

    BuscaDogError
    ├── InvalidParameter     → 400, message returned to the client
    └── UpstreamQueryError   → 500, generic message; cause is logged only

The HTTP status lives on the class and is only read by the exception
handlers registered in ``buscadog.main``.
"""

from __future__ import annotations

GENERIC_ERROR_MESSAGE = "error interno"


class BuscaDogError(Exception):
    """Base class for all BuscaDog application errors."""

    status_code: int = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


class InvalidParameter(BuscaDogError):
    """Malformed, missing or non-finite query parameter."""

    status_code = 400


class UpstreamQueryError(BuscaDogError):
    """The database rejected or failed to run a query."""

    status_code = 500
