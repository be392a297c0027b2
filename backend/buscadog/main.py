"""
BuscaDog — FastAPI Application
==============================
Veterinary clinic locator API backed by PostGIS.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from buscadog.config import get_settings
from buscadog.exceptions import GENERIC_ERROR_MESSAGE, BuscaDogError
from buscadog.routers import health, veterinarias

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("buscadog.access")
settings = get_settings()


# ── Security headers ──────────────────────────────────────────────
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach a baseline set of browser hardening headers to every response."""

    HEADERS: dict[str, str] = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
        "Referrer-Policy": "no-referrer",
        "Cross-Origin-Resource-Policy": "same-origin",
        "X-DNS-Prefetch-Control": "off",
    }

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        return response


# ── Access log ────────────────────────────────────────────────────
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One access-log line per request: method, path, status, duration.

    5xx → ERROR, 4xx → WARNING, everything else INFO.  ``/health`` is
    skipped.
    """

    SKIP_PATHS = frozenset({"/health"})

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        status = response.status_code
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        access_logger.log(
            level,
            "%s %s %d %.1fms",
            request.method,
            request.url.path,
            status,
            duration_ms,
        )
        return response


# ── Error mapping ─────────────────────────────────────────────────
def register_exception_handlers(app: FastAPI) -> None:
    """Map application errors to ``{"error": message}`` JSON bodies."""

    @app.exception_handler(BuscaDogError)
    async def buscadog_error_handler(request: Request, exc: BuscaDogError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


# ── Lifespan (startup / shutdown) ─────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
        - Install table and bbox functions (when ``init_schema``).
        - Verify PostGIS connectivity.
    Shutdown:
        - Dispose engine pool.
    """
    logger.info("%s starting up...", settings.app_name)

    from buscadog.models import database

    if settings.init_schema:
        await database.init_models()
        logger.info("Database schema verified / created.")

    async with database.engine.connect() as conn:
        from sqlalchemy import text
        result = await conn.execute(text("SELECT PostGIS_Version()"))
        logger.info("PostGIS connected (version=%s)", result.scalar())

    yield

    await database.engine.dispose()
    logger.info("%s shut down (connection pool closed).", settings.app_name)


# ── App factory ───────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="Veterinary clinic locator: bounding-box listing and map clustering.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentialed requests cannot use a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(veterinarias.router, prefix="/api/v1")

    return app


def run() -> None:  # pragma: no cover
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("buscadog.main:app", host=settings.host, port=settings.port)


# ── Module-level app instance (for `uvicorn buscadog.main:app`) ──
app = create_app()  # pragma: no cover
