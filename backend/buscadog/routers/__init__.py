"""Routers subpackage — HTTP layer for all API endpoints."""

from buscadog.routers import health, veterinarias

__all__ = ["health", "veterinarias"]
