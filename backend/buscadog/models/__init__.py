"""Models subpackage."""

from buscadog.models.database import (
    Base,
    async_session_factory,
    db_health,
    engine,
    get_db,
    init_models,
)
from buscadog.models.veterinaria import BBOX_FUNCTIONS_DDL, Veterinaria

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "db_health",
    "get_db",
    "init_models",
    "BBOX_FUNCTIONS_DDL",
    "Veterinaria",
]
