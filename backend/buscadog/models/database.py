"""
Async SQLAlchemy engine & session factory for PostGIS.

Schema Bootstrap
----------------
``init_models()`` enables PostGIS, issues ``CREATE TABLE IF NOT EXISTS``
for every registered ORM model and (re)installs the bbox SQL functions
the clinic endpoints call.  Every statement is idempotent.  The lifespan
calls it when ``Settings.init_schema`` is true.

Session Lifecycle
-----------------
The ``get_db`` dependency yields an ``AsyncSession``.  The clinic
endpoints only read, so there is nothing to commit; the session is
rolled back on error and always closed, which returns its connection
to the pool.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from buscadog.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

engine = create_async_engine(settings.database_url, **settings.engine_options)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@event.listens_for(engine.sync_engine, "connect")
def _on_connect(dbapi_connection, connection_record) -> None:
    logger.debug("Pool opened a new database connection")


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """
    FastAPI dependency — yields an async DB session.

    On error the session is rolled back and the exception re-raised so
    the application's exception handlers produce the response.
    """
    session = async_session_factory()
    try:
        yield session
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Database error: %s", exc, exc_info=True)
        raise
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_models() -> None:
    """
    Create the PostGIS extension, all tables in ``Base.metadata`` and
    the bbox functions.

    Must be called **after** all model modules have been imported so
    that ``Base.metadata`` is fully populated.
    """
    from buscadog.models.veterinaria import BBOX_FUNCTIONS_DDL

    async with engine.begin() as conn:
        await conn.exec_driver_sql("CREATE EXTENSION IF NOT EXISTS postgis")
        await conn.run_sync(Base.metadata.create_all)
        for ddl in BBOX_FUNCTIONS_DDL:
            await conn.exec_driver_sql(ddl)


async def db_health() -> dict[str, Any]:
    """Round-trip to the database; returns its current timestamp."""
    async with engine.connect() as conn:
        result = await conn.execute(text("SELECT now() AS now"))
        now = result.scalar_one()
    return {"ok": True, "now": now}
