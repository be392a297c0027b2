"""
BuscaDog — Configuration via pydantic-settings.

Environment variables (prefix ``BUSCADOG_``) override defaults.  The query
limits are exposed as a frozen ``QueryLimits`` value that is handed to the
query service at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

# libpq sslmode values asyncpg accepts as its ``ssl`` argument.
_ASYNCPG_SSL_MODES = frozenset(
    {"disable", "allow", "prefer", "require", "verify-ca", "verify-full"}
)


# ── Query limits ──────────────────────────────────────────────────
@dataclass(frozen=True, slots=True)
class LimitRange:
    """Default value and inclusive clamp range for an integer parameter."""

    default: int
    minimum: int
    maximum: int


@dataclass(frozen=True, slots=True)
class QueryLimits:
    aggregate: LimitRange
    detail: LimitRange
    precision: LimitRange


class Settings(BaseSettings):
    env_path: ClassVar[str] = str(Path(__file__).resolve().parents[2] / ".env")
    model_config = SettingsConfigDict(
        env_file=env_path,
        env_file_encoding="utf-8",
        env_prefix="BUSCADOG_",
        # PG* / DATABASE_URL style variables used by other tooling live in
        # the same .env file; they must not fail validation.
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────
    app_name: str = "BuscaDog"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080

    # ── Database (PostGIS) ─────────────────────────────────────────
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "buscadog"
    # Full connection URL (Neon / Render / Heroku style).  Wins over the
    # individual db_* fields when set.
    database_dsn: str = ""
    # TLS without certificate verification, for hosted Postgres providers.
    db_ssl: bool = False

    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout: float = 5.0
    db_connect_timeout: float = 5.0
    db_pool_recycle: int = 1800

    # Create the clinic table and install the bbox functions on startup.
    init_schema: bool = True

    def _parsed_dsn(self) -> tuple[URL, str | None]:
        """
        ``database_dsn`` rewritten for asyncpg, plus its libpq ``sslmode``.

        asyncpg.connect() has no ``sslmode`` keyword, so the query option
        is stripped from the URL and returned separately.
        """
        url = make_url(self.database_dsn)
        if url.drivername in ("postgres", "postgresql"):
            url = url.set(drivername="postgresql+asyncpg")
        sslmode = url.query.get("sslmode")
        if isinstance(sslmode, tuple):
            sslmode = sslmode[-1]
        if sslmode is not None:
            url = url.difference_update_query(["sslmode"])
            if sslmode not in _ASYNCPG_SSL_MODES:
                raise ValueError(f"Unsupported sslmode in database_dsn: {sslmode!r}")
        return url, sslmode

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy connection string (asyncpg driver)."""
        if self.database_dsn:
            url, _ = self._parsed_dsn()
            return url.render_as_string(hide_password=False)
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def engine_options(self) -> dict[str, Any]:
        """Keyword arguments for ``create_async_engine``."""
        connect_args: dict[str, Any] = {"timeout": self.db_connect_timeout}
        sslmode = self._parsed_dsn()[1] if self.database_dsn else None
        if sslmode is not None:
            connect_args["ssl"] = sslmode
        elif self.db_ssl:
            connect_args["ssl"] = "require"
        return {
            "echo": self.debug,
            "pool_size": self.db_pool_size,
            "max_overflow": self.db_max_overflow,
            "pool_timeout": self.db_pool_timeout,
            "pool_recycle": self.db_pool_recycle,
            "pool_pre_ping": True,
            "connect_args": connect_args,
        }

    # ── CORS ───────────────────────────────────────────────────────
    # "*" allows any origin.
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    # ── Clinic query limits ────────────────────────────────────────
    agg_limit_default: int = 1200
    agg_limit_min: int = 50
    agg_limit_max: int = 10_000

    detail_limit_default: int = 800
    detail_limit_min: int = 50
    detail_limit_max: int = 5_000

    # Decimal digits used to round coordinates before grouping.
    # 0 ≈ 111 km cells, 6 ≈ sub-metre (no effective aggregation).
    precision_default: int = 2
    precision_min: int = 0
    precision_max: int = 6

    @property
    def query_limits(self) -> QueryLimits:
        return QueryLimits(
            aggregate=LimitRange(
                self.agg_limit_default, self.agg_limit_min, self.agg_limit_max
            ),
            detail=LimitRange(
                self.detail_limit_default,
                self.detail_limit_min,
                self.detail_limit_max,
            ),
            precision=LimitRange(
                self.precision_default, self.precision_min, self.precision_max
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
