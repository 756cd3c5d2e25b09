# app/core/db.py
"""
Database configuration and initialization module.
Handles the SQLAlchemy async engine (connection pool), parameterized raw queries,
idempotent schema creation, and per-request sessions.
"""
import logging
import ssl

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.core.errors import InternalError
from app.models import Base

logger = logging.getLogger("uvicorn.error")

# Pool limits for server databases (PostgreSQL)
POOL_MAX_CONNECTIONS = 20
POOL_RECYCLE_SECONDS = 30
CONNECT_TIMEOUT_SECONDS = 2

# libpq query parameters that asyncpg does not accept as keyword arguments
_LIBPQ_ONLY_PARAMS = ("sslmode", "channel_binding")

engine: AsyncEngine | None = None
SessionLocal: async_sessionmaker[AsyncSession] | None = None


def _unverified_ssl_context() -> ssl.SSLContext:
    """TLS without certificate verification, for managed databases with self-signed chains."""
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def engine_options(raw_url: str, production: bool = False) -> tuple[URL, dict]:
    """
    Translate a DATABASE_URL into an async SQLAlchemy URL plus create_async_engine kwargs.

    - postgres:// and postgresql:// URLs use the asyncpg driver with a bounded pool
    - sslmode from the URL is handed to asyncpg as its ssl argument
    - production mode forces TLS without certificate verification
    - sqlite URLs use aiosqlite; in-memory databases share one static connection
    """
    url = make_url(raw_url)
    backend = url.get_backend_name()

    if backend in ("postgres", "postgresql"):
        sslmode = url.query.get("sslmode")
        if isinstance(sslmode, tuple):
            sslmode = sslmode[-1]
        url = url.set(drivername="postgresql+asyncpg").difference_update_query(_LIBPQ_ONLY_PARAMS)

        connect_args: dict = {"timeout": CONNECT_TIMEOUT_SECONDS}
        if production:
            connect_args["ssl"] = _unverified_ssl_context()
        elif sslmode:
            connect_args["ssl"] = sslmode
        return url, {
            "pool_size": POOL_MAX_CONNECTIONS,
            "max_overflow": 0,
            "pool_recycle": POOL_RECYCLE_SECONDS,
            "pool_timeout": CONNECT_TIMEOUT_SECONDS,
            "pool_pre_ping": True,
            "connect_args": connect_args,
        }

    if backend == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")
        if url.database in (None, "", ":memory:"):
            return url, {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        return url, {}

    # Any other backend: trust the URL's own async driver
    return url, {}


def build_engine(raw_url: str, production: bool = False) -> AsyncEngine:
    url, options = engine_options(raw_url, production=production)
    return create_async_engine(url, **options)


async def init_db(url: str | None = None) -> AsyncEngine:
    """
    Create the engine (connection pool) and session factory.

    No connection is opened here; the pool connects on first use.
    Call init_schema() afterwards to make sure the users table exists.
    """
    global engine, SessionLocal
    if engine is not None:
        await engine.dispose()
    engine = build_engine(url or settings.database_url, production=settings.is_production)
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
    logger.info("Database engine ready: %s", engine.url.render_as_string(hide_password=True))
    return engine


async def close_db() -> None:
    """Dispose of the pool and forget the session factory."""
    global engine, SessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    SessionLocal = None


def _require_engine() -> AsyncEngine:
    if engine is None:
        raise RuntimeError("Database is not initialized; call init_db() first")
    return engine


async def execute(sql: str, params: dict | None = None) -> list[dict]:
    """
    Run one parameterized statement in its own transaction.

    Parameters use the :name style, e.g. execute("SELECT * FROM users WHERE username = :u", {"u": "alice"}).
    Returns the rows as dicts, or an empty list for statements that return no rows.
    """
    async with _require_engine().begin() as conn:
        result = await conn.execute(text(sql), params or {})
        if not result.returns_rows:
            return []
        return [dict(row) for row in result.mappings().all()]


async def init_schema() -> int:
    """
    Create the users table if it does not exist and report how many users it holds.
    Safe to run any number of times.
    """
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Users table ready")

    rows = await execute("SELECT COUNT(*) AS count FROM users")
    count = int(rows[0]["count"])
    logger.info("Total users in database: %d", count)
    return count


async def get_session():
    """
    FastAPI dependency yielding an AsyncSession bound to the pool.

    Raises InternalError (500) when the engine was never initialized.
    """
    if SessionLocal is None:
        logger.error("Database session requested before init_db()")
        raise InternalError()
    async with SessionLocal() as session:
        yield session
