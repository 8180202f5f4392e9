"""Database engine and connection management."""

from __future__ import annotations

import logging
import ssl
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlalchemy.schema import CreateTable

from school_directory.config.settings import settings

# Import models so they are attached to Base.metadata before table creation
from school_directory.models import Base  # noqa: F401 - ensures metadata is registered
from school_directory.models import school  # noqa: F401

logger = logging.getLogger(__name__)


def _relaxed_ssl_context() -> ssl.SSLContext:
    """Return a TLS context that encrypts but does not verify the peer."""

    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _create_engine() -> AsyncEngine:
    """Create an async engine with environment-appropriate pooling."""

    engine_options: dict[str, Any] = {
        "echo": settings.debug,
        "future": True,
        "pool_pre_ping": True,
    }

    if settings.database.serverless or settings.debug:
        # One connection per operation, closed on exit.
        engine_options["poolclass"] = NullPool

    if settings.database.is_mysql and settings.database.ssl:
        engine_options["connect_args"] = {"ssl": _relaxed_ssl_context()}

    return create_async_engine(settings.database.url, **engine_options)


engine: AsyncEngine = _create_engine()

SessionFactory = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def init_models(bind: AsyncEngine | None = None) -> None:
    """Create database tables if they do not exist.

    Emits ``CREATE TABLE IF NOT EXISTS`` rather than relying on a
    check-then-create, so concurrent callers cannot collide.
    """

    async with (bind or engine).begin() as conn:
        for table in Base.metadata.sorted_tables:
            await conn.execute(CreateTable(table, if_not_exists=True))

    logger.info("Ensured database tables in default schema.")


async def dispose_engine() -> None:
    """Dispose of the engine and release pooled connections."""

    await engine.dispose()
