"""Engine, request-scoped sessions and schema readiness checks.

The schema is owned by Alembic (``backend/alembic``); nothing here creates
tables.
"""

from typing import AsyncGenerator, Optional

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from ictirc.config import get_settings
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class Base(DeclarativeBase):
    pass


settings = get_settings()
engine = create_async_engine(
    settings.postgres_url,
    echo=settings.sql_echo,
    pool_pre_ping=True,
    pool_recycle=1800,
)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session and one transaction per request.

    Routers commit explicitly once the mutation and its audit row are
    written; anything raised before then rolls both back together.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping(session: AsyncSession) -> None:
    """Round-trip a trivial query; raises if the database is unreachable."""
    await session.execute(text("SELECT 1"))


async def current_revision(conn: AsyncConnection) -> Optional[str]:
    """Alembic revision the database is stamped with, or None if unmigrated."""
    has_version_table = await conn.run_sync(
        lambda sync_conn: inspect(sync_conn).has_table("alembic_version")
    )
    if not has_version_table:
        return None
    result = await conn.execute(text("SELECT version_num FROM alembic_version"))
    return result.scalar_one_or_none()


async def init_db() -> None:
    """Check connectivity at startup and report the migrated revision."""
    async with engine.connect() as conn:
        revision = await current_revision(conn)
    if revision is None:
        log.warning("database schema not migrated", hint="run alembic upgrade head")
    else:
        log.info("database ready", revision=revision)
