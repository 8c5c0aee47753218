"""Integration test configuration with real PostgreSQL database."""

import os
import asyncio
import uuid
from pathlib import Path
from typing import AsyncGenerator

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
    AsyncEngine,
)
from alembic.config import Config
from alembic import command

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")
BACKEND_DIR = Path(__file__).resolve().parents[2]


def pytest_collection_modifyitems(items):
    """Apply integration marker to all tests in this directory."""
    for item in items:
        if "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
            if not TEST_DATABASE_URL:
                item.add_marker(pytest.mark.skip(reason="TEST_DATABASE_URL not set"))


@pytest.fixture(scope="session")
def event_loop_policy():
    """Return the event loop policy for session scope."""
    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture(scope="session")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine (session-scoped)."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, future=True, pool_pre_ping=True)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="session")
async def setup_database(test_engine: AsyncEngine):
    """
    Reset the schema and run migrations.

    Runs once at the start of the test session.
    """
    async with test_engine.begin() as conn:
        await conn.execute(text("DROP SCHEMA public CASCADE"))
        await conn.execute(text("CREATE SCHEMA public"))
        await conn.execute(text("GRANT ALL ON SCHEMA public TO PUBLIC"))

    def run_migrations():
        alembic_cfg = Config(str(BACKEND_DIR / "alembic.ini"))
        alembic_cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
        alembic_cfg.set_main_option("sqlalchemy.url", TEST_DATABASE_URL)
        command.upgrade(alembic_cfg, "head")

    await asyncio.get_running_loop().run_in_executor(None, run_migrations)

    yield


@pytest.fixture(scope="session")
def async_session_factory(
    test_engine: AsyncEngine, setup_database
) -> async_sessionmaker[AsyncSession]:
    """Session factory for tests that need independent, committing sessions."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    test_engine: AsyncEngine,
    setup_database,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Session whose work is rolled back at the end of the test.

    Commits inside the test release a savepoint instead of the outer
    transaction.
    """
    from sqlalchemy import event

    async with test_engine.connect() as conn:
        trans = await conn.begin()
        async_session = AsyncSession(bind=conn, expire_on_commit=False)
        await conn.begin_nested()

        @event.listens_for(async_session.sync_session, "after_transaction_end")
        def restart_savepoint(session, transaction):
            if transaction.nested and not transaction._parent.nested:
                session.begin_nested()

        yield async_session

        await async_session.close()
        await trans.rollback()


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
async def created_category(db_session):
    from ictirc.models.category import Category

    category = Category(name=f"Test {uuid.uuid4().hex[:6]}", slug=f"test-{uuid.uuid4().hex[:8]}")
    db_session.add(category)
    await db_session.flush()
    return category


@pytest.fixture
async def created_paper(db_session, created_category):
    from ictirc.repositories.paper_repository import PaperRepository

    repo = PaperRepository(session=db_session)
    return await repo.create(
        title="Adaptive Routing in Campus Mesh Networks",
        abstract="A study of adaptive routing.",
        keywords=["mesh", "routing", "campus"],
        category_id=created_category.id,
    )
