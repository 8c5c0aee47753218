"""Shared pytest fixtures."""

# Clear settings cache before any imports to prevent stale values with coverage
from ictirc.config import get_settings

get_settings.cache_clear()

import pytest
import uuid
from unittest.mock import AsyncMock, Mock
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from ictirc.models.enums import PaperStatus, UserRole


# Database mocking fixtures


@pytest.fixture
def mock_async_session():
    """Create a mock AsyncSession for repository and service tests."""
    session = AsyncMock()

    # Mock result object for execute
    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.scalar_one = Mock(return_value=0)
    mock_result.scalars = Mock(return_value=Mock(all=Mock(return_value=[])))
    mock_result.fetchall = Mock(return_value=[])
    mock_result.rowcount = 0

    session.execute = AsyncMock(return_value=mock_result)
    session.scalar = AsyncMock(return_value=0)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = Mock()
    session.add_all = Mock()
    session.delete = AsyncMock()
    session.expire_all = Mock()

    # Mock begin_nested for savepoint tests
    @asynccontextmanager
    async def begin_nested():
        yield

    session.begin_nested = begin_nested

    return session


@pytest.fixture
def make_user():
    """Factory for lightweight User stand-ins."""

    def _make(role=UserRole.AUTHOR, is_active=True, email=None):
        user = Mock()
        user.id = uuid.uuid4()
        user.email = email or f"{role.lower()}-{uuid.uuid4().hex[:6]}@example.com"
        user.name = f"Test {role.title()}"
        user.role = role
        user.is_active = is_active
        user.created_at = datetime.now(timezone.utc)
        user.updated_at = datetime.now(timezone.utc)
        return user

    return _make


@pytest.fixture
def make_paper():
    """Factory for live Paper stand-ins with one corresponding author."""

    def _make(status=PaperStatus.SUBMITTED, doi=None, authors=None):
        paper = Mock()
        paper.id = uuid.uuid4()
        paper.title = "Adaptive Routing in Campus Mesh Networks"
        paper.abstract = "A" * 120
        paper.keywords = ["mesh", "routing", "campus"]
        paper.category_id = uuid.uuid4()
        paper.status = status
        paper.doi = doi
        paper.published_at = None
        paper.raw_file_url = None
        paper.publication_step = 0
        paper.publication_note = None
        paper.created_at = datetime.now(timezone.utc)
        paper.updated_at = datetime.now(timezone.utc)

        if authors is None:
            author = Mock()
            author.id = uuid.uuid4()
            author.name = "Maria Santos"
            author.email = "maria@example.com"
            author.affiliation = "ISUFST"
            link = Mock()
            link.order = 0
            link.is_corresponding_author = True
            link.author = author
            authors = [link]
        paper.authors = authors
        paper.corresponding_author = authors[0] if authors else None
        return paper

    return _make


@pytest.fixture
def sample_uuid():
    """Return a sample UUID string."""
    return str(uuid.uuid4())
