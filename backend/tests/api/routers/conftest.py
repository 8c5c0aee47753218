"""Shared pytest fixtures for router tests."""

import pytest
import uuid
from contextlib import ExitStack, asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock, patch

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.enums import UserRole
from ictirc.services.auth_service import AuthenticatedUser


@pytest.fixture(autouse=True)
def mock_database_init():
    """Keep the lifespan away from a real database."""
    import ictirc.main  # noqa: F401

    with ExitStack() as stack:
        stack.enter_context(patch("ictirc.main.init_db", new_callable=AsyncMock))
        mock_engine = stack.enter_context(patch("ictirc.main.engine"))
        mock_engine.dispose = AsyncMock()
        yield


@pytest.fixture
def mock_db_session():
    """Create a mock AsyncSession for router tests."""
    session = AsyncMock(spec=AsyncSession)

    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.scalar_one = Mock(return_value=0)
    mock_result.scalars = Mock(return_value=Mock(all=Mock(return_value=[])))
    mock_result.rowcount = 0

    session.execute = AsyncMock(return_value=mock_result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.close = AsyncMock()

    @asynccontextmanager
    async def begin_nested():
        yield

    session.begin_nested = begin_nested

    return session


@pytest.fixture
def mock_identity():
    """Verified token identity for the calling user."""
    return AuthenticatedUser(
        id=str(uuid.uuid4()), email="editor@example.com", name="Test Editor"
    )


@pytest.fixture
def mock_user(mock_identity):
    """User row matching ``mock_identity``."""
    user = Mock()
    user.id = uuid.UUID(mock_identity.id)
    user.email = mock_identity.email
    user.name = mock_identity.name
    user.role = UserRole.EDITOR
    user.is_active = True
    user.created_at = datetime.now(timezone.utc)
    user.updated_at = datetime.now(timezone.utc)
    return user


@pytest.fixture
def mock_workflow_service():
    return AsyncMock()


@pytest.fixture
def mock_user_service():
    return AsyncMock()


@pytest.fixture
def mock_invite_service():
    return AsyncMock()


@pytest.fixture
def mock_archive_service():
    return AsyncMock()


@pytest.fixture
def mock_audit_service():
    service = AsyncMock()
    service.list_logs = AsyncMock(return_value=([], 0))
    return service


@pytest.fixture
def mock_review_service():
    return AsyncMock()


@pytest.fixture
def mock_submission_service():
    return AsyncMock()


@pytest.fixture
def mock_notification_service():
    service = AsyncMock()
    service.notify_status_change = AsyncMock(return_value=True)
    service.notify_submission_received = AsyncMock(return_value=True)
    return service


@pytest.fixture
def mock_category_repo():
    repo = AsyncMock()
    repo.list_all = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_user_repo(mock_user):
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=mock_user)
    return repo


def _create_test_client(
    mock_db_session,
    services,
    *,
    identity=None,
):
    """Build a TestClient with infrastructure dependencies overridden.

    When ``identity`` is provided, token verification is bypassed. When
    omitted, the auth dependency runs normally so tests can assert 401s.
    """
    from ictirc.main import app
    from ictirc.database import get_db
    from ictirc.dependencies import (
        get_archive_service_dep,
        get_audit_service_dep,
        get_category_repository,
        get_current_identity,
        get_invite_service_dep,
        get_paper_workflow_service_dep,
        get_review_service_dep,
        get_submission_service_dep,
        get_user_repository,
        get_user_service_dep,
    )
    from ictirc.factories.service_factories import get_notification_service

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_paper_workflow_service_dep] = lambda: services["workflow"]
    app.dependency_overrides[get_review_service_dep] = lambda: services["reviews"]
    app.dependency_overrides[get_user_service_dep] = lambda: services["users"]
    app.dependency_overrides[get_invite_service_dep] = lambda: services["invites"]
    app.dependency_overrides[get_archive_service_dep] = lambda: services["archive"]
    app.dependency_overrides[get_audit_service_dep] = lambda: services["audit"]
    app.dependency_overrides[get_submission_service_dep] = lambda: services["submissions"]
    app.dependency_overrides[get_notification_service] = lambda: services["notifications"]
    app.dependency_overrides[get_category_repository] = lambda: services["categories"]
    app.dependency_overrides[get_user_repository] = lambda: services["user_repo"]

    if identity is not None:
        app.dependency_overrides[get_current_identity] = lambda: identity

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def services(
    mock_workflow_service,
    mock_user_service,
    mock_invite_service,
    mock_archive_service,
    mock_audit_service,
    mock_review_service,
    mock_submission_service,
    mock_notification_service,
    mock_category_repo,
    mock_user_repo,
):
    return {
        "workflow": mock_workflow_service,
        "users": mock_user_service,
        "invites": mock_invite_service,
        "archive": mock_archive_service,
        "audit": mock_audit_service,
        "reviews": mock_review_service,
        "submissions": mock_submission_service,
        "notifications": mock_notification_service,
        "categories": mock_category_repo,
        "user_repo": mock_user_repo,
    }


@pytest.fixture
def client(mock_db_session, services, mock_identity):
    """Create TestClient with all dependencies overridden including auth."""
    yield from _create_test_client(mock_db_session, services, identity=mock_identity)


@pytest.fixture
def unauthenticated_client(mock_db_session, services):
    """Create TestClient WITHOUT auth override to test 401 responses."""
    yield from _create_test_client(mock_db_session, services)


# Sample data fixtures


@pytest.fixture
def sample_paper(make_paper):
    return make_paper()


@pytest.fixture
def sample_user(make_user):
    return make_user(UserRole.REVIEWER)


@pytest.fixture
def sample_invite():
    invite = Mock()
    invite.id = uuid.uuid4()
    invite.email = "new.reviewer@example.com"
    invite.role = UserRole.REVIEWER
    invite.status = "PENDING"
    invite.token = "invite-token-abc"
    invite.expires_at = datetime.now(timezone.utc)
    invite.invited_by_id = None
    invite.created_at = datetime.now(timezone.utc)
    return invite
