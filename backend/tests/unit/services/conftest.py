"""Shared pytest fixtures for service tests."""

import pytest
from unittest.mock import AsyncMock, Mock, patch


@pytest.fixture
def actor_lookup():
    """
    Patch the actor lookup used by the permission guards.

    Set ``actor_lookup.get_by_id.return_value`` to the acting user.
    """
    with patch("ictirc.repositories.user_repository.UserRepository") as repo_cls:
        repo = repo_cls.return_value
        repo.get_by_id = AsyncMock(return_value=None)
        yield repo


@pytest.fixture
def mock_audit_service():
    """Create a mock AuditService."""
    service = AsyncMock()
    service.record = AsyncMock()
    return service


@pytest.fixture
def mock_paper_repository():
    """Create a mock PaperRepository."""
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.list_papers = AsyncMock(return_value=([], 0))
    repo.create = AsyncMock()
    repo.delete = AsyncMock(return_value=True)
    repo.transition_status = AsyncMock(return_value=True)
    repo.set_doi_if_absent = AsyncMock(return_value=True)
    repo.revoke_doi = AsyncMock(return_value=True)
    repo.update_publication_step = AsyncMock()
    repo.set_raw_file_url = AsyncMock()
    repo.upsert_author = AsyncMock()
    repo.add_author = AsyncMock()
    return repo


@pytest.fixture
def mock_doi_sequence_repository():
    """Create a mock DoiSequenceRepository handing out serial 1."""
    repo = AsyncMock()
    repo.next_serial = AsyncMock(return_value=1)
    repo.get_count = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def mock_user_repository():
    """Create a mock UserRepository for the service under test."""
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_email = AsyncMock(return_value=None)
    repo.create = AsyncMock()
    repo.get_or_create = AsyncMock()
    repo.list_users = AsyncMock(return_value=([], 0))
    repo.update_role = AsyncMock(side_effect=lambda user, role: user)
    repo.set_active = AsyncMock()
    return repo


@pytest.fixture
def mock_invite_repository():
    """Create a mock InviteRepository."""
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_token = AsyncMock(return_value=None)
    repo.get_active_for_email = AsyncMock(return_value=None)
    repo.list_pending = AsyncMock(return_value=[])
    repo.create = AsyncMock()
    repo.mark_status = AsyncMock(return_value=True)
    repo.expire_overdue = AsyncMock(return_value=0)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def mock_email_client():
    """Create a mock EmailClient."""
    client = AsyncMock()
    client.send_status_change_email = AsyncMock(return_value="msg_123")
    client.send_submission_confirmation = AsyncMock(return_value="msg_456")
    return client


@pytest.fixture
def mock_storage_client():
    """Create a mock StorageClient with a successful upload."""
    client = AsyncMock()
    client.upload_to_hot_storage = AsyncMock(
        return_value=Mock(success=True, url="https://storage.example.com/papers/x.pdf", error=None)
    )
    client.delete_from_hot_storage = AsyncMock(return_value=True)
    return client


@pytest.fixture
def mock_review_repository():
    """Create a mock ReviewRepository."""
    repo = AsyncMock()
    repo.get_assignment = AsyncMock(return_value=None)
    repo.find_assignment = AsyncMock(return_value=None)
    repo.list_assignments = AsyncMock(return_value=[])
    repo.create_assignment = AsyncMock()
    repo.delete_assignment = AsyncMock()
    repo.list_comments = AsyncMock(return_value=[])
    repo.create_comment = AsyncMock()
    return repo
