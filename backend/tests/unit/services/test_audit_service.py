"""Tests for AuditService."""

import pytest
from unittest.mock import AsyncMock

from ictirc.exceptions import AuthorizationError
from ictirc.models.enums import UserRole
from ictirc.services.audit_service import AuditAction, AuditService


@pytest.fixture
def audit_repository():
    repo = AsyncMock()
    repo.create = AsyncMock()
    repo.list_logs = AsyncMock(return_value=([], 0))
    return repo


@pytest.fixture
def audit_service(mock_async_session, audit_repository):
    return AuditService(session=mock_async_session, audit_repository=audit_repository)


class TestRecord:
    @pytest.mark.asyncio
    async def test_denormalizes_actor_email(self, audit_service, audit_repository, make_user):
        editor = make_user(UserRole.EDITOR, email="editor@example.com")

        await audit_service.record(
            AuditAction.ASSIGN_DOI,
            target_id="paper-1",
            target_type="Paper",
            actor=editor,
            details={"doi": "10.ISUFST.CICT/2024.00001"},
            ip_address="10.1.1.1",
        )

        kwargs = audit_repository.create.call_args.kwargs
        assert kwargs["action"] == "ASSIGN_DOI"
        assert kwargs["actor_id"] == editor.id
        assert kwargs["actor_email"] == "editor@example.com"
        assert kwargs["ip_address"] == "10.1.1.1"

    @pytest.mark.asyncio
    async def test_system_action_without_actor(self, audit_service, audit_repository):
        await audit_service.record(AuditAction.SUBMIT_PAPER, target_id="paper-1")

        kwargs = audit_repository.create.call_args.kwargs
        assert kwargs["actor_id"] is None
        assert kwargs["actor_email"] is None


class TestListLogs:
    @pytest.mark.asyncio
    async def test_requires_audit_read(self, audit_service, actor_lookup, make_user):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)

        with pytest.raises(AuthorizationError):
            await audit_service.list_logs("editor")

    @pytest.mark.asyncio
    async def test_paginates(self, audit_service, actor_lookup, make_user, audit_repository):
        actor_lookup.get_by_id.return_value = make_user(UserRole.DEAN)

        await audit_service.list_logs("dean", action="REVOKE_DOI", page=3, page_size=25)

        audit_repository.list_logs.assert_called_once_with(action="REVOKE_DOI", limit=25, offset=50)
