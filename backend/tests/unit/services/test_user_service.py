"""Tests for UserService."""

import pytest
from unittest.mock import AsyncMock

from ictirc.exceptions import AuthorizationError, ConflictError, ResourceNotFoundError
from ictirc.models.enums import UserRole
from ictirc.services.audit_service import AuditAction
from ictirc.services.user_service import UserService


@pytest.fixture
def user_service(mock_async_session, mock_user_repository, mock_audit_service):
    return UserService(
        session=mock_async_session,
        user_repository=mock_user_repository,
        audit_service=mock_audit_service,
    )


class TestSyncUser:
    @pytest.mark.asyncio
    async def test_creates_author_on_first_login(self, user_service, mock_user_repository, make_user):
        new_user = make_user(UserRole.AUTHOR)
        mock_user_repository.get_or_create.return_value = (new_user, True)

        user, created = await user_service.sync_user(new_user.id, new_user.email, "New Author")

        assert created is True
        assert user is new_user
        mock_user_repository.get_or_create.assert_called_once_with(new_user.id, new_user.email, "New Author")


class TestUpdateUserRole:
    @pytest.mark.asyncio
    async def test_dean_promotes_author(
        self, user_service, actor_lookup, make_user, mock_user_repository, mock_audit_service
    ):
        dean = make_user(UserRole.DEAN)
        target = make_user(UserRole.AUTHOR)
        actor_lookup.get_by_id.return_value = dean
        mock_user_repository.get_by_id.return_value = target

        async def _update(user, role):
            user.role = role
            return user

        mock_user_repository.update_role = AsyncMock(side_effect=_update)

        result = await user_service.update_user_role(dean.id, target.id, UserRole.REVIEWER)

        assert result.role == UserRole.REVIEWER
        call = mock_audit_service.record.call_args
        assert call.args[0] == AuditAction.UPDATE_USER_ROLE
        assert call.kwargs["details"]["from"] == "AUTHOR"
        assert call.kwargs["details"]["to"] == "REVIEWER"

    @pytest.mark.asyncio
    async def test_cannot_change_own_role(self, user_service, actor_lookup, make_user):
        dean = make_user(UserRole.DEAN)
        actor_lookup.get_by_id.return_value = dean

        with pytest.raises(ConflictError) as exc_info:
            await user_service.update_user_role(dean.id, str(dean.id), UserRole.EDITOR)

        assert exc_info.value.message == "Cannot change your own role"

    @pytest.mark.asyncio
    async def test_cannot_demote_dean(
        self, user_service, actor_lookup, make_user, mock_user_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.DEAN)
        mock_user_repository.get_by_id.return_value = make_user(UserRole.DEAN)

        with pytest.raises(ConflictError) as exc_info:
            await user_service.update_user_role("dean", "other-dean", UserRole.EDITOR)

        assert exc_info.value.message == "Cannot demote the Dean"
        mock_user_repository.update_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_editor_cannot_change_roles(self, user_service, actor_lookup, make_user):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)

        with pytest.raises(AuthorizationError):
            await user_service.update_user_role("editor", "target", UserRole.REVIEWER)

    @pytest.mark.asyncio
    async def test_missing_target(self, user_service, actor_lookup, make_user):
        actor_lookup.get_by_id.return_value = make_user(UserRole.DEAN)

        with pytest.raises(ResourceNotFoundError):
            await user_service.update_user_role("dean", "missing", UserRole.REVIEWER)


class TestToggleUserActive:
    @pytest.mark.asyncio
    async def test_dean_deactivates_editor(
        self, user_service, actor_lookup, make_user, mock_user_repository, mock_audit_service
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.DEAN)
        target = make_user(UserRole.EDITOR)
        mock_user_repository.get_by_id.return_value = target

        async def _set_active(user, is_active):
            user.is_active = is_active
            return user

        mock_user_repository.set_active = AsyncMock(side_effect=_set_active)

        result = await user_service.toggle_user_active("dean", target.id)

        assert result.is_active is False
        mock_user_repository.set_active.assert_called_once_with(target, False)
        assert mock_audit_service.record.call_args.kwargs["details"]["is_active"] is False

    @pytest.mark.asyncio
    async def test_cannot_deactivate_self(self, user_service, actor_lookup, make_user):
        dean = make_user(UserRole.DEAN)
        actor_lookup.get_by_id.return_value = dean

        with pytest.raises(ConflictError) as exc_info:
            await user_service.toggle_user_active(dean.id, dean.id)

        assert exc_info.value.message == "Cannot deactivate your own account"

    @pytest.mark.asyncio
    async def test_cannot_deactivate_dean(
        self, user_service, actor_lookup, make_user, mock_user_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.DEAN)
        mock_user_repository.get_by_id.return_value = make_user(UserRole.DEAN)

        with pytest.raises(ConflictError) as exc_info:
            await user_service.toggle_user_active("dean", "other")

        assert exc_info.value.message == "Cannot deactivate the Dean account"

    @pytest.mark.asyncio
    async def test_editor_lacks_user_update(self, user_service, actor_lookup, make_user):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)

        with pytest.raises(AuthorizationError):
            await user_service.toggle_user_active("editor", "target")
