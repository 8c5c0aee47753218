"""Tests for the role hierarchy, permission matrix and route protection."""

import pytest
from unittest.mock import AsyncMock, patch

from ictirc.exceptions import AuthorizationError
from ictirc.models.enums import UserRole
from ictirc.rbac import (
    PROTECTED_ROUTES,
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    Permission,
    can_access_route,
    has_any_role,
    has_permission,
    has_role,
    is_dean,
    require_permission,
    require_role,
    role_display_name,
)


class TestRoleHierarchy:
    def test_ranks_are_totally_ordered(self):
        ranks = [ROLE_HIERARCHY[r] for r in (UserRole.AUTHOR, UserRole.REVIEWER, UserRole.EDITOR, UserRole.DEAN)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    @pytest.mark.parametrize(
        "actual,required,expected",
        [
            (UserRole.DEAN, UserRole.EDITOR, True),
            (UserRole.EDITOR, UserRole.EDITOR, True),
            (UserRole.REVIEWER, UserRole.EDITOR, False),
            (UserRole.AUTHOR, UserRole.AUTHOR, True),
            (UserRole.AUTHOR, UserRole.REVIEWER, False),
        ],
    )
    def test_has_role(self, actual, required, expected):
        assert has_role(actual, required) is expected

    def test_has_any_role(self):
        assert has_any_role(UserRole.EDITOR, [UserRole.EDITOR, UserRole.DEAN])
        assert not has_any_role(UserRole.AUTHOR, [UserRole.EDITOR, UserRole.DEAN])

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            ROLE_HIERARCHY[UserRole.AUTHOR] = 5  # type: ignore[index]


class TestPermissionMatrix:
    def test_dean_holds_every_permission(self):
        assert ROLE_PERMISSIONS[UserRole.DEAN] == frozenset(Permission)

    def test_dean_is_superset_of_editor(self):
        assert ROLE_PERMISSIONS[UserRole.EDITOR] < ROLE_PERMISSIONS[UserRole.DEAN]

    def test_permissions_not_strictly_hierarchical(self):
        """REVIEWER outranks AUTHOR but cannot create papers."""
        assert has_permission(UserRole.AUTHOR, Permission.PAPER_CREATE)
        assert not has_permission(UserRole.REVIEWER, Permission.PAPER_CREATE)
        assert has_permission(UserRole.REVIEWER, Permission.PAPER_REVIEW)
        assert not has_permission(UserRole.AUTHOR, Permission.PAPER_REVIEW)

    def test_editor_cannot_delete_archive_entities(self):
        for permission in (
            Permission.ARCHIVE_VOLUME_DELETE,
            Permission.ARCHIVE_ISSUE_DELETE,
            Permission.ARCHIVE_PAPER_DELETE,
        ):
            assert not has_permission(UserRole.EDITOR, permission)
            assert has_permission(UserRole.DEAN, permission)

    def test_editor_can_publish_but_not_override_plagiarism(self):
        assert has_permission(UserRole.EDITOR, Permission.PAPER_PUBLISH)
        assert not has_permission(UserRole.EDITOR, Permission.PLAGIARISM_OVERRIDE)


class TestRouteAccess:
    def test_unlisted_path_is_public(self):
        assert can_access_route(UserRole.AUTHOR, "/about")

    def test_most_specific_prefix_wins(self):
        # /dashboard admits AUTHOR but /dashboard/papers does not
        assert can_access_route(UserRole.AUTHOR, "/dashboard")
        assert not can_access_route(UserRole.AUTHOR, "/dashboard/papers/123")
        assert can_access_route(UserRole.REVIEWER, "/dashboard/papers/review/9")

    def test_dean_only_routes(self):
        assert can_access_route(UserRole.DEAN, "/dashboard/settings/roles")
        assert not can_access_route(UserRole.EDITOR, "/dashboard/settings/roles")

    def test_archive_routes_are_staff_only(self):
        assert can_access_route(UserRole.EDITOR, "/dashboard/archives/upload")
        assert not can_access_route(UserRole.REVIEWER, "/dashboard/archives")

    def test_every_route_admits_dean(self):
        for route in PROTECTED_ROUTES:
            assert can_access_route(UserRole.DEAN, route)


class TestDisplayNames:
    def test_role_display_name(self):
        assert role_display_name(UserRole.EDITOR) == "Editor-in-Chief"
        assert role_display_name(UserRole.DEAN) == "Dean (Super Admin)"

    def test_is_dean(self):
        assert is_dean(UserRole.DEAN)
        assert not is_dean(UserRole.EDITOR)


class TestRequireChecks:
    """Tests for the actor-loading permission guards."""

    @pytest.fixture
    def user_lookup(self):
        with patch("ictirc.repositories.user_repository.UserRepository") as repo_cls:
            repo = repo_cls.return_value
            repo.get_by_id = AsyncMock(return_value=None)
            yield repo

    @pytest.mark.asyncio
    async def test_missing_actor_rejected(self, user_lookup, mock_async_session):
        with pytest.raises(AuthorizationError) as exc_info:
            await require_permission(mock_async_session, "missing", Permission.PAPER_READ)

        assert exc_info.value.message == "User not found"

    @pytest.mark.asyncio
    async def test_deactivated_actor_rejected(self, user_lookup, mock_async_session, make_user):
        user_lookup.get_by_id.return_value = make_user(UserRole.DEAN, is_active=False)

        with pytest.raises(AuthorizationError) as exc_info:
            await require_role(mock_async_session, "id", UserRole.AUTHOR)

        assert exc_info.value.message == "User account is deactivated"

    @pytest.mark.asyncio
    async def test_missing_permission_message(self, user_lookup, mock_async_session, make_user):
        user_lookup.get_by_id.return_value = make_user(UserRole.REVIEWER)

        with pytest.raises(AuthorizationError) as exc_info:
            await require_permission(mock_async_session, "id", Permission.PAPER_PUBLISH)

        assert exc_info.value.message == "Insufficient permissions: requires paper:publish"
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_insufficient_role_message(self, user_lookup, mock_async_session, make_user):
        user_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)

        with pytest.raises(AuthorizationError) as exc_info:
            await require_role(mock_async_session, "id", UserRole.DEAN)

        assert exc_info.value.message == "Insufficient role: requires DEAN or higher"

    @pytest.mark.asyncio
    async def test_returns_actor_when_allowed(self, user_lookup, mock_async_session, make_user):
        editor = make_user(UserRole.EDITOR)
        user_lookup.get_by_id.return_value = editor

        result = await require_permission(mock_async_session, editor.id, Permission.USER_INVITE)

        assert result is editor
