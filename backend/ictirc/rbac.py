"""Role hierarchy, permission matrix and route protection.

Single source of truth for who may do what. The tables below are built
once at import time and never mutated.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping
from uuid import UUID

from ictirc.exceptions import AuthorizationError
from ictirc.models.enums import UserRole

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from ictirc.models.user import User


class Permission(StrEnum):
    PAPER_READ = "paper:read"
    PAPER_CREATE = "paper:create"
    PAPER_UPDATE = "paper:update"
    PAPER_DELETE = "paper:delete"
    PAPER_REVIEW = "paper:review"
    PAPER_PUBLISH = "paper:publish"
    PAPER_REVOKE_DOI = "paper:revoke-doi"
    USER_READ = "user:read"
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    USER_INVITE = "user:invite"
    SYSTEM_LOCK = "system:lock"
    SYSTEM_SETTINGS = "system:settings"
    AUDIT_READ = "audit:read"
    AUDIT_EXPORT = "audit:export"
    ARCHIVE_READ = "archive:read"
    ARCHIVE_VOLUME_CREATE = "archive:volume:create"
    ARCHIVE_VOLUME_UPDATE = "archive:volume:update"
    ARCHIVE_VOLUME_DELETE = "archive:volume:delete"
    ARCHIVE_ISSUE_CREATE = "archive:issue:create"
    ARCHIVE_ISSUE_UPDATE = "archive:issue:update"
    ARCHIVE_ISSUE_DELETE = "archive:issue:delete"
    ARCHIVE_PAPER_UPLOAD = "archive:paper:upload"
    ARCHIVE_PAPER_UPDATE = "archive:paper:update"
    ARCHIVE_PAPER_DELETE = "archive:paper:delete"
    ARCHIVE_CONFERENCE_MANAGE = "archive:conference:manage"
    PLAGIARISM_RECORD = "plagiarism:record"
    PLAGIARISM_OVERRIDE = "plagiarism:override"


ROLE_HIERARCHY: Mapping[UserRole, int] = MappingProxyType(
    {
        UserRole.AUTHOR: 0,
        UserRole.REVIEWER: 1,
        UserRole.EDITOR: 2,
        UserRole.DEAN: 3,
    }
)

_EDITOR_PERMISSIONS = frozenset(
    {
        Permission.PAPER_READ,
        Permission.PAPER_CREATE,
        Permission.PAPER_UPDATE,
        Permission.PAPER_REVIEW,
        Permission.PAPER_PUBLISH,
        Permission.USER_READ,
        Permission.USER_INVITE,
        Permission.ARCHIVE_READ,
        Permission.ARCHIVE_VOLUME_CREATE,
        Permission.ARCHIVE_VOLUME_UPDATE,
        Permission.ARCHIVE_ISSUE_CREATE,
        Permission.ARCHIVE_ISSUE_UPDATE,
        Permission.ARCHIVE_PAPER_UPLOAD,
        Permission.ARCHIVE_PAPER_UPDATE,
        Permission.ARCHIVE_CONFERENCE_MANAGE,
        Permission.PLAGIARISM_RECORD,
    }
)

# Not strictly hierarchical: REVIEWER cannot create, AUTHOR cannot review
ROLE_PERMISSIONS: Mapping[UserRole, frozenset[Permission]] = MappingProxyType(
    {
        UserRole.AUTHOR: frozenset({Permission.PAPER_READ, Permission.PAPER_CREATE}),
        UserRole.REVIEWER: frozenset({Permission.PAPER_READ, Permission.PAPER_REVIEW}),
        UserRole.EDITOR: _EDITOR_PERMISSIONS,
        UserRole.DEAN: frozenset(Permission),
    }
)

_ALL_ROLES = (UserRole.AUTHOR, UserRole.REVIEWER, UserRole.EDITOR, UserRole.DEAN)
_STAFF = (UserRole.EDITOR, UserRole.DEAN)

PROTECTED_ROUTES: Mapping[str, tuple[UserRole, ...]] = MappingProxyType(
    {
        "/dashboard": _ALL_ROLES,
        "/dashboard/papers": (UserRole.REVIEWER, UserRole.EDITOR, UserRole.DEAN),
        "/dashboard/papers/review": (UserRole.REVIEWER, UserRole.EDITOR, UserRole.DEAN),
        "/dashboard/users": _STAFF,
        "/dashboard/settings": (UserRole.DEAN,),
        "/dashboard/system": (UserRole.DEAN,),
        "/dashboard/archives": _STAFF,
        "/dashboard/archives/volumes": _STAFF,
        "/dashboard/archives/issues": _STAFF,
        "/dashboard/archives/upload": _STAFF,
        "/dashboard/archives/conferences": _STAFF,
    }
)

_ROLE_DISPLAY_NAMES: Mapping[UserRole, str] = MappingProxyType(
    {
        UserRole.AUTHOR: "Author",
        UserRole.REVIEWER: "Reviewer",
        UserRole.EDITOR: "Editor-in-Chief",
        UserRole.DEAN: "Dean (Super Admin)",
    }
)


def has_role(actual: UserRole, required: UserRole) -> bool:
    """True if ``actual`` ranks at or above ``required``."""
    return ROLE_HIERARCHY[actual] >= ROLE_HIERARCHY[required]


def has_any_role(role: UserRole, allowed: Iterable[UserRole]) -> bool:
    return role in allowed


def has_permission(role: UserRole, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS[role]


def can_access_route(role: UserRole, path: str) -> bool:
    """Resolve the most specific protected prefix for ``path``.

    Paths that match no entry are public.
    """
    matches = [route for route in PROTECTED_ROUTES if path.startswith(route)]
    if not matches:
        return True
    most_specific = max(matches, key=len)
    return has_any_role(role, PROTECTED_ROUTES[most_specific])


def is_dean(role: UserRole) -> bool:
    return role == UserRole.DEAN


def role_display_name(role: UserRole) -> str:
    return _ROLE_DISPLAY_NAMES[role]


async def _load_active_actor(session: AsyncSession, actor_id: UUID | str) -> User:
    from ictirc.repositories.user_repository import UserRepository

    user = await UserRepository(session).get_by_id(actor_id)
    if user is None:
        raise AuthorizationError("User not found")
    if not user.is_active:
        raise AuthorizationError("User account is deactivated")
    return user


async def require_permission(
    session: AsyncSession, actor_id: UUID | str, permission: Permission
) -> User:
    """
    Load the actor and verify it holds ``permission``.

    Raises:
        AuthorizationError: actor missing, deactivated or lacking the permission
    """
    user = await _load_active_actor(session, actor_id)
    if not has_permission(user.role, permission):
        raise AuthorizationError(
            f"Insufficient permissions: requires {permission}",
            details={"required_permission": str(permission), "role": str(user.role)},
        )
    return user


async def require_role(session: AsyncSession, actor_id: UUID | str, role: UserRole) -> User:
    """
    Load the actor and verify it ranks at or above ``role``.

    Raises:
        AuthorizationError: actor missing, deactivated or underprivileged
    """
    user = await _load_active_actor(session, actor_id)
    if not has_role(user.role, role):
        raise AuthorizationError(
            f"Insufficient role: requires {role} or higher",
            details={"required_role": str(role), "role": str(user.role)},
        )
    return user
