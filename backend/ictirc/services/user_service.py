"""User administration: role changes, activation and first-login sync."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.exceptions import ConflictError, ResourceNotFoundError
from ictirc.models.enums import UserRole
from ictirc.models.user import User
from ictirc.rbac import Permission, is_dean, require_permission, require_role
from ictirc.repositories.user_repository import UserRepository
from ictirc.services.audit_service import AuditAction, AuditService
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class UserService:
    def __init__(
        self,
        session: AsyncSession,
        user_repository: UserRepository,
        audit_service: AuditService,
    ):
        self.session = session
        self.user_repository = user_repository
        self.audit_service = audit_service

    async def sync_user(
        self, user_id: UUID | str, email: str, name: Optional[str] = None
    ) -> tuple[User, bool]:
        """Ensure an authenticated identity has a User row, creating an AUTHOR if needed."""
        user, created = await self.user_repository.get_or_create(user_id, email, name)
        if created:
            log.info("user synced on first login", user_id=str(user.id), email=email)
        return user, created

    async def list_users(
        self,
        actor_id: UUID | str,
        role: Optional[UserRole] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        await require_permission(self.session, actor_id, Permission.USER_READ)
        return await self.user_repository.list_users(
            role=role, search=search, limit=limit, offset=(page - 1) * limit
        )

    async def _get_target(self, user_id: UUID | str) -> User:
        target = await self.user_repository.get_by_id(user_id)
        if target is None:
            raise ResourceNotFoundError("User", str(user_id))
        return target

    async def update_user_role(
        self,
        actor_id: UUID | str,
        user_id: UUID | str,
        new_role: UserRole,
        ip_address: Optional[str] = None,
    ) -> User:
        """
        Change another user's role. DEAN only.

        The DEAN account can never be demoted, and nobody can change their
        own role.
        """
        actor = await require_role(self.session, actor_id, UserRole.DEAN)
        if str(user_id) == str(actor.id):
            raise ConflictError("Cannot change your own role")

        target = await self._get_target(user_id)
        if is_dean(target.role) and new_role != UserRole.DEAN:
            raise ConflictError("Cannot demote the Dean")

        previous_role = target.role
        target = await self.user_repository.update_role(target, new_role)
        await self.audit_service.record(
            AuditAction.UPDATE_USER_ROLE,
            target_id=str(target.id),
            target_type="User",
            actor=actor,
            details={"from": str(previous_role), "to": str(new_role), "email": target.email},
            ip_address=ip_address,
        )
        if new_role == UserRole.DEAN and not is_dean(previous_role):
            log.warning("additional dean assigned", user_id=str(target.id))
        return target

    async def toggle_user_active(
        self,
        actor_id: UUID | str,
        user_id: UUID | str,
        ip_address: Optional[str] = None,
    ) -> User:
        """Flip a user's active flag. The DEAN account and the actor's own are exempt."""
        actor = await require_permission(self.session, actor_id, Permission.USER_UPDATE)
        if str(user_id) == str(actor.id):
            raise ConflictError("Cannot deactivate your own account")

        target = await self._get_target(user_id)
        if is_dean(target.role):
            raise ConflictError("Cannot deactivate the Dean account")

        target = await self.user_repository.set_active(target, not target.is_active)
        await self.audit_service.record(
            AuditAction.TOGGLE_USER_ACTIVE,
            target_id=str(target.id),
            target_type="User",
            actor=actor,
            details={"is_active": target.is_active, "email": target.email},
            ip_address=ip_address,
        )
        return target
