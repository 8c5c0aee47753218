"""Invitations that grant a role to a not-yet-registered email."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.exceptions import ConflictError, InviteExpiredError, ResourceNotFoundError
from ictirc.models.enums import InviteStatus, UserRole
from ictirc.models.invite_token import InviteToken
from ictirc.models.user import User
from ictirc.rbac import Permission, require_permission
from ictirc.repositories.invite_repository import InviteRepository
from ictirc.repositories.user_repository import UserRepository
from ictirc.services.audit_service import AuditAction, AuditService
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class InviteService:
    """
    Invite lifecycle: PENDING → ACCEPTED on signup, PENDING → EXPIRED on expiry.

    At most one non-expired PENDING invite exists per email.
    """

    def __init__(
        self,
        session: AsyncSession,
        invite_repository: InviteRepository,
        user_repository: UserRepository,
        audit_service: AuditService,
        ttl_days: int = 7,
    ):
        self.session = session
        self.invite_repository = invite_repository
        self.user_repository = user_repository
        self.audit_service = audit_service
        self.ttl_days = ttl_days

    async def create_invite(
        self,
        actor_id: UUID | str,
        email: str,
        role: UserRole = UserRole.AUTHOR,
        ip_address: Optional[str] = None,
    ) -> InviteToken:
        actor = await require_permission(self.session, actor_id, Permission.USER_INVITE)
        email = email.strip().lower()

        if await self.user_repository.get_by_email(email) is not None:
            raise ConflictError("User with this email already exists")

        now = datetime.now(timezone.utc)
        await self.invite_repository.expire_overdue(now, email=email)
        if await self.invite_repository.get_active_for_email(email, now) is not None:
            raise ConflictError("Pending invite already exists for this email")

        try:
            async with self.session.begin_nested():
                invite = await self.invite_repository.create(
                    email=email,
                    role=role,
                    token=secrets.token_urlsafe(32),
                    expires_at=now + timedelta(days=self.ttl_days),
                    invited_by_id=actor.id,
                )
        except IntegrityError:
            # A concurrent request inserted its PENDING invite first
            log.info("pending invite race lost", email=email)
            raise ConflictError("Pending invite already exists for this email") from None

        await self.audit_service.record(
            AuditAction.CREATE_INVITE,
            target_id=str(invite.id),
            target_type="InviteToken",
            actor=actor,
            details={"email": email, "role": str(role)},
            ip_address=ip_address,
        )
        if role == UserRole.DEAN:
            log.warning("dean invite created", email=email, actor_id=str(actor.id))
        return invite

    async def accept_invite(self, token: str, new_user_id: UUID | str) -> User:
        """
        Redeem an invite for a freshly signed-up identity.

        An overdue invite is flipped to EXPIRED before InviteExpiredError is
        raised; the caller must commit that change.
        """
        invite = await self.invite_repository.get_by_token(token)
        if invite is None:
            raise ResourceNotFoundError("Invite", None)
        if invite.status != InviteStatus.PENDING:
            raise ConflictError("Invite has already been used")

        if invite.expires_at <= datetime.now(timezone.utc):
            await self.invite_repository.mark_status(invite, InviteStatus.EXPIRED)
            raise InviteExpiredError()

        if await self.user_repository.get_by_id(new_user_id) is not None:
            raise ConflictError("User already registered")
        if await self.user_repository.get_by_email(invite.email) is not None:
            raise ConflictError("User with this email already exists")

        if not await self.invite_repository.mark_status(invite, InviteStatus.ACCEPTED):
            raise ConflictError("Invite has already been used")

        user = await self.user_repository.create(
            user_id=new_user_id, email=invite.email, role=invite.role
        )
        await self.audit_service.record(
            AuditAction.ACCEPT_INVITE,
            target_id=str(invite.id),
            target_type="InviteToken",
            actor=user,
            details={"email": invite.email, "role": str(invite.role)},
        )
        if invite.role == UserRole.DEAN:
            log.warning("dean invite accepted", user_id=str(user.id))
        return user

    async def cancel_invite(
        self,
        actor_id: UUID | str,
        invite_id: UUID | str,
        ip_address: Optional[str] = None,
    ) -> None:
        actor = await require_permission(self.session, actor_id, Permission.USER_INVITE)
        invite = await self.invite_repository.get_by_id(invite_id)
        if invite is None:
            raise ResourceNotFoundError("Invite", str(invite_id))

        email = invite.email
        await self.invite_repository.delete(invite)
        await self.audit_service.record(
            AuditAction.CANCEL_INVITE,
            target_id=str(invite_id),
            target_type="InviteToken",
            actor=actor,
            details={"email": email},
            ip_address=ip_address,
        )

    async def list_pending_invites(self, actor_id: UUID | str) -> list[InviteToken]:
        await require_permission(self.session, actor_id, Permission.USER_READ)
        return await self.invite_repository.list_pending(datetime.now(timezone.utc))

    async def expire_overdue_invites(
        self, actor_id: UUID | str, ip_address: Optional[str] = None
    ) -> int:
        """Sweep every overdue PENDING invite to EXPIRED. Returns the count."""
        actor = await require_permission(self.session, actor_id, Permission.USER_INVITE)
        count = await self.invite_repository.expire_overdue(datetime.now(timezone.utc))
        if count:
            await self.audit_service.record(
                AuditAction.EXPIRE_INVITES,
                target_type="InviteToken",
                actor=actor,
                details={"count": count},
                ip_address=ip_address,
            )
        return count
