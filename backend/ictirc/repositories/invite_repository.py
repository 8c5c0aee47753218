"""Repository for InviteToken operations."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.enums import InviteStatus, UserRole
from ictirc.models.invite_token import InviteToken
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class InviteRepository:
    """Repository for invite CRUD and status transitions."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invite_id: UUID | str) -> Optional[InviteToken]:
        result = await self.session.execute(select(InviteToken).where(InviteToken.id == invite_id))
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[InviteToken]:
        result = await self.session.execute(select(InviteToken).where(InviteToken.token == token))
        return result.scalar_one_or_none()

    async def get_active_for_email(self, email: str, now: datetime) -> Optional[InviteToken]:
        """PENDING invite for ``email`` that has not expired yet."""
        result = await self.session.execute(
            select(InviteToken)
            .where(
                InviteToken.email == email,
                InviteToken.status == InviteStatus.PENDING,
                InviteToken.expires_at > now,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_pending(self, now: datetime) -> list[InviteToken]:
        """Non-expired PENDING invites, newest first."""
        result = await self.session.execute(
            select(InviteToken)
            .where(InviteToken.status == InviteStatus.PENDING, InviteToken.expires_at > now)
            .order_by(InviteToken.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        email: str,
        role: UserRole,
        token: str,
        expires_at: datetime,
        invited_by_id: Optional[UUID] = None,
    ) -> InviteToken:
        """
        Create a PENDING invite.

        Caller is responsible for committing the transaction.
        """
        invite = InviteToken(
            email=email,
            role=role,
            token=token,
            expires_at=expires_at,
            invited_by_id=invited_by_id,
            status=InviteStatus.PENDING,
        )
        self.session.add(invite)
        await self.session.flush()
        await self.session.refresh(invite)
        log.debug("invite created", email=email, role=str(role))
        return invite

    async def mark_status(
        self,
        invite: InviteToken,
        status: InviteStatus,
        expected: InviteStatus = InviteStatus.PENDING,
    ) -> bool:
        """Move an invite out of ``expected``. Returns False if it already moved."""
        result = await self.session.execute(
            update(InviteToken)
            .where(InviteToken.id == invite.id, InviteToken.status == expected)
            .values(status=status, updated_at=datetime.now(timezone.utc))
            .returning(InviteToken.id)
        )
        if result.scalar_one_or_none() is None:
            return False
        await self.session.flush()
        await self.session.refresh(invite)
        return True

    async def expire_overdue(self, now: datetime, email: Optional[str] = None) -> int:
        """Flip overdue PENDING invites to EXPIRED. Returns the number of rows changed."""
        conditions = [InviteToken.status == InviteStatus.PENDING, InviteToken.expires_at <= now]
        if email is not None:
            conditions.append(InviteToken.email == email)

        result = await self.session.execute(
            update(InviteToken)
            .where(*conditions)
            .values(status=InviteStatus.EXPIRED, updated_at=now)
        )
        await self.session.flush()
        count = result.rowcount or 0
        if count:
            log.info("overdue invites expired", count=count, email=email)
        return count

    async def delete(self, invite: InviteToken) -> None:
        await self.session.delete(invite)
        await self.session.flush()
