"""Repository for the append-only audit trail."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.audit_log import AuditLog
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class AuditLogRepository:
    """Insert and read audit rows. Rows are never updated or deleted."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        action: str,
        target_id: Optional[str] = None,
        target_type: Optional[str] = None,
        actor_id: Optional[UUID] = None,
        actor_email: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """
        Insert one audit row.

        Caller is responsible for committing the transaction.
        """
        entry = AuditLog(
            action=action,
            target_id=target_id,
            target_type=target_type,
            actor_id=actor_id,
            actor_email=actor_email,
            details=details,
            ip_address=ip_address,
        )
        self.session.add(entry)
        await self.session.flush()
        log.debug("audit row inserted", action=action, target_id=target_id)
        return entry

    async def list_logs(
        self, action: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> tuple[list[AuditLog], int]:
        """List audit rows newest first."""
        filters = [AuditLog.action == action] if action else []

        count_result = await self.session.execute(
            select(func.count()).select_from(AuditLog).where(*filters)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(AuditLog)
            .where(*filters)
            .order_by(AuditLog.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total
