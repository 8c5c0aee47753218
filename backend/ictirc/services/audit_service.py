"""Audit trail recording and retrieval."""

from enum import StrEnum
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.audit_log import AuditLog
from ictirc.models.user import User
from ictirc.rbac import Permission, require_permission
from ictirc.repositories.audit_log_repository import AuditLogRepository
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class AuditAction(StrEnum):
    UPDATE_PAPER_STATUS = "UPDATE_PAPER_STATUS"
    ASSIGN_DOI = "ASSIGN_DOI"
    REVOKE_DOI = "REVOKE_DOI"
    DELETE_PAPER = "DELETE_PAPER"
    UPDATE_PUBLICATION_STEP = "UPDATE_PUBLICATION_STEP"
    SUBMIT_PAPER = "SUBMIT_PAPER"
    UPDATE_USER_ROLE = "UPDATE_USER_ROLE"
    TOGGLE_USER_ACTIVE = "TOGGLE_USER_ACTIVE"
    CREATE_INVITE = "CREATE_INVITE"
    ACCEPT_INVITE = "ACCEPT_INVITE"
    CANCEL_INVITE = "CANCEL_INVITE"
    EXPIRE_INVITES = "EXPIRE_INVITES"
    CREATE_CONFERENCE = "CREATE_CONFERENCE"
    UPDATE_CONFERENCE = "UPDATE_CONFERENCE"
    DELETE_CONFERENCE = "DELETE_CONFERENCE"
    CREATE_VOLUME = "CREATE_VOLUME"
    UPDATE_VOLUME = "UPDATE_VOLUME"
    DELETE_VOLUME = "DELETE_VOLUME"
    CREATE_ISSUE = "CREATE_ISSUE"
    UPDATE_ISSUE = "UPDATE_ISSUE"
    DELETE_ISSUE = "DELETE_ISSUE"
    CREATE_ARCHIVED_PAPER = "CREATE_ARCHIVED_PAPER"
    UPDATE_ARCHIVED_PAPER = "UPDATE_ARCHIVED_PAPER"
    DELETE_ARCHIVED_PAPER = "DELETE_ARCHIVED_PAPER"
    ASSIGN_REVIEWER = "ASSIGN_REVIEWER"
    UNASSIGN_REVIEWER = "UNASSIGN_REVIEWER"
    ADD_PAPER_COMMENT = "ADD_PAPER_COMMENT"


class AuditService:
    """
    Writes audit rows into the caller's session.

    The row commits or rolls back together with the mutation it documents.
    """

    def __init__(self, session: AsyncSession, audit_repository: AuditLogRepository):
        self.session = session
        self.audit_repository = audit_repository

    async def record(
        self,
        action: AuditAction,
        target_id: Optional[str] = None,
        target_type: Optional[str] = None,
        actor: Optional[User] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        entry = await self.audit_repository.create(
            action=str(action),
            target_id=target_id,
            target_type=target_type,
            actor_id=actor.id if actor is not None else None,
            actor_email=actor.email if actor is not None else None,
            details=details,
            ip_address=ip_address,
        )
        log.info(
            "audit recorded",
            action=str(action),
            target_type=target_type,
            target_id=target_id,
            actor_id=str(actor.id) if actor is not None else None,
        )
        return entry

    async def list_logs(
        self,
        actor_id: UUID | str,
        action: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> tuple[list[AuditLog], int]:
        """Audit rows newest first; requires ``audit:read``."""
        await require_permission(self.session, actor_id, Permission.AUDIT_READ)
        offset = (page - 1) * page_size
        return await self.audit_repository.list_logs(action=action, limit=page_size, offset=offset)
