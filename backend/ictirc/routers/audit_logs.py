"""Audit trail router."""

from typing import Optional

from fastapi import APIRouter, Query

from ictirc.dependencies import AuditServiceDep, CurrentIdentity
from ictirc.schemas.audit import AuditLogInfo, AuditLogListResponse
from ictirc.schemas.common import Pagination

router = APIRouter()


@router.get("/audit-logs", response_model=AuditLogListResponse)
async def list_audit_logs(
    identity: CurrentIdentity,
    audit_service: AuditServiceDep,
    action: Optional[str] = Query(None, max_length=64),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
) -> AuditLogListResponse:
    """Audit rows newest first, optionally filtered by action."""
    logs, total = await audit_service.list_logs(
        identity.id, action=action, page=page, page_size=limit
    )
    return AuditLogListResponse(
        logs=[AuditLogInfo.model_validate(entry) for entry in logs],
        pagination=Pagination.build(total, page, limit),
    )
