"""Audit log schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ictirc.schemas.common import Pagination, SuccessResponse


class AuditLogInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    actor_id: Optional[UUID] = None
    actor_email: Optional[str] = None
    action: str
    target_id: Optional[str] = None
    target_type: Optional[str] = None
    metadata: Optional[dict[str, Any]] = Field(
        None, validation_alias=AliasChoices("details", "metadata")
    )
    ip_address: Optional[str] = None
    created_at: datetime


class AuditLogListResponse(SuccessResponse):
    logs: list[AuditLogInfo]
    pagination: Pagination
