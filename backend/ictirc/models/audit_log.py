"""Append-only audit trail of privileged actions."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import String, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column
from ictirc.database import Base


class AuditLog(Base):
    """
    One row per privileged mutation.

    Rows are inserted in the same transaction as the change they document
    and are never updated or deleted by the application.
    """

    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    actor_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), index=True)
    actor_email: Mapped[str | None] = mapped_column(String(255))
    action: Mapped[str] = mapped_column(String(64), index=True)
    target_id: Mapped[str | None] = mapped_column(String(64), index=True)
    target_type: Mapped[str | None] = mapped_column(String(64))
    # "metadata" is reserved on declarative classes
    details: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONB)
    ip_address: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), index=True
    )

    def __repr__(self):
        return f"<AuditLog(action='{self.action}', target_id='{self.target_id}')>"
