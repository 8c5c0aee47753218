"""Single-use invitation granting a role to a not-yet-registered email."""

import uuid
from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Index, String, TIMESTAMP, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from ictirc.database import Base
from ictirc.models.enums import InviteStatus, UserRole


class InviteToken(Base):
    __tablename__ = "invite_tokens"
    __table_args__ = (
        # One live invite per email; overdue rows are swept to EXPIRED before insert
        Index(
            "uq_invite_tokens_pending_email",
            "email",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), index=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, length=20), default=UserRole.AUTHOR
    )
    token: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    status: Mapped[InviteStatus] = mapped_column(
        Enum(InviteStatus, native_enum=False, length=20),
        default=InviteStatus.PENDING,
        server_default=InviteStatus.PENDING.value,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    invited_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL")
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<InviteToken(email='{self.email}', status='{self.status}')>"
