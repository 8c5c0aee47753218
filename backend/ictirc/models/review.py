"""Reviewer assignments and review comments on live papers."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Text, TIMESTAMP, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ictirc.database import Base
from ictirc.models.user import User


class ReviewerAssignment(Base):
    """A reviewer attached to a paper. One row per (paper, reviewer)."""

    __tablename__ = "reviewer_assignments"
    __table_args__ = (
        UniqueConstraint("paper_id", "reviewer_id", name="uq_reviewer_assignments_pair"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    paper_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("papers.id", ondelete="CASCADE"), index=True
    )
    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )
    assigned_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL")
    )
    assigned_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    reviewer: Mapped[User] = relationship(foreign_keys=[reviewer_id], lazy="selectin")

    def __repr__(self):
        return f"<ReviewerAssignment(paper_id='{self.paper_id}', reviewer_id='{self.reviewer_id}')>"


class PaperComment(Base):
    __tablename__ = "paper_comments"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    paper_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("papers.id", ondelete="CASCADE"), index=True
    )
    author_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"))
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    author: Mapped[User] = relationship(lazy="selectin")

    def __repr__(self):
        return f"<PaperComment(paper_id='{self.paper_id}', author_id='{self.author_id}')>"
