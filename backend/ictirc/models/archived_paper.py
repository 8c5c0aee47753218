"""Finalized historical papers stored outside the live review workflow."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, ForeignKey, Identity, Index, Integer, String, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ictirc.database import Base
from ictirc.models.enums import PaperStatus

if TYPE_CHECKING:
    from ictirc.models.issue import Issue


class ArchivedPaper(Base):
    __tablename__ = "archived_papers"
    __table_args__ = (Index("ix_archived_papers_issue_page_seq", "issue_id", "page_start", "seq"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    issue_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("issues.id"), index=True
    )
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("categories.id"), index=True
    )
    uploader_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id")
    )

    title: Mapped[str] = mapped_column(Text)
    abstract: Mapped[str] = mapped_column(Text)
    keywords: Mapped[list] = mapped_column(JSONB, default=list)
    doi: Mapped[str | None] = mapped_column(String(64))
    pdf_url: Mapped[str] = mapped_column(Text)
    docx_url: Mapped[str | None] = mapped_column(Text)
    page_start: Mapped[int | None] = mapped_column(Integer)
    page_end: Mapped[int | None] = mapped_column(Integer)
    # Insertion order; created_at is shared by every row of one transaction
    seq: Mapped[int] = mapped_column(BigInteger, Identity(always=False))

    published_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    submitted_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True))
    accepted_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True))

    uploaded_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    issue: Mapped[Issue] = relationship("Issue", back_populates="papers")
    authors: Mapped[list[ArchivedPaperAuthor]] = relationship(
        "ArchivedPaperAuthor",
        back_populates="paper",
        order_by="ArchivedPaperAuthor.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    @property
    def status(self) -> PaperStatus:
        """Archived papers always surface as published."""
        return PaperStatus.PUBLISHED

    def __repr__(self):
        return f"<ArchivedPaper(title='{self.title[:50]}...')>"


class ArchivedPaperAuthor(Base):
    __tablename__ = "archived_paper_authors"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    paper_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("archived_papers.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    affiliation: Mapped[str | None] = mapped_column(String(255))
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_corresponding: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")

    paper: Mapped[ArchivedPaper] = relationship("ArchivedPaper", back_populates="authors")
