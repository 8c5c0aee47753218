"""Live submission models: papers, authors and their ordered join rows."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    TIMESTAMP,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ictirc.database import Base
from ictirc.models.enums import PaperStatus


class Author(Base):
    """Person credited on a paper, deduplicated by email."""

    __tablename__ = "authors"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    affiliation: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    def __repr__(self):
        return f"<Author(email='{self.email}')>"


class Paper(Base):
    """A submission moving through the review workflow."""

    __tablename__ = "papers"
    __table_args__ = (UniqueConstraint("doi", name="uq_papers_doi"),)

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Metadata
    title: Mapped[str] = mapped_column(Text)
    abstract: Mapped[str] = mapped_column(Text)
    keywords: Mapped[list] = mapped_column(JSONB, default=list)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("categories.id"), index=True
    )
    submitter_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )

    # Workflow
    status: Mapped[PaperStatus] = mapped_column(
        Enum(PaperStatus, native_enum=False, length=20),
        default=PaperStatus.SUBMITTED,
        server_default=PaperStatus.SUBMITTED.value,
        index=True,
    )
    doi: Mapped[str | None] = mapped_column(String(64))
    published_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True))
    publication_step: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    publication_note: Mapped[str | None] = mapped_column(Text)

    # Files
    raw_file_url: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    authors: Mapped[list[PaperAuthor]] = relationship(
        "PaperAuthor",
        back_populates="paper",
        order_by="PaperAuthor.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Paper(id='{self.id}', status='{self.status}')>"

    @property
    def corresponding_author(self) -> Optional[PaperAuthor]:
        """Flagged corresponding author, falling back to the first author."""
        for link in self.authors:
            if link.is_corresponding_author:
                return link
        return self.authors[0] if self.authors else None


class PaperAuthor(Base):
    """Ordered paper/author link; exactly one row per paper is corresponding."""

    __tablename__ = "paper_authors"
    __table_args__ = (UniqueConstraint("paper_id", "author_id", name="uq_paper_authors_pair"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    paper_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("papers.id", ondelete="CASCADE"), index=True
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("authors.id"), index=True
    )
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_corresponding_author: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    paper: Mapped[Paper] = relationship("Paper", back_populates="authors")
    author: Mapped[Author] = relationship("Author", lazy="selectin")
