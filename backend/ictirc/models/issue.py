"""Archive issue belonging to exactly one volume."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ictirc.database import Base

if TYPE_CHECKING:
    from ictirc.models.archived_paper import ArchivedPaper
    from ictirc.models.conference import Conference
    from ictirc.models.volume import Volume


class Issue(Base):
    """issue_number is unique within a volume by convention."""

    __tablename__ = "issues"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    volume_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("volumes.id"), index=True
    )
    conference_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("conferences.id"), index=True
    )
    issue_number: Mapped[int] = mapped_column(Integer)
    month: Mapped[str | None] = mapped_column(String(20))
    published_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    issn: Mapped[str | None] = mapped_column(String(9))
    theme: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    cover_image_url: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    volume: Mapped[Volume] = relationship("Volume", back_populates="issues")
    conference: Mapped[Conference | None] = relationship("Conference", back_populates="issues")
    papers: Mapped[list[ArchivedPaper]] = relationship("ArchivedPaper", back_populates="issue")

    def __repr__(self):
        return f"<Issue(volume_id='{self.volume_id}', issue_number={self.issue_number})>"
