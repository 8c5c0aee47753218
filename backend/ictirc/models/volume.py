"""Archive volume: top of the Volume → Issue → ArchivedPaper tree."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Integer, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ictirc.database import Base

if TYPE_CHECKING:
    from ictirc.models.issue import Issue


class Volume(Base):
    """(volume_number, year) is unique by convention, checked by ArchiveService."""

    __tablename__ = "volumes"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    volume_number: Mapped[int] = mapped_column(Integer)
    year: Mapped[int] = mapped_column(Integer, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    cover_image_url: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    issues: Mapped[list[Issue]] = relationship(
        "Issue", back_populates="volume", order_by="Issue.issue_number"
    )

    def __repr__(self):
        return f"<Volume(volume_number={self.volume_number}, year={self.year})>"
