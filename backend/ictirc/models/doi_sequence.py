"""Per-year DOI serial counter."""

from datetime import datetime

from sqlalchemy import Integer, String, TIMESTAMP, func
from sqlalchemy.orm import Mapped, mapped_column
from ictirc.database import Base


class DoiSequence(Base):
    """One row per publication year; only ever incremented."""

    __tablename__ = "doi_sequences"

    # Row id is "doi_{year}"
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    year: Mapped[int] = mapped_column(Integer, unique=True)
    count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<DoiSequence(year={self.year}, count={self.count})>"
