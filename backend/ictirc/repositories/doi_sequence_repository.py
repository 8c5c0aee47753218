"""Repository for the per-year DOI counter."""

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.doi_sequence import DoiSequence
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class DoiSequenceRepository:
    """Atomic DOI serial allocation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def next_serial(self, year: int) -> int:
        """Atomically increment the counter for ``year`` via UPSERT.

        Creates the row with count 1 if it doesn't exist. Returns the new
        count. Concurrent callers serialize on the row lock taken by the
        conflict update, so no two callers see the same value.
        """
        result = await self.session.execute(
            text("""
                INSERT INTO doi_sequences (id, year, count, updated_at)
                VALUES (:id, :year, 1, now())
                ON CONFLICT (year)
                DO UPDATE SET count = doi_sequences.count + 1,
                             updated_at = now()
                RETURNING count
            """),
            {"id": f"doi_{year}", "year": year},
        )
        count = result.scalar_one()
        log.debug("doi serial allocated", year=year, count=count)
        return count

    async def get_count(self, year: int) -> int:
        """Current counter value for ``year``, 0 if nothing was issued yet."""
        result = await self.session.execute(
            select(DoiSequence.count).where(DoiSequence.year == year)
        )
        count = result.scalar_one_or_none()
        return count or 0
