"""Repository for ArchivedPaper operations."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.archived_paper import ArchivedPaper, ArchivedPaperAuthor
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class ArchivedPaperRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, paper_id: UUID | str) -> Optional[ArchivedPaper]:
        result = await self.session.execute(
            select(ArchivedPaper).where(ArchivedPaper.id == paper_id)
        )
        return result.scalar_one_or_none()

    async def list_for_issue(self, issue_id: UUID | str) -> list[ArchivedPaper]:
        """Papers in page order; unnumbered papers after numbered ones, then by insertion."""
        result = await self.session.execute(
            select(ArchivedPaper)
            .where(ArchivedPaper.issue_id == issue_id)
            .order_by(
                ArchivedPaper.page_start.asc().nulls_last(),
                ArchivedPaper.seq.asc(),
            )
        )
        return list(result.scalars().all())

    async def search(
        self, search: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> tuple[list[ArchivedPaper], int]:
        """Archived papers, newest publication first."""
        filters = []
        if search:
            pattern = f"%{search}%"
            filters.append(
                or_(ArchivedPaper.title.ilike(pattern), ArchivedPaper.abstract.ilike(pattern))
            )

        count_result = await self.session.execute(
            select(func.count()).select_from(ArchivedPaper).where(*filters)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(ArchivedPaper)
            .where(*filters)
            .order_by(ArchivedPaper.published_date.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def create(self, authors: list[dict[str, Any]], **fields: Any) -> ArchivedPaper:
        """
        Create an archived paper with its authors in list order.

        Caller is responsible for committing the transaction.
        """
        paper = ArchivedPaper(**fields)
        paper.authors = [
            ArchivedPaperAuthor(**{"order": index, **author})
            for index, author in enumerate(authors)
        ]
        self.session.add(paper)
        await self.session.flush()
        await self.session.refresh(paper)
        log.debug("archived paper created", paper_id=str(paper.id), authors=len(authors))
        return paper

    async def update(
        self,
        paper: ArchivedPaper,
        authors: Optional[list[dict[str, Any]]] = None,
        **fields: Any,
    ) -> ArchivedPaper:
        """Apply field changes; a given author list replaces the existing one."""
        for key, value in fields.items():
            setattr(paper, key, value)
        if authors is not None:
            paper.authors = [
                ArchivedPaperAuthor(**{"order": index, **author})
                for index, author in enumerate(authors)
            ]
        await self.session.flush()
        await self.session.refresh(paper)
        return paper

    async def delete(self, paper: ArchivedPaper) -> None:
        await self.session.delete(paper)
        await self.session.flush()
