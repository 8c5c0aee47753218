"""Repository for archive Issue operations."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.archived_paper import ArchivedPaper
from ictirc.models.issue import Issue


class IssueRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, issue_id: UUID | str) -> Optional[Issue]:
        result = await self.session.execute(select(Issue).where(Issue.id == issue_id))
        return result.scalar_one_or_none()

    async def find_by_number(
        self, volume_id: UUID, issue_number: int, exclude_id: Optional[UUID] = None
    ) -> Optional[Issue]:
        """Issue with ``issue_number`` inside the volume, ignoring ``exclude_id``."""
        stmt = select(Issue).where(Issue.volume_id == volume_id, Issue.issue_number == issue_number)
        if exclude_id is not None:
            stmt = stmt.where(Issue.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_issues(
        self, volume_id: Optional[UUID] = None, conference_id: Optional[UUID] = None
    ) -> list[Issue]:
        """Issues by published date then issue number, newest first."""
        stmt = select(Issue)
        if volume_id is not None:
            stmt = stmt.where(Issue.volume_id == volume_id)
        if conference_id is not None:
            stmt = stmt.where(Issue.conference_id == conference_id)
        result = await self.session.execute(
            stmt.order_by(Issue.published_date.desc(), Issue.issue_number.desc())
        )
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> Issue:
        issue = Issue(**fields)
        self.session.add(issue)
        await self.session.flush()
        await self.session.refresh(issue)
        return issue

    async def update(self, issue: Issue, **fields: Any) -> Issue:
        for key, value in fields.items():
            setattr(issue, key, value)
        await self.session.flush()
        await self.session.refresh(issue)
        return issue

    async def count_papers(self, issue_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(ArchivedPaper).where(ArchivedPaper.issue_id == issue_id)
        )
        return result.scalar_one()

    async def delete(self, issue: Issue) -> None:
        await self.session.delete(issue)
        await self.session.flush()
