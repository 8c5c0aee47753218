"""Repository for Conference operations."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.conference import Conference
from ictirc.models.issue import Issue


class ConferenceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, conference_id: UUID | str) -> Optional[Conference]:
        result = await self.session.execute(
            select(Conference).where(Conference.id == conference_id)
        )
        return result.scalar_one_or_none()

    async def list_conferences(self, published_only: bool = False) -> list[Conference]:
        """Conferences, most recent start date first."""
        stmt = select(Conference).order_by(Conference.start_date.desc())
        if published_only:
            stmt = stmt.where(Conference.is_published.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> Conference:
        conference = Conference(**fields)
        self.session.add(conference)
        await self.session.flush()
        await self.session.refresh(conference)
        return conference

    async def update(self, conference: Conference, **fields: Any) -> Conference:
        for key, value in fields.items():
            setattr(conference, key, value)
        await self.session.flush()
        await self.session.refresh(conference)
        return conference

    async def count_issues(self, conference_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Issue).where(Issue.conference_id == conference_id)
        )
        return result.scalar_one()

    async def delete(self, conference: Conference) -> None:
        await self.session.delete(conference)
        await self.session.flush()
