"""Repository for archive Volume operations."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.issue import Issue
from ictirc.models.volume import Volume


class VolumeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, volume_id: UUID | str) -> Optional[Volume]:
        result = await self.session.execute(select(Volume).where(Volume.id == volume_id))
        return result.scalar_one_or_none()

    async def find_by_number(
        self, volume_number: int, year: int, exclude_id: Optional[UUID] = None
    ) -> Optional[Volume]:
        """Volume with the same (volume_number, year), ignoring ``exclude_id``."""
        stmt = select(Volume).where(Volume.volume_number == volume_number, Volume.year == year)
        if exclude_id is not None:
            stmt = stmt.where(Volume.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_volumes(self) -> list[Volume]:
        """Volumes by year then volume number, newest first."""
        result = await self.session.execute(
            select(Volume).order_by(Volume.year.desc(), Volume.volume_number.desc())
        )
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> Volume:
        volume = Volume(**fields)
        self.session.add(volume)
        await self.session.flush()
        await self.session.refresh(volume)
        return volume

    async def update(self, volume: Volume, **fields: Any) -> Volume:
        for key, value in fields.items():
            setattr(volume, key, value)
        await self.session.flush()
        await self.session.refresh(volume)
        return volume

    async def count_issues(self, volume_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Issue).where(Issue.volume_id == volume_id)
        )
        return result.scalar_one()

    async def delete(self, volume: Volume) -> None:
        await self.session.delete(volume)
        await self.session.flush()
